"""
Ledger reconciliation.

Recomputes every balance of a stock item from its movement history and
compares the result with the stored columns. Read-only.
"""

import logging

from django.db.models import Sum

from apps.inventory.models import MovementKind, WarehouseStockItem

logger = logging.getLogger(__name__)


def _movement_totals(item: WarehouseStockItem) -> dict:
    rows = (
        item.movements
        .order_by()
        .values('kind')
        .annotate(total=Sum('quantity'))
    )
    totals = {kind: 0 for kind in MovementKind.values}
    for row in rows:
        totals[row['kind']] = row['total'] or 0
    return totals


def check_stock_item_consistency(item: WarehouseStockItem) -> list[str]:
    """
    Compare a stock item's stored balances with its movement ledger.

    Returns:
        List of human-readable issues; empty when the item is consistent.

    Example:
        >>> check_stock_item_consistency(item)
        ['available_quantity is 7 but movements give 5']
    """
    totals = _movement_totals(item)
    credited = totals[MovementKind.CREDIT]
    distributed = totals[MovementKind.DISTRIBUTION]
    allocated = totals[MovementKind.ALLOCATION] - totals[MovementKind.ALLOCATION_RETURN]
    expected_available = credited - distributed - allocated

    issues = []
    checks = [
        ('total_quantity', item.total_quantity, credited),
        ('available_quantity', item.available_quantity, expected_available),
        ('distributed_quantity', item.distributed_quantity, distributed),
        ('allocated_quantity', item.allocated_quantity, allocated),
    ]
    for field, stored, expected in checks:
        if stored != expected:
            issues.append(f"{field} is {stored} but movements give {expected}")

    if item.available_quantity + item.distributed_quantity + item.allocated_quantity != item.total_quantity:
        issues.append(
            "available + distributed + allocated does not equal total_quantity"
        )

    live_allocated = 0
    for allocation in item.allocations.all():
        drawn = (
            item.movements
            .filter(allocation_ref=allocation.id, kind=MovementKind.ALLOCATION)
            .aggregate(total=Sum('quantity'))['total'] or 0
        )
        returned = (
            item.movements
            .filter(allocation_ref=allocation.id, kind=MovementKind.ALLOCATION_RETURN)
            .aggregate(total=Sum('quantity'))['total'] or 0
        )
        if drawn - returned != allocation.quantity:
            issues.append(
                f"allocation {allocation.id} holds {allocation.quantity} "
                f"but movements give {drawn - returned}"
            )
        live_allocated += allocation.quantity

    # Claimed units of deleted allocations stay in allocated_quantity
    if live_allocated > item.allocated_quantity:
        issues.append(
            f"live allocations hold {live_allocated} but only "
            f"{item.allocated_quantity} is allocated"
        )

    if issues:
        logger.warning("Stock item %s failed reconciliation: %s", item.id, '; '.join(issues))
    return issues


def check_all_stock_items() -> dict:
    """Run the consistency check over every stock item, keyed by item ID."""
    results = {}
    for item in WarehouseStockItem.objects.prefetch_related('allocations'):
        issues = check_stock_item_consistency(item)
        if issues:
            results[item.id] = issues
    return results


def conservation_totals() -> dict:
    """
    Sum the balance columns across all stock items.

    Returns:
        Dict with total, available, distributed and allocated sums and a
        ``conservation_holds`` flag.
    """
    sums = WarehouseStockItem.objects.aggregate(
        total=Sum('total_quantity'),
        available=Sum('available_quantity'),
        distributed=Sum('distributed_quantity'),
        allocated=Sum('allocated_quantity'),
    )
    sums = {key: value or 0 for key, value in sums.items()}
    sums['conservation_holds'] = (
        sums['total'] == sums['available'] + sums['distributed'] + sums['allocated']
    )
    return sums
