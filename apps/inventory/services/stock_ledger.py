"""
Stock ledger service.

Every change to a stock item's balances goes through this module. Each
operation locks the item row, checks the requested quantity against the
current balance, updates the balance columns together and appends a
StockMovement. Callers never assign quantity fields directly.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from apps.accounts.models import User
from apps.common.exceptions import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from apps.common.validators import require_positive_int, require_text
from apps.inventory.models import (
    FoodCategory,
    MovementKind,
    StockMovement,
    WarehouseStockItem,
)
from apps.inventory.signals import stock_credited, stock_distributed

logger = logging.getLogger(__name__)

STOCK_METADATA_FIELDS = (
    'food_name',
    'category',
    'units',
    'expiration_date',
    'donor_name',
    'location',
)

BALANCE_FIELDS = [
    'total_quantity',
    'available_quantity',
    'distributed_quantity',
    'allocated_quantity',
    'updated_at',
]


def get_stock_item(*, item_id: UUID) -> WarehouseStockItem:
    try:
        return WarehouseStockItem.objects.get(id=item_id)
    except (WarehouseStockItem.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Stock item with ID {item_id} not found")


def lock_stock_item(item_id: UUID) -> WarehouseStockItem:
    """Fetch a stock item with a row lock. Must run inside a transaction."""
    try:
        return WarehouseStockItem.objects.select_for_update().get(id=item_id)
    except (WarehouseStockItem.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Stock item with ID {item_id} not found")


def _ensure_available(item: WarehouseStockItem, quantity: int) -> None:
    if quantity > item.available_quantity:
        logger.warning(
            "Rejected debit of %s from stock item %s (available %s)",
            quantity, item.id, item.available_quantity,
        )
        raise InsufficientStockError(
            available=item.available_quantity,
            requested=quantity,
        )


def _require_open_transaction(operation: str) -> None:
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError(f"{operation} must run inside transaction.atomic()")


def _record(item, kind, quantity, **extra) -> StockMovement:
    return StockMovement.objects.create(
        stock_item=item,
        kind=kind,
        quantity=quantity,
        balance_after=item.available_quantity,
        **extra,
    )


@transaction.atomic
def credit_stock(
    *,
    item_key: str,
    quantity: int,
    metadata: dict,
    donation_request=None,
    performed_by: Optional[User] = None,
) -> tuple[WarehouseStockItem, bool]:
    """
    Add verified quantity to the stock item identified by ``item_key``.

    Creates the item from ``metadata`` when the key is new, otherwise
    increments its total and available balances.

    Args:
        item_key: Merge key (see build_item_key)
        quantity: Positive number of units received
        metadata: food_name, category, units and optionally
            expiration_date, donor_name, location
        donation_request: Verified request this credit comes from
        performed_by: User who verified the donation

    Returns:
        Tuple of (stock item, created)

    Raises:
        ValidationError: If quantity is not a positive integer or
            metadata is incomplete
    """
    require_positive_int(quantity)
    require_text(item_key, 'item_key')
    fields = {k: metadata[k] for k in STOCK_METADATA_FIELDS if k in metadata}
    for required in ('food_name', 'category', 'units'):
        require_text(fields.get(required), required)
    if fields['category'] not in FoodCategory.values:
        raise ValidationError(f"Unknown food category: {fields['category']}")

    item, created = (
        WarehouseStockItem.objects
        .select_for_update()
        .get_or_create(
            item_key=item_key,
            defaults={
                **fields,
                'total_quantity': quantity,
                'available_quantity': quantity,
            },
        )
    )

    if not created:
        item.total_quantity += quantity
        item.available_quantity += quantity
        item.save(update_fields=BALANCE_FIELDS)

    movement = _record(
        item,
        MovementKind.CREDIT,
        quantity,
        donation_request=donation_request,
        performed_by=performed_by,
    )

    transaction.on_commit(lambda: stock_credited.send(
        sender=WarehouseStockItem,
        stock_item=item,
        quantity=quantity,
        movement=movement,
    ))

    logger.info(
        "Credited %s %s to stock item %s (%s)",
        quantity, item.units, item.id, 'new' if created else 'merged',
    )
    return item, created


def debit_for_distribution(
    *,
    item_id: UUID,
    quantity: int,
    note: str = '',
    performed_by: Optional[User] = None,
) -> WarehouseStockItem:
    """
    Hand stock out directly, e.g. to a beneficiary on site.

    Raises:
        ValidationError: If quantity is not a positive integer
        NotFoundError: If the stock item does not exist
        InsufficientStockError: If quantity exceeds the available balance
    """
    require_positive_int(quantity)

    with transaction.atomic():
        item = lock_stock_item(item_id)
        _ensure_available(item, quantity)

        item.available_quantity -= quantity
        item.distributed_quantity += quantity
        item.save(update_fields=BALANCE_FIELDS)

        movement = _record(
            item,
            MovementKind.DISTRIBUTION,
            quantity,
            note=note,
            performed_by=performed_by,
        )

        transaction.on_commit(lambda: stock_distributed.send(
            sender=WarehouseStockItem,
            stock_item=item,
            quantity=quantity,
            movement=movement,
        ))

    logger.info("Distributed %s from stock item %s", quantity, item.id)
    return item


def debit_for_allocation(
    *,
    item: WarehouseStockItem,
    quantity: int,
    allocation_ref: UUID,
    performed_by: Optional[User] = None,
    note: str = '',
) -> StockMovement:
    """
    Move quantity from the available balance into allocations.

    Only the marketplace calls this, inside the same transaction that
    creates or edits the allocation. ``item`` must already be locked
    with select_for_update by that transaction.

    Raises:
        ValidationError: If quantity is not a positive integer
        InsufficientStockError: If quantity exceeds the available balance
    """
    _require_open_transaction('debit_for_allocation')
    require_positive_int(quantity)
    _ensure_available(item, quantity)

    item.available_quantity -= quantity
    item.allocated_quantity += quantity
    item.save(update_fields=BALANCE_FIELDS)

    return _record(
        item,
        MovementKind.ALLOCATION,
        quantity,
        allocation_ref=allocation_ref,
        performed_by=performed_by,
        note=note,
    )


def credit_back_from_allocation(
    *,
    item: WarehouseStockItem,
    quantity: int,
    allocation_ref: UUID,
    performed_by: Optional[User] = None,
    note: str = '',
) -> StockMovement:
    """
    Return unclaimed allocation quantity to the available balance.

    Inverse of debit_for_allocation, with the same locking requirement.

    Raises:
        ValidationError: If quantity is not positive or exceeds the
            quantity currently held in allocations
    """
    _require_open_transaction('credit_back_from_allocation')
    require_positive_int(quantity)
    if quantity > item.allocated_quantity:
        raise ValidationError(
            f"Cannot return {quantity}: only {item.allocated_quantity} is allocated"
        )

    item.allocated_quantity -= quantity
    item.available_quantity += quantity
    item.save(update_fields=BALANCE_FIELDS)

    return _record(
        item,
        MovementKind.ALLOCATION_RETURN,
        quantity,
        allocation_ref=allocation_ref,
        performed_by=performed_by,
        note=note,
    )
