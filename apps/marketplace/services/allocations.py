"""
Marketplace allocation service.

Posting, editing and deleting an allocation each move quantity between
a warehouse stock item and a machine allocation in one transaction: the
stock row is locked first, then the allocation row, every check runs
before the first write, and the ledger debit or credit commits together
with the allocation change or not at all.
"""

import logging
import uuid
from datetime import date
from typing import NamedTuple, Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F

from apps.accounts.models import User
from apps.common.exceptions import InsufficientStockError, NotFoundError, ValidationError
from apps.common.validators import require_non_negative_int, require_positive_int
from apps.inventory.models import WarehouseStockItem
from apps.inventory.services import credit_back_from_allocation, debit_for_allocation
from apps.inventory.services.stock_ledger import lock_stock_item
from apps.machines.directory import get_machine_for_posting
from apps.marketplace.models import MarketplaceAllocation
from apps.marketplace.signals import (
    allocation_claimed,
    allocation_deleted,
    allocation_edited,
    allocation_posted,
)

logger = logging.getLogger(__name__)


class DeletionResult(NamedTuple):
    stock_item: WarehouseStockItem
    returned_quantity: int


def get_allocation(*, allocation_id: UUID) -> MarketplaceAllocation:
    try:
        return (
            MarketplaceAllocation.objects
            .select_related('stock_item', 'machine')
            .get(id=allocation_id)
        )
    except (MarketplaceAllocation.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Allocation with ID {allocation_id} not found")


def _lock_allocation(allocation_id: UUID) -> MarketplaceAllocation:
    try:
        return MarketplaceAllocation.objects.select_for_update().get(id=allocation_id)
    except (MarketplaceAllocation.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Allocation with ID {allocation_id} not found")


def _lock_allocation_with_stock(allocation_id: UUID):
    """Lock the allocation's stock item, then the allocation itself."""
    try:
        stock_item_id = (
            MarketplaceAllocation.objects
            .filter(id=allocation_id)
            .values_list('stock_item_id', flat=True)
            .first()
        )
    except DjangoValidationError:
        stock_item_id = None
    if stock_item_id is None:
        raise NotFoundError(f"Allocation with ID {allocation_id} not found")

    item = lock_stock_item(stock_item_id)
    allocation = _lock_allocation(allocation_id)
    return item, allocation


def _check_expiration(item: WarehouseStockItem, expiration_date: Optional[date]) -> None:
    if item.is_expired:
        raise ValidationError(f"Stock item {item.food_name} has expired")
    if (
        expiration_date is not None
        and item.expiration_date is not None
        and expiration_date > item.expiration_date
    ):
        raise ValidationError("Allocation cannot expire after its stock item")


def post_allocation(
    *,
    stock_item_id: UUID,
    machine_id: str,
    quantity: int,
    description: str = '',
    expiration_date: Optional[date] = None,
    posted_by: Optional[User] = None,
) -> MarketplaceAllocation:
    """
    Move stock to a machine as a new allocation.

    Args:
        stock_item_id: Source warehouse stock item
        machine_id: Target machine
        quantity: Positive number of units to move
        description: Text shown at the machine
        expiration_date: Defaults to the stock item's expiration date
        posted_by: Staff member posting the allocation

    Returns:
        Created MarketplaceAllocation with zero claims and views

    Raises:
        ValidationError: If quantity is invalid or the stock has expired
        NotFoundError: If the stock item does not exist
        InvalidMachineError: If the machine is unknown, not online, or full
        InsufficientStockError: If quantity exceeds the available balance
    """
    require_positive_int(quantity)

    with transaction.atomic():
        item = lock_stock_item(stock_item_id)
        machine = get_machine_for_posting(machine_id)
        if quantity > item.available_quantity:
            logger.warning(
                "Rejected posting of %s from stock item %s (available %s)",
                quantity, item.id, item.available_quantity,
            )
            raise InsufficientStockError(
                available=item.available_quantity,
                requested=quantity,
            )
        _check_expiration(item, expiration_date)

        allocation_id = uuid.uuid4()
        debit_for_allocation(
            item=item,
            quantity=quantity,
            allocation_ref=allocation_id,
            performed_by=posted_by,
            note=f"Posted to machine {machine.id}",
        )
        allocation = MarketplaceAllocation.objects.create(
            id=allocation_id,
            stock_item=item,
            machine=machine,
            quantity=quantity,
            description=description or '',
            expiration_date=expiration_date or item.expiration_date,
            posted_by=posted_by,
        )
        transaction.on_commit(
            lambda: allocation_posted.send(sender=MarketplaceAllocation, allocation=allocation)
        )

    logger.info(
        "Posted allocation %s: %s %s of %s to machine %s",
        allocation.id, quantity, item.units, item.food_name, machine.id,
    )
    return allocation


def edit_allocation(
    *,
    allocation_id: UUID,
    quantity: Optional[int] = None,
    description: Optional[str] = None,
    machine_id: Optional[str] = None,
    expiration_date: Optional[date] = None,
    edited_by: Optional[User] = None,
) -> MarketplaceAllocation:
    """
    Replace an allocation's quantity, target or details.

    A quantity change is applied as a delta against the stock item's
    current balance: increases are debited and checked against what is
    available now, decreases are credited back.

    Raises:
        NotFoundError: If the allocation does not exist
        ValidationError: If quantity is negative or below claimed units
        InvalidMachineError: If a new machine cannot accept postings
        InsufficientStockError: If an increase exceeds the available balance
    """
    if quantity is not None:
        require_non_negative_int(quantity)

    with transaction.atomic():
        item, allocation = _lock_allocation_with_stock(allocation_id)
        previous_quantity = allocation.quantity
        update_fields = []

        if quantity is not None and quantity < allocation.claimed_count:
            raise ValidationError(
                f"quantity cannot be below the {allocation.claimed_count} units already claimed"
            )
        if machine_id is not None and machine_id != allocation.machine_id:
            allocation.machine = get_machine_for_posting(machine_id)
            update_fields.append('machine')
        if expiration_date is not None:
            _check_expiration(item, expiration_date)
            allocation.expiration_date = expiration_date
            update_fields.append('expiration_date')
        if description is not None:
            allocation.description = description
            update_fields.append('description')

        delta = 0 if quantity is None else quantity - allocation.quantity
        if delta > 0:
            if delta > item.available_quantity:
                raise InsufficientStockError(
                    available=item.available_quantity,
                    requested=delta,
                    message=(
                        f"Insufficient stock: increasing by {delta} needs more than "
                        f"the {item.available_quantity} available"
                    ),
                )
            _check_expiration(item, None)
            debit_for_allocation(
                item=item,
                quantity=delta,
                allocation_ref=allocation.id,
                performed_by=edited_by,
                note='Allocation increased',
            )
        elif delta < 0:
            credit_back_from_allocation(
                item=item,
                quantity=-delta,
                allocation_ref=allocation.id,
                performed_by=edited_by,
                note='Allocation reduced',
            )
        if delta:
            allocation.quantity = quantity
            update_fields.append('quantity')

        if update_fields:
            allocation.save(update_fields=[*update_fields, 'updated_at'])
        transaction.on_commit(lambda: allocation_edited.send(
            sender=MarketplaceAllocation,
            allocation=allocation,
            previous_quantity=previous_quantity,
        ))

    logger.info(
        "Edited allocation %s: quantity %s -> %s",
        allocation.id, previous_quantity, allocation.quantity,
    )
    return allocation


def delete_allocation(*, allocation_id: UUID, deleted_by: Optional[User] = None) -> DeletionResult:
    """
    Remove an allocation and return its unclaimed units to stock.

    Claimed units stay counted as allocated on the stock item.

    Raises:
        NotFoundError: If the allocation does not exist
    """
    with transaction.atomic():
        item, allocation = _lock_allocation_with_stock(allocation_id)
        returned = allocation.remaining

        if returned > 0:
            credit_back_from_allocation(
                item=item,
                quantity=returned,
                allocation_ref=allocation.id,
                performed_by=deleted_by,
                note='Allocation deleted',
            )
        allocation.delete()
        transaction.on_commit(lambda: allocation_deleted.send(
            sender=MarketplaceAllocation,
            allocation_id=allocation_id,
            stock_item=item,
            returned_quantity=returned,
        ))

    logger.info("Deleted allocation %s, returned %s to stock item %s", allocation_id, returned, item.id)
    return DeletionResult(stock_item=item, returned_quantity=returned)


def record_claim(*, allocation_id: UUID, amount: int = 1) -> MarketplaceAllocation:
    """
    Count units taken from a machine.

    Raises:
        ValidationError: If amount is not positive or the allocation has expired
        NotFoundError: If the allocation does not exist
        InsufficientStockError: If amount exceeds the unclaimed quantity
    """
    require_positive_int(amount, 'amount')

    with transaction.atomic():
        allocation = _lock_allocation(allocation_id)
        if allocation.is_expired:
            raise ValidationError("Allocation has expired")
        if amount > allocation.remaining:
            raise InsufficientStockError(
                available=allocation.remaining,
                requested=amount,
            )

        allocation.claimed_count += amount
        allocation.save(update_fields=['claimed_count', 'updated_at'])
        transaction.on_commit(lambda: allocation_claimed.send(
            sender=MarketplaceAllocation, allocation=allocation, amount=amount,
        ))

    return allocation


def record_view(*, allocation_id: UUID) -> MarketplaceAllocation:
    """Increment the view counter."""
    try:
        updated = (
            MarketplaceAllocation.objects
            .filter(id=allocation_id)
            .update(view_count=F('view_count') + 1)
        )
    except DjangoValidationError:
        updated = 0
    if not updated:
        raise NotFoundError(f"Allocation with ID {allocation_id} not found")
    return get_allocation(allocation_id=allocation_id)
