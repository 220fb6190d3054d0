import pytest
import uuid
from datetime import date, timedelta

from django.utils import timezone

from apps.common.exceptions import (
    InsufficientStockError,
    InvalidMachineError,
    NotFoundError,
    ValidationError,
)
from apps.inventory.models import MovementKind, StockStatus
from apps.inventory.services import check_stock_item_consistency
from apps.marketplace.models import (
    AllocationStatus,
    MarketplaceAllocation,
    compute_allocation_status,
)
from apps.marketplace.services import (
    delete_allocation,
    edit_allocation,
    post_allocation,
    record_claim,
    record_view,
)
from apps.marketplace.signals import allocation_claimed, allocation_posted


def assert_conserved(item):
    item.refresh_from_db()
    assert item.total_quantity == (
        item.available_quantity + item.distributed_quantity + item.allocated_quantity
    )
    assert check_stock_item_consistency(item) == []


# =============================================================================
# Status Derivation Tests
# =============================================================================

class TestComputeAllocationStatus:

    today = date(2026, 3, 1)

    @pytest.mark.parametrize('remaining, expected', [
        (15, AllocationStatus.ACTIVE),
        (6, AllocationStatus.ACTIVE),
        (5, AllocationStatus.LOW_STOCK),
        (1, AllocationStatus.LOW_STOCK),
        (0, AllocationStatus.OUT_OF_STOCK),
    ])
    def test_status_from_remaining(self, remaining, expected):
        assert compute_allocation_status(remaining, None, today=self.today, low_threshold=5) == expected

    def test_expired_wins_over_remaining(self):
        yesterday = self.today - timedelta(days=1)
        assert compute_allocation_status(15, yesterday, today=self.today, low_threshold=5) == AllocationStatus.EXPIRED


# =============================================================================
# Posting Tests
# =============================================================================

@pytest.mark.django_db
class TestPostAllocation:

    def test_post_moves_stock_to_machine(self, stock_item, machine, ngo_user):
        allocation = post_allocation(
            stock_item_id=stock_item.id,
            machine_id=machine.id,
            quantity=15,
            posted_by=ngo_user,
        )

        assert allocation.quantity == 15
        assert allocation.claimed_count == 0
        assert allocation.view_count == 0
        assert allocation.status == AllocationStatus.ACTIVE

        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 5
        assert stock_item.allocated_quantity == 15
        assert stock_item.status == StockStatus.LOW
        assert_conserved(stock_item)

    def test_records_allocation_movement(self, allocation, stock_item):
        movement = stock_item.movements.get(kind=MovementKind.ALLOCATION)

        assert movement.quantity == 15
        assert movement.allocation_ref == allocation.id
        assert movement.balance_after == 5

    def test_expiration_defaults_to_stock_item(self, make_stock_item, machine):
        expires = timezone.localdate() + timedelta(days=3)
        item = make_stock_item(food_name='Yogurt', category='perishable', expiration_date=expires)

        allocation = post_allocation(stock_item_id=item.id, machine_id=machine.id, quantity=4)

        assert allocation.expiration_date == expires

    def test_exceeding_available_leaves_state_unchanged(self, stock_item, machine):
        with pytest.raises(InsufficientStockError) as exc_info:
            post_allocation(stock_item_id=stock_item.id, machine_id=machine.id, quantity=25)

        assert exc_info.value.available == 20
        assert exc_info.value.requested == 25
        assert 'only 20 available' in str(exc_info.value)
        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 20
        assert stock_item.allocated_quantity == 0
        assert MarketplaceAllocation.objects.count() == 0
        assert not stock_item.movements.filter(kind=MovementKind.ALLOCATION).exists()
        assert_conserved(stock_item)

    def test_offline_machine_rejected(self, stock_item, offline_machine):
        with pytest.raises(InvalidMachineError, match='offline'):
            post_allocation(stock_item_id=stock_item.id, machine_id=offline_machine.id, quantity=5)

        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 20
        assert MarketplaceAllocation.objects.count() == 0
        assert not stock_item.movements.filter(kind=MovementKind.ALLOCATION).exists()

    def test_full_machine_rejected(self, stock_item, full_machine):
        with pytest.raises(InvalidMachineError, match='full'):
            post_allocation(stock_item_id=stock_item.id, machine_id=full_machine.id, quantity=5)

    def test_unknown_machine_rejected(self, stock_item):
        with pytest.raises(InvalidMachineError, match='not found'):
            post_allocation(stock_item_id=stock_item.id, machine_id='nope', quantity=5)

    def test_unknown_stock_item(self, machine):
        with pytest.raises(NotFoundError):
            post_allocation(stock_item_id=uuid.uuid4(), machine_id=machine.id, quantity=5)

    @pytest.mark.parametrize('quantity', [0, -3, 2.5, '5', True])
    def test_invalid_quantity(self, stock_item, machine, quantity):
        with pytest.raises(ValidationError):
            post_allocation(stock_item_id=stock_item.id, machine_id=machine.id, quantity=quantity)

    def test_expired_stock_rejected(self, make_stock_item, machine):
        past = timezone.localdate() - timedelta(days=1)
        item = make_stock_item(food_name='Milk', category='perishable', expiration_date=past)

        with pytest.raises(ValidationError, match='expired'):
            post_allocation(stock_item_id=item.id, machine_id=machine.id, quantity=2)

    def test_expiration_after_stock_rejected(self, make_stock_item, machine):
        expires = timezone.localdate() + timedelta(days=3)
        item = make_stock_item(food_name='Yogurt', category='perishable', expiration_date=expires)

        with pytest.raises(ValidationError):
            post_allocation(
                stock_item_id=item.id,
                machine_id=machine.id,
                quantity=2,
                expiration_date=expires + timedelta(days=1),
            )

    def test_emits_event_on_commit(self, stock_item, machine, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, allocation, **kwargs):
            received.append(allocation.quantity)

        allocation_posted.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                post_allocation(stock_item_id=stock_item.id, machine_id=machine.id, quantity=3)
        finally:
            allocation_posted.disconnect(receiver)

        assert received == [3]


# =============================================================================
# Editing Tests
# =============================================================================

@pytest.mark.django_db
class TestEditAllocation:

    def test_decrease_credits_back(self, allocation, stock_item):
        allocation = edit_allocation(allocation_id=allocation.id, quantity=10)

        assert allocation.quantity == 10
        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 10
        assert stock_item.allocated_quantity == 10
        assert stock_item.movements.filter(kind=MovementKind.ALLOCATION_RETURN).get().quantity == 5
        assert_conserved(stock_item)

    def test_increase_debits(self, allocation, stock_item):
        edit_allocation(allocation_id=allocation.id, quantity=18)

        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 2
        assert stock_item.allocated_quantity == 18
        assert_conserved(stock_item)

    def test_increase_beyond_available(self, allocation, stock_item):
        with pytest.raises(InsufficientStockError) as exc_info:
            edit_allocation(allocation_id=allocation.id, quantity=21)

        assert exc_info.value.available == 5
        assert exc_info.value.requested == 6
        allocation.refresh_from_db()
        assert allocation.quantity == 15

    def test_below_claimed_rejected(self, allocation):
        record_claim(allocation_id=allocation.id, amount=4)

        with pytest.raises(ValidationError, match='claimed'):
            edit_allocation(allocation_id=allocation.id, quantity=3)

    def test_change_machine(self, allocation, offline_machine, ngo_user):
        from apps.machines.models import Machine, MachineStatus
        other = Machine.objects.create(
            id='m9', name='Market Hall', location='Old Town',
            status=MachineStatus.ONLINE, max_capacity=100,
        )

        allocation = edit_allocation(allocation_id=allocation.id, machine_id=other.id)
        assert allocation.machine_id == 'm9'

        with pytest.raises(InvalidMachineError):
            edit_allocation(allocation_id=allocation.id, machine_id=offline_machine.id)

    def test_details_only_keep_stock(self, allocation, stock_item):
        allocation = edit_allocation(allocation_id=allocation.id, description='Top shelf')

        assert allocation.description == 'Top shelf'
        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 5

    def test_unknown_allocation(self):
        with pytest.raises(NotFoundError):
            edit_allocation(allocation_id=uuid.uuid4(), quantity=1)


# =============================================================================
# Deletion Tests
# =============================================================================

@pytest.mark.django_db
class TestDeleteAllocation:

    def test_returns_remaining(self, allocation, stock_item):
        result = delete_allocation(allocation_id=allocation.id)

        assert result.returned_quantity == 15
        assert result.stock_item.available_quantity == 20
        assert result.stock_item.allocated_quantity == 0
        assert not MarketplaceAllocation.objects.exists()
        assert_conserved(stock_item)

    def test_claimed_units_stay_allocated(self, allocation, stock_item):
        record_claim(allocation_id=allocation.id, amount=6)

        result = delete_allocation(allocation_id=allocation.id)

        assert result.returned_quantity == 9
        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 14
        assert stock_item.allocated_quantity == 6
        assert_conserved(stock_item)

    def test_unknown_allocation(self):
        with pytest.raises(NotFoundError):
            delete_allocation(allocation_id=uuid.uuid4())


# =============================================================================
# Claim & View Tests
# =============================================================================

@pytest.mark.django_db
class TestClaims:

    def test_claim_reduces_remaining(self, allocation):
        allocation = record_claim(allocation_id=allocation.id, amount=11)

        assert allocation.claimed_count == 11
        assert allocation.remaining == 4
        assert allocation.status == AllocationStatus.LOW_STOCK

    def test_claim_everything(self, allocation):
        allocation = record_claim(allocation_id=allocation.id, amount=15)

        assert allocation.status == AllocationStatus.OUT_OF_STOCK

    def test_claim_beyond_remaining(self, allocation):
        record_claim(allocation_id=allocation.id, amount=14)

        with pytest.raises(InsufficientStockError) as exc_info:
            record_claim(allocation_id=allocation.id, amount=2)

        assert exc_info.value.available == 1
        allocation.refresh_from_db()
        assert allocation.claimed_count == 14

    def test_claim_does_not_touch_stock(self, allocation, stock_item):
        record_claim(allocation_id=allocation.id, amount=5)

        stock_item.refresh_from_db()
        assert stock_item.available_quantity == 5
        assert stock_item.allocated_quantity == 15

    def test_claim_expired(self, allocation):
        MarketplaceAllocation.objects.filter(id=allocation.id).update(
            expiration_date=timezone.localdate() - timedelta(days=1)
        )

        with pytest.raises(ValidationError, match='expired'):
            record_claim(allocation_id=allocation.id)

    def test_claim_emits_event(self, allocation, django_capture_on_commit_callbacks):
        amounts = []

        def receiver(sender, amount, **kwargs):
            amounts.append(amount)

        allocation_claimed.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                record_claim(allocation_id=allocation.id, amount=2)
        finally:
            allocation_claimed.disconnect(receiver)

        assert amounts == [2]

    def test_view_counter(self, allocation):
        record_view(allocation_id=allocation.id)
        allocation = record_view(allocation_id=allocation.id)

        assert allocation.view_count == 2

    def test_view_unknown(self):
        with pytest.raises(NotFoundError):
            record_view(allocation_id=uuid.uuid4())


@pytest.mark.django_db
class TestMalformedIds:

    @pytest.mark.parametrize('operation', [
        lambda: edit_allocation(allocation_id='not-a-uuid', quantity=1),
        lambda: delete_allocation(allocation_id='not-a-uuid'),
        lambda: record_claim(allocation_id='not-a-uuid'),
        lambda: record_view(allocation_id='not-a-uuid'),
    ])
    def test_allocation_operations(self, operation):
        with pytest.raises(NotFoundError, match='not-a-uuid'):
            operation()

    def test_post_with_malformed_stock_item(self, machine):
        with pytest.raises(NotFoundError, match='not-a-uuid'):
            post_allocation(stock_item_id='not-a-uuid', machine_id=machine.id, quantity=1)


@pytest.mark.django_db
class TestStatusAnnotation:

    def test_annotation_matches_property(self, allocation, make_stock_item, machine):
        beans = make_stock_item(quantity=10, food_name='Beans')
        low = post_allocation(stock_item_id=beans.id, machine_id=machine.id, quantity=3)
        record_claim(allocation_id=low.id, amount=3)

        for row in MarketplaceAllocation.objects.with_status():
            assert row.derived_status == row.status

        assert list(
            MarketplaceAllocation.objects.with_derived_status(AllocationStatus.OUT_OF_STOCK)
        ) == [low]
