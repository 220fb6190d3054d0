"""
Service layer tests for the donation lifecycle.

Tests cover:
- Transition table and the single status writer
- Submission validation
- Review permissions and failure without partial state
- Idempotent verification and the stock credit
- Domain events sent on commit
"""

import pytest
from uuid import uuid4

from apps.common.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from apps.donations.models import DonationRequest, DonationStatus
from apps.donations.services import (
    DONATION_TRANSITIONS,
    TERMINAL_DONATION_STATUSES,
    VerificationResult,
    apply_transition,
    approve_donation,
    deny_donation,
    get_donor_history,
    get_pending_queue,
    submit_donation,
    verify_donation,
)
from apps.donations.signals import donation_approved, donation_denied, donation_verified
from apps.inventory.models import MovementKind, StockMovement, StockStatus, WarehouseStockItem


# =============================================================================
# State Machine Tests
# =============================================================================

class TestTransitionTable:

    def test_every_status_has_an_entry(self):
        assert set(DONATION_TRANSITIONS) == set(DonationStatus)

    def test_terminal_statuses(self):
        assert TERMINAL_DONATION_STATUSES == {DonationStatus.VERIFIED, DonationStatus.REJECTED}

    def test_verification_requires_approval_first(self):
        assert DonationStatus.VERIFIED not in DONATION_TRANSITIONS[DonationStatus.PENDING]


@pytest.mark.django_db
class TestApplyTransition:

    def test_writes_audit_entry(self, pending_donation, ngo_user):
        entry = apply_transition(
            pending_donation,
            DonationStatus.APPROVED_PENDING_VERIFICATION,
            actor=ngo_user,
            note='ok',
        )

        assert entry.from_status == DonationStatus.PENDING
        assert entry.to_status == DonationStatus.APPROVED_PENDING_VERIFICATION
        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.APPROVED_PENDING_VERIFICATION

    def test_illegal_transition_leaves_status(self, pending_donation):
        with pytest.raises(InvalidTransitionError) as exc_info:
            apply_transition(pending_donation, DonationStatus.VERIFIED)

        assert exc_info.value.current == DonationStatus.PENDING
        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.PENDING
        assert pending_donation.audit_entries.count() == 1


# =============================================================================
# Submission Tests
# =============================================================================

@pytest.mark.django_db
class TestSubmitDonation:

    def test_new_request_is_pending(self, user, donation_data):
        donation = submit_donation(donor=user, **donation_data)

        assert donation.status == DonationStatus.PENDING
        assert donation.donor_name == 'Test Donor'
        assert donation.is_active
        entry = donation.audit_entries.get()
        assert entry.from_status == ''
        assert entry.to_status == DonationStatus.PENDING

    @pytest.mark.parametrize('quantity', [0, -1, 1.5, None])
    def test_rejects_invalid_quantity(self, user, donation_data, quantity):
        donation_data['quantity'] = quantity

        with pytest.raises(ValidationError):
            submit_donation(donor=user, **donation_data)

        assert DonationRequest.objects.count() == 0

    @pytest.mark.parametrize('field', ['food_name', 'units'])
    def test_rejects_blank_required_text(self, user, donation_data, field):
        donation_data[field] = '   '

        with pytest.raises(ValidationError, match=field):
            submit_donation(donor=user, **donation_data)

    def test_rejects_missing_pickup_date(self, user, donation_data):
        donation_data['pickup_date'] = None

        with pytest.raises(ValidationError, match='pickup_date'):
            submit_donation(donor=user, **donation_data)

    def test_rejects_unknown_category(self, user, donation_data):
        donation_data['category'] = 'frozen'

        with pytest.raises(ValidationError, match='category'):
            submit_donation(donor=user, **donation_data)

    def test_pickup_clears_drop_off_location(self, user, donation_data):
        donation_data['delivery_method'] = 'pickup'

        donation = submit_donation(donor=user, **donation_data)

        assert donation.drop_off_location == ''


# =============================================================================
# Review Tests
# =============================================================================

@pytest.mark.django_db
class TestApproveDonation:

    def test_approve_pending(self, pending_donation, ngo_user):
        donation = approve_donation(request_id=pending_donation.id, reviewer=ngo_user)

        assert donation.status == DonationStatus.APPROVED_PENDING_VERIFICATION
        assert donation.reviewed_by == ngo_user
        assert donation.reviewed_at is not None

    def test_approve_twice_fails(self, approved_donation, ngo_user):
        with pytest.raises(InvalidTransitionError):
            approve_donation(request_id=approved_donation.id, reviewer=ngo_user)

    def test_approve_rejected_fails(self, pending_donation, ngo_user):
        deny_donation(request_id=pending_donation.id, reviewer=ngo_user, reason='Expired')

        with pytest.raises(InvalidTransitionError):
            approve_donation(request_id=pending_donation.id, reviewer=ngo_user)

    def test_donor_cannot_approve(self, pending_donation, user):
        with pytest.raises(PermissionDeniedError):
            approve_donation(request_id=pending_donation.id, reviewer=user)

        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.PENDING

    def test_unknown_request(self, ngo_user):
        with pytest.raises(NotFoundError):
            approve_donation(request_id=uuid4(), reviewer=ngo_user)

    def test_emits_event_on_commit(self, pending_donation, ngo_user, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, donation, reviewer, **kwargs):
            received.append((donation.id, reviewer))

        donation_approved.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                approve_donation(request_id=pending_donation.id, reviewer=ngo_user)
        finally:
            donation_approved.disconnect(receiver)

        assert received == [(pending_donation.id, ngo_user)]


@pytest.mark.django_db
class TestDenyDonation:

    def test_deny_without_reason_fails(self, pending_donation, ngo_user):
        with pytest.raises(ValidationError, match='reason'):
            deny_donation(request_id=pending_donation.id, reviewer=ngo_user, reason='  ')

        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.PENDING

    def test_deny_pending_removes_from_queue(self, pending_donation, ngo_user):
        donation = deny_donation(
            request_id=pending_donation.id,
            reviewer=ngo_user,
            reason='Packaging damaged',
        )

        assert donation.status == DonationStatus.REJECTED
        assert donation.rejection_reason == 'Packaging damaged'
        assert pending_donation not in get_pending_queue()
        assert DonationRequest.objects.filter(id=pending_donation.id).exists()

    def test_deny_approved(self, approved_donation, ngo_user):
        donation = deny_donation(
            request_id=approved_donation.id,
            reviewer=ngo_user,
            reason='Donor did not show up',
        )

        assert donation.status == DonationStatus.REJECTED
        assert donation.audit_entries.last().note == 'Donor did not show up'

    def test_deny_verified_fails(self, approved_donation, ngo_user):
        verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')

        with pytest.raises(InvalidTransitionError):
            deny_donation(request_id=approved_donation.id, reviewer=ngo_user, reason='Too late')

    def test_emits_reason(self, pending_donation, ngo_user, django_capture_on_commit_callbacks):
        reasons = []

        def receiver(sender, reason, **kwargs):
            reasons.append(reason)

        donation_denied.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                deny_donation(request_id=pending_donation.id, reviewer=ngo_user, reason=' Spoiled ')
        finally:
            donation_denied.disconnect(receiver)

        assert reasons == ['Spoiled']


# =============================================================================
# Verification Tests
# =============================================================================

@pytest.mark.django_db
class TestVerifyDonation:

    def test_verify_credits_stock(self, approved_donation, ngo_user):
        result = verify_donation(
            request_id=approved_donation.id,
            verifier=ngo_user,
            proof_image='img.png',
        )

        assert result.already_verified is False
        assert result.item_created is True
        assert result.donation.status == DonationStatus.VERIFIED
        assert result.donation.stock_item == result.stock_item
        assert result.stock_item.available_quantity == 20
        assert result.stock_item.total_quantity == 20
        assert result.stock_item.status == StockStatus.AVAILABLE
        assert result.stock_item.location == 'Warehouse 4, Dock B'
        assert approved_donation not in get_pending_queue()

    def test_verify_is_idempotent(self, approved_donation, ngo_user):
        first = verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')
        second = verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')

        assert second.already_verified is True
        assert second.item_created is False
        assert second.stock_item.id == first.stock_item.id
        item = WarehouseStockItem.objects.get(id=first.stock_item.id)
        assert item.total_quantity == 20
        assert item.available_quantity == 20
        assert StockMovement.objects.filter(kind=MovementKind.CREDIT).count() == 1

    def test_verify_result_shape(self, approved_donation, ngo_user):
        result = verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')

        assert isinstance(result, VerificationResult)
        assert result._fields == ('donation', 'stock_item', 'item_created', 'already_verified')

    def test_verify_requires_proof(self, approved_donation, ngo_user):
        with pytest.raises(ValidationError, match='proof_image'):
            verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='')

        approved_donation.refresh_from_db()
        assert approved_donation.status == DonationStatus.APPROVED_PENDING_VERIFICATION
        assert WarehouseStockItem.objects.count() == 0

    def test_verify_pending_fails_without_credit(self, pending_donation, ngo_user):
        with pytest.raises(InvalidTransitionError):
            verify_donation(request_id=pending_donation.id, verifier=ngo_user, proof_image='img.png')

        assert WarehouseStockItem.objects.count() == 0

    def test_verify_rejected_fails(self, approved_donation, ngo_user):
        deny_donation(request_id=approved_donation.id, reviewer=ngo_user, reason='Spoiled')

        with pytest.raises(InvalidTransitionError):
            verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')

    def test_matching_donations_merge_into_one_item(self, user, other_user, ngo_user, donation_data):
        first = submit_donation(donor=user, **donation_data)
        second = submit_donation(donor=other_user, **{**donation_data, 'quantity': 5})
        for donation in (first, second):
            approve_donation(request_id=donation.id, reviewer=ngo_user)

        verify_donation(request_id=first.id, verifier=ngo_user, proof_image='a.png')
        result = verify_donation(request_id=second.id, verifier=ngo_user, proof_image='b.png')

        assert result.item_created is False
        assert result.stock_item.total_quantity == 25
        assert WarehouseStockItem.objects.count() == 1

    def test_donor_cannot_verify(self, approved_donation, user):
        with pytest.raises(PermissionDeniedError):
            verify_donation(request_id=approved_donation.id, verifier=user, proof_image='img.png')

    def test_event_sent_once(self, approved_donation, ngo_user, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, stock_item, **kwargs):
            received.append(stock_item.id)

        donation_verified.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')
            with django_capture_on_commit_callbacks(execute=True):
                verify_donation(request_id=approved_donation.id, verifier=ngo_user, proof_image='img.png')
        finally:
            donation_verified.disconnect(receiver)

        assert len(received) == 1


# =============================================================================
# Query Tests
# =============================================================================

@pytest.mark.django_db
class TestQueries:

    def test_pending_queue_holds_only_active_requests(self, user, ngo_user, donation_data):
        first = submit_donation(donor=user, **donation_data)
        second = submit_donation(donor=user, **donation_data)
        third = submit_donation(donor=user, **donation_data)
        approve_donation(request_id=second.id, reviewer=ngo_user)
        deny_donation(request_id=third.id, reviewer=ngo_user, reason='Duplicate')

        queue = list(get_pending_queue())
        assert len(queue) == 2
        assert set(queue) == {first, second}

    def test_donor_history_includes_closed_requests(self, user, other_user, ngo_user, donation_data):
        mine = submit_donation(donor=user, **donation_data)
        submit_donation(donor=other_user, **donation_data)
        deny_donation(request_id=mine.id, reviewer=ngo_user, reason='Duplicate')

        assert list(get_donor_history(user)) == [mine]
