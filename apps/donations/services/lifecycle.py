"""
Donation lifecycle service.

Handles submission, review and verification of donation requests with
row locks and transaction safety. Verification is the only path by
which donor-declared quantities become warehouse stock.
"""

import logging
from datetime import date
from typing import NamedTuple, Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.common.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from apps.common.validators import (
    require_non_negative_int,
    require_positive_int,
    require_text,
)
from apps.donations.models import (
    DeliveryMethod,
    DonationAuditEntry,
    DonationRequest,
    DonationStatus,
)
from apps.donations.signals import (
    donation_approved,
    donation_denied,
    donation_submitted,
    donation_verified,
)
from apps.inventory.models import FoodCategory, WarehouseStockItem, build_item_key
from apps.inventory.services import credit_stock

from .state_machine import apply_transition, ensure_transition

logger = logging.getLogger(__name__)


class VerificationResult(NamedTuple):
    donation: DonationRequest
    stock_item: WarehouseStockItem
    item_created: bool
    already_verified: bool


def _require_ngo_staff(user: User, action: str) -> None:
    if user is None or not user.is_ngo_staff:
        raise PermissionDeniedError(f"Only NGO staff can {action}")


def _lock_request(request_id: UUID) -> DonationRequest:
    try:
        return DonationRequest.objects.select_for_update().get(id=request_id)
    except (DonationRequest.DoesNotExist, DjangoValidationError):
        raise NotFoundError(f"Donation request with ID {request_id} not found")


def submit_donation(
    *,
    donor: User,
    food_name: str,
    category: str,
    quantity: int,
    units: str,
    pickup_date: date,
    expiration_date: Optional[date] = None,
    description: str = '',
    estimated_meals: Optional[int] = None,
    delivery_method: str = DeliveryMethod.DROP_OFF,
    drop_off_location: str = '',
) -> DonationRequest:
    """
    Record a donor's pledge in the pending state.

    Args:
        donor: User making the donation
        food_name: What is being donated
        category: perishable, non-perishable, cooked or packaged
        quantity: Positive number of units
        units: Unit label, e.g. 'kg'
        pickup_date: When the food can be collected or dropped off
        expiration_date: Optional best-before date
        description: Optional free text
        estimated_meals: Optional number of meals the donation covers
        delivery_method: 'drop-off' or 'pickup'
        drop_off_location: Where the donor drops the food off

    Returns:
        Created DonationRequest in status 'pending'

    Raises:
        ValidationError: If any input is missing or malformed
    """
    food_name = require_text(food_name, 'food_name')
    units = require_text(units, 'units')
    require_positive_int(quantity)

    if category not in FoodCategory.values:
        raise ValidationError(f"Unknown food category: {category}")
    if pickup_date is None:
        raise ValidationError("pickup_date is required")
    if delivery_method not in DeliveryMethod.values:
        raise ValidationError(f"Unknown delivery method: {delivery_method}")
    if estimated_meals is not None:
        require_non_negative_int(estimated_meals, 'estimated_meals')
    if delivery_method != DeliveryMethod.DROP_OFF:
        drop_off_location = ''

    with transaction.atomic():
        donation = DonationRequest.objects.create(
            donor=donor,
            donor_name=donor.get_display_name(),
            food_name=food_name,
            category=category,
            quantity=quantity,
            units=units,
            pickup_date=pickup_date,
            expiration_date=expiration_date,
            description=description or '',
            estimated_meals=estimated_meals,
            delivery_method=delivery_method,
            drop_off_location=(drop_off_location or '').strip(),
        )
        DonationAuditEntry.objects.create(
            request=donation,
            to_status=DonationStatus.PENDING,
            actor=donor,
            note='Donation submitted',
        )
        transaction.on_commit(
            lambda: donation_submitted.send(sender=DonationRequest, donation=donation)
        )

    logger.info("Donation request %s submitted by %s", donation.id, donor.id)
    return donation


def approve_donation(*, request_id: UUID, reviewer: User) -> DonationRequest:
    """
    Accept a pending request; it then waits for physical verification.

    Raises:
        PermissionDeniedError: If reviewer is not NGO staff
        NotFoundError: If the request does not exist
        InvalidTransitionError: If the request is not pending
    """
    _require_ngo_staff(reviewer, 'approve donations')

    with transaction.atomic():
        donation = _lock_request(request_id)
        donation.reviewed_by = reviewer
        donation.reviewed_at = timezone.now()
        apply_transition(
            donation,
            DonationStatus.APPROVED_PENDING_VERIFICATION,
            actor=reviewer,
            note='Approved by NGO',
            update_fields=['reviewed_by', 'reviewed_at'],
        )
        transaction.on_commit(lambda: donation_approved.send(
            sender=DonationRequest, donation=donation, reviewer=reviewer,
        ))

    logger.info("Donation request %s approved by %s", donation.id, reviewer.id)
    return donation


def deny_donation(*, request_id: UUID, reviewer: User, reason: str) -> DonationRequest:
    """
    Reject a request that is pending or awaiting verification.

    The reason is stored on the request and in its audit trail so it can
    be shown to the donor.

    Raises:
        PermissionDeniedError: If reviewer is not NGO staff
        ValidationError: If reason is blank
        NotFoundError: If the request does not exist
        InvalidTransitionError: If the request is already verified or rejected
    """
    _require_ngo_staff(reviewer, 'deny donations')
    reason = require_text(reason, 'reason')

    with transaction.atomic():
        donation = _lock_request(request_id)
        donation.rejection_reason = reason
        donation.reviewed_by = reviewer
        donation.reviewed_at = timezone.now()
        apply_transition(
            donation,
            DonationStatus.REJECTED,
            actor=reviewer,
            note=reason,
            update_fields=['rejection_reason', 'reviewed_by', 'reviewed_at'],
        )
        transaction.on_commit(lambda: donation_denied.send(
            sender=DonationRequest, donation=donation, reviewer=reviewer, reason=reason,
        ))

    logger.info("Donation request %s rejected by %s", donation.id, reviewer.id)
    return donation


def verify_donation(*, request_id: UUID, verifier: User, proof_image: str) -> VerificationResult:
    """
    Confirm physical receipt and credit the quantity to warehouse stock.

    The stock credit and the status change commit together. Calling this
    again for a request that is already verified returns the existing
    stock item and credits nothing.

    Args:
        request_id: Donation request to verify
        verifier: NGO staff member confirming receipt
        proof_image: Reference to the proof photo

    Returns:
        VerificationResult(donation, stock_item, item_created, already_verified)

    Raises:
        PermissionDeniedError: If verifier is not NGO staff
        NotFoundError: If the request does not exist
        ValidationError: If proof_image is blank
        InvalidTransitionError: If the request is not approved
    """
    _require_ngo_staff(verifier, 'verify donations')

    with transaction.atomic():
        donation = _lock_request(request_id)

        if donation.status == DonationStatus.VERIFIED:
            logger.info("Donation request %s already verified, skipping credit", donation.id)
            return VerificationResult(
                donation=donation,
                stock_item=donation.stock_item,
                item_created=False,
                already_verified=True,
            )

        proof = require_text(proof_image, 'proof_image')
        ensure_transition(donation, DonationStatus.VERIFIED)

        item, created = credit_stock(
            item_key=build_item_key(
                food_name=donation.food_name,
                category=donation.category,
                units=donation.units,
                expiration_date=donation.expiration_date,
            ),
            quantity=donation.quantity,
            metadata={
                'food_name': donation.food_name,
                'category': donation.category,
                'units': donation.units,
                'expiration_date': donation.expiration_date,
                'donor_name': donation.donor_name,
                'location': donation.drop_off_location,
            },
            donation_request=donation,
            performed_by=verifier,
        )

        donation.proof_image = proof
        donation.verified_by = verifier
        donation.verified_at = timezone.now()
        donation.stock_item = item
        apply_transition(
            donation,
            DonationStatus.VERIFIED,
            actor=verifier,
            note=f"Verified with proof {proof}",
            update_fields=['proof_image', 'verified_by', 'verified_at', 'stock_item'],
        )
        transaction.on_commit(lambda: donation_verified.send(
            sender=DonationRequest, donation=donation, verifier=verifier, stock_item=item,
        ))

    logger.info(
        "Donation request %s verified by %s; %s %s credited to stock item %s",
        donation.id, verifier.id, donation.quantity, donation.units, item.id,
    )
    return VerificationResult(
        donation=donation,
        stock_item=item,
        item_created=created,
        already_verified=False,
    )


def get_pending_queue():
    """Requests awaiting review or verification, oldest first."""
    return (
        DonationRequest.objects
        .active()
        .select_related('donor')
        .order_by('created_at')
    )


def get_donor_history(donor: User):
    """All of a donor's requests, newest first, including closed ones."""
    return (
        DonationRequest.objects
        .filter(donor=donor)
        .select_related('stock_item')
        .order_by('-created_at')
    )
