"""
Donation request state machine.

The transition table below is the complete set of legal status changes.
apply_transition() is the only code that writes DonationRequest.status.
"""

from apps.common.exceptions import InvalidTransitionError
from apps.donations.models import DonationAuditEntry, DonationRequest, DonationStatus


DONATION_TRANSITIONS: dict[DonationStatus, frozenset[DonationStatus]] = {
    DonationStatus.PENDING: frozenset({
        DonationStatus.APPROVED_PENDING_VERIFICATION,
        DonationStatus.REJECTED,
    }),
    DonationStatus.APPROVED_PENDING_VERIFICATION: frozenset({
        DonationStatus.VERIFIED,
        DonationStatus.REJECTED,
    }),
    DonationStatus.VERIFIED: frozenset(),
    DonationStatus.REJECTED: frozenset(),
}

TERMINAL_DONATION_STATUSES = frozenset(
    status for status, targets in DONATION_TRANSITIONS.items() if not targets
)


def can_transition(current, target) -> bool:
    return DonationStatus(target) in DONATION_TRANSITIONS[DonationStatus(current)]


def ensure_transition(donation: DonationRequest, target: DonationStatus) -> None:
    """
    Raise InvalidTransitionError unless ``donation`` may move to ``target``.

    Services call this before any side effect so that an illegal request
    fails without touching other tables.
    """
    current = DonationStatus(donation.status)
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Cannot move donation request from '{current.value}' to "
            f"'{DonationStatus(target).value}'",
            current=current,
            target=DonationStatus(target),
        )


def apply_transition(
    donation: DonationRequest,
    target: DonationStatus,
    *,
    actor=None,
    note: str = '',
    update_fields=(),
) -> DonationAuditEntry:
    """
    Move ``donation`` to ``target`` and append an audit entry.

    The caller must hold a row lock on the donation. Any other fields the
    caller changed for this transition are passed in ``update_fields`` so
    they are saved in the same statement.

    Raises:
        InvalidTransitionError: If the transition is not in DONATION_TRANSITIONS
    """
    ensure_transition(donation, target)
    previous = donation.status

    donation.status = DonationStatus(target)
    donation.save(update_fields=['status', 'updated_at', *update_fields])

    return DonationAuditEntry.objects.create(
        request=donation,
        from_status=previous,
        to_status=donation.status,
        actor=actor,
        note=note,
    )
