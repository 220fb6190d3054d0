"""Services for the donation request lifecycle."""

from .state_machine import (
    DONATION_TRANSITIONS,
    TERMINAL_DONATION_STATUSES,
    apply_transition,
    can_transition,
    ensure_transition,
)
from .lifecycle import (
    VerificationResult,
    submit_donation,
    approve_donation,
    deny_donation,
    verify_donation,
    get_pending_queue,
    get_donor_history,
)

__all__ = [
    # State machine
    'DONATION_TRANSITIONS',
    'TERMINAL_DONATION_STATUSES',
    'apply_transition',
    'can_transition',
    'ensure_transition',
    # Lifecycle
    'VerificationResult',
    'submit_donation',
    'approve_donation',
    'deny_donation',
    'verify_donation',
    'get_pending_queue',
    'get_donor_history',
]
