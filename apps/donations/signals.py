"""
Domain events for the donation lifecycle.

Each signal is sent with ``transaction.on_commit`` once the transition
has been stored. The notification layer subscribes to these; nothing in
this project delivers them.
"""

from django.dispatch import Signal

# kwargs: donation
donation_submitted = Signal()

# kwargs: donation, reviewer
donation_approved = Signal()

# kwargs: donation, reviewer, reason
donation_denied = Signal()

# kwargs: donation, verifier, stock_item
donation_verified = Signal()
