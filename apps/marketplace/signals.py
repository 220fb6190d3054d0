"""Domain events for marketplace allocations, sent after commit."""

from django.dispatch import Signal

# kwargs: allocation
allocation_posted = Signal()

# kwargs: allocation, previous_quantity
allocation_edited = Signal()

# kwargs: allocation_id, stock_item, returned_quantity
allocation_deleted = Signal()

# kwargs: allocation, amount
allocation_claimed = Signal()
