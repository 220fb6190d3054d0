"""
Domain events emitted by the inventory ledger.

Signals are sent after the surrounding transaction commits, so
receivers never observe a movement that was rolled back.
"""

from django.dispatch import Signal

# kwargs: stock_item, quantity, movement
stock_credited = Signal()

# kwargs: stock_item, quantity, movement
stock_distributed = Signal()
