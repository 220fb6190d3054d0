"""Services for the warehouse inventory ledger."""

from .stock_ledger import (
    get_stock_item,
    credit_stock,
    debit_for_distribution,
    debit_for_allocation,
    credit_back_from_allocation,
)
from .reconciliation import (
    check_stock_item_consistency,
    check_all_stock_items,
    conservation_totals,
)

__all__ = [
    'get_stock_item',
    'credit_stock',
    'debit_for_distribution',
    'debit_for_allocation',
    'credit_back_from_allocation',
    'check_stock_item_consistency',
    'check_all_stock_items',
    'conservation_totals',
]
