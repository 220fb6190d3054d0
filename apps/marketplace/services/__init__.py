"""Services for marketplace allocations."""

from .allocations import (
    DeletionResult,
    get_allocation,
    post_allocation,
    edit_allocation,
    delete_allocation,
    record_claim,
    record_view,
)

__all__ = [
    'DeletionResult',
    'get_allocation',
    'post_allocation',
    'edit_allocation',
    'delete_allocation',
    'record_claim',
    'record_view',
]
