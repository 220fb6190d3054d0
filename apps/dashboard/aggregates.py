"""
Dashboard Aggregates
====================

Read-only projections over donation requests, warehouse stock and
marketplace allocations. Every figure is computed from current rows at
call time; nothing here writes or triggers a transition.

Classes:
    DashboardQueries: Static methods, one per dashboard panel.

Example:
    NGO landing page::

        from apps.dashboard.aggregates import DashboardQueries

        overview = DashboardQueries.ngo_overview()
        print(f"{overview['requests']['pending']} requests to review")
        print(f"{overview['stock']['by_status']['low']} stock items running low")

Note:
    Stock and allocation statuses are derived, so counts by status go
    through the ``with_status()`` annotations rather than a stored column.
"""

from django.db.models import Count, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.donations.models import ACTIVE_DONATION_STATUSES, DonationRequest, DonationStatus
from apps.inventory.models import StockStatus, WarehouseStockItem
from apps.inventory.services import conservation_totals
from apps.marketplace.models import AllocationStatus, MarketplaceAllocation


def _count_by(queryset, field, choices):
    """Count rows per value of ``field``, with zero for absent values."""
    counts = {value: 0 for value in choices.values}
    rows = queryset.order_by().values(field).annotate(count=Count('id'))
    for row in rows:
        counts[row[field]] = row['count']
    return counts


class DashboardQueries:
    """
    Aggregate queries for the dashboard endpoints.

    All methods return plain dictionaries ready for JSON responses.

    Methods:
        ngo_overview: Review queue, stock and marketplace at a glance.
        donor_summary: One donor's requests and their outcome.
        marketplace_summary: Allocation statuses, claims and views.
        inventory_summary: Ledger column totals and the conservation check.
    """

    @staticmethod
    def _allocation_figures(queryset, today):
        by_status = _count_by(queryset.with_status(today), 'derived_status', AllocationStatus)
        counters = queryset.aggregate(
            claims=Coalesce(Sum('claimed_count'), 0),
            views=Coalesce(Sum('view_count'), 0),
        )
        return {
            'total': sum(by_status.values()),
            'by_status': by_status,
            'total_claims': counters['claims'],
            'total_views': counters['views'],
        }

    @staticmethod
    def ngo_overview(today=None):
        """
        Summarize everything NGO staff act on.

        Args:
            today (date, optional): Reference date for expiration.
                Defaults to the current local date.

        Returns:
            dict: ``requests`` (counts per status), ``stock``
            (``by_status`` and ``total_available``) and ``marketplace``
            (``total``, ``by_status``, ``total_claims``, ``total_views``).

        Example:
            >>> DashboardQueries.ngo_overview()['requests']
            {'pending': 3, 'approved-pending-verification': 1, 'verified': 12, 'rejected': 2}
        """
        if today is None:
            today = timezone.localdate()

        requests = _count_by(DonationRequest.objects.all(), 'status', DonationStatus)

        items = WarehouseStockItem.objects.all()
        stock = {
            'by_status': _count_by(items.with_status(today), 'derived_status', StockStatus),
            'total_available': items.aggregate(
                total=Coalesce(Sum('available_quantity'), 0)
            )['total'],
        }

        return {
            'requests': requests,
            'stock': stock,
            'marketplace': DashboardQueries._allocation_figures(
                MarketplaceAllocation.objects.all(), today
            ),
        }

    @staticmethod
    def donor_summary(donor):
        """
        Summarize a donor's own requests.

        Returns:
            dict: ``total_donations``, ``by_status``, ``active``,
            ``verified_quantity`` and ``estimated_meals``. Quantities and
            meals count verified requests only.
        """
        donations = DonationRequest.objects.filter(donor=donor)
        by_status = _count_by(donations, 'status', DonationStatus)
        verified = donations.filter(status=DonationStatus.VERIFIED).aggregate(
            quantity=Coalesce(Sum('quantity'), 0),
            meals=Coalesce(Sum('estimated_meals'), 0),
        )

        return {
            'total_donations': sum(by_status.values()),
            'by_status': by_status,
            'active': sum(by_status[status] for status in ACTIVE_DONATION_STATUSES),
            'verified_quantity': verified['quantity'],
            'estimated_meals': verified['meals'],
        }

    @staticmethod
    def marketplace_summary(machine_id=None, today=None):
        """Allocation counts by status with claim and view totals, optionally for one machine."""
        if today is None:
            today = timezone.localdate()

        allocations = MarketplaceAllocation.objects.all()
        if machine_id is not None:
            allocations = allocations.filter(machine_id=machine_id)

        data = DashboardQueries._allocation_figures(allocations, today)
        data['machine'] = machine_id
        return data

    @staticmethod
    def inventory_summary(today=None):
        """
        Ledger totals across all stock items.

        Returns:
            dict: ``total``, ``available``, ``distributed``, ``allocated``,
            ``conservation_holds`` and ``by_status``.
        """
        if today is None:
            today = timezone.localdate()

        data = conservation_totals()
        data['by_status'] = _count_by(
            WarehouseStockItem.objects.with_status(today), 'derived_status', StockStatus
        )
        return data
