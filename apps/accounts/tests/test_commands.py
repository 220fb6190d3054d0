import pytest
from django.core.management import call_command

from apps.accounts.models import User
from apps.donations.models import DonationRequest, DonationStatus
from apps.inventory.services import check_all_stock_items, conservation_totals
from apps.marketplace.models import MarketplaceAllocation


@pytest.mark.django_db
class TestCreateSampleDataCommand:

    def test_creates_consistent_ledger(self):
        call_command('create_sample_data')

        assert User.objects.filter(email='staff@foodbank.example.com').exists()
        assert DonationRequest.objects.filter(status=DonationStatus.VERIFIED).count() == 2
        assert DonationRequest.objects.active().count() == 2
        assert MarketplaceAllocation.objects.get().claimed_count == 4
        assert check_all_stock_items() == {}
        assert conservation_totals()['conservation_holds'] is True

    def test_clear_recreates(self):
        call_command('create_sample_data')
        call_command('create_sample_data', clear=True)

        assert DonationRequest.objects.count() == 5
        assert MarketplaceAllocation.objects.count() == 1
