import pytest
from datetime import date, timedelta

from apps.donations.services import approve_donation, submit_donation


@pytest.fixture
def donation_data():
    """Valid submission for 20 kg of rice."""
    return {
        'food_name': 'Rice',
        'category': 'non-perishable',
        'quantity': 20,
        'units': 'kg',
        'pickup_date': date.today() + timedelta(days=1),
        'expiration_date': date.today() + timedelta(days=180),
        'description': 'Sealed bags',
        'estimated_meals': 80,
        'delivery_method': 'drop-off',
        'drop_off_location': 'Warehouse 4, Dock B',
    }


@pytest.fixture
def pending_donation(user, donation_data):
    return submit_donation(donor=user, **donation_data)


@pytest.fixture
def approved_donation(pending_donation, ngo_user):
    return approve_donation(request_id=pending_donation.id, reviewer=ngo_user)
