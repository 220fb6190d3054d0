"""Fixtures shared by every app's test suite."""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole


def _authenticate(client, user):
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a donor."""
    return User.objects.create_user(
        email='donor@example.com',
        password='TestPass123!',
        display_name='Test Donor',
        role=UserRole.DONOR,
    )


@pytest.fixture
def other_user(db):
    """Create and return a second donor."""
    return User.objects.create_user(
        email='otherdonor@example.com',
        password='OtherPass123!',
        display_name='Other Donor',
        role=UserRole.DONOR,
    )


@pytest.fixture
def ngo_user(db):
    """Create and return an NGO staff member."""
    return User.objects.create_user(
        email='staff@ngo.example.com',
        password='TestPass123!',
        display_name='NGO Staff',
        role=UserRole.NGO_STAFF,
        organization_name='Food Bank',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an API client authenticated as the donor."""
    return _authenticate(api_client, user)


@pytest.fixture
def other_client(other_user):
    """Return an API client authenticated as the second donor."""
    return _authenticate(APIClient(), other_user)


@pytest.fixture
def ngo_client(ngo_user):
    """Return an API client authenticated as NGO staff."""
    return _authenticate(APIClient(), ngo_user)


@pytest.fixture
def machine(db):
    """An online machine with plenty of room."""
    from apps.machines.models import Machine, MachineStatus
    return Machine.objects.create(
        id='m1',
        name='Central Station Fridge',
        location='Central Station, Hall B',
        status=MachineStatus.ONLINE,
        max_capacity=100,
        food_amount=20,
    )


@pytest.fixture
def offline_machine(db):
    from apps.machines.models import Machine, MachineStatus
    return Machine.objects.create(
        id='m2',
        name='Library Pantry',
        location='Public Library',
        status=MachineStatus.OFFLINE,
        max_capacity=50,
        food_amount=0,
    )


@pytest.fixture
def full_machine(db):
    """An online machine at 90% of capacity."""
    from apps.machines.models import Machine, MachineStatus
    return Machine.objects.create(
        id='m3',
        name='Campus Locker',
        location='University Campus',
        status=MachineStatus.ONLINE,
        max_capacity=50,
        food_amount=45,
    )


@pytest.fixture
def make_stock_item(db):
    """Factory that credits stock through the ledger so movements exist."""
    from apps.inventory.models import build_item_key
    from apps.inventory.services import credit_stock

    def _make(quantity=20, food_name='Rice', category='non-perishable',
              units='kg', expiration_date=None, donor_name='Test Donor'):
        item, _ = credit_stock(
            item_key=build_item_key(
                food_name=food_name,
                category=category,
                units=units,
                expiration_date=expiration_date,
            ),
            quantity=quantity,
            metadata={
                'food_name': food_name,
                'category': category,
                'units': units,
                'expiration_date': expiration_date,
                'donor_name': donor_name,
            },
        )
        return item

    return _make


@pytest.fixture
def stock_item(make_stock_item):
    """Twenty kilograms of rice, no expiration date."""
    return make_stock_item()
