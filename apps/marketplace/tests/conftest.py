import pytest

from apps.marketplace.services import post_allocation


@pytest.fixture
def allocation(stock_item, machine, ngo_user):
    """Fifteen of the twenty kilograms of rice posted to machine m1."""
    return post_allocation(
        stock_item_id=stock_item.id,
        machine_id=machine.id,
        quantity=15,
        description='Rice bags by the entrance',
        posted_by=ngo_user,
    )
