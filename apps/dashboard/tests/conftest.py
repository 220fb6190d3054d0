import pytest
from datetime import date, timedelta

from apps.donations.services import (
    approve_donation,
    deny_donation,
    submit_donation,
    verify_donation,
)
from apps.marketplace.services import post_allocation, record_claim, record_view


def _submit(donor, food_name, quantity, meals):
    return submit_donation(
        donor=donor,
        food_name=food_name,
        category='non-perishable',
        quantity=quantity,
        units='kg',
        pickup_date=date.today() + timedelta(days=1),
        estimated_meals=meals,
    )


@pytest.fixture
def populated_ledger(user, other_user, ngo_user, machine):
    """
    A small but complete picture:

    - donor: one verified (20 kg rice), one pending, one rejected request
    - other donor: one pending request
    - 15 kg of the rice posted to m1, 3 claimed, viewed twice
    """
    verified = _submit(user, 'Rice', 20, 80)
    approve_donation(request_id=verified.id, reviewer=ngo_user)
    result = verify_donation(request_id=verified.id, verifier=ngo_user, proof_image='img.png')

    _submit(user, 'Pasta', 5, 20)
    rejected = _submit(user, 'Soup', 8, 16)
    deny_donation(request_id=rejected.id, reviewer=ngo_user, reason='Opened cans')
    _submit(other_user, 'Beans', 12, 40)

    allocation = post_allocation(
        stock_item_id=result.stock_item.id,
        machine_id=machine.id,
        quantity=15,
        posted_by=ngo_user,
    )
    record_claim(allocation_id=allocation.id, amount=3)
    record_view(allocation_id=allocation.id)
    record_view(allocation_id=allocation.id)

    return {'stock_item': result.stock_item, 'allocation': allocation}
