import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.inventory.models import WarehouseStockItem


@pytest.mark.django_db
class TestCheckLedgerCommand:

    def test_consistent_ledger(self, stock_item, capsys):
        call_command('check_ledger')

        assert 'consistent' in capsys.readouterr().out

    def test_inconsistent_ledger_fails(self, stock_item):
        WarehouseStockItem.objects.filter(id=stock_item.id).update(
            available_quantity=10, distributed_quantity=10,
        )

        with pytest.raises(CommandError, match='1 stock item'):
            call_command('check_ledger')

    def test_unknown_item(self, db):
        with pytest.raises(CommandError, match='not found'):
            call_command('check_ledger', item='00000000-0000-0000-0000-000000000000')
