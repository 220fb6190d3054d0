"""
Management command to reconcile stock items against their movement ledger.

Usage:
    python manage.py check_ledger
    python manage.py check_ledger --item <uuid>

Exits with status 1 when any inconsistency is found.
"""

from django.core.management.base import BaseCommand, CommandError

from apps.common.exceptions import NotFoundError
from apps.inventory.services import (
    check_all_stock_items,
    check_stock_item_consistency,
    get_stock_item,
)


class Command(BaseCommand):
    help = 'Reconcile warehouse stock balances against the movement ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--item',
            help='Check a single stock item by ID',
        )

    def handle(self, *args, **options):
        if options['item']:
            try:
                item = get_stock_item(item_id=options['item'])
            except NotFoundError as e:
                raise CommandError(str(e))
            issues = check_stock_item_consistency(item)
            results = {item.id: issues} if issues else {}
        else:
            results = check_all_stock_items()

        if not results:
            self.stdout.write(self.style.SUCCESS('Ledger is consistent.'))
            return

        for item_id, issues in results.items():
            self.stdout.write(self.style.ERROR(f'Stock item {item_id}:'))
            for issue in issues:
                self.stdout.write(f'  - {issue}')

        raise CommandError(f'{len(results)} stock item(s) failed reconciliation')
