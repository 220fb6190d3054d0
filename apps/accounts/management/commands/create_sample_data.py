"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 4 users (admin, one NGO staff member, two donors)
- 3 machines (online, offline, nearly full)
- Donation requests in every status
- Warehouse stock from the verified donations
- A marketplace allocation with a few claims
"""

from datetime import date, timedelta

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User, UserRole
from apps.donations.models import DonationRequest
from apps.donations.services import (
    approve_donation,
    deny_donation,
    submit_donation,
    verify_donation,
)
from apps.inventory.models import StockMovement, WarehouseStockItem
from apps.machines.models import Machine, MachineStatus
from apps.marketplace.models import MarketplaceAllocation
from apps.marketplace.services import post_allocation, record_claim


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        machines = self.create_machines()
        stock = self.create_donations(users)
        self.create_allocations(users, machines, stock)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  staff@foodbank.example.com / password123 (NGO staff)')
        self.stdout.write('  alice@example.com / password123 (donor)')
        self.stdout.write('  bob@example.com / password123 (donor)')

    def clear_data(self):
        """Clear all ledger data; stock history is protected, so order matters."""
        MarketplaceAllocation.objects.all().delete()
        StockMovement.objects.all().delete()
        DonationRequest.objects.all().delete()
        WarehouseStockItem.objects.all().delete()
        Machine.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def _user(self, email, password, **defaults):
        user, _ = User.objects.get_or_create(email=email, defaults=defaults)
        user.set_password(password)
        user.save()
        return user

    def create_users(self):
        self.stdout.write('  Creating users...')

        return {
            'admin': self._user(
                'admin@example.com', 'admin123',
                display_name='Admin User',
                role=UserRole.NGO_STAFF,
                is_staff=True,
                is_superuser=True,
            ),
            'staff': self._user(
                'staff@foodbank.example.com', 'password123',
                display_name='Sam Warehouse',
                role=UserRole.NGO_STAFF,
                organization_name='City Food Bank',
            ),
            'alice': self._user(
                'alice@example.com', 'password123',
                display_name='Alice Bakery',
                role=UserRole.DONOR,
                organization_name="Alice's Bakery",
            ),
            'bob': self._user(
                'bob@example.com', 'password123',
                display_name='Bob Grocer',
                role=UserRole.DONOR,
            ),
        }

    def create_machines(self):
        self.stdout.write('  Creating machines...')

        machine_data = [
            ('m1', 'Central Station Fridge', 'Central Station, Hall B', MachineStatus.ONLINE, 100, 20),
            ('m2', 'Library Pantry', 'Public Library', MachineStatus.OFFLINE, 50, 0),
            ('m3', 'Campus Locker', 'University Campus', MachineStatus.ONLINE, 50, 46),
        ]

        machines = {}
        for machine_id, name, location, status, capacity, amount in machine_data:
            machine, _ = Machine.objects.update_or_create(
                id=machine_id,
                defaults={
                    'name': name,
                    'location': location,
                    'status': status,
                    'max_capacity': capacity,
                    'food_amount': amount,
                },
            )
            machines[machine_id] = machine

        return machines

    def _submit(self, donor, food_name, category, quantity, units, meals, expires_in=None):
        return submit_donation(
            donor=donor,
            food_name=food_name,
            category=category,
            quantity=quantity,
            units=units,
            pickup_date=date.today() + timedelta(days=1),
            expiration_date=date.today() + timedelta(days=expires_in) if expires_in else None,
            estimated_meals=meals,
            drop_off_location='Warehouse 4, Dock B',
        )

    def create_donations(self, users):
        """Walk sample requests through the lifecycle; returns the credited stock items."""
        self.stdout.write('  Creating donation requests...')

        staff = users['staff']
        stock = {}

        for donor, food_name, category, quantity, units, meals, expires_in in [
            (users['alice'], 'Bread', 'packaged', 30, 'loaves', 60, 4),
            (users['bob'], 'Rice', 'non-perishable', 20, 'kg', 80, None),
        ]:
            request = self._submit(donor, food_name, category, quantity, units, meals, expires_in)
            approve_donation(request_id=request.id, reviewer=staff)
            result = verify_donation(
                request_id=request.id,
                verifier=staff,
                proof_image=f'proofs/{food_name.lower()}.png',
            )
            stock[food_name] = result.stock_item

        awaiting = self._submit(users['alice'], 'Apples', 'perishable', 12, 'kg', 24, 10)
        approve_donation(request_id=awaiting.id, reviewer=staff)

        self._submit(users['bob'], 'Canned soup', 'non-perishable', 24, 'cans', 24)

        denied = self._submit(users['bob'], 'Milk', 'perishable', 10, 'l', 10, 1)
        deny_donation(request_id=denied.id, reviewer=staff, reason='Cold chain was broken')

        return stock

    def create_allocations(self, users, machines, stock):
        self.stdout.write('  Creating marketplace allocations...')

        allocation = post_allocation(
            stock_item_id=stock['Rice'].id,
            machine_id=machines['m1'].id,
            quantity=15,
            description='1 kg bags, take what you need',
            posted_by=users['staff'],
        )
        record_claim(allocation_id=allocation.id, amount=4)
