# Generated manually for the inventory app

import uuid
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='WarehouseStockItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('item_key', models.CharField(max_length=400, unique=True)),
                ('food_name', models.CharField(max_length=200)),
                ('category', models.CharField(choices=[('perishable', 'Perishable'), ('non-perishable', 'Non-perishable'), ('cooked', 'Cooked'), ('packaged', 'Packaged')], max_length=20)),
                ('units', models.CharField(max_length=50)),
                ('expiration_date', models.DateField(blank=True, null=True)),
                ('donor_name', models.CharField(blank=True, max_length=200)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('total_quantity', models.PositiveIntegerField(default=0)),
                ('available_quantity', models.PositiveIntegerField(default=0)),
                ('distributed_quantity', models.PositiveIntegerField(default=0)),
                ('allocated_quantity', models.PositiveIntegerField(default=0)),
                ('date_added', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'warehouse_stock_items',
                'ordering': ['-date_added'],
                'indexes': [
                    models.Index(fields=['category'], name='stock_category_idx'),
                    models.Index(fields=['expiration_date'], name='stock_expiration_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('available_quantity__lte', models.F('total_quantity'))), name='stock_available_lte_total'),
                    models.CheckConstraint(condition=models.Q(('total_quantity', models.F('available_quantity') + models.F('distributed_quantity') + models.F('allocated_quantity'))), name='stock_quantity_conserved'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('kind', models.CharField(choices=[('credit', 'Credit'), ('distribution', 'Distribution'), ('allocation', 'Allocation'), ('allocation_return', 'Allocation return')], max_length=20)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('balance_after', models.PositiveIntegerField()),
                ('allocation_ref', models.UUIDField(blank=True, db_index=True, null=True)),
                ('note', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_movements', to=settings.AUTH_USER_MODEL)),
                ('stock_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='inventory.warehousestockitem')),
            ],
            options={
                'db_table': 'stock_movements',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['stock_item', 'kind'], name='movement_item_kind_idx'),
                ],
            },
        ),
    ]
