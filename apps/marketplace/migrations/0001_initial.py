# Generated manually for the marketplace app

import uuid
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
        ('machines', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MarketplaceAllocation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('quantity', models.PositiveIntegerField()),
                ('claimed_count', models.PositiveIntegerField(default=0)),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('description', models.TextField(blank=True)),
                ('expiration_date', models.DateField(blank=True, null=True)),
                ('date_posted', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('machine', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='allocations', to='machines.machine')),
                ('posted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='posted_allocations', to=settings.AUTH_USER_MODEL)),
                ('stock_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='allocations', to='inventory.warehousestockitem')),
            ],
            options={
                'db_table': 'marketplace_allocations',
                'ordering': ['-date_posted'],
                'indexes': [
                    models.Index(fields=['machine', 'date_posted'], name='allocation_machine_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('claimed_count__lte', models.F('quantity'))), name='allocation_claimed_lte_quantity'),
                ],
            },
        ),
    ]
