# Generated manually for the donations app

import uuid
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('approved-pending-verification', 'Approved, pending verification'),
    ('verified', 'Verified'),
    ('rejected', 'Rejected'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='DonationRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('donor_name', models.CharField(max_length=200)),
                ('food_name', models.CharField(max_length=200)),
                ('category', models.CharField(choices=[('perishable', 'Perishable'), ('non-perishable', 'Non-perishable'), ('cooked', 'Cooked'), ('packaged', 'Packaged')], max_length=20)),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('units', models.CharField(max_length=50)),
                ('expiration_date', models.DateField(blank=True, null=True)),
                ('description', models.TextField(blank=True)),
                ('estimated_meals', models.PositiveIntegerField(blank=True, null=True)),
                ('pickup_date', models.DateField()),
                ('delivery_method', models.CharField(choices=[('drop-off', 'Drop-off'), ('pickup', 'Pickup')], default='drop-off', max_length=20)),
                ('drop_off_location', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(choices=STATUS_CHOICES, default='pending', max_length=40)),
                ('rejection_reason', models.TextField(blank=True)),
                ('proof_image', models.CharField(blank=True, max_length=500)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('donor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='donation_requests', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_donations', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_donations', to=settings.AUTH_USER_MODEL)),
                ('stock_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='donation_requests', to='inventory.warehousestockitem')),
            ],
            options={
                'db_table': 'donation_requests',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='donation_status_created_idx'),
                    models.Index(fields=['donor', 'status'], name='donation_donor_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DonationAuditEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_status', models.CharField(blank=True, choices=STATUS_CHOICES, max_length=40)),
                ('to_status', models.CharField(choices=STATUS_CHOICES, max_length=40)),
                ('note', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='donation_audit_entries', to=settings.AUTH_USER_MODEL)),
                ('request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='audit_entries', to='donations.donationrequest')),
            ],
            options={
                'db_table': 'donation_audit_entries',
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
