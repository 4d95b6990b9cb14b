# Initial migration for the exchange ledger, platform settings and notifications

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PlatformSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=64, unique=True)),
                ('value', models.TextField(blank=True, default='')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['key'],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='Record creation timestamp')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Last update timestamp')),
                ('type', models.CharField(choices=[('buy', 'Buy'), ('sell', 'Sell')], max_length=4)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=20)),
                ('rate', models.DecimalField(decimal_places=8, max_digits=20)),
                ('commission', models.DecimalField(decimal_places=6, default=0, help_text='Commission fraction in effect at submission', max_digits=7)),
                ('fee', models.DecimalField(decimal_places=2, default=0, help_text='Commission amount in the native currency', max_digits=20)),
                ('basis', models.CharField(choices=[('native', 'Native'), ('foreign', 'Foreign')], default='native', max_length=7)),
                ('final_amount', models.DecimalField(decimal_places=2, max_digits=20)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved')], db_index=True, default='pending', max_length=10)),
                ('proof_of_payment', models.CharField(max_length=255)),
                ('network', models.CharField(blank=True, choices=[('trc20', 'Trc20'), ('bep20', 'Bep20')], max_length=10, null=True)),
                ('payment_method', models.CharField(blank=True, choices=[('cliq', 'Cliq'), ('wallet', 'Wallet')], max_length=10, null=True)),
                ('cliq_type', models.CharField(blank=True, choices=[('alias', 'Alias'), ('number', 'Number')], max_length=10, null=True)),
                ('cliq_alias', models.CharField(blank=True, max_length=20, null=True)),
                ('cliq_number', models.CharField(blank=True, max_length=20, null=True)),
                ('approved_at', models.DateTimeField(blank=True, null=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_transactions', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['user', '-created_at'], name='api_txn_user_created_idx')],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='Record creation timestamp')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Last update timestamp')),
                ('type', models.CharField(choices=[('new_user', 'New User'), ('kyc_submitted', 'Kyc Submitted'), ('order_created', 'Order Created'), ('order_approved', 'Order Approved')], max_length=20)),
                ('message', models.TextField()),
                ('related_id', models.PositiveIntegerField(blank=True, null=True)),
                ('read', models.BooleanField(default=False)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['user', 'read'], name='api_notif_user_read_idx')],
            },
        ),
    ]
