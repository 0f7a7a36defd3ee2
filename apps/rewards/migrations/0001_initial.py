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
            name='Promotion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50, unique=True)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('required_points', models.PositiveIntegerField(blank=True, null=True)),
                ('promotion_type', models.CharField(choices=[('DISCOUNT', 'Discount'), ('FREE_SERVICE', 'Free Service'), ('CASHBACK', 'Cashback'), ('OTHER', 'Other')], default='DISCOUNT', max_length=20)),
                ('discount_percent', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('max_discount_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('valid_from', models.DateTimeField()),
                ('valid_to', models.DateTimeField()),
                ('is_active', models.BooleanField(default=True)),
                ('max_usage_per_user', models.PositiveIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Promotion',
                'verbose_name_plural': 'Promotions',
                'db_table': 'reward_promotions',
                'ordering': ['required_points', 'code'],
            },
        ),
        migrations.CreateModel(
            name='PointTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points', models.IntegerField()),
                ('kind', models.CharField(choices=[('EARNED', 'Points Earned'), ('BONUS', 'Bonus Points'), ('REFERRAL', 'Referral Points'), ('REDEEMED', 'Points Redeemed'), ('EXPIRED', 'Points Expired'), ('ADMIN_GRANT', 'Admin Grant')], max_length=20)),
                ('reason', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('reference_type', models.CharField(blank=True, default='', max_length=50)),
                ('reference_id', models.CharField(blank=True, max_length=100, null=True)),
                ('balance_after', models.IntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('promotion', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='redemptions', to='rewards.promotion')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='point_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Point Transaction',
                'verbose_name_plural': 'Point Transactions',
                'db_table': 'reward_point_transactions',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'created_at', 'id'], name='reward_txn_user_created_idx'),
                    models.Index(fields=['user', 'kind'], name='reward_txn_user_kind_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'kind', 'reference_type', 'reference_id'), name='reward_txn_unique_reference'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PointLot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points_amount', models.IntegerField()),
                ('remaining_points', models.IntegerField()),
                ('earned_at', models.DateTimeField()),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('is_expired', models.BooleanField(default=False)),
                ('is_fully_redeemed', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('transaction', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='lot', to='rewards.pointtransaction')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='point_lots', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Point Lot',
                'verbose_name_plural': 'Point Lots',
                'db_table': 'reward_point_lots',
                'ordering': ['earned_at', 'id'],
                'indexes': [
                    models.Index(fields=['user', 'earned_at', 'id'], name='reward_lot_fifo_idx'),
                    models.Index(fields=['expires_at', 'is_expired'], name='reward_lot_expiry_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('remaining_points__gte', 0), ('remaining_points__lte', models.F('points_amount'))), name='reward_lot_remaining_in_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserPointSummary',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('total_points', models.IntegerField(default=0)),
                ('used_points', models.IntegerField(default=0)),
                ('expired_points', models.IntegerField(default=0)),
                ('available_points', models.IntegerField(default=0)),
                ('level', models.PositiveSmallIntegerField(choices=[(1, 'Bronze'), (2, 'Silver'), (3, 'Gold'), (4, 'Platinum'), (5, 'Diamond')], default=1)),
                ('total_transactions', models.IntegerField(default=0)),
                ('last_earned_at', models.DateTimeField(blank=True, null=True)),
                ('last_used_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='point_summary', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'User Point Summary',
                'verbose_name_plural': 'User Point Summaries',
                'db_table': 'reward_point_summaries',
                'indexes': [
                    models.Index(fields=['-total_points', 'created_at'], name='reward_summary_rank_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('total_points__gte', 0), ('used_points__gte', 0), ('expired_points__gte', 0), ('available_points__gte', 0)), name='reward_summary_non_negative'),
                    models.CheckConstraint(condition=models.Q(total_points=models.F('used_points') + models.F('expired_points') + models.F('available_points')), name='reward_summary_balanced'),
                ],
            },
        ),
    ]
