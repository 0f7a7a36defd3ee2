from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.rewards.models import Promotion, PromotionType


class Command(BaseCommand):
    help = 'Set up the default reward promotion catalog'

    def handle(self, *args, **options):
        now = timezone.now()
        promotions_data = [
            {
                'code': 'REWARD10',
                'description': '10% off your next service',
                'required_points': 500,
                'promotion_type': PromotionType.DISCOUNT,
                'discount_percent': Decimal('10.00'),
                'max_discount_amount': Decimal('50.00'),
            },
            {
                'code': 'REWARD20',
                'description': '20% off your next service',
                'required_points': 1000,
                'promotion_type': PromotionType.DISCOUNT,
                'discount_percent': Decimal('20.00'),
                'max_discount_amount': Decimal('100.00'),
            },
            {
                'code': 'FREEWASH',
                'description': 'Free car wash',
                'required_points': 1500,
                'promotion_type': PromotionType.FREE_SERVICE,
                'max_usage_per_user': 1,
            },
            {
                'code': 'CASHBACK5',
                'description': '5% cashback on your next booking',
                'required_points': 2500,
                'promotion_type': PromotionType.CASHBACK,
                'discount_percent': Decimal('5.00'),
            },
        ]

        created_count = 0
        updated_count = 0

        for promotion_data in promotions_data:
            defaults = dict(promotion_data, valid_from=now, valid_to=now + timedelta(days=365))
            promotion, created = Promotion.objects.get_or_create(
                code=promotion_data['code'],
                defaults=defaults
            )

            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'Created promotion: {promotion.code}'))
            else:
                for field, value in promotion_data.items():
                    setattr(promotion, field, value)
                promotion.save()
                updated_count += 1
                self.stdout.write(self.style.WARNING(f'Updated promotion: {promotion.code}'))

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully set up reward promotions. Created: {created_count}, Updated: {updated_count}'
            )
        )
