from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from apps.rewards.models import UserPointSummary
from apps.rewards.services import BalanceProjector
from apps.rewards.services.unit_of_work import run_locked


class Command(BaseCommand):
    help = 'Recompute cached point summaries and lots from the transaction ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user-id',
            type=int,
            help='Rebuild the summary of a specific user ID only',
        )
        parser.add_argument(
            '--check-only',
            action='store_true',
            help='Report accounts that drifted from the ledger without repairing them',
        )

    def handle(self, *args, **options):
        User = get_user_model()
        user_id = options.get('user_id')
        check_only = options.get('check_only')

        if user_id:
            users = User.objects.filter(id=user_id)
            if not users.exists():
                raise CommandError(f'User with ID {user_id} not found')
        else:
            users = User.objects.filter(
                pk__in=UserPointSummary.objects.values_list('user_id', flat=True)
            ).order_by('pk')

        drifted = 0
        for user in users:
            expected = BalanceProjector.rebuild(user)
            current = BalanceProjector.get_summary(user)
            summary_ok = current.balance_fields() == expected.balance_fields()
            lot_drift = BalanceProjector.lot_drift(user)
            if summary_ok and not lot_drift:
                continue

            drifted += 1
            if check_only:
                if not summary_ok:
                    self.stdout.write(
                        self.style.WARNING(
                            f'User {user.pk}: cached {current.balance_fields()} '
                            f'but ledger gives {expected.balance_fields()}'
                        )
                    )
                for transaction_id, (stored, state) in lot_drift.items():
                    self.stdout.write(
                        self.style.WARNING(
                            f'User {user.pk}: lot of transaction {transaction_id} is {stored} '
                            f'but ledger gives {state}'
                        )
                    )
            else:
                run_locked(user, lambda summary, user=user: BalanceProjector.rebuild(user, commit=True))
                self.stdout.write(f'Repaired points summary and lots of user {user.pk}')

        action = 'found' if check_only else 'repaired'
        self.stdout.write(self.style.SUCCESS(f'Done: {drifted} drifted accounts {action}'))
