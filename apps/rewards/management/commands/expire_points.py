from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from apps.rewards.services import ExpirationSweeper


class Command(BaseCommand):
    help = 'Expire points that are past their expiry date'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user-id',
            type=int,
            help='Expire points for specific user ID only',
        )
        parser.add_argument(
            '--loop',
            action='store_true',
            help='Keep sweeping every --interval seconds until interrupted',
        )
        parser.add_argument(
            '--interval',
            type=int,
            help='Seconds between sweeps when running with --loop',
        )

    def handle(self, *args, **options):
        user_id = options.get('user_id')

        if user_id:
            User = get_user_model()
            try:
                user = User.objects.get(id=user_id)
            except User.DoesNotExist:
                raise CommandError(f'User with ID {user_id} not found')

            expired = ExpirationSweeper.expire_user(user)
            self.stdout.write(
                self.style.SUCCESS(
                    f'Expired {sum(expired)} points in {len(expired)} entries for user {user.get_username()}'
                )
            )
            return

        if options.get('loop'):
            self.stdout.write('Running points expiration sweeper, press Ctrl+C to stop...')
            try:
                ExpirationSweeper.run_forever(interval=options.get('interval'))
            except KeyboardInterrupt:
                self.stdout.write('Sweeper stopped')
            return

        self.stdout.write('Starting points expiration for all users...')
        report = ExpirationSweeper.sweep()

        for failed_id, error in report.failed_users.items():
            self.stdout.write(self.style.ERROR(f'User {failed_id} failed: {error}'))

        self.stdout.write(
            self.style.SUCCESS(
                f'Points expiration complete. Total expired: {report.points_expired} points '
                f'across {report.users_processed} users'
            )
        )
