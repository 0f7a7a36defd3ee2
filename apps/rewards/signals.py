"""
Signals for the rewards app.

``points_changed`` and ``tier_changed`` are sent only after the ledger write
that caused them has committed.
"""
import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# kwargs: transaction, summary
points_changed = Signal()
# kwargs: user_id, previous_level, level
tier_changed = Signal()


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_point_summary_for_new_user(sender, instance, created, **kwargs):
    """Open an empty points summary when a user account is created"""
    if created:
        from .services import BalanceProjector
        BalanceProjector.get_summary(instance)


@receiver(points_changed)
def invalidate_leaderboard(sender, transaction, summary, **kwargs):
    from .services import LeaderboardIndex
    LeaderboardIndex.invalidate()


@receiver(tier_changed)
def log_tier_change(sender, user_id, previous_level, level, **kwargs):
    direction = 'upgraded' if level > previous_level else 'changed'
    logger.info(f"User {user_id} tier {direction} from level {previous_level} to {level}")
