"""
Runs ledger writes inside a user's critical section and a single DB transaction.
"""
import logging

from django.conf import settings
from django.db import InterfaceError, OperationalError, transaction

from ..exceptions import ConcurrentModification, StorageUnavailable
from ..signals import points_changed, tier_changed
from .balance_projector import BalanceProjector
from .locks import user_locks

logger = logging.getLogger(__name__)


def run_locked(user, operation, timeout=None):
    """
    Call ``operation(summary)`` with the user's summary row locked.

    The per-user lock serializes writers in this process, ``select_for_update``
    and the summary version check serialize writers across processes. A lost
    version check is retried a bounded number of times; every retry reruns the
    whole operation because the failed attempt was rolled back.
    """
    if timeout is None:
        timeout = settings.REWARDS_LOCK_TIMEOUT_SECONDS
    max_retries = settings.REWARDS_MAX_CAS_RETRIES

    with user_locks.critical_section(user.pk, timeout):
        attempt = 0
        while True:
            attempt += 1
            try:
                with transaction.atomic():
                    summary = BalanceProjector.lock_summary(user)
                    return operation(summary)
            except ConcurrentModification as exc:
                if attempt > max_retries:
                    logger.error(f"Giving up on points write for user {user.pk} after {attempt} attempts: {exc}")
                    raise
                logger.warning(f"Retrying points write for user {user.pk} (attempt {attempt}): {exc}")
            except (OperationalError, InterfaceError) as exc:
                logger.error(f"Points storage unavailable for user {user.pk}: {exc}")
                raise StorageUnavailable(f"Points storage unavailable: {exc}") from exc


def publish_after_commit(txn, summary, previous_level):
    """Queue change notifications to run once the current transaction commits"""
    level = summary.level

    def _publish():
        points_changed.send(sender=txn.__class__, transaction=txn, summary=summary)
        if level != previous_level:
            tier_changed.send(
                sender=summary.__class__,
                user_id=summary.user_id,
                previous_level=previous_level,
                level=level,
            )

    transaction.on_commit(_publish)
