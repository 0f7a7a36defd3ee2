"""
Per-user critical sections for ledger writes.
"""
import logging
import threading
import weakref
from contextlib import contextmanager

from ..exceptions import CriticalSectionTimeout

logger = logging.getLogger(__name__)


class _UserLock:
    """Reentrant lock wrapper; plain thread locks cannot be weakly referenced"""
    __slots__ = ('lock', '__weakref__')

    def __init__(self):
        self.lock = threading.RLock()


class UserLockRegistry:
    """
    Hands out one lock per user id.

    Locks are held in a weak-value map, so a user's lock disappears once no
    thread is holding or waiting on it and the map does not grow with the
    number of users ever seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = weakref.WeakValueDictionary()

    def lock_for(self, user_id):
        with self._guard:
            user_lock = self._locks.get(user_id)
            if user_lock is None:
                user_lock = _UserLock()
                self._locks[user_id] = user_lock
            return user_lock

    @contextmanager
    def critical_section(self, user_id, timeout):
        user_lock = self.lock_for(user_id)
        if not user_lock.lock.acquire(timeout=timeout):
            logger.warning(f"Timed out after {timeout}s waiting for points ledger of user {user_id}")
            raise CriticalSectionTimeout()
        try:
            yield
        finally:
            user_lock.lock.release()


user_locks = UserLockRegistry()
