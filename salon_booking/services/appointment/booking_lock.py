# salon_booking/services/appointment/booking_lock.py
"""
Per-professional booking locks.

The conflict check and the write of a create/update run while holding the
professional's lock. Different professionals never share a lock.
"""
from contextlib import contextmanager
from typing import Dict, Iterator, Optional
import logging
import threading

import redis

from salon_booking.config.redis import RedisKeys, get_redis
from salon_booking.config.settings import get_settings
from salon_booking.core.errors import BookingLockTimeout

logger = logging.getLogger(__name__)


class BookingLockProvider:
    """Interface: `with provider.lock(professional_id): ...`"""

    def __init__(self, timeout: float):
        self.timeout = timeout

    @contextmanager
    def lock(self, professional_id) -> Iterator[None]:
        raise NotImplementedError


class LocalBookingLocks(BookingLockProvider):
    """In-process locks, one threading.Lock per professional id"""

    def __init__(self, timeout: float = 10.0):
        super().__init__(timeout)
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _get_lock(self, professional_id) -> threading.Lock:
        key = str(professional_id)
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def lock(self, professional_id) -> Iterator[None]:
        lock = self._get_lock(professional_id)
        if not lock.acquire(timeout=self.timeout):
            logger.error(f"Booking lock timeout for professional {professional_id}")
            raise BookingLockTimeout(professional_id, self.timeout)
        try:
            yield
        finally:
            lock.release()


class RedisBookingLocks(BookingLockProvider):
    """Cross-process locks backed by redis, for multi-worker deployments"""

    KEY_PATTERN = RedisKeys.BOOKING_LOCK

    def __init__(self, client: redis.Redis, timeout: float = 10.0, lease_seconds: Optional[float] = None):
        super().__init__(timeout)
        self.client = client
        # Lease must outlive the blocking wait
        self.lease_seconds = lease_seconds or max(timeout * 3, 30.0)

    @contextmanager
    def lock(self, professional_id) -> Iterator[None]:
        name = self.KEY_PATTERN.format(professional_id=professional_id)
        lock = self.client.lock(name, timeout=self.lease_seconds, blocking_timeout=self.timeout)
        if not lock.acquire(blocking=True):
            logger.error(f"Redis booking lock timeout for professional {professional_id}")
            raise BookingLockTimeout(professional_id, self.timeout)
        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError as e:
                # Lease expired while held
                logger.warning(f"Booking lock {name} was already released: {e}")


_default_locks: Optional[BookingLockProvider] = None


def get_booking_locks() -> BookingLockProvider:
    """Process-wide provider selected by BOOKING_LOCK_BACKEND"""
    global _default_locks
    if _default_locks is None:
        settings = get_settings()
        if settings.BOOKING_LOCK_BACKEND == "redis":
            _default_locks = RedisBookingLocks(get_redis(), timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS)
        else:
            _default_locks = LocalBookingLocks(timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS)
        logger.info(f"Booking locks: {type(_default_locks).__name__}")
    return _default_locks
