import asyncio
import time
from config import Config
from log import get_logger
from utils.states import CacheKey

logger = get_logger(__name__)


class OptionCache:
    """
    Per-user expiring store for flow state and offered options.

    Entries are keyed by ``(user_id, CacheKey)`` and live for a fixed ``ttl``
    from the moment they are written. Reading an entry does not extend it.
    Expired entries are dropped lazily on read and in bulk by ``sweep()``.

    When an entry expires (rather than being deleted) a tombstone is kept for
    one more ``ttl`` so callers can tell a lapsed selection from one that was
    never made, see ``lapsed()``.
    """

    def __init__(self, ttl=120, check_period=150, clock=time.monotonic):
        self.ttl = ttl
        self.check_period = check_period
        self._clock = clock
        # (user_id, key) -> (deadline, value)
        self._entries = {}
        # (user_id, key) -> time the entry expired
        self._lapsed = {}

    def set(self, user_id, key: CacheKey, value):
        k = (user_id, key)
        self._entries[k] = (self._clock() + self.ttl, value)
        self._lapsed.pop(k, None)

    def get(self, user_id, key: CacheKey, default=None):
        k = (user_id, key)
        entry = self._entries.get(k)
        if entry is None:
            return default

        deadline, value = entry
        if self._clock() >= deadline:
            self._expire(k, deadline)
            return default
        return value

    def has(self, user_id, key: CacheKey):
        return self.get(user_id, key, _MISSING) is not _MISSING

    def delete(self, user_id, key: CacheKey):
        k = (user_id, key)
        self._entries.pop(k, None)
        self._lapsed.pop(k, None)

    def clear(self, user_id, keys=None):
        """Drop a batch of keys for one user, or all of them."""
        if keys is None:
            keys = [k for (uid, k) in list(self._entries) + list(self._lapsed) if uid == user_id]
        for key in keys:
            self.delete(user_id, key)

    def lapsed(self, user_id, key: CacheKey):
        """True if the entry expired (not deleted) within the last ttl."""
        k = (user_id, key)
        # Expire on demand so the answer does not depend on sweep timing
        self.get(user_id, key)
        expired_at = self._lapsed.get(k)
        if expired_at is None:
            return False
        return self._clock() - expired_at < self.ttl

    def sweep(self):
        now = self._clock()
        expired = [k for k, (deadline, _) in self._entries.items() if now >= deadline]
        for k in expired:
            self._expire(k, self._entries[k][0])

        stale = [k for k, ts in self._lapsed.items() if now - ts >= self.ttl]
        for k in stale:
            del self._lapsed[k]

        return len(expired)

    def _expire(self, k, deadline):
        self._entries.pop(k, None)
        self._lapsed[k] = deadline

    def __len__(self):
        return len(self._entries)

    async def sweep_loop(self):
        logger.info(f"Starting Cache Sweep Loop ({self.check_period}s interval)...")
        while True:
            await asyncio.sleep(self.check_period)
            try:
                removed = self.sweep()
                if removed:
                    logger.info(f"Cache sweep: expired {removed} entries, {len(self)} live.")
            except Exception as e:
                logger.error(f"Cache Sweep Error: {e}")


_MISSING = object()

cache = OptionCache(ttl=Config.CACHE_TTL, check_period=Config.CACHE_CHECK_PERIOD)
