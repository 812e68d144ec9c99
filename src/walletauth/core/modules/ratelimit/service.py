import math
import time
from collections.abc import Callable, Mapping

import structlog

from walletauth.config import Config
from walletauth.core.core import Service
from walletauth.core.modules.ratelimit.models import RateLimitEntry
from walletauth.core.periodic import PeriodicTask
from walletauth.errors import RateLimitError

logger = structlog.get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


def client_key(headers: Mapping[str, str], client_host: str | None) -> str:
    """Identify the client: first X-Forwarded-For hop, then X-Real-IP, then the peer address."""
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return client_host or UNKNOWN_CLIENT


class RateLimitService(Service):
    """Fixed-window request counter per client key.

    A window starts on the first request of a key and fully resets once it has
    passed; requests beyond `max_requests` inside a window are rejected.
    """

    def __init__(self, config: Config, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__(config)
        self._clock = clock
        self._window = config.rate_limit_window_ms / 1000
        self._max_requests = config.rate_limit_max_requests
        self._entries: dict[str, RateLimitEntry] = {}
        self._sweeper = PeriodicTask(
            "rate_limit_cleanup", config.rate_limit_cleanup_interval_seconds, self.cleanup_expired_windows
        )

    def hit(self, key: str) -> None:
        """Count a request for `key`, raising RateLimitError when the window is exhausted."""
        at = self._clock()
        entry = self._entries.get(key)

        if entry is None or entry.is_expired(at):
            self._entries[key] = RateLimitEntry(key=key, count=1, window_reset_at=at + self._window)
            return

        if entry.count >= self._max_requests:
            retry_after = math.ceil(entry.window_reset_at - at)
            logger.info("rate_limit_exceeded", client=key, retry_after=retry_after)
            raise RateLimitError(retry_after)

        entry.count += 1

    def get_entry(self, key: str) -> RateLimitEntry | None:
        """Current window for `key`, for inspection in tests."""
        return self._entries.get(key)

    def cleanup_expired_windows(self) -> int:
        at = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(at)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def reset(self) -> None:
        self._entries.clear()

    async def on_start(self) -> None:
        self._sweeper.start()

    async def on_stop(self) -> None:
        await self._sweeper.stop()
