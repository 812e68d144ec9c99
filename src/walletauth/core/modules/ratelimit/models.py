from dataclasses import dataclass


@dataclass
class RateLimitEntry:
    """Request counter for one client key within a fixed window.

    `window_reset_at` is on the rate limiter's monotonic clock, in seconds.
    """

    key: str
    count: int
    window_reset_at: float

    def is_expired(self, at: float) -> bool:
        return self.window_reset_at < at
