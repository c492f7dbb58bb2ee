"""
In-memory OAuth token cache for gateway clients.
"""
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

# Tokens are treated as expired this many seconds before the gateway says so
DEFAULT_REFRESH_SKEW_SECONDS = 300


@dataclass
class CachedToken:
    token: str
    expires_at: float


class TokenCache:
    """
    Access tokens keyed by OAuth client id.

    A token is served only while the clock is before its expiry minus the
    refresh skew; after that the caller must fetch a new one.
    """

    def __init__(
        self,
        refresh_skew_seconds: int = DEFAULT_REFRESH_SKEW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.refresh_skew_seconds = refresh_skew_seconds
        self.clock = clock
        self._tokens: Dict[str, CachedToken] = {}

    def get(self, client_id: str) -> Optional[str]:
        cached = self._tokens.get(client_id)
        if cached is None:
            return None
        if cached.expires_at <= self.clock():
            del self._tokens[client_id]
            return None
        return cached.token

    def set(self, client_id: str, token: str, expires_in: int) -> CachedToken:
        cached = CachedToken(
            token=token,
            expires_at=self.clock() + max(expires_in - self.refresh_skew_seconds, 0),
        )
        self._tokens[client_id] = cached
        return cached

    def invalidate(self, client_id: str) -> None:
        self._tokens.pop(client_id, None)

    def clear(self) -> None:
        self._tokens.clear()
