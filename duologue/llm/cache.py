"""
In-memory response cache.

Responses are grouped by cache seed: agents configured with the same
`cache_seed` share cached completions, and a different seed starts fresh.
"""
import time
from dataclasses import dataclass
from langchain_core.messages import AIMessage


@dataclass
class CacheEntry:
    """A cached response and when it expires."""
    value: AIMessage
    expires_at: float | None  # Unix timestamp, None = never


class ResponseCache:
    """
    Dictionary-backed cache of chat model responses.

    Lost on process restart.
    """

    _by_seed: dict[int | str, "ResponseCache"] = {}

    def __init__(self, ttl: int | None = None):
        self._cache: dict[str, CacheEntry] = {}
        self.ttl = ttl

    @classmethod
    def for_seed(cls, seed: int | str | None, ttl: int | None = None) -> "ResponseCache | None":
        """
        Get the shared cache for a seed. A None seed disables caching.

        `ttl` (seconds) applies when this call creates the seed's cache.
        """
        if seed is None:
            return None
        if seed not in cls._by_seed:
            cls._by_seed[seed] = cls(ttl=ttl)
        return cls._by_seed[seed]

    @classmethod
    def clear_all(cls) -> None:
        """Drop every seed's cache."""
        cls._by_seed.clear()

    def get(self, key: str) -> AIMessage | None:
        """Return the cached response, or None on a miss or expiry."""
        entry = self._cache.get(key)
        if entry is None:
            return None

        if entry.expires_at is not None and time.time() > entry.expires_at:
            del self._cache[key]
            return None

        return entry.value

    def set(self, key: str, value: AIMessage) -> None:
        """Store a response."""
        expires_at = time.time() + self.ttl if self.ttl else None
        self._cache[key] = CacheEntry(value=value, expires_at=expires_at)

    def size(self) -> int:
        return len(self._cache)
