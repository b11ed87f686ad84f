"""In-memory refresh token store.

Every read-then-write sequence runs under one lock, so two concurrent
refreshes of the same token can never both observe it as present.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from .models import RefreshTokenRecord

logger = logging.getLogger(__name__)


class TakeOutcome(StrEnum):
    """Result kind of RefreshTokenStore.take_if_valid."""

    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TakeResult:
    outcome: TakeOutcome
    record: RefreshTokenRecord | None = None


class RefreshTokenStore:
    """Process-wide mapping from refresh token value to its owner and expiry.

    Expired entries are treated as absent by all readers and reaped lazily
    when a lookup runs into them. Nothing is persisted.
    """

    def __init__(self):
        self._tokens: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def put(self, token: str, record: RefreshTokenRecord, now: datetime) -> None:
        """Insert a new refresh token.

        Raises:
            ValueError: If the record is already expired or the value is live.

        """
        if record.is_expired(now):
            raise ValueError("Refresh token record must expire in the future")

        with self._lock:
            existing = self._tokens.get(token)
            if existing is not None and not existing.is_expired(now):
                raise ValueError("Refresh token value already in use")
            self._tokens[token] = record

    def take_if_valid(self, token: str, now: datetime) -> TakeResult:
        """Atomically look up, check and remove a refresh token.

        The entry is removed whether it was valid or expired.
        """
        with self._lock:
            record = self._tokens.pop(token, None)

        if record is None:
            return TakeResult(TakeOutcome.NOT_FOUND)
        if record.is_expired(now):
            return TakeResult(TakeOutcome.EXPIRED, record)
        return TakeResult(TakeOutcome.VALID, record)

    def remove(self, token: str) -> bool:
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def remove_all_for_user(self, username: str) -> int:
        """Remove every refresh token owned by username (case-insensitive).

        Returns:
            Number of entries removed, including already expired ones

        """
        key = username.casefold()
        with self._lock:
            doomed = [t for t, r in self._tokens.items() if r.username.casefold() == key]
            for token in doomed:
                del self._tokens[token]
        return len(doomed)

    def count_for_user(self, username: str, now: datetime) -> int:
        """Count live (unexpired) refresh tokens for username."""
        key = username.casefold()
        with self._lock:
            return sum(1 for r in self._tokens.values() if r.username.casefold() == key and not r.is_expired(now))
