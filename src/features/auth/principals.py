"""Credential verification against the static principal list."""

import logging
from collections.abc import Iterable
from typing import Protocol

from src.config.settings import DemoUser

from .models import Principal

logger = logging.getLogger(__name__)


class PrincipalDirectory(Protocol):
    """Read-only lookup of known principals."""

    def find_by_username(self, username: str) -> Principal | None: ...


class StaticPrincipalDirectory:
    """Principal directory backed by a fixed, in-memory list.

    Usernames are matched case-insensitively. When two entries share a
    username the first one wins.
    """

    def __init__(self, principals: Iterable[Principal]):
        self._principals: tuple[Principal, ...] = tuple(principals)

    @classmethod
    def from_settings(cls, users: Iterable[DemoUser]) -> "StaticPrincipalDirectory":
        return cls(Principal(username=u.username, password=u.password, role=u.role) for u in users)

    def __len__(self) -> int:
        return len(self._principals)

    def find_by_username(self, username: str) -> Principal | None:
        key = username.casefold()
        for principal in self._principals:
            if principal.username.casefold() == key:
                return principal
        return None


def verify_credentials(directory: PrincipalDirectory, username: str, password: str) -> Principal | None:
    """Check a username/password pair against the directory.

    Args:
        directory: Principal lookup
        username: Submitted username (case-insensitive)
        password: Submitted password (exact match)

    Returns:
        The principal registered under username, or None

    """
    principal = directory.find_by_username(username)
    if principal is None or principal.password != password:
        return None
    return principal
