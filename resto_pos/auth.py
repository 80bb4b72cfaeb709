"""Username lookup against the fixed user directory. No passwords."""

from __future__ import annotations

from typing import Iterable

from resto_pos.constant import USERS
from resto_pos.models import User


def find_user(username: str, users: Iterable[User] = USERS) -> User | None:
    """Return the user with exactly this username, or ``None``."""
    wanted = username.strip()
    for user in users:
        if user.username == wanted:
            return user
    return None
