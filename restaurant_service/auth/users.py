from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _add_user(
    username: str,
    password: str,
    user_id: str,
    given_name: str,
    family_name: str,
) -> None:
    _users[username] = {
        "id": user_id,
        "password_hash": _hash_password(password),
        "given_name": given_name,
        "family_name": family_name,
    }


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    _add_user("user", "user123", "8f14e45f-0001", "Jamie", "Doe")
    _add_user("critic", "critic123", "8f14e45f-0002", "Alex", "Rivera")


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns the public user profile or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {
            "id": record["id"],
            "username": username,
            "given_name": record["given_name"],
            "family_name": record["family_name"],
        }
    return None


_seed_users()
