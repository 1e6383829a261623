"""
treeshelp.auth.passwords

Bcrypt password hashing.

Responsibilities:
- Hash new passwords with a configurable cost factor.
- Verify a plaintext password against a stored hash without raising on malformed hashes.
"""

from __future__ import annotations

import bcrypt


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash: treat as a failed match.
            return False


# --- Module Notes -----------------------------------------------------------
# bcrypt only looks at the first 72 bytes of a password; request models cap length.
