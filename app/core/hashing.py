"""One-way hashing for verification codes."""
from __future__ import annotations

import bcrypt


class SecretHasher:
    """Salted bcrypt hashing of short numeric secrets.

    The cost factor must make enumerating all 10**6 codes against one stored
    hash take longer than a code stays valid.
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"000000", bcrypt.gensalt(rounds=rounds))

    def hash(self, code: str) -> str:
        """Hash a code with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(code.encode("utf-8"), salt).decode("utf-8")

    def verify(self, code: str, hashed: str) -> bool:
        """Verify a code against a stored hash.

        A malformed hash burns the same bcrypt work against a dummy hash so
        the caller cannot tell it apart from a wrong code by timing.
        """
        candidate = code.encode("utf-8")
        try:
            return bcrypt.checkpw(candidate, hashed.encode("utf-8"))
        except ValueError:
            bcrypt.checkpw(candidate, self._dummy_hash)
            return False


__all__ = ["SecretHasher"]
