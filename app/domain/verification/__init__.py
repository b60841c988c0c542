"""One-time email verification codes."""

from .services import ChallengeIssuer, ChallengeVerifier, IssuedChallenge, SessionGrant
from .store import ChallengeRecord, CodeStore

__all__ = [
    "ChallengeIssuer",
    "ChallengeRecord",
    "ChallengeVerifier",
    "CodeStore",
    "IssuedChallenge",
    "SessionGrant",
]
