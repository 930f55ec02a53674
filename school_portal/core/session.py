import logging
import time
from dataclasses import dataclass
from typing import Any, Optional
from jose import JWTError, jwt

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user_id: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_provider(cls, session: Any) -> "AuthSession":
        """Build from a Supabase `Session` (or any object with the same attributes)."""
        user = getattr(session, "user", None)
        return cls(
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None),
            expires_at=getattr(session, "expires_at", None),
            user_id=getattr(user, "id", None),
            email=getattr(user, "email", None),
        )


def token_expiry(token: str) -> Optional[int]:
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get("exp")
    return int(exp) if exp is not None else None


class SessionStore:
    """Holds the signed-in session and the branch the user is working in.

    `generation` increases on every sign-in so that per-session guards (such as
    the 401 handler) can tell one session from the next.
    """

    def __init__(self):
        self._session: Optional[AuthSession] = None
        self._branch_id: Optional[str] = None
        self.generation = 0

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    @property
    def has_session(self) -> bool:
        return self._session is not None

    @property
    def current_branch_id(self) -> Optional[str]:
        return self._branch_id

    @current_branch_id.setter
    def current_branch_id(self, branch_id: Optional[str]) -> None:
        self._branch_id = branch_id

    def set_session(self, session: AuthSession) -> None:
        self._session = session
        self.generation += 1
        logger.info(f"Session started for {session.email or session.user_id}")

    def clear(self) -> None:
        self._session = None
        self._branch_id = None

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self._session is None:
            return True

        expires_at = self._session.expires_at
        if expires_at is None:
            expires_at = token_expiry(self._session.access_token)
        if expires_at is None:
            return False

        now = time.time() if now is None else now
        return now >= expires_at
