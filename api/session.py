"""In-memory game sessions with signed session tokens."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import config
from core.game import HighLowGame

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


@dataclass
class GameSession:
    """A live game plus the lock that serializes every move on it."""

    game: HighLowGame
    expires_at: datetime
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class GameSessionStore:
    """
    Memory-only store of one game per session.

    Sessions are never persisted and expire after ``ttl`` seconds of inactivity.
    """

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, GameSession] = {}

    def create_session_id(self, signed: bool = True) -> str:
        """
        Create a new session ID.

        Args:
            signed: If True, return a signed session token

        Returns:
            A new session ID (signed or unsigned based on parameter)
        """
        session_id = str(uuid4())
        if signed:
            return get_session_signer().sign(session_id)
        return session_id

    def put(self, session_id: str, game: HighLowGame) -> GameSession:
        """Store a game, replacing any previous game for the session."""
        self.cleanup_expired()
        session = GameSession(game=game, expires_at=self._expiry())
        self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> GameSession | None:
        """Return the live session and refresh its expiry, or None."""
        session = self._sessions.get(session_id)
        if session is None:
            return None

        if session.expires_at < datetime.now():
            self.delete(session_id)
            return None

        session.expires_at = self._expiry()
        return session

    def delete(self, session_id: str) -> None:
        """Delete session."""
        self._sessions.pop(session_id, None)

    def exists(self, session_id: str) -> bool:
        """Check if session exists."""
        return self.get(session_id) is not None

    def cleanup_expired(self) -> int:
        """Remove expired sessions."""
        now = datetime.now()
        expired = [sid for sid, s in self._sessions.items() if s.expires_at < now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Removed %d expired game sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    def _expiry(self) -> datetime:
        return datetime.now() + timedelta(seconds=self._ttl)


# Global session store instance
_session_store: GameSessionStore | None = None


def get_session_store() -> GameSessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = GameSessionStore()
    return _session_store


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    signer = get_session_signer()
    return signer.unsign(token)
