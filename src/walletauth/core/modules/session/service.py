import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

import structlog

from walletauth.config import Config
from walletauth.core.core import Service
from walletauth.core.modules.session.models import Session, SessionToken
from walletauth.core.periodic import PeriodicTask
from walletauth.utils import mask_token, now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Issues and resolves wallet sessions held in process memory."""

    def __init__(self, config: Config, clock: Callable[[], datetime] = now) -> None:
        super().__init__(config)
        self._clock = clock
        self._ttl = timedelta(seconds=config.session_ttl_seconds)
        self._sessions: dict[SessionToken, Session] = {}
        self._sweeper = PeriodicTask(
            "session_cleanup", config.session_cleanup_interval_seconds, self.cleanup_expired_sessions
        )

    def create_session(self, wallet_address: str, message: str, signature: str) -> SessionToken:
        """Store a new session. Callers must verify the signature beforehand."""
        token = SessionToken(secrets.token_hex(32))
        created_at = self._clock()
        self._sessions[token] = Session(
            token=token,
            wallet_address=wallet_address,
            message=message,
            signature=signature,
            created_at=created_at,
            expires_at=created_at + self._ttl,
        )
        logger.info("session_created", token=mask_token(token), wallet_address=wallet_address)
        return token

    def get_session(self, token: str) -> Session | None:
        """Return the session, evicting it if it has expired."""
        session = self._sessions.get(SessionToken(token))
        if session is None:
            return None
        if session.is_expired(self._clock()):
            del self._sessions[session.token]
            logger.debug("session_expired", token=mask_token(token))
            return None
        return session

    def destroy_session(self, token: str) -> bool:
        """Remove a session; returns False when there was nothing to remove."""
        removed = self._sessions.pop(SessionToken(token), None) is not None
        if removed:
            logger.info("session_destroyed", token=mask_token(token))
        return removed

    def get_sessions_by_wallet(self, wallet_address: str) -> list[Session]:
        """Get all live sessions of a wallet (multi-device)."""
        at = self._clock()
        wanted = wallet_address.lower()
        return [s for s in self._sessions.values() if s.wallet_address.lower() == wanted and not s.is_expired(at)]

    def cleanup_expired_sessions(self) -> int:
        at = self._clock()
        expired = [token for token, session in self._sessions.items() if session.is_expired(at)]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug("expired_sessions_removed", count=len(expired), remaining=self.count())
        return len(expired)

    def count(self) -> int:
        return len(self._sessions)

    async def on_start(self) -> None:
        """Start the periodic expiry sweep."""
        self._sweeper.start()

    async def on_stop(self) -> None:
        await self._sweeper.stop()
