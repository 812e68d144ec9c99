import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from walletauth.config import Config
from walletauth.core.core import Core
from walletauth.core.modules.session.models import Session
from walletauth.core.modules.signature.models import Recovered, VerificationResult
from walletauth.core.modules.signature.verifier import addresses_match, build_verification_result, try_recover_signer
from walletauth.errors import AuthenticationError

logger = structlog.get_logger(__name__)

INVALID_SIGNATURE = "Invalid signature for this message"
INVALID_SESSION = "Invalid or expired session"


class App:
    """Facade for all application operations, turns verifier outcomes into user errors before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)
        self._started_at = time.monotonic()

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    def uptime(self) -> float:
        """Seconds since the application was created."""
        return time.monotonic() - self._started_at

    def check_rate_limit(self, client_key: str) -> None:
        """Charge one request to the client, raises RateLimitError when over budget."""
        self._core.services.rate_limit.hit(client_key)

    def verify_signature(self, message: str, signature: str, expected_signer: str) -> VerificationResult:
        """Verify that `signature` over `message` was produced by `expected_signer`."""
        signer = self._recover(message, signature)
        if not addresses_match(signer, expected_signer):
            logger.info("signer_mismatch", signer=signer, expected=expected_signer)
            raise AuthenticationError("Signature does not match expected signer address")
        return build_verification_result(message, signer)

    def create_session(self, message: str, signature: str, wallet_address: str) -> Session:
        """Verify wallet ownership and open a session for it."""
        signer = self._recover(message, signature)
        if not addresses_match(signer, wallet_address):
            logger.info("signer_mismatch", signer=signer, expected=wallet_address)
            raise AuthenticationError("Signature does not match wallet address")

        sessions = self._core.services.session
        token = sessions.create_session(signer, message, signature)
        session = sessions.get_session(token)
        if session is None:
            raise RuntimeError("Session vanished right after creation")
        return session

    def get_session(self, token: str | None) -> Session:
        """Resolve a session token. Missing, unknown and expired tokens are indistinguishable."""
        session = self._core.services.session.get_session(token) if token else None
        if session is None:
            raise AuthenticationError(INVALID_SESSION)
        return session

    def destroy_session(self, token: str | None) -> None:
        """Log out. Destroying an absent session is not an error."""
        if token:
            self._core.services.session.destroy_session(token)

    def get_wallet_sessions(self, wallet_address: str) -> list[Session]:
        return self._core.services.session.get_sessions_by_wallet(wallet_address)

    # === Private helpers ===
    def _recover(self, message: str, signature: str) -> str:
        result = try_recover_signer(message, signature)
        if isinstance(result, Recovered):
            return result.address
        logger.info("signature_rejected", kind=result.kind, reason=result.reason)
        raise AuthenticationError(INVALID_SIGNATURE)
