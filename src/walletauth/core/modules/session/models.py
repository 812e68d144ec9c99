"""Session management models."""

from datetime import datetime
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field

SessionToken = NewType("SessionToken", str)


class Session(BaseModel):
    """Wallet session established by a verified signature.

    Held only in process memory; the token is the sole external handle.
    """

    token: SessionToken
    wallet_address: str
    message: str
    signature: str
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(frozen=True)

    def is_expired(self, at: datetime) -> bool:
        return self.expires_at < at


class SessionView(BaseModel):
    """Session information returned to the owner (never includes token or signature)."""

    wallet_address: str = Field(..., alias="walletAddress", description="Checksummed wallet address")
    expires_at: datetime = Field(..., alias="expiresAt", description="Session expiry time (UTC)")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_domain(cls, session: Session) -> "SessionView":
        """Create view model from domain model."""
        return cls(wallet_address=session.wallet_address, expires_at=session.expires_at)


class CreatedSessionView(SessionView):
    """Newly created session, including the bearer token for non-browser clients."""

    session_token: str = Field(..., alias="sessionToken", description="Opaque session token")

    @classmethod
    def from_domain(cls, session: Session) -> "CreatedSessionView":
        return cls(session_token=session.token, wallet_address=session.wallet_address, expires_at=session.expires_at)
