from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field, field_validator

from walletauth.core.modules.session.models import CreatedSessionView, SessionView
from walletauth.core.modules.signature.models import VerificationResult
from walletauth.utils import is_address_format, is_signature_format
from walletauth.web.deps import SESSION_COOKIE, AppDep, RateLimited, SessionTokenDep
from walletauth.web.responses import DataResponse, ErrorResponse, MessageResponse

router = APIRouter(prefix="/auth", tags=["auth"])


class SignedMessage(BaseModel):
    """Message and its EIP-191 signature."""

    message: str = Field(..., description="Message that was signed")
    signature: str = Field(..., description="0x-prefixed 65-byte signature")

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    @field_validator("message")
    @classmethod
    def message_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Message is required")
        return value

    @field_validator("signature")
    @classmethod
    def signature_format(cls, value: str) -> str:
        if not value:
            raise ValueError("Signature is required")
        if not is_signature_format(value):
            raise ValueError("Invalid signature format - must be a valid hex string")
        return value


def _check_address(value: str, label: str) -> str:
    if not value:
        raise ValueError(f"{label} is required")
    if not is_address_format(value):
        raise ValueError("Invalid Ethereum address format")
    return value


class VerifySignatureRequest(SignedMessage):
    """Signature verification request."""

    expected_signer: str = Field(..., alias="expectedSigner", description="Address expected to have signed")

    @field_validator("expected_signer")
    @classmethod
    def expected_signer_format(cls, value: str) -> str:
        return _check_address(value, "Expected signer address")


class CreateSessionRequest(SignedMessage):
    """Session creation request."""

    wallet_address: str = Field(..., alias="walletAddress", description="Wallet that signed the message")

    @field_validator("wallet_address")
    @classmethod
    def wallet_address_format(cls, value: str) -> str:
        return _check_address(value, "Wallet address")


@router.post(
    "/verify-signature",
    summary="Verify a signed message",
    description="Recover the signer of a message and check it against the expected address.",
    operation_id="verifySignature",
    dependencies=[RateLimited],
    responses={
        200: {"description": "Signature is valid"},
        400: {"model": ErrorResponse, "description": "Malformed request"},
        401: {"model": ErrorResponse, "description": "Signature does not match"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
async def verify_signature(payload: VerifySignatureRequest, app: AppDep) -> DataResponse[VerificationResult]:
    result = app.verify_signature(payload.message, payload.signature, payload.expected_signer)
    return DataResponse(data=result)


@router.post(
    "/session",
    summary="Create session",
    description="Verify wallet ownership with a signature and open a 24 hour session.",
    operation_id="createSession",
    status_code=201,
    dependencies=[RateLimited],
    responses={
        201: {"description": "Session created"},
        400: {"model": ErrorResponse, "description": "Malformed request"},
        401: {"model": ErrorResponse, "description": "Signature does not match wallet"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
async def create_session(payload: CreateSessionRequest, app: AppDep, response: Response) -> DataResponse[CreatedSessionView]:
    session = app.create_session(payload.message, payload.signature, payload.wallet_address)

    # Set cookie for browser-based clients
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.token,
        httponly=True,
        samesite="strict",
        secure=app.config.cookie_secure,
        max_age=app.config.session_ttl_seconds,
    )

    return DataResponse(data=CreatedSessionView.from_domain(session))


@router.get(
    "/session",
    summary="Get current session",
    description="Return the wallet bound to the session cookie or bearer token.",
    operation_id="getSession",
    responses={
        200: {"description": "Active session"},
        401: {"model": ErrorResponse, "description": "No valid session"},
    },
)
async def get_session(app: AppDep, token: SessionTokenDep) -> DataResponse[SessionView]:
    session = app.get_session(token)
    return DataResponse(data=SessionView.from_domain(session))


@router.delete(
    "/session",
    summary="End session",
    description="Destroy the current session if any and clear the session cookie.",
    operation_id="destroySession",
    responses={200: {"description": "Session destroyed"}},
)
async def destroy_session(app: AppDep, token: SessionTokenDep, response: Response) -> MessageResponse:
    app.destroy_session(token)
    response.delete_cookie(SESSION_COOKIE, httponly=True, samesite="strict", secure=app.config.cookie_secure)
    return MessageResponse(message="Session destroyed successfully")
