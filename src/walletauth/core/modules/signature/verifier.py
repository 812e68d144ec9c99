"""EIP-191 personal-message signature recovery.

All functions here are pure: they hold no state and may be called from any
number of concurrent requests.
"""

import structlog
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import is_checksum_address, keccak, to_checksum_address

from walletauth.core.modules.signature.models import (
    Recovered,
    RecoveryFailed,
    RecoveryFailureKind,
    RecoveryResult,
    VerificationResult,
)
from walletauth.errors import InvalidAddressError, InvalidSignatureFormatError, SignatureError, SignatureRecoveryError
from walletauth.utils import is_address_format, is_signature_format, now

logger = structlog.get_logger(__name__)

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def hash_message(message: str) -> str:
    """Return the 0x-prefixed keccak-256 hash of an EIP-191 personal message."""
    data = message.encode("utf-8")
    return "0x" + keccak(PERSONAL_MESSAGE_PREFIX + str(len(data)).encode("ascii") + data).hex()


def recover_signer(message: str, signature: str) -> str:
    """Recover the checksummed address that signed `message`.

    Raises:
        InvalidSignatureFormatError: `signature` is not 0x + 130 hex characters.
        SignatureRecoveryError: the signature does not yield a valid address.
    """
    if not isinstance(signature, str) or not is_signature_format(signature):
        raise InvalidSignatureFormatError

    try:
        address = Account.recover_message(encode_defunct(text=message), signature=signature)
    except Exception as exc:
        raise SignatureRecoveryError(f"Failed to recover signer address: {exc}") from exc

    if not is_valid_address(address):
        raise SignatureRecoveryError("Failed to recover valid address")
    return to_checksum_address(address)


def try_recover_signer(message: str, signature: str) -> RecoveryResult:
    """Recover the signer without raising; failures are returned as values."""
    try:
        return Recovered(address=recover_signer(message, signature))
    except InvalidSignatureFormatError as exc:
        return RecoveryFailed(kind=RecoveryFailureKind.INVALID_FORMAT, reason=str(exc))
    except SignatureRecoveryError as exc:
        logger.debug("signature_recovery_failed", reason=str(exc))
        return RecoveryFailed(kind=RecoveryFailureKind.RECOVERY_FAILED, reason=str(exc))


def addresses_match(left: str, right: str) -> bool:
    """Compare two addresses after checksum canonicalization."""
    try:
        return get_checksum_address(left) == get_checksum_address(right)
    except InvalidAddressError:
        return False


def verify_signature(message: str, signature: str, expected_address: str) -> bool:
    """Check that `signature` over `message` recovers to `expected_address`. Never raises."""
    try:
        signer = recover_signer(message, signature)
    except SignatureError:
        return False
    return addresses_match(signer, expected_address)


def is_valid_address(address: str) -> bool:
    """Structural check, plus EIP-55 checksum validation for mixed-case input."""
    if not isinstance(address, str) or not is_address_format(address):
        return False
    body = address[2:]
    if body.islower() or body.isupper() or body.isdigit():
        return True
    return is_checksum_address(address)


def get_checksum_address(address: str) -> str:
    if not isinstance(address, str) or not is_address_format(address):
        raise InvalidAddressError
    return to_checksum_address(address)


def build_verification_result(message: str, signer: str) -> VerificationResult:
    return VerificationResult(is_valid=True, signer=signer, original_message=message, timestamp=now())
