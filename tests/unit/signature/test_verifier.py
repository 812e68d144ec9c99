"""Tests for EIP-191 signature recovery."""

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct

from walletauth.core.modules.signature.models import Recovered, RecoveryFailed, RecoveryFailureKind
from walletauth.core.modules.signature.verifier import (
    addresses_match,
    build_verification_result,
    get_checksum_address,
    hash_message,
    is_valid_address,
    recover_signer,
    try_recover_signer,
    verify_signature,
)
from walletauth.errors import InvalidAddressError, InvalidSignatureFormatError, SignatureRecoveryError

CHECKSUMMED = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestRecoverSigner:
    """Tests for recover_signer."""

    @pytest.mark.parametrize(
        "message",
        ["Hello, Web3!", "a", "multi\nline\nmessage", "unicodé ✓ 🚀", "x" * 5000],
    )
    def test_round_trip_recovers_signer(self, wallet, sign, message):
        """Test that a signature recovers to the address of the signing key."""
        signature = sign(wallet, message)
        assert recover_signer(message, signature) == wallet.address

    def test_returns_checksummed_address(self, wallet, sign):
        """Test that the recovered address is in EIP-55 form."""
        signature = sign(wallet, "test")
        signer = recover_signer("test", signature)
        assert signer == get_checksum_address(wallet.address.lower())

    @pytest.mark.parametrize("position", [0, 3, 7, 11])
    def test_tampered_message_does_not_match(self, wallet, sign, position):
        """Test that altering a single character never recovers the original signer."""
        message = "Hello, Web3!"
        signature = sign(wallet, message)
        replacement = "#" if message[position] != "#" else "$"
        tampered = message[:position] + replacement + message[position + 1 :]

        result = try_recover_signer(tampered, signature)
        assert not (isinstance(result, Recovered) and result.address == wallet.address)

    @pytest.mark.parametrize(
        "signature",
        [
            "",
            "invalid-signature",
            "0x",
            "0x" + "ab" * 64,
            "0x" + "ab" * 66,
            "ab" * 65 + "ab",
            "0x" + "zz" * 65,
            "0X" + "ab" * 65,
            " 0x" + "ab" * 65,
        ],
    )
    def test_malformed_signature_raises_format_error(self, signature):
        """Test that anything but 0x + 130 hex characters is a format error."""
        with pytest.raises(InvalidSignatureFormatError):
            recover_signer("message", signature)

    def test_bad_recovery_id_raises_recovery_error(self, wallet, sign):
        """Test that a well-formed signature with an impossible v value fails recovery."""
        signature = sign(wallet, "message")
        broken = signature[:-2] + "05"
        with pytest.raises(SignatureRecoveryError):
            recover_signer("message", broken)

    def test_zero_signature_raises_recovery_error(self):
        """Test that r = s = 0 cannot be recovered."""
        with pytest.raises(SignatureRecoveryError):
            recover_signer("message", "0x" + "00" * 64 + "1b")


class TestTryRecoverSigner:
    """Tests for the result-returning recovery."""

    def test_success(self, wallet, sign):
        result = try_recover_signer("hi", sign(wallet, "hi"))
        assert result == Recovered(address=wallet.address)

    def test_format_failure(self):
        result = try_recover_signer("hi", "nope")
        assert isinstance(result, RecoveryFailed)
        assert result.kind == RecoveryFailureKind.INVALID_FORMAT

    def test_recovery_failure(self):
        result = try_recover_signer("hi", "0x" + "00" * 64 + "1b")
        assert isinstance(result, RecoveryFailed)
        assert result.kind == RecoveryFailureKind.RECOVERY_FAILED


class TestVerifySignature:
    """Tests for verify_signature."""

    def test_valid_signature(self, wallet, sign):
        assert verify_signature("test", sign(wallet, "test"), wallet.address) is True

    def test_address_comparison_is_case_insensitive(self, wallet, sign):
        signature = sign(wallet, "test")
        assert verify_signature("test", signature, wallet.address.lower()) is True
        assert verify_signature("test", signature, "0x" + wallet.address[2:].upper()) is True

    def test_other_wallet_rejected(self, wallet, other_wallet, sign):
        assert verify_signature("test", sign(wallet, "test"), other_wallet.address) is False

    def test_never_raises(self, wallet):
        assert verify_signature("test", "garbage", wallet.address) is False
        assert verify_signature("test", "0x" + "00" * 65, wallet.address) is False
        assert verify_signature("test", "0x" + "00" * 65, "not-an-address") is False


class TestAddresses:
    """Tests for address helpers."""

    def test_valid_lowercase_and_uppercase(self):
        assert is_valid_address(CHECKSUMMED.lower()) is True
        assert is_valid_address("0x" + CHECKSUMMED[2:].upper()) is True

    def test_valid_checksum(self):
        assert is_valid_address(CHECKSUMMED) is True

    def test_invalid_checksum_rejected(self):
        broken = CHECKSUMMED[:3] + CHECKSUMMED[3].swapcase() + CHECKSUMMED[4:]
        assert is_valid_address(broken) is False

    @pytest.mark.parametrize("address", ["", "0x", "0x123", CHECKSUMMED[2:], CHECKSUMMED + "00", "0x" + "g" * 40])
    def test_structurally_invalid(self, address):
        assert is_valid_address(address) is False

    def test_get_checksum_address(self):
        assert get_checksum_address(CHECKSUMMED.lower()) == CHECKSUMMED

    def test_get_checksum_address_rejects_invalid(self):
        with pytest.raises(InvalidAddressError):
            get_checksum_address("0x1234")

    def test_addresses_match(self):
        assert addresses_match(CHECKSUMMED, CHECKSUMMED.lower()) is True
        assert addresses_match(CHECKSUMMED, "0x" + "0" * 40) is False
        assert addresses_match(CHECKSUMMED, "bogus") is False


class TestHashMessage:
    """Tests for hash_message."""

    def test_known_vector(self):
        """Test against the well-known personal_sign hash of 'hello world'."""
        assert hash_message("hello world") == "0xd9eba16ed0ecae432b71fe008c98cc872bb4cc214d3220a36f365326cf807d68"

    def test_matches_signing_hash(self, wallet):
        """Test that the hash equals the digest eth-account signs."""
        message = "Hello, Web3! ✓"
        signed = Account.sign_message(encode_defunct(text=message), wallet.key)
        assert hash_message(message) == "0x" + bytes(signed.message_hash).hex()


def test_build_verification_result():
    result = build_verification_result("hello", CHECKSUMMED)
    assert result.is_valid is True
    assert result.signer == CHECKSUMMED
    assert result.original_message == "hello"
    assert result.timestamp.tzinfo is not None
    assert result.model_dump(by_alias=True).keys() == {"isValid", "signer", "originalMessage", "timestamp"}
