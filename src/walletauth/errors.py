from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class AuthenticationError(UserError):
    """Raised when a signature or a session token does not authenticate the caller."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class RateLimitError(UserError):
    """Raised when a client exceeds its request budget for the current window."""

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Please try again in {retry_after} second(s).")


class SignatureError(Exception):
    """Base class for signature verification failures.

    These are domain errors of the verifier and carry no transport semantics;
    the web layer decides how they are reported.
    """


class InvalidSignatureFormatError(SignatureError):
    """Raised when a signature is not 0x followed by 130 hex characters."""

    def __init__(self, message: str = "Invalid signature format") -> None:
        super().__init__(message)


class SignatureRecoveryError(SignatureError):
    """Raised when no valid signer address can be recovered from a signature."""

    def __init__(self, message: str = "Failed to recover signer address") -> None:
        super().__init__(message)


class InvalidAddressError(SignatureError):
    """Raised when an address is not 0x followed by 40 hex characters."""

    def __init__(self, message: str = "Invalid Ethereum address") -> None:
        super().__init__(message)
