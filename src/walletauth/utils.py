import re
from datetime import UTC, datetime

ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
SIGNATURE_RE = re.compile(r"^0x[a-fA-F0-9]{130}$")


def is_address_format(value: str) -> bool:
    return bool(ADDRESS_RE.fullmatch(value))


def is_signature_format(value: str) -> bool:
    return bool(SIGNATURE_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)


def mask_token(token: str) -> str:
    """Shorten a bearer credential for log output."""
    return token[:8] + "..."
