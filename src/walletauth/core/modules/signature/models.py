"""Signature verification models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field


class RecoveryFailureKind(StrEnum):
    INVALID_FORMAT = "invalid_format"
    RECOVERY_FAILED = "recovery_failed"


@dataclass(frozen=True)
class Recovered:
    """Successful signer recovery."""

    address: str


@dataclass(frozen=True)
class RecoveryFailed:
    """Failed signer recovery with the reason it failed."""

    kind: RecoveryFailureKind
    reason: str


RecoveryResult: TypeAlias = Recovered | RecoveryFailed


class VerificationResult(BaseModel):
    """Outcome of a successful signature verification (API representation)."""

    is_valid: bool = Field(..., alias="isValid", description="Whether the signature is valid")
    signer: str = Field(..., description="Checksummed address recovered from the signature")
    original_message: str = Field(..., alias="originalMessage", description="Message that was signed")
    timestamp: datetime = Field(..., description="Verification time (UTC)")

    model_config = ConfigDict(frozen=True, populate_by_name=True)
