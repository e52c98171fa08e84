# scan_submit/core/session.py
"""Scan session and submission result value types."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class ScanStatus(Enum):
    """Lifecycle of a single scan session."""
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SUBMITTING = "submitting"
    RESOLVED = "resolved"      # Result shown, waiting for acknowledgment


@dataclass(frozen=True)
class ScanSession:
    """One accepted decode, from confirmation prompt to acknowledgment."""
    payload: str
    status: ScanStatus = ScanStatus.AWAITING_CONFIRMATION

    def advance(self, status: ScanStatus) -> "ScanSession":
        return replace(self, status=status)


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a single submission call."""
    ok: bool
    label: Optional[str] = None
    reason: Optional[str] = None  # Logged only, never shown to the operator

    @classmethod
    def success(cls, label: str) -> "SubmissionResult":
        return cls(ok=True, label=label)

    @classmethod
    def failure(cls, reason: str) -> "SubmissionResult":
        return cls(ok=False, reason=reason)
