"""
Result Models

Dataclass models for authentication outcomes and validation results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional


class AuthStatus(Enum):
    """Status of an authentication attempt."""

    AUTHENTICATED = "authenticated"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class AuthOutcome:
    """
    Result of driving a login against a security manager.

    groups is None when group lookup did not run, and an empty frozenset
    when it ran and found nothing.
    """

    status: AuthStatus
    groups: Optional[FrozenSet[str]] = None
    reason: str = ""
    cause: Optional[str] = None
    trace: Optional[str] = None

    @classmethod
    def authenticated(cls, groups: Optional[Iterable[str]]) -> "AuthOutcome":
        return cls(
            status=AuthStatus.AUTHENTICATED,
            groups=frozenset(groups) if groups is not None else None,
        )

    @classmethod
    def failed(
        cls, reason: str, cause: Optional[str] = None, trace: Optional[str] = None
    ) -> "AuthOutcome":
        return cls(status=AuthStatus.FAILED, reason=reason, cause=cause, trace=trace)

    @classmethod
    def error(cls, message: str) -> "AuthOutcome":
        return cls(status=AuthStatus.ERROR, reason=message)

    @property
    def is_success(self) -> bool:
        """Check if the user authenticated."""
        return self.status == AuthStatus.AUTHENTICATED

    def __repr__(self) -> str:
        return f"AuthOutcome(status={self.status.value}, groups={self.groups})"


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if validation has errors."""
        return len(self.errors) > 0

    def add_error(self, error: str) -> None:
        """Add an error to the validation result."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning to the validation result."""
        self.warnings.append(warning)

    def __repr__(self) -> str:
        return f"ValidationResult(valid={self.is_valid}, errors={len(self.errors)}, warnings={len(self.warnings)})"
