"""
Password Policy
===============

Checks a candidate password against the account password rules.

Rules, checked in order (the first violated rule is reported):
1. At least ``min_length`` characters (default 8)
2. At least one uppercase letter (Unicode category Lu)
3. At least one lowercase letter (Unicode category Ll)
4. At least one decimal digit (Unicode category Nd)

Character classes come from ``unicodedata`` so the result does not depend
on the process locale.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional

from deskauth.core.auth.models import AuthFailureReason


DEFAULT_MIN_LENGTH: Final[int] = 8


class PolicyViolation(Enum):
    """Password rules, in the order they are checked."""
    TOO_SHORT = "TooShort"
    MISSING_UPPERCASE = "MissingUppercase"
    MISSING_LOWERCASE = "MissingLowercase"
    MISSING_DIGIT = "MissingDigit"

    @property
    def failure_reason(self) -> AuthFailureReason:
        return AuthFailureReason(self.value)


@dataclass(frozen=True, slots=True)
class PolicyResult:
    """Either valid (no violation) or exactly one violated rule."""
    violation: Optional[PolicyViolation] = None
    min_length: int = DEFAULT_MIN_LENGTH

    @property
    def is_valid(self) -> bool:
        return self.violation is None

    @property
    def message(self) -> str:
        if self.violation is None:
            return "Password is valid"
        if self.violation is PolicyViolation.TOO_SHORT:
            return f"Password must be at least {self.min_length} characters long"
        if self.violation is PolicyViolation.MISSING_UPPERCASE:
            return "Password must contain at least one uppercase letter"
        if self.violation is PolicyViolation.MISSING_LOWERCASE:
            return "Password must contain at least one lowercase letter"
        return "Password must contain at least one number"


def _has_category(password: str, category: str) -> bool:
    return any(unicodedata.category(c) == category for c in password)


class PasswordPolicy:
    """
    Stateless password validator.

    Usage:
        policy = PasswordPolicy()
        result = policy.validate("ValidPass123")
        if not result.is_valid:
            show(result.message)
    """

    __slots__ = ("_min_length",)

    def __init__(self, min_length: int = DEFAULT_MIN_LENGTH) -> None:
        if min_length < 1:
            raise ValueError("min_length must be at least 1")
        self._min_length = min_length

    @property
    def min_length(self) -> int:
        return self._min_length

    def validate(self, password: str) -> PolicyResult:
        """Return the first violated rule, or a valid result."""
        if len(password) < self._min_length:
            return self._violation(PolicyViolation.TOO_SHORT)
        if not _has_category(password, "Lu"):
            return self._violation(PolicyViolation.MISSING_UPPERCASE)
        if not _has_category(password, "Ll"):
            return self._violation(PolicyViolation.MISSING_LOWERCASE)
        if not _has_category(password, "Nd"):
            return self._violation(PolicyViolation.MISSING_DIGIT)
        return PolicyResult(min_length=self._min_length)

    def _violation(self, violation: PolicyViolation) -> PolicyResult:
        return PolicyResult(violation=violation, min_length=self._min_length)


_default_policy: Final[PasswordPolicy] = PasswordPolicy()


def validate_password(password: str) -> PolicyResult:
    """Validate a password against the default policy."""
    return _default_policy.validate(password)
