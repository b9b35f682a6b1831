"""
Authentication Models
=====================

Value types shared by the policy, hasher, session store and service.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class AuthFailureReason(Enum):
    """Reasons an authentication operation reports success=False."""
    EMPTY_USERNAME = "EmptyUsername"
    TOO_SHORT = "TooShort"
    MISSING_UPPERCASE = "MissingUppercase"
    MISSING_LOWERCASE = "MissingLowercase"
    MISSING_DIGIT = "MissingDigit"
    INVALID_CREDENTIALS = "InvalidCredentials"


_DEFAULT_MESSAGES: dict[AuthFailureReason, str] = {
    AuthFailureReason.EMPTY_USERNAME: "Username cannot be empty",
    AuthFailureReason.TOO_SHORT: "Password must be at least 8 characters long",
    AuthFailureReason.MISSING_UPPERCASE: "Password must contain at least one uppercase letter",
    AuthFailureReason.MISSING_LOWERCASE: "Password must contain at least one lowercase letter",
    AuthFailureReason.MISSING_DIGIT: "Password must contain at least one number",
    AuthFailureReason.INVALID_CREDENTIALS: "Invalid username or password",
}


@dataclass(frozen=True, slots=True, eq=False)
class Identity:
    """
    An authenticated principal.

    Immutable once constructed. Two identities are equal when their ids
    are equal, whatever their usernames.
    """
    id: int
    username: str

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise ValueError(f"Identity id must be an integer, got {type(self.id).__name__}")
        if not isinstance(self.username, str) or not self.username.strip():
            raise ValueError("Identity username cannot be empty")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}


@dataclass(frozen=True, slots=True)
class Credential:
    """
    A username paired with its password hash, ready for external storage.

    Note: password_hash is never exposed in repr.
    """
    username: str
    password_hash: str

    def __repr__(self) -> str:
        return f"Credential(username={self.username!r})"


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Outcome of a service operation.

    Attributes:
        success: Whether the operation succeeded
        reason: Why it failed (None on success)
        message: Human-readable status
        credential_hash: Password hash produced by a successful registration
        identity: Identity placed in the session by a successful login
    """
    success: bool
    reason: Optional[AuthFailureReason] = None
    message: str = ""
    credential_hash: Optional[str] = None
    identity: Optional[Identity] = None

    def __repr__(self) -> str:
        """Safe representation without the hash."""
        return (
            f"AuthResult(success={self.success}, reason={self.reason}, "
            f"message={self.message!r}, identity={self.identity!r})"
        )

    @classmethod
    def ok(
        cls,
        message: str,
        *,
        credential_hash: Optional[str] = None,
        identity: Optional[Identity] = None,
    ) -> AuthResult:
        return cls(
            success=True,
            message=message,
            credential_hash=credential_hash,
            identity=identity,
        )

    @classmethod
    def failure(cls, reason: AuthFailureReason, message: Optional[str] = None) -> AuthResult:
        return cls(
            success=False,
            reason=reason,
            message=message if message is not None else _DEFAULT_MESSAGES[reason],
        )

    def to_response(self) -> dict[str, Any]:
        """Plain dict for a host dispatcher to marshal."""
        return {
            "success": self.success,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "credential_hash": self.credential_hash,
            "user": self.identity.to_dict() if self.identity else None,
        }
