"""
Authentication Module
=====================

Provides the authentication core of the desktop application:
- Password policy enforcement
- Argon2id password hashing and verification
- Process-wide current-session state
- A service combining the three
"""

from deskauth.core.auth.argon2_auth import (
    CredentialError,
    CredentialHasher,
    CredentialHashingError,
    HashRecord,
    MalformedHashError,
    hash_password,
    verify_password,
)
from deskauth.core.auth.auth_service import (
    AuthService,
    create_auth_service,
)
from deskauth.core.auth.models import (
    AuthFailureReason,
    AuthResult,
    Credential,
    Identity,
)
from deskauth.core.auth.password_policy import (
    PasswordPolicy,
    PolicyResult,
    PolicyViolation,
    validate_password,
)
from deskauth.core.auth.session_control import (
    SessionState,
    SessionStore,
)

__all__ = [
    "CredentialError",
    "CredentialHasher",
    "CredentialHashingError",
    "HashRecord",
    "MalformedHashError",
    "hash_password",
    "verify_password",
    "AuthService",
    "create_auth_service",
    "AuthFailureReason",
    "AuthResult",
    "Credential",
    "Identity",
    "PasswordPolicy",
    "PolicyResult",
    "PolicyViolation",
    "validate_password",
    "SessionState",
    "SessionStore",
]
