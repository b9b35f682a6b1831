"""
deskauth - Authentication core for a desktop application
========================================================

Password policy, Argon2id credential hashing and the process-wide
current-session state, shared by concurrent command handlers.

Security Notice:
- Passwords and hashes are never logged
- The core never stores credentials; the caller persists hashes
"""

from deskauth.commands import AuthCommands
from deskauth.core.auth import (
    AuthFailureReason,
    AuthResult,
    AuthService,
    Credential,
    CredentialHasher,
    Identity,
    MalformedHashError,
    CredentialHashingError,
    PasswordPolicy,
    SessionStore,
    create_auth_service,
)
from deskauth.core.config import AuthSettings
from deskauth.core.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "AuthCommands",
    "AuthFailureReason",
    "AuthResult",
    "AuthService",
    "AuthSettings",
    "Credential",
    "CredentialHasher",
    "CredentialHashingError",
    "Identity",
    "MalformedHashError",
    "PasswordPolicy",
    "SessionStore",
    "configure_logging",
    "create_auth_service",
    "__version__",
]
