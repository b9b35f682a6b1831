"""
Authentication Service
======================

Combines the password policy, the credential hasher and the session store
into the operations a host application calls.

The service creates no account records and assigns no ids: registration
returns a hash for the caller to store, and login trusts the id the caller
got back from its own store.
"""

from __future__ import annotations

import logging
from typing import Optional

from deskauth.core.auth.argon2_auth import CredentialHasher
from deskauth.core.auth.models import AuthFailureReason, AuthResult, Credential, Identity
from deskauth.core.auth.password_policy import PasswordPolicy
from deskauth.core.auth.session_control import SessionStore
from deskauth.core.config import AuthSettings


logger = logging.getLogger(__name__)


class AuthService:
    """
    Register, verify, login, logout and whoami.

    Usage:
        service = create_auth_service()

        result = service.register("alice", "GoodPass123")
        if result.success:
            user_id = store.insert(service.credential_for("alice", result))

        if service.verify_credential(password, stored_hash):
            service.login("alice", user_id)

        service.whoami()  # Identity(id=..., username='alice')
    """

    __slots__ = ("_policy", "_hasher", "_sessions")

    def __init__(
        self,
        policy: PasswordPolicy,
        hasher: CredentialHasher,
        sessions: SessionStore,
    ) -> None:
        self._policy = policy
        self._hasher = hasher
        self._sessions = sessions

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    def register(self, username: str, password: str) -> AuthResult:
        """
        Validate a new account's password and hash it.

        Returns:
            A failed AuthResult for a blank username or a policy violation,
            otherwise a successful one carrying ``credential_hash``

        Raises:
            CredentialHashingError: If hashing fails
        """
        if not username or not username.strip():
            logger.info("Registration rejected: %s", AuthFailureReason.EMPTY_USERNAME.value)
            return AuthResult.failure(AuthFailureReason.EMPTY_USERNAME)

        policy_result = self._policy.validate(password)
        if policy_result.violation is not None:
            reason = policy_result.violation.failure_reason
            logger.info("Registration rejected: %s", reason.value)
            return AuthResult.failure(reason, policy_result.message)

        password_hash = self._hasher.hash(password)
        logger.info("Registration accepted")
        return AuthResult.ok("Registration successful", credential_hash=password_hash)

    def credential_for(self, username: str, result: AuthResult) -> Credential:
        """
        Pair a username with the hash from a successful registration.

        Raises:
            ValueError: If the result is not a successful registration
        """
        if not result.success or result.credential_hash is None:
            raise ValueError("Result does not carry a credential hash")
        return Credential(username=username, password_hash=result.credential_hash)

    def verify_credential(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Raises:
            MalformedHashError: If the stored hash cannot be parsed
        """
        return self._hasher.verify(password, password_hash)

    def login(self, username: str, user_id: int) -> AuthResult:
        """
        Make (user_id, username) the current identity.

        The caller must have verified the credential first; see
        ``authenticate`` for the combined operation.

        Raises:
            ValueError: If user_id is not an integer or username is blank
        """
        identity = Identity(id=user_id, username=username)
        self._sessions.login(identity)
        return AuthResult.ok("Login successful", identity=identity)

    def authenticate(self, credential: Credential, user_id: int, password: str) -> AuthResult:
        """
        Verify a password against a stored credential and log in on success.

        On a wrong password the session is left as it was.

        Raises:
            MalformedHashError: If the stored hash cannot be parsed
        """
        if not self._hasher.verify(password, credential.password_hash):
            logger.info("Login rejected for user %s", user_id)
            return AuthResult.failure(AuthFailureReason.INVALID_CREDENTIALS)
        return self.login(credential.username, user_id)

    def logout(self) -> None:
        self._sessions.logout()

    def whoami(self) -> Optional[Identity]:
        return self._sessions.get_current()


def create_auth_service(settings: Optional[AuthSettings] = None) -> AuthService:
    """
    Build an AuthService with a fresh SessionStore.

    Args:
        settings: Settings to use (loaded from the environment if omitted)
    """
    settings = settings or AuthSettings.load()
    return AuthService(
        policy=PasswordPolicy(min_length=settings.policy.min_length),
        hasher=CredentialHasher.from_settings(settings.hasher),
        sessions=SessionStore(),
    )
