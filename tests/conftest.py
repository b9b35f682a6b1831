from __future__ import annotations

import pytest

from deskauth.core.auth.argon2_auth import CredentialHasher
from deskauth.core.auth.auth_service import AuthService
from deskauth.core.auth.password_policy import PasswordPolicy
from deskauth.core.auth.session_control import SessionStore


@pytest.fixture()
def hasher() -> CredentialHasher:
    """Low-cost hasher so the suite does not spend 100 MB per hash."""
    return CredentialHasher(memory_cost=1024, time_cost=1, parallelism=1)


@pytest.fixture()
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture()
def service(hasher: CredentialHasher, sessions: SessionStore) -> AuthService:
    return AuthService(policy=PasswordPolicy(), hasher=hasher, sessions=sessions)
