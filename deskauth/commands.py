"""
Async command handlers for a host dispatcher.

Each handler returns plain data (dicts, bools, None) that the host can
marshal to its own transport. Hashing and verification run in a worker
thread so a slow KDF call never stalls the event loop.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from deskauth.core.auth.auth_service import AuthService


class AuthCommands:
    """The five auth operations as coroutines."""

    __slots__ = ("_service",)

    def __init__(self, service: AuthService) -> None:
        self._service = service

    async def register_user(self, username: str, password: str) -> dict[str, Any]:
        result = await asyncio.to_thread(self._service.register, username, password)
        return result.to_response()

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self._service.verify_credential, password, password_hash)

    async def login_user(self, username: str, user_id: int) -> dict[str, Any]:
        return self._service.login(username, user_id).to_response()

    async def logout_user(self) -> None:
        self._service.logout()

    async def get_current_user(self) -> Optional[dict[str, Any]]:
        identity = self._service.whoami()
        return identity.to_dict() if identity else None
