"""
Argon2id Password Hashing
=========================

Derives and verifies password hashes with Argon2id (argon2-cffi).

Security Properties:
- Memory-hard (resistant to GPU/ASIC attacks)
- Fresh random salt for every hash
- Parameters embedded in the output, so old hashes keep verifying
  after the cost parameters are tuned
- Constant-time key comparison (performed by libargon2)

Encoded format (PHC string):
    $argon2id$v=19$m=MEMORY,t=TIME,p=PARALLEL$SALT$HASH

References:
- RFC 9106: Argon2 Memory-Hard Function
- OWASP Password Storage Cheat Sheet
"""

from __future__ import annotations

import base64
import binascii
import ctypes
import logging
from dataclasses import dataclass
from typing import Final, Optional

from argon2 import PasswordHasher, Type, extract_parameters
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from deskauth.core.config import HasherSettings


logger = logging.getLogger(__name__)

# Argon2id parameters (OWASP recommended)
ARGON2_MEMORY_COST: Final[int] = 102400  # 100 MB in KiB
ARGON2_TIME_COST: Final[int] = 2  # iterations
ARGON2_PARALLELISM: Final[int] = 4  # lanes
ARGON2_HASH_LENGTH: Final[int] = 32  # 256 bits
ARGON2_SALT_LENGTH: Final[int] = 16  # 128 bits

_TYPE_NAMES: Final[dict[Type, str]] = {
    Type.ID: "argon2id",
    Type.I: "argon2i",
    Type.D: "argon2d",
}


class CredentialError(Exception):
    """Base exception for credential hashing errors."""
    pass


class CredentialHashingError(CredentialError):
    """Raised when the underlying KDF or random source fails."""
    pass


class MalformedHashError(CredentialError):
    """Raised when a stored hash string cannot be parsed."""
    pass


@dataclass(frozen=True, slots=True)
class HashRecord:
    """
    Parsed view of an encoded hash string.

    Attributes:
        algorithm: "argon2id", "argon2i" or "argon2d"
        version: Argon2 version number (19 for v1.3)
        memory_cost: Memory usage in KiB
        time_cost: Number of iterations
        parallelism: Number of lanes
        salt: Raw salt bytes
        derived_key: Raw derived key bytes
    """
    algorithm: str
    version: int
    memory_cost: int
    time_cost: int
    parallelism: int
    salt: bytes
    derived_key: bytes

    def __repr__(self) -> str:
        """Safe representation without salt or key."""
        return (
            f"HashRecord(algorithm={self.algorithm!r}, version={self.version}, "
            f"m={self.memory_cost}, t={self.time_cost}, p={self.parallelism})"
        )


def _secure_zero_memory(data: bytearray) -> None:
    """
    Overwrite a mutable buffer holding a password.

    Best-effort: Python may keep other copies of the data alive.
    """
    if not data:
        return
    ctypes.memset(ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data)), 0, len(data))


def _b64decode_unpadded(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.b64decode(padded, validate=True)


class CredentialHasher:
    """
    Argon2id password hasher with secure defaults.

    Usage:
        hasher = CredentialHasher()

        # Hash a password
        encoded = hasher.hash("user_password")
        store(username, encoded)  # caller persists this

        # Verify a password
        is_valid = hasher.verify("user_password", encoded)

    Notes:
        - hash() and verify() are CPU-bound and block for tens to hundreds
          of milliseconds; run them off any event loop thread.
        - verify() only raises for structurally invalid hash strings; a
          wrong password is a plain False.
    """

    __slots__ = (
        "_memory_cost", "_time_cost", "_parallelism",
        "_hash_length", "_salt_length", "_hasher",
    )

    def __init__(
        self,
        memory_cost: int = ARGON2_MEMORY_COST,
        time_cost: int = ARGON2_TIME_COST,
        parallelism: int = ARGON2_PARALLELISM,
        hash_length: int = ARGON2_HASH_LENGTH,
        salt_length: int = ARGON2_SALT_LENGTH,
    ) -> None:
        """
        Initialize the Argon2id hasher.

        Args:
            memory_cost: Memory usage in KiB (default: 102400 = 100MB)
            time_cost: Number of iterations (default: 2)
            parallelism: Degree of parallelism (default: 4)
            hash_length: Output hash length in bytes (default: 32)
            salt_length: Salt length in bytes (default: 16)

        Raises:
            ValueError: If a parameter is outside the Argon2 limits
        """
        # Same limits as HasherSettings
        settings = HasherSettings(
            memory_cost=memory_cost,
            time_cost=time_cost,
            parallelism=parallelism,
            hash_length=hash_length,
            salt_length=salt_length,
        )

        self._memory_cost = settings.memory_cost
        self._time_cost = settings.time_cost
        self._parallelism = settings.parallelism
        self._hash_length = settings.hash_length
        self._salt_length = settings.salt_length
        self._hasher = PasswordHasher(
            time_cost=self._time_cost,
            memory_cost=self._memory_cost,
            parallelism=self._parallelism,
            hash_len=self._hash_length,
            salt_len=self._salt_length,
            type=Type.ID,
        )

    @classmethod
    def from_settings(cls, settings: HasherSettings) -> CredentialHasher:
        return cls(
            memory_cost=settings.memory_cost,
            time_cost=settings.time_cost,
            parallelism=settings.parallelism,
            hash_length=settings.hash_length,
            salt_length=settings.salt_length,
        )

    @property
    def parameters(self) -> dict[str, int]:
        """Get current hashing parameters."""
        return {
            "memory_cost": self._memory_cost,
            "time_cost": self._time_cost,
            "parallelism": self._parallelism,
            "hash_length": self._hash_length,
            "salt_length": self._salt_length,
        }

    def hash(self, password: str) -> str:
        """
        Hash a password using Argon2id.

        Args:
            password: The password to hash (any string, including empty)

        Returns:
            Encoded hash string for storage

        Raises:
            CredentialHashingError: If the KDF or the random source fails
        """
        password_bytes = bytearray(password.encode("utf-8", "surrogatepass"))

        try:
            return self._hasher.hash(bytes(password_bytes))
        except (HashingError, OSError, NotImplementedError) as e:
            logger.error("Password hashing failed: %s", type(e).__name__)
            raise CredentialHashingError(f"Failed to hash password: {e}") from e
        finally:
            _secure_zero_memory(password_bytes)

    def parse(self, encoded: str) -> HashRecord:
        """
        Parse an encoded hash string into its parts.

        Raises:
            MalformedHashError: If the string is not a valid Argon2 hash
        """
        if not isinstance(encoded, str) or not encoded:
            raise MalformedHashError("Invalid password hash: empty or not a string")

        try:
            params = extract_parameters(encoded)
            parts = encoded.split("$")
            salt = _b64decode_unpadded(parts[-2])
            derived_key = _b64decode_unpadded(parts[-1])
        except (InvalidHashError, binascii.Error, ValueError) as e:
            raise MalformedHashError("Invalid password hash: cannot parse") from e

        if not salt or not derived_key:
            raise MalformedHashError("Invalid password hash: missing salt or key")

        return HashRecord(
            algorithm=_TYPE_NAMES[params.type],
            version=params.version,
            memory_cost=params.memory_cost,
            time_cost=params.time_cost,
            parallelism=params.parallelism,
            salt=salt,
            derived_key=derived_key,
        )

    def verify(self, password: str, encoded: str) -> bool:
        """
        Verify a password against an encoded hash.

        The salt and cost parameters are read from the encoded string, not
        from this hasher, so hashes made with older parameters still verify.

        Args:
            password: The password to verify
            encoded: The encoded hash string from storage

        Returns:
            True if password matches, False otherwise

        Raises:
            MalformedHashError: If the encoded string cannot be parsed
        """
        self.parse(encoded)

        password_bytes = bytearray(password.encode("utf-8", "surrogatepass"))

        try:
            return self._hasher.verify(encoded, bytes(password_bytes))
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            # Parsed above, but libargon2 rejected the encoding
            logger.warning("Stored password hash rejected by argon2: %s", type(e).__name__)
            raise MalformedHashError("Invalid password hash: rejected by argon2") from e
        finally:
            _secure_zero_memory(password_bytes)

    def needs_rehash(self, encoded: str) -> bool:
        """
        Check if a hash was made with parameters other than the current ones.

        Raises:
            MalformedHashError: If the encoded string cannot be parsed
        """
        record = self.parse(encoded)
        if record.algorithm != "argon2id":
            return True
        return self._hasher.check_needs_rehash(encoded)


# Convenience functions
_default_hasher: Optional[CredentialHasher] = None


def _get_hasher() -> CredentialHasher:
    """Get or create default hasher instance."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = CredentialHasher()
    return _default_hasher


def hash_password(password: str) -> str:
    """Hash a password using Argon2id with secure defaults."""
    return _get_hasher().hash(password)


def verify_password(password: str, encoded: str) -> bool:
    """
    Verify a password against a stored hash.

    Raises:
        MalformedHashError: If the stored hash cannot be parsed
    """
    return _get_hasher().verify(password, encoded)
