"""
Authentication Configuration
============================

Immutable, environment-aware settings for the authentication core.

Features:
- Immutable settings after initialization
- Environment variable override support
- No secrets read from the environment
- Validation of every section on construction
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Optional


# Keys that must never be taken from the environment
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "token", "api_key",
    "private", "credential", "salt",
})

_VALID_LOG_LEVELS: Final[frozenset[str]] = frozenset({
    "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL",
})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    # salt_length is a size, not a salt value
    key_lower = key.lower().replace("salt_length", "")
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class HasherSettings:
    """
    Argon2id cost parameters.

    Defaults follow the OWASP recommendation for Argon2id. Lower values are
    accepted down to the limits of the algorithm itself so that tests and
    low-end machines can tune the cost.
    """

    memory_cost: int = 102400  # KiB
    time_cost: int = 2
    parallelism: int = 4
    hash_length: int = 32
    salt_length: int = 16

    def __post_init__(self) -> None:
        if self.time_cost < 1:
            raise ValueError("time_cost must be at least 1")
        if self.parallelism < 1:
            raise ValueError("parallelism must be at least 1")
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("memory_cost must be at least 8 KiB per lane")
        if self.hash_length < 16:
            raise ValueError("hash_length must be at least 16 bytes")
        if self.salt_length < 8:
            raise ValueError("salt_length must be at least 8 bytes")


@dataclass(frozen=True, slots=True)
class PolicySettings:
    """Password policy settings."""

    min_length: int = 8

    def __post_init__(self) -> None:
        if self.min_length < 1:
            raise ValueError("min_length must be at least 1")


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    """Immutable logging configuration."""

    level: str = "INFO"
    enable_console: bool = True
    enable_file: bool = False
    log_dir: Optional[Path] = None
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    def __post_init__(self) -> None:
        if self.level.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.level}")
        if self.enable_file and self.log_dir is None:
            raise ValueError("log_dir is required when file logging is enabled")
        if self.log_dir is not None and not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be an absolute path: {self.log_dir}")


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Top-level settings for the authentication core.

    Usage:
        settings = AuthSettings.load()
        service = create_auth_service(settings)

    Environment variables are prefixed with DESKAUTH_ and use a double
    underscore between section and key:

        DESKAUTH_HASHER__MEMORY_COST=65536
        DESKAUTH_POLICY__MIN_LENGTH=10
        DESKAUTH_LOGGING__LEVEL=DEBUG
        DESKAUTH_LOGGING__MAX_FILE_SIZE_BYTES=1048576
        DESKAUTH_LOGGING__BACKUP_COUNT=3

    The log format strings are not read from the environment.
    """

    hasher: HasherSettings = field(default_factory=HasherSettings)
    policy: PolicySettings = field(default_factory=PolicySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def load(
        cls,
        env_prefix: str = "DESKAUTH",
        environ: Optional[dict[str, str]] = None,
    ) -> AuthSettings:
        """
        Load settings with environment variable overrides.

        Args:
            env_prefix: Prefix for environment variables (default: DESKAUTH)
            environ: Mapping to read instead of os.environ

        Returns:
            Validated AuthSettings instance

        Raises:
            ValueError: If an override has the wrong type or fails validation
        """
        overrides = cls._parse_env_overrides(env_prefix, environ)

        hasher_kwargs: dict[str, Any] = {}
        for name in ("memory_cost", "time_cost", "parallelism", "hash_length", "salt_length"):
            key = f"hasher.{name}"
            if key in overrides:
                hasher_kwargs[name] = int(overrides[key])

        policy_kwargs: dict[str, Any] = {}
        if "policy.min_length" in overrides:
            policy_kwargs["min_length"] = int(overrides["policy.min_length"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in overrides:
            logging_kwargs["level"] = overrides["logging.level"].upper()
        if "logging.enable_console" in overrides:
            logging_kwargs["enable_console"] = _parse_bool(overrides["logging.enable_console"])
        if "logging.enable_file" in overrides:
            logging_kwargs["enable_file"] = _parse_bool(overrides["logging.enable_file"])
        if "logging.log_dir" in overrides:
            logging_kwargs["log_dir"] = Path(overrides["logging.log_dir"])
        if "logging.max_file_size_bytes" in overrides:
            logging_kwargs["max_file_size_bytes"] = int(overrides["logging.max_file_size_bytes"])
        if "logging.backup_count" in overrides:
            logging_kwargs["backup_count"] = int(overrides["logging.backup_count"])

        return cls(
            hasher=HasherSettings(**hasher_kwargs),
            policy=PolicySettings(**policy_kwargs),
            logging=LoggingSettings(**logging_kwargs),
        )

    @staticmethod
    def _parse_env_overrides(
        prefix: str,
        environ: Optional[dict[str, str]] = None,
    ) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        source = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in source.items():
            if not key.startswith(prefix_upper):
                continue
            # DESKAUTH_SECTION__KEY -> section.key
            config_key = key[len(prefix_upper):].lower().replace("__", ".")
            if _is_sensitive_key(config_key):
                continue
            overrides[config_key] = value

        return overrides
