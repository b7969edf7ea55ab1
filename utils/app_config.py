"""Environment-driven application settings."""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class AppConfig:
    """Settings read once at start-up.

    Attributes:
        openai_model: Chat completion model used for generation.
        session_cookie_name: Cookie carrying the login session id.
        generation_max_attempts: Total provider attempts per generation.
        generation_retry_base_delay: Seconds before the first rate-limit retry.
        dev_login_enabled: Expose POST /sessions for issuing session cookies.
        log_level: Root logging level name.
    """

    openai_model: str = "gpt-4o"
    session_cookie_name: str = "sid"
    generation_max_attempts: int = 3
    generation_retry_base_delay: float = 1.0
    dev_login_enabled: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build settings from environment variables, falling back to defaults."""
        try:
            max_attempts = int(os.getenv("GENERATION_MAX_ATTEMPTS", "3"))
            base_delay = float(os.getenv("GENERATION_RETRY_BASE_DELAY", "1.0"))
        except ValueError as exc:
            raise RuntimeError("Invalid numeric generation retry setting") from exc
        return cls(
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "sid"),
            generation_max_attempts=max_attempts,
            generation_retry_base_delay=base_delay,
            dev_login_enabled=_env_flag("DEV_LOGIN_ENABLED"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
