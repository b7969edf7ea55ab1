"""Typed failures raised by the content generation service."""

from __future__ import annotations

EMPTY_RESPONSE = "EMPTY_RESPONSE"
VALIDATION_ERROR = "VALIDATION_ERROR"
RATE_LIMIT = "RATE_LIMIT"
AUTH_ERROR = "AUTH_ERROR"
API_ERROR = "API_ERROR"


class GenerationError(Exception):
    """A generation failure carrying a machine-readable code."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"GenerationError(code={self.code!r}, message={self.message!r})"
