"""Session domain models for realtime workflows."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass
class AuthSession:
	"""Server-side login session referenced by the session cookie."""

	session_id: str
	user_id: Optional[int]
	created_at: float = field(default_factory=lambda: time.time())


@dataclass(frozen=True)
class AuthenticatedIdentity:
	"""Identity bound to a socket or request once the cookie checks out."""

	user_id: int
	session_id: str


class ConnectionState(str, Enum):
	"""Per-socket generation state."""

	IDLE = "idle"
	AWAITING_GENERATION_RESULT = "awaiting_generation_result"
