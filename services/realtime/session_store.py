"""Simple in-memory store for authenticated login sessions."""

from __future__ import annotations

from typing import Dict, Optional
from uuid import uuid4

from models.session_models import AuthSession


class SessionStore:
	"""Manage login sessions referenced by the session cookie."""

	def __init__(self) -> None:
		self._sessions: Dict[str, AuthSession] = {}

	def create(self, user_id: Optional[int]) -> AuthSession:
		"""Create a new session bound to `user_id` (None for anonymous)."""
		session_id = uuid4().hex
		state = AuthSession(session_id=session_id, user_id=user_id)
		self._sessions[session_id] = state
		return state

	def get(self, session_id: str) -> AuthSession:
		"""Return a session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	def delete(self, session_id: str) -> bool:
		"""Drop a session. Returns True if it existed."""
		return self._sessions.pop(session_id, None) is not None

	def __len__(self) -> int:
		return len(self._sessions)
