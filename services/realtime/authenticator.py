"""Cookie-based authentication for websocket handshakes and HTTP requests."""

from __future__ import annotations

import logging
from typing import Optional

from starlette.requests import cookie_parser

from models.session_models import AuthenticatedIdentity
from services.realtime.session_store import SessionStore

LOGGER = logging.getLogger(__name__)


class HandshakeRejected(Exception):
	"""Raised when a connection attempt does not carry a valid login session."""

	def __init__(self, reason: str, status_code: int = 401) -> None:
		super().__init__(reason)
		self.reason = reason
		self.status_code = status_code


class ConnectionAuthenticator:
	"""Resolve the session cookie of an inbound request to a user identity."""

	def __init__(self, store: SessionStore, cookie_name: str = "sid") -> None:
		if store is None:
			raise ValueError("Session store is required.")
		self.store = store
		self.cookie_name = cookie_name

	def authenticate(self, cookie_header: Optional[str]) -> AuthenticatedIdentity:
		"""Return the identity for a raw Cookie header or raise HandshakeRejected.

		Args:
			cookie_header: Value of the request's Cookie header, if any.
		"""
		session_id = cookie_parser(cookie_header or "").get(self.cookie_name)
		if not session_id:
			LOGGER.info("Connection rejected: no session cookie")
			raise HandshakeRejected("no cookie")

		try:
			session = self.store.get(session_id)
		except KeyError:
			LOGGER.info("Connection rejected: invalid session")
			raise HandshakeRejected("invalid session") from None
		except Exception as exc:
			LOGGER.warning("Connection rejected: session lookup failed: %s", exc)
			raise HandshakeRejected("invalid session") from exc

		if session.user_id is None:
			LOGGER.info("Connection rejected: no user in session %s", session_id)
			raise HandshakeRejected("no user in session")

		return AuthenticatedIdentity(user_id=session.user_id, session_id=session_id)
