"""Login session helpers for cookie-authenticated routes."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import HTTPException, Request, Response

from models.session_models import AuthenticatedIdentity
from services.realtime.authenticator import ConnectionAuthenticator, HandshakeRejected
from services.realtime.session_store import SessionStore


def require_identity(request: Request) -> AuthenticatedIdentity:
	"""Return the caller's identity or raise a 401."""
	authenticator: ConnectionAuthenticator = request.app.state.authenticator
	try:
		return authenticator.authenticate(request.headers.get("cookie"))
	except HandshakeRejected as exc:
		raise HTTPException(status_code=exc.status_code, detail="Unauthorized") from exc


async def start_session(request: Request, response: Response, user_id: int) -> Dict[str, Any]:
	"""Create a login session for `user_id` and set the session cookie."""
	if not request.app.state.config.dev_login_enabled:
		raise HTTPException(status_code=404, detail="Not Found")
	store: SessionStore = request.app.state.session_store
	state = store.create(user_id=user_id)
	response.set_cookie(
		request.app.state.authenticator.cookie_name,
		state.session_id,
		httponly=True,
		samesite="lax",
	)
	return {"session_id": state.session_id, "user_id": state.user_id}


async def end_session(request: Request, response: Response) -> Dict[str, Any]:
	"""Drop the caller's login session and clear the cookie."""
	identity = require_identity(request)
	store: SessionStore = request.app.state.session_store
	store.delete(identity.session_id)
	response.delete_cookie(request.app.state.authenticator.cookie_name)
	return {"session_id": identity.session_id, "closed": True}
