"""WebSocket endpoint for realtime content generation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket
from fastapi.responses import PlainTextResponse

from services.realtime.authenticator import ConnectionAuthenticator, HandshakeRejected
from services.realtime.ws_session import RealtimeSessionHandler

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
	"""Authenticate the handshake, then serve generation requests until the client leaves."""
	authenticator: ConnectionAuthenticator = websocket.app.state.authenticator
	try:
		identity = authenticator.authenticate(websocket.headers.get("cookie"))
	except HandshakeRejected as exc:
		try:
			await websocket.send_denial_response(PlainTextResponse(exc.reason, status_code=exc.status_code))
		except RuntimeError:
			# Server lacks the denial-response extension; closing before accept yields a 403.
			await websocket.close(code=1008, reason=exc.reason)
		return

	await websocket.accept()
	handler = RealtimeSessionHandler(websocket, identity, websocket.app.state.content_generator)
	await handler.open()
	try:
		while True:
			message = await websocket.receive()
			if message["type"] == "websocket.disconnect":
				LOGGER.info("WebSocket closed by client (code=%s)", message.get("code"))
				break
			raw = message.get("text")
			if raw is None:
				raw = message.get("bytes")
			await handler.handle_text(raw)
	except Exception as exc:
		LOGGER.error("WebSocket error for user %s: %s", identity.user_id, exc)
	finally:
		await handler.close()
