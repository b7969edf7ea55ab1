"""Per-socket realtime session driving content generation requests."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import WebSocket
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.websockets import WebSocketDisconnect, WebSocketState

from models.session_models import AuthenticatedIdentity, ConnectionState
from services.openai.content_generator import ContentGenerator
from services.openai.errors import GenerationError
from utils.timestamps import utc_now_iso

LOGGER = logging.getLogger(__name__)

MESSAGE_PARSE_ERROR = "MESSAGE_PARSE_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"
REQUEST_IN_PROGRESS = "REQUEST_IN_PROGRESS"
INVALID_REQUEST = "INVALID_REQUEST"
UNSUPPORTED_MESSAGE = "UNSUPPORTED_MESSAGE"


class GenerateContentMessage(BaseModel):
	"""Inbound `generate_content` frame."""

	model_config = ConfigDict(str_strip_whitespace=True)

	prompt: str = Field(min_length=1)
	platform: str = Field(min_length=1)


def _error_frame(code: str, message: str) -> Dict[str, Any]:
	return {"type": "error", "code": code, "message": message}


class RealtimeSessionHandler:
	"""Serve generation requests for one authenticated websocket.

	At most one generation runs per socket. The provider call executes in a
	background task so the read loop keeps seeing close events; a request
	that arrives while one is pending is rejected with REQUEST_IN_PROGRESS.
	"""

	def __init__(self, websocket: WebSocket, identity: AuthenticatedIdentity, generator: ContentGenerator) -> None:
		self.websocket = websocket
		self.identity = identity
		self.generator = generator
		self.state = ConnectionState.IDLE
		self._task: Optional[asyncio.Task] = None

	async def open(self) -> None:
		"""Announce the connection to the client."""
		LOGGER.info("Realtime session opened for user %s", self.identity.user_id)
		await self._send({"type": "connection_status", "status": "connected"})

	async def handle_text(self, raw: Any) -> None:
		"""Process a single inbound websocket frame."""
		try:
			payload = json.loads(raw)
		except (TypeError, ValueError):
			payload = None
		if not isinstance(payload, dict):
			LOGGER.warning("Unparseable frame from user %s", self.identity.user_id)
			await self._send(_error_frame(MESSAGE_PARSE_ERROR, "Invalid message format"))
			return

		message_type = payload.get("type")
		if message_type == "generate_content":
			await self._start_generation(payload)
		else:
			await self._send(_error_frame(UNSUPPORTED_MESSAGE, f"Unsupported message type: {message_type!r}"))

	async def close(self) -> None:
		"""Cancel any in-flight generation once the socket has gone away."""
		task = self._task
		if task is not None and not task.done():
			LOGGER.info("Cancelling in-flight generation for user %s", self.identity.user_id)
			task.cancel()
			await asyncio.gather(task, return_exceptions=True)
		LOGGER.info("Realtime session closed for user %s", self.identity.user_id)

	async def wait_idle(self) -> None:
		"""Wait for the pending generation, if any, to finish."""
		task = self._task
		if task is not None:
			await asyncio.gather(task, return_exceptions=True)

	async def _start_generation(self, payload: Dict[str, Any]) -> None:
		if self.state is ConnectionState.AWAITING_GENERATION_RESULT:
			await self._send(_error_frame(REQUEST_IN_PROGRESS, "A generation request is already in progress"))
			return
		try:
			request = GenerateContentMessage.model_validate(payload)
		except ValidationError:
			await self._send(
				_error_frame(INVALID_REQUEST, "generate_content requires a non-empty prompt and platform")
			)
			return
		self.state = ConnectionState.AWAITING_GENERATION_RESULT
		self._task = asyncio.create_task(self._generate(request))

	async def _generate(self, request: GenerateContentMessage) -> None:
		try:
			result = await self.generator.generate(request.prompt, request.platform)
			frame = {"type": "content_generated", "content": result.to_dict(), "timestamp": utc_now_iso()}
		except GenerationError as exc:
			LOGGER.warning("Content generation failed (%s): %s", exc.code, exc.message)
			frame = _error_frame(exc.code, exc.message)
		except Exception:
			LOGGER.exception("Unexpected error while generating content for user %s", self.identity.user_id)
			frame = _error_frame(UNKNOWN_ERROR, "An unexpected error occurred")
		finally:
			# Back to idle before replying so a follow-up request is never refused.
			self.state = ConnectionState.IDLE
			self._task = None
		await self._send(frame)

	async def _send(self, payload: Dict[str, Any]) -> None:
		ws = self.websocket
		if ws.client_state != WebSocketState.CONNECTED or ws.application_state != WebSocketState.CONNECTED:
			LOGGER.debug("Dropping %s frame; socket already closed", payload.get("type"))
			return
		try:
			await ws.send_text(json.dumps(payload))
		except (WebSocketDisconnect, RuntimeError, OSError) as exc:
			LOGGER.debug("Dropping %s frame; send failed: %s", payload.get("type"), exc)
