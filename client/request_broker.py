"""Asyncio client for the realtime content generation socket.

`ContentRequestBroker` keeps one websocket open to the server's `/ws`
endpoint, reconnects after abnormal closures, and correlates a single
in-flight `generate_content` request with the `content_generated` or
`error` frame that answers it.

Usage:
    broker = ContentRequestBroker("ws://localhost:8000/ws", cookie="sid=...")
    await broker.start()
    await broker.wait_connected(timeout=5)
    post = await broker.generate_content("Launch day!", "twitter")
    await broker.close()
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed

LOGGER = logging.getLogger(__name__)

NORMAL_CLOSURE = 1000
ABNORMAL_CLOSURE = 1006
RECONNECT_DELAY = 3.0
REQUEST_TIMEOUT = 30.0


class BrokerError(Exception):
    """Base class for request broker failures."""


class BrokerNotConnected(BrokerError):
    """No open socket is available for sending."""


class RequestInProgress(BrokerError):
    """A generation request is already awaiting its response."""


class RequestTimedOut(BrokerError):
    """No response arrived within the request timeout."""


class GenerationFailed(BrokerError):
    """The server answered the request with an error frame."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass
class _InFlightSlot:
    future: asyncio.Future
    timeout_handle: asyncio.TimerHandle


class ContentRequestBroker:
    """Own a reconnecting websocket and one outstanding generation request."""

    def __init__(
        self,
        url: str,
        *,
        cookie: Optional[str] = None,
        reconnect_delay: float = RECONNECT_DELAY,
        request_timeout: float = REQUEST_TIMEOUT,
        connect: Optional[Callable[..., Awaitable[Any]]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        """
        Args:
            url: Websocket URL of the server's `/ws` endpoint.
            cookie: Raw Cookie header carrying the login session.
            reconnect_delay: Seconds to wait before reconnecting after an abnormal close.
            request_timeout: Seconds to wait for a response to `generate_content`.
            connect: Optional connection factory (defaults to `websockets` asyncio client).
            sleep: Optional awaitable sleep used for the reconnect delay.
        """
        self.url = url
        self.cookie = cookie
        self.reconnect_delay = reconnect_delay
        self.request_timeout = request_timeout
        self._connect = connect or ws_connect
        self._sleep = sleep or asyncio.sleep

        self.is_connected = False
        self.error: Optional[str] = None
        self.server_status: Optional[str] = None
        self.status_frames = 0

        self._ws: Any = None
        self._slot: Optional[_InFlightSlot] = None
        self._runner: Optional[asyncio.Task] = None
        self._closing = False
        self._connected = asyncio.Event()

    async def start(self) -> None:
        """Begin connecting in the background."""
        if self._runner is None or self._runner.done():
            self._closing = False
            self._runner = asyncio.create_task(self._run())

    async def wait_connected(self, timeout: Optional[float] = None) -> None:
        await asyncio.wait_for(self._connected.wait(), timeout)

    async def close(self) -> None:
        """Close the socket normally; no reconnect follows."""
        self._closing = True
        ws = self._ws
        if ws is not None:
            await ws.close(code=NORMAL_CLOSURE, reason="Client closed")
        runner = self._runner
        if runner is not None and not runner.done():
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)
        self._runner = None

    async def generate_content(self, prompt: str, platform: str) -> Dict[str, Any]:
        """Request a generated post and wait for its result.

        Raises:
            BrokerNotConnected: The socket is not open; nothing was sent.
            RequestInProgress: Another request from this broker is pending.
            GenerationFailed: The server replied with an error frame.
            RequestTimedOut: No reply within `request_timeout` seconds.
        """
        ws = self._ws
        if ws is None or not self.is_connected:
            raise BrokerNotConnected("WebSocket is not connected")
        if self._slot is not None:
            raise RequestInProgress("A generation request is already in progress")

        loop = asyncio.get_running_loop()
        future = loop.create_future()
        handle = loop.call_later(self.request_timeout, self._settle, None, RequestTimedOut("Request timed out"))
        self._slot = _InFlightSlot(future=future, timeout_handle=handle)
        try:
            try:
                await ws.send(json.dumps({"type": "generate_content", "prompt": prompt, "platform": platform}))
            except ConnectionClosed:
                self._settle(None, BrokerNotConnected("Connection lost. Please try again."))
            return await future
        finally:
            # Caller cancellation must not leave the slot occupied.
            if self._slot is not None and self._slot.future is future:
                self._slot.timeout_handle.cancel()
                self._slot = None

    async def _run(self) -> None:
        while not self._closing:
            headers = {"Cookie": self.cookie} if self.cookie else None
            try:
                ws = await self._connect(self.url, additional_headers=headers)
            except Exception as exc:
                LOGGER.warning("WebSocket connection to %s failed: %s", self.url, exc)
                self.error = "Failed to connect to the server"
            else:
                code = await self._serve(ws)
                if code == NORMAL_CLOSURE:
                    break
            if self._closing:
                break
            LOGGER.info("Reconnecting in %.1fs", self.reconnect_delay)
            await self._sleep(self.reconnect_delay)

    async def _serve(self, ws: Any) -> int:
        """Read frames until the socket closes; return the close code."""
        self._ws = ws
        self.is_connected = True
        self.error = None
        self._connected.set()
        LOGGER.info("WebSocket connected to %s", self.url)
        try:
            while True:
                self._dispatch(await ws.recv())
        except ConnectionClosed as exc:
            code = exc.rcvd.code if exc.rcvd is not None else ABNORMAL_CLOSURE
            LOGGER.info("WebSocket disconnected (code=%s)", code)
            return code
        finally:
            self._ws = None
            self.is_connected = False
            self._connected.clear()
            # The server session that owned the request is gone with the socket.
            self._settle(None, BrokerNotConnected("Connection lost. Please try again."))

    def _dispatch(self, raw: Any) -> None:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            LOGGER.warning("Ignoring unparseable frame from server")
            return
        if not isinstance(data, dict):
            return

        kind = data.get("type")
        if kind == "connection_status":
            self.server_status = data.get("status")
            self.status_frames += 1
        elif kind == "content_generated":
            self._settle(data.get("content"))
        elif kind == "error":
            code = data.get("code") or "UNKNOWN_ERROR"
            self._settle(None, GenerationFailed(code, data.get("message") or code))

    def _settle(self, result: Any, error: Optional[BaseException] = None) -> None:
        """Resolve the in-flight slot once; later calls are no-ops."""
        slot = self._slot
        if slot is None:
            return
        self._slot = None
        slot.timeout_handle.cancel()
        if slot.future.done():
            return
        if error is not None:
            slot.future.set_exception(error)
        else:
            slot.future.set_result(result)
