"""
Workspace event connection.

WHAT: One long-lived WebSocket per workspace with automatic reconnection
WHY: Agent runs and workspace changes are pushed by the server as they happen
HOW: Reader task owned by the manager; bounded reconnects with exponential delay;
     each parsed message is dispatched to listeners registered per event name
"""

import asyncio
import enum
import inspect
import json
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import urlencode

import websockets
from pydantic import ValidationError

from .error_mapper import map_error
from ..models.contracts import violations_from
from ..models.events import websocket_message_adapter
from ..utils.exceptions import DomainError, ErrorKind
from ..utils.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[[Any], Any]

# Connection-level events; message events use the message `type` as name
OPEN = "open"
MESSAGE = "message"
PARSE_ERROR = "parse-error"
CONNECTION_ERROR = "connection-error"
FATAL = "fatal"
CLOSE = "close"


class ConnectionState(str, enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    RECONNECTING = "reconnecting"
    CLOSED_EXPLICIT = "closed-explicit"
    CLOSED_EXHAUSTED = "closed-exhausted"


TERMINAL_STATES = (ConnectionState.CLOSED_EXPLICIT, ConnectionState.CLOSED_EXHAUSTED)


def websocket_url(base_url: str, workspace_slug: str) -> str:
    """Derive ws(s)://host/ws/<slug> from an http(s) base address."""
    base = base_url.rstrip("/")
    if base.startswith("https://"):
        base = "wss://" + base[len("https://"):]
    elif base.startswith("http://"):
        base = "ws://" + base[len("http://"):]
    return f"{base}/ws/{workspace_slug}"


class WebSocketConnection:
    """
    Reconnecting event connection for one workspace.

    Not shareable across workspaces: one instance owns one socket and one
    subscription. Listeners run on the reader task in registration order,
    so messages are delivered in arrival order.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        max_reconnects: int = 5,
        base_delay: float = 1.0,
        connect: Optional[Callable[[str], Any]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            url: ws(s) URL without the credential
            api_key: Credential, sent as the `token` query parameter
            max_reconnects: Consecutive failed connection attempts before giving up
            base_delay: Base reconnect delay in seconds (doubles per failure)
            connect: Factory returning an async context manager yielding the socket
                (defaults to websockets.connect)
            sleep: Awaitable sleep, replaceable in tests
        """
        self.url = url
        self._api_key = api_key
        self.max_reconnects = max_reconnects
        self.base_delay = base_delay
        self._connect = connect or websockets.connect
        self._sleep = sleep

        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._state = ConnectionState.IDLE
        self._failures = 0
        self._ws = None
        self._task: Optional[asyncio.Task] = None
        self._explicitly_closed = False

    # ========== Public API ==========

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def failures(self) -> int:
        """Consecutive failed connection attempts since the last successful open."""
        return self._failures

    @property
    def connection_url(self) -> str:
        return f"{self.url}?{urlencode({'token': self._api_key})}"

    def on(self, event: str, listener: Listener) -> Listener:
        """Subscribe `listener` to `event`; returns the listener."""
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        """Unsubscribe `listener` from `event` (no-op if absent)."""
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def start(self) -> "WebSocketConnection":
        """
        Start the reader task. Must be called from a running event loop.

        Raises:
            RuntimeError: If already started or closed
        """
        if self._explicitly_closed or self._state in TERMINAL_STATES:
            raise RuntimeError("WebSocket connection is closed")
        if self._task is not None:
            raise RuntimeError("WebSocket connection already started")

        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"ws:{self.url}")
        return self

    async def close(self) -> None:
        """Close for good. Idempotent; cancels any pending reconnection."""
        if self._explicitly_closed:
            return
        self._explicitly_closed = True
        self._set_state(ConnectionState.CLOSED_EXPLICIT)

        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        elif self._ws is not None:
            # Called from a listener on the reader task; the loop exits on its own
            await self._ws.close()

        logger.info(f"WebSocket closed by caller ({self.url})")
        await self._emit(CLOSE, None)

    async def wait_closed(self) -> None:
        """Wait until the reader task has finished."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def __aenter__(self) -> "WebSocketConnection":
        return self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ========== Reader task ==========

    async def _run(self) -> None:
        while not self._explicitly_closed:
            self._set_state(ConnectionState.CONNECTING)
            try:
                async with self._connect(self.connection_url) as ws:
                    self._ws = ws
                    self._failures = 0
                    self._set_state(ConnectionState.OPEN)
                    logger.info(f"WebSocket open ({self.url})")
                    await self._emit(OPEN, None)

                    async for raw in ws:
                        await self._dispatch(raw)

                if not self._explicitly_closed:
                    logger.warning(f"WebSocket closed by server ({self.url})")
            except Exception as e:
                if self._explicitly_closed:
                    break
                error = map_error(e)
                logger.warning(f"WebSocket connection error ({self.url}): {error.message}")
                await self._emit(CONNECTION_ERROR, error)
            finally:
                self._ws = None

            if self._explicitly_closed:
                break

            self._failures += 1
            if self._failures >= self.max_reconnects:
                self._set_state(ConnectionState.CLOSED_EXHAUSTED)
                logger.error(f"WebSocket gave up after {self._failures} failed attempts ({self.url})")
                await self._emit(FATAL, DomainError(
                    ErrorKind.NETWORK_FAILURE,
                    "Max reconnect attempts reached",
                    recoverable=False,
                    suggestion="Live updates stopped. Check the server and reconnect.",
                    details={"attempts": self._failures, "url": self.url},
                ))
                return

            delay = self.base_delay * (2 ** (self._failures - 1))
            self._set_state(ConnectionState.RECONNECTING)
            logger.warning(
                f"WebSocket reconnecting in {delay:.1f}s "
                f"(attempt {self._failures}/{self.max_reconnects}, {self.url})"
            )
            await self._sleep(delay)

    async def _dispatch(self, raw: Any) -> None:
        try:
            message = websocket_message_adapter.validate_python(json.loads(raw))
        except (ValueError, TypeError, RecursionError) as e:
            # ValidationError and JSONDecodeError are both ValueErrors; deep nesting overflows the decoder
            details: Dict[str, Any] = {"raw": raw if isinstance(raw, str) else repr(raw)}
            if isinstance(e, ValidationError):
                details["errors"] = violations_from(e)
            await self._emit(PARSE_ERROR, DomainError.validation_failure(
                "WebSocket message could not be parsed", status=None, details=details,
            ))
            return

        await self._emit(MESSAGE, message)
        await self._emit(message.type, message.payload)

    async def _emit(self, event: str, arg: Any) -> None:
        for listener in list(self._listeners.get(event, [])):
            try:
                result = listener(arg)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"WebSocket listener for '{event}' failed")

    def _set_state(self, state: ConnectionState) -> None:
        if self._state in TERMINAL_STATES and state not in TERMINAL_STATES:
            return
        if state != self._state:
            logger.debug(f"WebSocket state {self._state.value} -> {state.value} ({self.url})")
            self._state = state
