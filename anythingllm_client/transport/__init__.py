"""Transport layer: request pipeline, retry, error mapping, streaming and WebSocket."""

from .error_mapper import map_error
from .http import HttpClient
from .retry import with_retry
from .streaming_handler import decode_chat_stream
from .websocket import ConnectionState, WebSocketConnection

__all__ = [
    "map_error",
    "HttpClient",
    "with_retry",
    "decode_chat_stream",
    "ConnectionState",
    "WebSocketConnection",
]
