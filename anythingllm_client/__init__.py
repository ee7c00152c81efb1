"""Resilient async client for the AnythingLLM REST and WebSocket API."""

from .client import AnythingLLMClient
from .core.config import ClientConfig, Settings
from .models import (
    AgentDetail,
    AgentSummary,
    AuthStatus,
    ChatChunk,
    ChatMessage,
    ChatResponse,
    CitationChunk,
    DocumentDetail,
    ErrorChunk,
    GroundingChunk,
    ResponseContract,
    SearchResult,
    StopChunk,
    TextChunk,
    WebSocketMessage,
    WorkspaceDetail,
    WorkspaceSummary,
)
from .transport.websocket import ConnectionState, WebSocketConnection
from .utils.exceptions import DomainError, ErrorKind
from .utils.logger import setup_logging

__version__ = "0.1.0"

__all__ = [
    "AnythingLLMClient",
    "ClientConfig",
    "Settings",
    "DomainError",
    "ErrorKind",
    "ConnectionState",
    "WebSocketConnection",
    "ResponseContract",
    "AuthStatus",
    "WorkspaceSummary",
    "WorkspaceDetail",
    "DocumentDetail",
    "SearchResult",
    "ChatMessage",
    "ChatResponse",
    "ChatChunk",
    "TextChunk",
    "CitationChunk",
    "GroundingChunk",
    "StopChunk",
    "ErrorChunk",
    "AgentSummary",
    "AgentDetail",
    "WebSocketMessage",
    "setup_logging",
]
