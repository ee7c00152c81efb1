"""Response contracts and wire models."""

from .schemas import (
    AuthStatus,
    WorkspaceSettings,
    WorkspaceSummary,
    WorkspaceDetail,
    DocumentDetail,
    SearchResult,
    ChatMessage,
    ChatSource,
    ChatResponse,
    AgentSummary,
    AgentDetail,
)
from .chunks import (
    ChatChunk,
    TextChunk,
    CitationChunk,
    GroundingChunk,
    StopChunk,
    ErrorChunk,
)
from .events import WebSocketMessage
from .contracts import ResponseContract, ContractViolation

__all__ = [
    "AuthStatus",
    "WorkspaceSettings",
    "WorkspaceSummary",
    "WorkspaceDetail",
    "DocumentDetail",
    "SearchResult",
    "ChatMessage",
    "ChatSource",
    "ChatResponse",
    "AgentSummary",
    "AgentDetail",
    "ChatChunk",
    "TextChunk",
    "CitationChunk",
    "GroundingChunk",
    "StopChunk",
    "ErrorChunk",
    "WebSocketMessage",
    "ResponseContract",
    "ContractViolation",
]
