"""
WebSocket event messages.

WHAT: Typed messages pushed by the server on a workspace event connection
WHY: Subscribers get validated payloads keyed by event type
HOW: Pydantic discriminated union on `type`, one payload model per event
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .schemas import WireModel


# ========== Payloads ==========

class WorkspaceUpdatedPayload(WireModel):
    slug: str
    changes: Dict[str, Any] = Field(default_factory=dict)


class AgentStartedPayload(WireModel):
    agent_id: str
    thread_id: str
    timestamp: str


class AgentThinkingPayload(WireModel):
    agent_id: str
    content: str


class AgentToolCallPayload(WireModel):
    agent_id: str
    tool_name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class AgentToolResultPayload(WireModel):
    agent_id: str
    result: Any = None
    success: bool


class AgentMessagePayload(WireModel):
    agent_id: str
    role: Literal["assistant"] = "assistant"
    content: str


class AgentFinishedPayload(WireModel):
    agent_id: str
    final_output: Optional[str] = None
    error: Optional[str] = None


class ServerErrorPayload(WireModel):
    code: str
    message: str
    fatal: bool = False


# ========== Messages ==========

class WorkspaceUpdated(WireModel):
    type: Literal["workspace-updated"]
    payload: WorkspaceUpdatedPayload


class AgentStarted(WireModel):
    type: Literal["agent-started"]
    payload: AgentStartedPayload


class AgentThinking(WireModel):
    type: Literal["agent-thinking"]
    payload: AgentThinkingPayload


class AgentToolCall(WireModel):
    type: Literal["agent-tool-call"]
    payload: AgentToolCallPayload


class AgentToolResult(WireModel):
    type: Literal["agent-tool-result"]
    payload: AgentToolResultPayload


class AgentMessage(WireModel):
    type: Literal["agent-message"]
    payload: AgentMessagePayload


class AgentFinished(WireModel):
    type: Literal["agent-finished"]
    payload: AgentFinishedPayload


class ServerError(WireModel):
    type: Literal["error"]
    payload: ServerErrorPayload


WebSocketMessage = Annotated[
    Union[
        WorkspaceUpdated,
        AgentStarted,
        AgentThinking,
        AgentToolCall,
        AgentToolResult,
        AgentMessage,
        AgentFinished,
        ServerError,
    ],
    Field(discriminator="type"),
]

websocket_message_adapter: TypeAdapter = TypeAdapter(WebSocketMessage)

MESSAGE_TYPES = (
    "workspace-updated",
    "agent-started",
    "agent-thinking",
    "agent-tool-call",
    "agent-tool-result",
    "agent-message",
    "agent-finished",
    "error",
)
