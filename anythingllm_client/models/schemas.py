"""
Pydantic schemas for AnythingLLM responses.

WHAT: Canonical types for workspaces, documents, search results, chat and agents
WHY: Every pipeline result is validated against one of these before reaching callers
HOW: Pydantic v2 models, camelCase wire aliases, unknown fields preserved
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for server payloads: camelCase on the wire, extra fields kept."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> Dict[str, Any]:
        """Dump using wire (camelCase) names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ========== Auth ==========

class AuthStatus(WireModel):
    """Result of GET /auth."""
    authenticated: bool


# ========== Workspaces ==========

class WorkspaceSettings(WireModel):
    """Per-workspace model/retrieval settings."""
    llm_provider: Optional[str] = None
    embedder: Optional[str] = None
    similarity_threshold: Optional[float] = Field(default=None, ge=0, le=1)
    top_k: Optional[int] = Field(default=None, gt=0)


class WorkspaceSummary(WireModel):
    """Workspace as returned by list/create."""
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=3)
    created_at: datetime
    document_count: int = Field(..., ge=0)


class WorkspaceDetail(WorkspaceSummary):
    """Workspace with its settings."""
    settings: Optional[WorkspaceSettings] = None


# ========== Documents ==========

DocumentType = Literal["file", "web", "raw", "pdf"]


class DocumentDetail(WireModel):
    """Document stored on the platform."""
    id: UUID
    title: str
    location: str
    type: DocumentType = "file"
    created_at: datetime
    last_updated: Optional[datetime] = None
    tags: Optional[List[str]] = None

    @field_validator("type", mode="before")
    @classmethod
    def default_unknown_type(cls, v):
        """Unknown document types are treated as plain files."""
        if v not in ("file", "web", "raw", "pdf"):
            return "file"
        return v


class SearchResult(WireModel):
    """One retrieval hit."""
    content: str
    score: float = Field(..., ge=0, le=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    document_id: Optional[str] = None


# ========== Chat ==========

class ChatMessage(BaseModel):
    """One conversation message sent by the caller."""
    role: Literal["system", "user", "assistant"]
    content: str


class ChatSource(WireModel):
    """Citation attached to a blocking chat response."""
    title: str
    uri: Optional[str] = None
    text: Optional[str] = None


class ChatResponse(WireModel):
    """Blocking chat result."""
    text_response: str
    sources: Optional[List[ChatSource]] = None
    chat_id: Optional[str] = None


# ========== Agents ==========

class AgentSummary(WireModel):
    """Agent as listed for a workspace."""
    id: str
    name: str
    description: str
    active: bool
    config: Optional[Dict[str, Any]] = None


class AgentDetail(AgentSummary):
    """Full agent record; same required shape, extra fields kept."""
