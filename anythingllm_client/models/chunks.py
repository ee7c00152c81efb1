"""
Streaming chat chunk types.

WHAT: Typed variants for one incremental unit of a streamed chat response
WHY: Callers match on `type` and only see the fields relevant to each kind
HOW: Pydantic discriminated union on the `type` field
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, TypeAdapter

from .schemas import WireModel
from ..utils.exceptions import DomainError

CHUNK_TYPES = ("text", "citation", "grounding", "stop", "error")


class TextChunk(WireModel):
    """Text delta."""
    type: Literal["text"] = "text"
    content: Optional[str] = None
    chat_id: Optional[str] = None
    text_response: Optional[str] = None  # legacy servers

    @property
    def text(self) -> str:
        return self.content if self.content is not None else (self.text_response or "")


class CitationChunk(WireModel):
    """Citation metadata for the answer so far."""
    type: Literal["citation"]
    content: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    sources: Optional[List[Any]] = None  # legacy servers


class GroundingChunk(WireModel):
    """Grounding metadata (retrieval context)."""
    type: Literal["grounding"]
    metadata: Dict[str, Any] = Field(default_factory=dict)


class StopChunk(WireModel):
    """Terminal signal sent by the server."""
    type: Literal["stop"]
    chat_id: Optional[str] = None


class ErrorChunk(WireModel):
    """Terminal failure, sent by the server or produced locally."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: Literal["error"]
    content: Optional[str] = None
    error: Optional[str] = None
    domain_error: Optional[DomainError] = Field(default=None, exclude=True)

    @property
    def message(self) -> str:
        if self.domain_error is not None:
            return self.domain_error.message
        return self.error or self.content or "Stream error"


ChatChunk = Annotated[
    Union[TextChunk, CitationChunk, GroundingChunk, StopChunk, ErrorChunk],
    Field(discriminator="type"),
]

chat_chunk_adapter: TypeAdapter = TypeAdapter(ChatChunk)


def is_terminal(chunk) -> bool:
    """Stop and error chunks end a stream."""
    return chunk.type in ("stop", "error")
