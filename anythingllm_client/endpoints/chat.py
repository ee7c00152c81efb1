"""
Chat endpoints.

WHAT: Blocking and streaming chat against a workspace
WHY: The workspace answers with its LLM plus retrieved document context
HOW: Blocking calls go through the request pipeline; streaming decodes the event stream
"""

from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Union

from ..models.chunks import ChatChunk
from ..models.contracts import ResponseContract
from ..models.schemas import ChatMessage, ChatResponse
from ..transport.http import HttpClient
from ..transport.streaming_handler import decode_chat_stream
from ..utils.exceptions import DomainError

CHAT_RESPONSE = ResponseContract(ChatResponse)

MessageInput = Union[ChatMessage, Dict[str, Any]]


class ChatEndpoints:
    """Workspace chat."""

    def __init__(self, http: HttpClient):
        self.http = http

    async def send(
        self,
        workspace_slug: str,
        messages: Iterable[MessageInput],
        *,
        temperature: Optional[float] = None,
        mode: str = "chat",
    ) -> ChatResponse:
        """
        Send the conversation's last message and wait for the full answer.

        Args:
            workspace_slug: Target workspace
            messages: Conversation; roles must be system, user or assistant
            temperature: Optional sampling temperature
            mode: "chat" (default) or "query"

        Returns:
            ChatResponse with text and sources

        Raises:
            DomainError: ValidationFailure for an empty or malformed conversation,
                or any pipeline failure
        """
        body = _chat_body(messages, temperature=temperature, mode=mode)
        return await self.http.request("POST", f"/workspace/{workspace_slug}/chat", CHAT_RESPONSE, json=body)

    async def stream(
        self,
        workspace_slug: str,
        messages: Iterable[MessageInput],
        *,
        temperature: Optional[float] = None,
        mode: str = "chat",
    ) -> AsyncIterator[ChatChunk]:
        """
        Stream the answer as typed chunks.

        Transport failures arrive as a final ErrorChunk instead of an exception;
        conversation validation errors are raised before any request is made.

        Yields:
            ChatChunk values in arrival order
        """
        params = _chat_body(messages, temperature=temperature, mode=mode)
        lines = self.http.stream_lines("GET", f"/workspace/{workspace_slug}/stream-chat", params=params)
        # Release the pooled connection as soon as decoding stops
        async with aclosing(lines):
            async for chunk in decode_chat_stream(lines):
                yield chunk

    async def chat(
        self,
        workspace_slug: str,
        messages: Iterable[MessageInput],
        *,
        stream: bool = False,
        temperature: Optional[float] = None,
    ) -> Union[ChatResponse, AsyncIterator[ChatChunk]]:
        """Dispatch to `send` or `stream` depending on `stream`."""
        if stream:
            return self.stream(workspace_slug, messages, temperature=temperature)
        return await self.send(workspace_slug, messages, temperature=temperature)


def _chat_body(messages: Iterable[MessageInput], *, temperature: Optional[float], mode: str) -> Dict[str, Any]:
    conversation = _validate_messages(messages)
    body: Dict[str, Any] = {"message": conversation[-1].content, "mode": mode}
    if temperature is not None:
        body["temperature"] = temperature
    return body


def _validate_messages(messages: Iterable[MessageInput]) -> List[ChatMessage]:
    try:
        conversation = [
            m if isinstance(m, ChatMessage) else ChatMessage.model_validate(m)
            for m in messages
        ]
    except ValueError as e:
        raise DomainError.validation_failure("Invalid chat message", status=None,
                                             details={"error": str(e)}) from e
    if not conversation:
        raise DomainError.validation_failure("At least one message is required", status=None)
    return conversation
