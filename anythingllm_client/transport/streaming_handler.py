"""
Streaming chat decoder.

WHAT: Turn a line-delimited event stream into typed ChatChunk values
WHY: Partial frames are expected mid-stream and must not abort the answer
HOW: Async generator over `data: ` lines, pydantic validation per line, drop what fails
"""

import json
from typing import AsyncIterable, AsyncIterator, Optional

from pydantic import ValidationError

from .error_mapper import map_error
from ..models.chunks import CHUNK_TYPES, ChatChunk, ErrorChunk, chat_chunk_adapter, is_terminal
from ..utils.logger import get_logger

logger = get_logger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def parse_chunk_line(line: str) -> Optional[ChatChunk]:
    """
    Parse one stream line into a chunk.

    Args:
        line: Raw line from the stream

    Returns:
        The chunk, or None when the line carries no valid chunk
        (blank, comment/event lines, malformed JSON, failed validation)
    """
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None

    data_str = line[len(DATA_PREFIX):]
    try:
        data = json.loads(data_str)
    except (json.JSONDecodeError, RecursionError):
        logger.debug(f"Dropping non-JSON stream line: {line[:100]}")
        return None

    if not isinstance(data, dict):
        logger.debug(f"Dropping non-object stream line: {line[:100]}")
        return None

    try:
        return chat_chunk_adapter.validate_python(_normalize_frame(data))
    except ValidationError as e:
        logger.debug(f"Dropping invalid chunk ({e.error_count()} errors): {line[:100]}")
        return None


def _normalize_frame(data: dict) -> dict:
    # Legacy servers send their own `type` values; read those frames as text
    if data.get("type") in CHUNK_TYPES:
        return data
    return {**data, "type": "text"}


async def decode_chat_stream(lines: AsyncIterable[str]) -> AsyncIterator[ChatChunk]:
    """
    Lazily decode chat chunks in arrival order.

    Iteration ends on the done sentinel (nothing yielded for it), after a
    stop or error chunk, or when `lines` is exhausted. A failure of the
    underlying source is yielded as a final ErrorChunk rather than raised.

    Args:
        lines: Async iterable of text lines (e.g. httpx `aiter_lines()`)

    Yields:
        ChatChunk values
    """
    count = 0
    try:
        async for line in lines:
            if line.strip() == f"{DATA_PREFIX}{DONE_SENTINEL}":
                break

            chunk = parse_chunk_line(line)
            if chunk is None:
                continue

            count += 1
            yield chunk
            if is_terminal(chunk):
                break
    except Exception as e:
        error = map_error(e)
        logger.error(f"Chat stream failed after {count} chunks: {error.code} {error.message}")
        yield ErrorChunk(type="error", content=error.message, domain_error=error)
        return

    logger.debug(f"Chat stream completed ({count} chunks)")
