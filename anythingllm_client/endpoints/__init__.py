"""Resource modules (thin callers of the request pipeline)."""

from .workspaces import WorkspaceEndpoints
from .documents import DocumentEndpoints
from .chat import ChatEndpoints
from .agents import AgentEndpoints

__all__ = [
    "WorkspaceEndpoints",
    "DocumentEndpoints",
    "ChatEndpoints",
    "AgentEndpoints",
]
