"""
Workspace endpoints.

WHAT: List, create, read, update and delete workspaces
WHY: Workspaces hold documents, chat history and model configuration
HOW: Thin callers of HttpClient.request with a fixed contract per operation
"""

from typing import Any, List, Optional

from ..models.contracts import ResponseContract, list_of
from ..models.schemas import WorkspaceDetail, WorkspaceSummary
from ..transport.http import HttpClient

# Servers answer either with the object or wrapped as {"workspace": ...}
WORKSPACE_LIST = list_of(WorkspaceSummary, envelope="workspaces")
WORKSPACE_SUMMARY = ResponseContract.enveloped(WorkspaceSummary, "workspace")
WORKSPACE_DETAIL = ResponseContract.enveloped(WorkspaceDetail, "workspace")
ANY = ResponseContract(Any, name="any")


class WorkspaceEndpoints:
    """Workspace CRUD."""

    def __init__(self, http: HttpClient):
        self.http = http

    async def list(self) -> List[WorkspaceSummary]:
        return await self.http.request("GET", "/workspaces", WORKSPACE_LIST)

    async def create(self, name: str, slug: Optional[str] = None) -> WorkspaceSummary:
        """Create a workspace; the server derives the slug when omitted."""
        body = {"name": name}
        if slug:
            body["slug"] = slug
        return await self.http.request("POST", "/workspaces/new", WORKSPACE_SUMMARY, json=body)

    async def get(self, slug: str) -> WorkspaceDetail:
        return await self.http.request("GET", f"/workspace/{slug}", WORKSPACE_DETAIL)

    async def update(self, slug: str, **changes: Any) -> WorkspaceDetail:
        """
        Update workspace fields.

        Keyword names may be snake_case or camelCase; nested pydantic models
        are dumped with wire names.
        """
        body = {_camel(key): _wire(value) for key, value in changes.items()}
        return await self.http.request("POST", f"/workspace/{slug}/update", WORKSPACE_DETAIL, json=body)

    async def delete(self, slug: str) -> None:
        await self.http.request("DELETE", f"/workspace/{slug}", ANY)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _wire(value: Any) -> Any:
    if hasattr(value, "to_wire"):
        return value.to_wire()
    if isinstance(value, dict):
        return {_camel(k): _wire(v) for k, v in value.items()}
    return value
