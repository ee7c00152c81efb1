"""
Document endpoints.

WHAT: Upload files and links, list workspace documents, run similarity search
WHY: Documents feed the workspace's retrieval context
HOW: Multipart upload for files, JSON for the rest; contracts unwrap server envelopes
"""

import json
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Union

from pydantic import BaseModel, Field

from ..models.contracts import ContractViolation, ResponseContract, field_of
from ..models.schemas import DocumentDetail, SearchResult, WireModel
from ..transport.http import HttpClient


class UploadResponse(WireModel):
    success: bool
    documents: Optional[List[DocumentDetail]] = None
    document: Optional[DocumentDetail] = None


class LocalFiles(BaseModel):
    items: List[DocumentDetail]


class DocumentListResponse(WireModel):
    local_files: LocalFiles


class SearchResponse(WireModel):
    text_response: str
    sources: List[SearchResult] = Field(default_factory=list)


class SuccessResponse(WireModel):
    success: bool


def _first_document(response: UploadResponse) -> DocumentDetail:
    if response.documents:
        return response.documents[0]
    if response.document is not None:
        return response.document
    raise ContractViolation("No document returned")


def _basename(file: Any) -> Optional[str]:
    # File objects carry their local path; only the final component is sent
    name = getattr(file, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return None


UPLOAD = ResponseContract(UploadResponse, transform=_first_document)
PROCESS_LINK = ResponseContract(SuccessResponse, transform=field_of("success"))
DOCUMENT_LIST = ResponseContract(DocumentListResponse, transform=field_of("local_files", "items"))
SEARCH = ResponseContract(SearchResponse, transform=field_of("sources"))

FileInput = Union[bytes, BinaryIO]


class DocumentEndpoints:
    """Document ingestion and retrieval."""

    def __init__(self, http: HttpClient):
        self.http = http

    async def upload_file(
        self,
        workspace_slug: str,
        file: FileInput,
        *,
        filename: Optional[str] = None,
        title: Optional[str] = None,
        tags: Optional[List[str]] = None,
        content_type: str = "application/octet-stream",
    ) -> DocumentDetail:
        """
        Upload a file and embed it into a workspace.

        Args:
            workspace_slug: Workspace receiving the document
            file: Raw bytes or a binary file object
            filename: Name sent with the upload (defaults to title, then "upload")
            title: Optional document title
            tags: Optional tags
            content_type: MIME type of the upload

        Returns:
            The created document
        """
        name = filename or title or _basename(file) or "upload"
        form: dict[str, Any] = {"addToWorkspaces": workspace_slug}
        if title:
            form["title"] = title
        if tags:
            form["tags"] = json.dumps(tags)

        return await self.http.request(
            "POST",
            "/document/upload",
            UPLOAD,
            data=form,
            files={"file": (name, file, content_type)},
        )

    async def upload_web_link(self, workspace_slug: str, url: str) -> bool:
        """Ask the server to scrape and ingest `url`; returns the success flag."""
        return await self.http.request(
            "POST",
            "/document/process-link",
            PROCESS_LINK,
            json={"link": url, "addToWorkspaces": workspace_slug},
        )

    async def list(self, workspace_slug: str) -> List[DocumentDetail]:
        return await self.http.request("GET", f"/workspace/{workspace_slug}/documents", DOCUMENT_LIST)

    async def search(self, workspace_slug: str, query: str, top_k: int = 3) -> List[SearchResult]:
        """Similarity search via the workspace chat endpoint in query mode (read-only)."""
        return await self.http.request(
            "POST",
            f"/workspace/{workspace_slug}/chat",
            SEARCH,
            json={"message": query, "mode": "query", "topK": top_k},
            idempotent=True,
        )
