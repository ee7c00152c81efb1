"""
Integration tests against a real AnythingLLM server (optional).

WHAT: Auth, workspace lifecycle, document upload and chat on a live instance
WHY: Verify the wire contracts hold against an actual server
HOW: Enabled with RUN_LIVE_TESTS=true; skipped when the server does not answer
"""

import os
import random

import pytest

from anythingllm_client import AnythingLLMClient, DomainError, ErrorKind

from conftest import check_anythingllm_available

BASE_URL = os.getenv("ANYTHINGLLM_BASE_URL", "http://localhost:3001")
API_KEY = os.getenv("ANYTHINGLLM_API_KEY", "test-admin-key")


async def live_client(**options) -> AnythingLLMClient:
    if not await check_anythingllm_available():
        pytest.skip("AnythingLLM not reachable (set RUN_LIVE_TESTS=true and start the server)")
    return AnythingLLMClient(base_url=BASE_URL, api_key=options.pop("api_key", API_KEY), **options)


@pytest.mark.integration
@pytest.mark.requires_anythingllm
class TestLiveServer:
    """End-to-end checks with a running server."""

    @pytest.mark.asyncio
    async def test_verify_auth(self):
        async with await live_client() as client:
            status = await client.verify_auth()
            assert status.authenticated is True

    @pytest.mark.asyncio
    async def test_invalid_key_is_auth_failure(self):
        async with await live_client(api_key="invalid-key", retries=0) as client:
            with pytest.raises(DomainError) as exc_info:
                await client.verify_auth()
            assert exc_info.value.kind is ErrorKind.AUTH_FAILURE

    @pytest.mark.asyncio
    async def test_workspace_lifecycle(self):
        slug = f"test-ws-{random.randint(0, 99999)}"

        async with await live_client() as client:
            try:
                created = await client.workspaces.create("Integration Test", slug=slug)
                assert created.slug == slug
                assert created.name == "Integration Test"

                listed = await client.workspaces.list()
                assert any(w.slug == slug for w in listed)

                updated = await client.workspaces.update(slug, settings={"similarity_threshold": 0.85})
                assert updated.settings is not None
                assert updated.settings.similarity_threshold == 0.85

                document = await client.documents.upload_file(
                    slug, b"This is a test document content.",
                    filename="integration-test.txt", title="integration-test.txt",
                    content_type="text/plain",
                )
                assert document.title == "integration-test.txt"

                response = await client.chat.chat(slug, [{"role": "user", "content": "Hello, are you there?"}])
                assert isinstance(response.text_response, str)
            finally:
                try:
                    await client.workspaces.delete(slug)
                except DomainError as e:
                    print(f"Cleanup failed for {slug}: {e.message}")
