"""Agent endpoints: list and inspect the agents configured for a workspace."""

from typing import List

from ..models.contracts import ResponseContract, list_of
from ..models.schemas import AgentDetail, AgentSummary
from ..transport.http import HttpClient

AGENT_LIST = list_of(AgentSummary)
AGENT_DETAIL = ResponseContract(AgentDetail)


class AgentEndpoints:
    """Read-only agent access."""

    def __init__(self, http: HttpClient):
        self.http = http

    async def list(self, workspace_slug: str) -> List[AgentSummary]:
        return await self.http.request("GET", f"/workspace/{workspace_slug}/agents", AGENT_LIST)

    async def get(self, workspace_slug: str, agent_id: str) -> AgentDetail:
        return await self.http.request("GET", f"/workspace/{workspace_slug}/agent/{agent_id}", AGENT_DETAIL)
