"""HTTP client for the manager web API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from jack_cli import __version__
from jack_cli.service.models import (
    AgentInfo,
    AgentListing,
    ListResultsQuery,
    ResultSummary,
    TaskRequest,
    TaskResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_USER_AGENT = f"jack/{__version__}"

RESULTS_LIST_PATH = "/v1/results/list"
RESULTS_GET_PATH = "/v1/results/get"
REQUESTS_GET_PATH = "/v1/requests/get"
TASK_EXEC_PATH = "/v1/task/exec"
AGENTS_LIST_PATH = "/v1/agents/list"
AGENTS_ACCEPT_PATH = "/v1/agents/accept"
AGENTS_REJECT_PATH = "/v1/agents/reject"
AGENTS_REMOVE_PATH = "/v1/agents/remove"


class ManagerError(RuntimeError):
    """Manager call failed, either in transport or with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ManagerClient:
    """Thin wrapper over the manager's JSON endpoints.

    Every call is bounded by `timeout_seconds` unless a per-call timeout is
    given. Errors surface as `ManagerError` carrying the manager's own message
    when it sent one.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._client = httpx.Client(
            base_url=base_url,
            timeout=self._timeout,
            headers={"User-Agent": DEFAULT_USER_AGENT},
            transport=transport,
        )

    def list_results(self, query: ListResultsQuery) -> list[ResultSummary]:
        payload = self._post(
            RESULTS_LIST_PATH,
            {
                "limit": query.limit,
                "offset": query.offset,
                "fromDate": query.from_date,
                "toDate": query.to_date,
                "targets": list(query.targets),
            },
        )
        return [ResultSummary.from_payload(entry) for entry in payload.get("results") or []]

    def get_results(self, result_id: str) -> str:
        """Return the raw stored result payload for `result_id`."""

        payload = self._post(RESULTS_GET_PATH, {"resultID": result_id})
        return str(payload.get("result", ""))

    def get_request(self, request_id: str) -> str:
        """Return the raw stored request document for `request_id`."""

        payload = self._post(REQUESTS_GET_PATH, {"requestID": request_id})
        return str(payload.get("request", ""))

    def exec_task(self, request: TaskRequest) -> dict[str, TaskResponse]:
        # One extra second lets the manager answer with the task ids on timeout.
        timeout = httpx.Timeout(request.timeout + 1, connect=10.0)
        payload = self._post(TASK_EXEC_PATH, request.to_payload(), timeout=timeout)
        return {
            agent: TaskResponse.from_payload(response or {})
            for agent, response in payload.items()
        }

    def list_agents(self) -> AgentListing:
        return AgentListing.from_payload(self._post(AGENTS_LIST_PATH, {}))

    def accept_agent(self, agent: AgentInfo) -> AgentInfo:
        """Accept a candidate; returns the agent as registered by the manager."""

        body: dict[str, Any] = {"id": agent.id}
        if agent.address:
            body["address"] = agent.address
        if agent.certificate:
            body["certificate"] = agent.certificate
        payload = self._post(AGENTS_ACCEPT_PATH, {"agent": body})
        accepted = payload.get("agent")
        if not isinstance(accepted, dict):
            return agent
        return AgentInfo.from_payload(accepted)

    def reject_agent(self, agent_id: str) -> None:
        self._post(AGENTS_REJECT_PATH, {"agent": {"id": agent_id}})

    def remove_agent(self, agent_id: str) -> None:
        self._post(AGENTS_REMOVE_PATH, {"agent": {"id": agent_id}})

    def _post(
        self,
        path: str,
        body: dict[str, Any],
        *,
        timeout: httpx.Timeout | None = None,
    ) -> dict[str, Any]:
        try:
            if timeout is None:
                response = self._client.post(path, json=body)
            else:
                response = self._client.post(path, json=body, timeout=timeout)
        except httpx.TimeoutException as error:
            logger.debug("Timeout calling %s: %s", path, error)
            raise ManagerError(f"manager call timed out: {path}") from error
        except httpx.HTTPError as error:
            logger.debug("HTTP error calling %s: %s", path, error)
            raise ManagerError(f"failed to connect the manager: {error}") from error

        if not response.is_success:
            raise ManagerError(
                _error_message(response),
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as error:
            raise ManagerError(
                f"invalid JSON from manager on {path}",
                status_code=response.status_code,
            ) from error
        if not isinstance(payload, dict):
            raise ManagerError(
                f"unexpected response shape from manager on {path}",
                status_code=response.status_code,
            )
        return payload

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ManagerClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"HTTP {response.status_code}"
