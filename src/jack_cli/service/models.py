"""Request/response models for the manager API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TargetMode(str, Enum):
    """How the target string selects agents."""

    EXACT = "EXACT"
    LIST = "LIST"
    GLOB = "GLOB"
    REGEX = "REGEX"
    QUERY = "QUERY"


class LockMode(str, Enum):
    """Concurrency guarantee requested from the agent. Enforced agent-side only."""

    UNSPECIFIED = "UNSPECIFIED"
    NO_LOCK = "NO_LOCK"
    WRITE = "WRITE"
    EXCLUSIVE = "EXCLUSIVE"


@dataclass(slots=True)
class ListResultsQuery:
    limit: int
    offset: int = 0
    from_date: int = 0
    to_date: int = 0
    targets: tuple[str, ...] = ()


@dataclass(slots=True)
class ResultSummary:
    """One entry of a results page. `id` is a unix timestamp in nanoseconds."""

    id: int
    agent: str
    status: str
    error: str = ""
    internal_error: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ResultSummary:
        return cls(
            id=int(payload.get("id", 0)),
            agent=str(payload.get("agent", "")),
            status=str(payload.get("status", "unknown")),
            error=str(payload.get("error", "")),
            internal_error=str(payload.get("internalError", "")),
        )


@dataclass(slots=True)
class TaskInput:
    args: list[Any] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class TaskRequest:
    target: str
    target_mode: TargetMode
    lock_mode: LockMode
    task: str
    input: TaskInput
    timeout: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "targetMode": self.target_mode.value,
            "lockMode": self.lock_mode.value,
            "task": self.task,
            "input": {"args": self.input.args, "options": self.input.options},
            "timeout": self.timeout,
        }


INTERNAL_ERROR_OK = "OK"


@dataclass(slots=True)
class TaskResponse:
    """Per-agent answer to a task execution. `output` is the decoded JSON output."""

    id: int = 0
    group_id: int | None = None
    output: Any = None
    error: str = ""
    retcode: int = 0
    internal_error: str = INTERNAL_ERROR_OK
    module_error: str = ""

    @property
    def failed_internally(self) -> bool:
        return bool(self.internal_error) and self.internal_error != INTERNAL_ERROR_OK

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TaskResponse:
        group_id = payload.get("GroupID")
        return cls(
            id=int(payload.get("Id") or 0),
            group_id=int(group_id) if group_id is not None else None,
            output=payload.get("Output"),
            error=payload.get("Error") or "",
            retcode=int(payload.get("Retcode") or 0),
            internal_error=payload.get("InternalError") or INTERNAL_ERROR_OK,
            module_error=payload.get("ModuleError") or "",
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "groupID": self.group_id,
            "output": self.output,
            "error": self.error,
            "retcode": self.retcode,
            "internalError": self.internal_error,
            "moduleError": self.module_error,
        }


@dataclass(slots=True)
class RequestDocument:
    """What was asked for a given request id, as stored by the manager."""

    task: str = ""
    connected_targets: list[str] = field(default_factory=list)
    disconnected_targets: list[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> RequestDocument:
        return cls(
            task=payload.get("Task") or "",
            connected_targets=list(payload.get("ConnectedTarget") or []),
            disconnected_targets=list(payload.get("DisconnectedTarget") or []),
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> RequestDocument:
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError("request document is not a JSON object")
        return cls.from_payload(payload)


@dataclass(slots=True)
class AgentInfo:
    """Agent as known by the manager. Times are ISO 8601 strings, `None` when never set."""

    id: str
    address: str = ""
    certificate: str = ""
    is_connected: bool = False
    since: str | None = None
    last_msg: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AgentInfo:
        return cls(
            id=str(payload.get("id", "")),
            address=payload.get("address") or "",
            certificate=payload.get("certificate") or "",
            is_connected=bool(payload.get("isConnected", False)),
            since=payload.get("since") or None,
            last_msg=payload.get("lastMsg") or None,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "certificate": self.certificate,
            "isConnected": self.is_connected,
            "since": self.since,
            "lastMsg": self.last_msg,
        }


@dataclass(slots=True)
class AgentListing:
    """Agents grouped by registration state."""

    accepted: list[AgentInfo] = field(default_factory=list)
    candidates: list[AgentInfo] = field(default_factory=list)
    rejected: list[AgentInfo] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AgentListing:
        def _agents(key: str) -> list[AgentInfo]:
            return [AgentInfo.from_payload(entry) for entry in payload.get(key) or []]

        return cls(
            accepted=_agents("accepted"),
            candidates=_agents("candidates"),
            rejected=_agents("rejected"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "accepted": [agent.to_payload() for agent in self.accepted],
            "candidates": [agent.to_payload() for agent in self.candidates],
            "rejected": [agent.to_payload() for agent in self.rejected],
        }
