"""Manager API client."""

from jack_cli.service.client import ManagerClient, ManagerError
from jack_cli.service.models import (
    AgentInfo,
    AgentListing,
    ListResultsQuery,
    LockMode,
    RequestDocument,
    ResultSummary,
    TargetMode,
    TaskInput,
    TaskRequest,
    TaskResponse,
)

__all__ = [
    "AgentInfo",
    "AgentListing",
    "ListResultsQuery",
    "LockMode",
    "ManagerClient",
    "ManagerError",
    "RequestDocument",
    "ResultSummary",
    "TargetMode",
    "TaskInput",
    "TaskRequest",
    "TaskResponse",
]
