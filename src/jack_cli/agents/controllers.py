"""Controller for `jack agents` commands."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import httpx

from jack_cli.agents.render import render_agents, render_agents_health
from jack_cli.config import Settings
from jack_cli.service.client import ManagerClient
from jack_cli.service.models import AgentInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AgentsListCommand:
    """CLI input for agent listing and health."""

    details: bool = False
    json_format: bool = False
    sort_output: bool | None = None


@dataclass(slots=True)
class AgentAcceptCommand:
    """CLI input for accepting a candidate agent."""

    agent_id: str
    address: str = ""
    certificate: str = ""


@dataclass(slots=True)
class AgentsOutput:
    """Rendered agents view; `markup` is False for raw JSON."""

    text: str
    markup: bool


class AgentsCliController:
    """Lists and manages agents registered with the manager."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def settings(self) -> Settings:
        if self._settings is not None:
            return self._settings
        return Settings.from_env()

    def list_agents(self, command: AgentsListCommand) -> AgentsOutput:
        settings = self.settings
        with self._client(settings) as client:
            listing = client.list_agents()
        if command.json_format:
            return AgentsOutput(text=json.dumps(listing.to_payload(), indent=3), markup=False)
        return AgentsOutput(
            text=render_agents(
                listing,
                details=command.details,
                sort_output=self._sort_output(settings, command),
            ),
            markup=True,
        )

    def health(self, command: AgentsListCommand) -> AgentsOutput:
        settings = self.settings
        with self._client(settings) as client:
            listing = client.list_agents()
        if command.json_format:
            return AgentsOutput(text=json.dumps(listing.to_payload(), indent=3), markup=False)
        return AgentsOutput(
            text=render_agents_health(
                listing.accepted,
                details=command.details,
                sort_output=self._sort_output(settings, command),
            ),
            markup=True,
        )

    def accept(self, command: AgentAcceptCommand) -> AgentInfo:
        agent = AgentInfo(
            id=command.agent_id,
            address=command.address,
            certificate=command.certificate,
        )
        with self._client(self.settings) as client:
            accepted = client.accept_agent(agent)
        logger.debug("Accepted agent %s", accepted.id)
        return accepted

    def reject(self, agent_id: str) -> None:
        with self._client(self.settings) as client:
            client.reject_agent(agent_id)

    def remove(self, agent_id: str) -> None:
        with self._client(self.settings) as client:
            client.remove_agent(agent_id)

    def _client(self, settings: Settings) -> ManagerClient:
        settings.validate()
        return ManagerClient(
            settings.manager.url,
            timeout_seconds=settings.manager.request_timeout_seconds,
            transport=self._transport,
        )

    @staticmethod
    def _sort_output(settings: Settings, command: AgentsListCommand) -> bool:
        if command.sort_output is None:
            return settings.task.sort_output
        return command.sort_output
