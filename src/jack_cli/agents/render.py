"""Rendering of agent listings and health."""

from __future__ import annotations

from datetime import UTC, datetime

from jack_cli import style
from jack_cli.service.models import AgentInfo, AgentListing

NEVER = "never"


def format_agent_time(value: str | None) -> str:
    """`January 2, 2006 at 15:04 UTC`, or `never` when unset."""

    if not value:
        return NEVER
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return value
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return f"{moment:%B} {moment.day}, {moment:%Y at %H:%M} UTC"


def _ordered(agents: list[AgentInfo], sort_output: bool) -> list[AgentInfo]:
    return sorted(agents, key=lambda agent: agent.id) if sort_output else list(agents)


def render_agent_list(agents: list[AgentInfo], *, details: bool, sort_output: bool) -> str:
    items = ""
    for agent in _ordered(agents, sort_output):
        if not details:
            items += style.item(agent.id)
        elif agent.certificate:
            items += style.item(f"{agent.id} ({agent.address} {agent.certificate})")
        else:
            items += style.item(f"{agent.id} ({agent.address})")
    return style.spaced_block(items)


def render_agents(listing: AgentListing, *, details: bool, sort_output: bool) -> str:
    out = style.title("Accepted")
    out += render_agent_list(listing.accepted, details=details, sort_output=sort_output)
    out += style.title("Candidates")
    out += render_agent_list(listing.candidates, details=details, sort_output=sort_output)
    out += style.title("Rejected")
    out += render_agent_list(listing.rejected, details=details, sort_output=sort_output)
    return out


def render_agents_health(agents: list[AgentInfo], *, details: bool, sort_output: bool) -> str:
    items = ""
    for agent in _ordered(agents, sort_output):
        state = "connected" if agent.is_connected else "disconnected"
        if not details:
            items += style.item(f"{agent.id} ({state})")
            continue
        items += style.item(agent.id)
        items += style.sub_item(f"state: {state}")
        items += style.sub_item(f"{state} since: {format_agent_time(agent.since)}")
        items += style.sub_item(f"last event: {format_agent_time(agent.last_msg)}")
    return style.title("Agents") + style.spaced_block(items)
