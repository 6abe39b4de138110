"""Controllers for `jack results` commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import httpx
from rich.markup import escape

from jack_cli import style
from jack_cli.config import Settings
from jack_cli.results.grouped import GroupedResultResolver, extract_request_id
from jack_cli.results.listing import parse_time_string, render_results_page, to_unix_nanos
from jack_cli.service.client import ManagerClient, ManagerError
from jack_cli.service.models import ListResultsQuery, RequestDocument

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResultsGetCommand:
    """CLI input for result retrieval."""

    result_id: str


@dataclass(slots=True)
class ResultsListCommand:
    """CLI input for result listing."""

    limit: int | None
    offset: int
    from_date: str | None
    to_date: str | None
    targets: tuple[str, ...]


class ResultsCliController:
    """Fetches results from the manager and renders them as console markup."""

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

    def get(self, command: ResultsGetCommand) -> str:
        with _client(self.settings, self._transport) as client:
            resolver = GroupedResultResolver(fetch=client.get_results)
            rendered = resolver.resolve(command.result_id)
            header = _request_header(client, command.result_id)
        return f"{header}\n{rendered}"

    def list_results(self, command: ResultsListCommand) -> str:
        settings = self.settings
        page_limit = settings.results.page_limit
        limit = command.limit if command.limit is not None else settings.results.default_limit
        warning = ""
        if limit > page_limit:
            limit = page_limit
            warning = escape(
                f"Warning: limit exceeded maximum ({page_limit}), using maximum value\n",
            )

        from_date = to_unix_nanos(parse_time_string(command.from_date)) if command.from_date else 0
        to_date = to_unix_nanos(parse_time_string(command.to_date)) if command.to_date else 0
        if command.from_date and command.to_date and to_date < from_date:
            raise ValueError("'to' date must be after 'from' date")

        query = ListResultsQuery(
            limit=limit,
            offset=command.offset,
            from_date=from_date,
            to_date=to_date,
            targets=command.targets,
        )
        with _client(settings, self._transport) as client:
            results = client.list_results(query)
        return warning + render_results_page(query, results)


def render_request(document: RequestDocument) -> str:
    out = ""
    if document.task:
        out += style.inline_block_title("Task") + escape(document.task)
    if document.connected_targets:
        out += style.inline_block_title("Connected targets") + escape(
            ", ".join(document.connected_targets),
        )
    if document.disconnected_targets:
        out += style.inline_block_title("Disconnected targets") + escape(
            ", ".join(document.disconnected_targets),
        )
    return out


def _request_header(client: ManagerClient, result_id: str) -> str:
    # Failing to find the originating request only degrades the header.
    out = style.title("Request:")
    try:
        request_id = extract_request_id(client.get_results(result_id), result_id)
    except (ManagerError, ValueError) as error:
        logger.debug("Could not determine request for %s: %s", result_id, error)
        return out + style.render_error(f"Warning: Could not determine request ID: {error}\n")

    try:
        document = RequestDocument.from_json(client.get_request(request_id))
    except (ManagerError, ValueError) as error:
        logger.debug("Could not fetch request %s: %s", request_id, error)
        return out + style.render_error(
            f"Warning: Could not fetch request {request_id}: {error}\n",
        )
    return out + render_request(document)


@contextmanager
def _client(
    settings: Settings,
    transport: httpx.BaseTransport | None,
) -> Iterator[ManagerClient]:
    settings.validate()
    with ManagerClient(
        settings.manager.url,
        timeout_seconds=settings.manager.request_timeout_seconds,
        transport=transport,
    ) as client:
        yield client
