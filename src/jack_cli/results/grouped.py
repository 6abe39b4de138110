"""Expansion of grouped results into their constituent results."""

from __future__ import annotations

import logging
from collections.abc import Callable

from jack_cli.results.render import loads_exact, render_result

logger = logging.getLogger(__name__)

GROUPED_PREFIX = "grouped:"
GROUP_SEPARATOR = ","
REQUEST_KEY_PREFIX = "req:"


class GroupedResultCycleError(RuntimeError):
    """A grouped result lists its own id among its members."""

    def __init__(self, result_id: str) -> None:
        super().__init__(f"grouped result {result_id} references itself: stopping infinite loop")
        self.result_id = result_id


def cut_group_prefix(payload: str) -> tuple[str, bool]:
    """Return the grouped remainder and True when `payload` is a grouped result."""

    if payload.startswith(GROUPED_PREFIX):
        return payload[len(GROUPED_PREFIX) :], True
    return payload, False


def group_members(payload: str) -> list[str] | None:
    value, grouped = cut_group_prefix(payload)
    if not grouped:
        return None
    return value.split(GROUP_SEPARATOR)


class GroupedResultResolver:
    """Resolve a result id to rendered text, expanding grouped results depth-first.

    Only a group naming itself is rejected; longer cycles (A -> B -> A) are not
    detected and recurse until Python's recursion limit.
    """

    def __init__(
        self,
        fetch: Callable[[str], str],
        render: Callable[[str], str] = render_result,
    ) -> None:
        self._fetch = fetch
        self._render = render

    def resolve(self, result_id: str) -> str:
        payload = self._fetch(result_id)
        members = group_members(payload)
        if members is None:
            return self._render(payload)

        logger.debug("Expanding grouped result %s into %d members", result_id, len(members))
        out = ""
        for member_id in members:
            if member_id == result_id:
                raise GroupedResultCycleError(result_id)
            out += self.resolve(member_id)
        return out


def extract_request_id(payload: str, result_id: str) -> str:
    """Find the id of the request that produced a stored result.

    Grouped results share their id with the request. Single results point to
    their group id when dispatched as part of a group, else to their own id.
    """

    if cut_group_prefix(payload)[1]:
        return result_id

    document = loads_exact(payload)
    if not isinstance(document, dict):
        raise ValueError("result document is not a JSON object")

    task_result = document.get("Result")
    if not isinstance(task_result, dict):
        return result_id
    for key in ("groupID", "id"):
        value = task_result.get(key)
        if value not in (None, "", 0, "0"):
            return _strip_request_prefix(str(value))
    return result_id


def _strip_request_prefix(request_id: str) -> str:
    if request_id.startswith(REQUEST_KEY_PREFIX):
        return request_id[len(REQUEST_KEY_PREFIX) :]
    return request_id
