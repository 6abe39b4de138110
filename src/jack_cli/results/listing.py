"""Rendering of `jack results list` pages."""

from __future__ import annotations

from datetime import UTC, datetime

from rich.markup import escape

from jack_cli import style
from jack_cli.results.grouped import cut_group_prefix
from jack_cli.service.models import ListResultsQuery, ResultSummary

TIME_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S")
DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
NANOSECONDS = 1_000_000_000


def parse_time_string(value: str) -> datetime:
    """Parse `2025-01-01` or `2025-01-01 15:04:05` (UTC)."""

    for layout in TIME_FORMATS:
        try:
            return datetime.strptime(value, layout).replace(tzinfo=UTC)
        except ValueError:
            continue
    raise ValueError(f"unsupported time format: {value}")


def to_unix_nanos(moment: datetime) -> int:
    return int(moment.timestamp()) * NANOSECONDS


def format_nanos(value: int) -> str:
    return datetime.fromtimestamp(value / NANOSECONDS, tz=UTC).strftime(DISPLAY_TIME_FORMAT)


def status_symbol(status: str) -> str:
    if "error" in status:
        return style.render_error("✗")
    if status == "unknown":
        return style.render_unknown("?")
    return style.render_success("✓")


def format_result_item(summary: ResultSummary) -> str:
    # Grouped entries carry their member ids in place of an agent name.
    targets, _ = cut_group_prefix(summary.agent)
    return (
        f"[{status_symbol(summary.status)}] {style.render_id(str(summary.id))}"
        f" - {format_nanos(summary.id)}\n    {escape(targets)}\n\n"
    )


def render_results_page(query: ListResultsQuery, results: list[ResultSummary]) -> str:
    out = style.title("Task results")

    filters: list[str] = []
    if query.from_date > 0:
        filters.append(f"from: {format_nanos(query.from_date)}")
    if query.to_date > 0:
        filters.append(f"to: {format_nanos(query.to_date)}")
    if query.targets:
        filters.append(f"targets: {', '.join(query.targets)}")
    if query.offset > 0:
        filters.append(f"offset: {query.offset}")
    if filters:
        out += style.subtitle(f"Filters: {', '.join(filters)}")

    if not results:
        return out + style.spaced_block(style.item("No results found"))

    items = "".join(format_result_item(summary) for summary in results)
    pagination = (
        f"Showing {len(results)} results (limit: {query.limit}, offset: {query.offset})"
    )
    return f"{out}\n{items}{style.subtitle(pagination)}"
