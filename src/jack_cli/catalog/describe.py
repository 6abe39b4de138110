"""Parser for the collection describe protocol.

A collection describes itself as plain text. Exactly two leading spaces mark a
task line; anything else (headers, deeper-indented descriptions, wrapped text)
is ignored::

    Tasks:
      ping          Ping.
      instant-ping  Execute immediate ping.
          This healthcheck bypasses any tasks queue.
"""

from __future__ import annotations

from collections.abc import Iterable

from jack_cli.catalog.models import CollectionInfo, TaskInfo

TASK_INDENT = "  "


def is_task_line(line: str) -> bool:
    return line.startswith(TASK_INDENT) and not line.startswith(TASK_INDENT + " ")


def parse_describe_text(text: str, collection: CollectionInfo) -> CollectionInfo:
    """Add every task line of `text` to `collection`, later duplicates winning."""

    for line in text.splitlines():
        if not line.strip():
            continue
        if not is_task_line(line):
            continue
        task = _parse_task_line(line)
        if task is not None:
            collection.tasks[task.name] = task
    return collection


def parse_collection(name: str, chunks: Iterable[str]) -> CollectionInfo:
    collection = CollectionInfo(name=name)
    for chunk in chunks:
        parse_describe_text(chunk, collection)
    return collection


def _parse_task_line(line: str) -> TaskInfo | None:
    summary = line.strip()
    fields = summary.split()
    if not fields:
        return None
    return TaskInfo(name=fields[0], summary=summary)
