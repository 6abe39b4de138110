"""Registry of in-process (builtin) task collections."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Protocol

from jack_cli.catalog.describe import TASK_INDENT


class CollectionNotFoundError(LookupError):
    """Raised when a collection name is not registered."""


class CollectionExistsError(ValueError):
    """Raised when registering a collection name twice."""


class UnknownTaskError(LookupError):
    """Raised when asking help for a task the collection does not expose."""


class Collection(Protocol):
    """In-process collection contract consumed by the catalog."""

    name: str

    def help(self, task_filter: str = "") -> list[str]:
        """Return describe-text chunks, or one task's full help when filtered."""
        raise NotImplementedError


@dataclass(slots=True)
class BuiltinTask:
    """Task definition carried by a builtin collection."""

    name: str
    summary: str = ""
    description: str = ""
    args: tuple[tuple[str, str, str], ...] = ()
    flags: tuple[str, ...] = ()


@dataclass(slots=True)
class BuiltinCollection:
    """Collection compiled into the tool."""

    name: str
    tasks: dict[str, BuiltinTask] = field(default_factory=dict)

    def register_task(self, task: BuiltinTask) -> BuiltinTask:
        if task.name in self.tasks:
            raise ValueError(f"task already registered: {self.name}:{task.name}")
        self.tasks[task.name] = task
        return task

    def help(self, task_filter: str = "") -> list[str]:
        if not task_filter:
            return [self._summary_help()]

        task = self.tasks.get(task_filter)
        if task is None:
            raise UnknownTaskError(f"unknown task: {task_filter}")
        return [_task_help(self.name, task)]

    def _summary_help(self) -> str:
        width = max((len(name) for name in self.tasks), default=0)
        lines: list[str] = []
        for task in self.tasks.values():
            line = f"{TASK_INDENT}{task.name:<{width}}"
            if task.summary:
                line += f"  {task.summary}"
            if task.flags:
                line += f"  [{', '.join(task.flags)}]"
            lines.append(line.rstrip())
        return "\n".join(lines) + "\n"


def _task_help(collection_name: str, task: BuiltinTask) -> str:
    # Detail lines are indented by four spaces so the describe parser never
    # mistakes them for task lines.
    detail = TASK_INDENT * 2
    sections: list[str] = []
    if task.summary:
        sections.append(f"Summary:\n{_indent(task.summary, detail)}")
    if task.description:
        sections.append(f"Description:\n{_indent(task.description, detail)}")
    if task.args:
        usage = f"{detail}jack run <target> {collection_name}:{task.name}"
        usage += "".join(f" <{arg_name}>" for arg_name, _, _ in task.args)
        arg_lines = [
            f"{detail}{arg_name} ({arg_type}), example: {example}"
            for arg_name, arg_type, example in task.args
        ]
        sections.append("Usage:\n" + usage + "\n\nArguments:\n" + "\n".join(arg_lines))
    if task.flags:
        sections.append(f"Flags:\n{detail}{', '.join(task.flags)}")
    return "\n\n".join(sections) + "\n"


def _indent(text: str, prefix: str) -> str:
    return "\n".join(f"{prefix}{line}" if line else line for line in text.splitlines())


class CollectionRegistry:
    """Name → collection map, built once at startup and handed to the catalog."""

    def __init__(self) -> None:
        self._collections: dict[str, Collection] = {}
        self._lock = threading.Lock()

    def register(self, collection: Collection) -> None:
        name = collection.name
        if not name:
            raise ValueError("collection name must not be empty")
        with self._lock:
            if name in self._collections:
                raise CollectionExistsError(f"{name} already exists")
            self._collections[name] = collection

    def unregister(self, name: str) -> None:
        with self._lock:
            if name not in self._collections:
                raise CollectionNotFoundError(f"{name} does not exist")
            del self._collections[name]

    def get(self, name: str) -> Collection:
        with self._lock:
            try:
                return self._collections[name]
            except KeyError as error:
                raise CollectionNotFoundError(f"'{name}' not registered") from error

    def names(self) -> list[str]:
        with self._lock:
            return list(self._collections)
