"""Shell completion for `collection:task` references."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from jack_cli.catalog.models import Catalog

TASK_SEPARATOR = ":"


class CompletionDirective(str, Enum):
    """How the shell should treat the suggestions."""

    DEFAULT = "default"
    NO_FILE_COMP = "no_file_comp"


@dataclass(slots=True)
class CompletionResult:
    suggestions: list[str] = field(default_factory=list)
    directive: CompletionDirective = CompletionDirective.DEFAULT


class TaskReferenceError(ValueError):
    """Raised for a task reference that is not `collection:task`."""


def resolve_task_reference(reference: str) -> tuple[str, str]:
    """Split `collection:task` at the first colon."""

    collection, separator, task = reference.partition(TASK_SEPARATOR)
    if not separator or not collection or not task:
        raise TaskReferenceError(
            f"Invalid task reference {reference!r}: expected COLLECTION:TASK.",
        )
    return collection, task


class CompletionEngine:
    """Answers partial-input queries against a freshly built catalog."""

    def __init__(self, catalog_factory: Callable[[], Catalog]) -> None:
        self._catalog_factory = catalog_factory

    def complete(self, partial: str) -> CompletionResult:
        # Default directive keeps filename completion available next to suggestions.
        result = CompletionResult(directive=CompletionDirective.DEFAULT)
        catalog = self._catalog_factory()

        if TASK_SEPARATOR in partial:
            collection_name, _, task_prefix = partial.partition(TASK_SEPARATOR)
            collection = catalog.get(collection_name)
            if collection is None:
                return result
            for task_name, task in collection.tasks.items():
                if not task_name.startswith(task_prefix):
                    continue
                suggestion = f"{collection_name}{TASK_SEPARATOR}{task_name}"
                if task.summary:
                    suggestion = f"{suggestion}\t{task.summary}"
                result.suggestions.append(suggestion)
            return result

        for collection_name in catalog:
            if collection_name.startswith(partial):
                result.suggestions.append(f"{collection_name}{TASK_SEPARATOR}")
        return result
