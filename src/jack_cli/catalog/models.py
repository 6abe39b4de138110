"""Domain models for the collection/task catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CatalogSourceKind(str, Enum):
    """Where a collection was discovered."""

    BUILTIN = "builtin"
    EXTERNAL = "external"


@dataclass(frozen=True, slots=True)
class TaskInfo:
    """One task parsed from a describe line.

    `summary` is the whole trimmed describe line, task name included.
    """

    name: str
    summary: str


@dataclass(slots=True)
class CollectionInfo:
    """Named group of tasks, keyed by task name."""

    name: str
    tasks: dict[str, TaskInfo] = field(default_factory=dict)


Catalog = dict[str, CollectionInfo]


@dataclass(frozen=True, slots=True)
class CatalogSkip:
    """A collection or plugin file left out of the catalog."""

    name: str
    source: CatalogSourceKind
    reason: str


@dataclass(slots=True)
class CatalogBuildResult:
    """Collections discovered by one source (or the merged builder) plus what was skipped."""

    catalog: Catalog = field(default_factory=dict)
    skipped: list[CatalogSkip] = field(default_factory=list)

    def merge(self, other: CatalogBuildResult) -> None:
        """Merge `other` over this result; same-name collections are replaced."""

        self.catalog.update(other.catalog)
        self.skipped.extend(other.skipped)
