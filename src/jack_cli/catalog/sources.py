"""Catalog sources: builtin collections and executable plugins on disk."""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from jack_cli.catalog.describe import parse_collection
from jack_cli.catalog.models import CatalogBuildResult, CatalogSkip, CatalogSourceKind
from jack_cli.catalog.registry import Collection, CollectionNotFoundError, CollectionRegistry

logger = logging.getLogger(__name__)

DESCRIBE_FLAG = "--describe"
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class DescribeError(RuntimeError):
    """A collection could not produce its describe text."""


class DescribableCollection(Protocol):
    """Anything that can describe its tasks in the describe protocol."""

    name: str

    def describe(self) -> list[str]:
        """Return describe-text chunks."""
        raise NotImplementedError


@dataclass(slots=True)
class BuiltinDescribable:
    """Describes an in-process collection through its help output."""

    name: str
    collection: Collection

    def describe(self) -> list[str]:
        try:
            return list(self.collection.help(""))
        except Exception as error:  # noqa: BLE001
            raise DescribeError(f"failed to get help for collection {self.name}: {error}") from error


@dataclass(slots=True)
class ExternalPlugin:
    """Executable plugin invoked as `<path> --describe`."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def describe(self) -> list[str]:
        try:
            completed = subprocess.run(  # noqa: S603
                [str(self.path), DESCRIBE_FLAG],
                check=False,
                capture_output=True,
                env=os.environ.copy(),
            )
        except OSError as error:
            raise DescribeError(f"failed to execute {self.path}: {error}") from error
        if completed.returncode != 0:
            raise DescribeError(f"{self.path} {DESCRIBE_FLAG} exit code={completed.returncode}")
        # Invalid UTF-8 in describe output becomes U+FFFD.
        return [completed.stdout.decode("utf-8", errors="replace")]


def is_executable(mode: int) -> bool:
    return bool(mode & EXECUTABLE_BITS)


class BuiltinCatalogSource:
    """Collections registered in the in-process registry."""

    kind = CatalogSourceKind.BUILTIN

    def __init__(self, registry: CollectionRegistry) -> None:
        self.registry = registry

    def describables(self) -> tuple[list[DescribableCollection], list[CatalogSkip]]:
        found: list[DescribableCollection] = []
        skipped: list[CatalogSkip] = []
        for name in self.registry.names():
            try:
                collection = self.registry.get(name)
            except CollectionNotFoundError as error:
                logger.debug("failed to get collection %s from registry: %s", name, error)
                skipped.append(CatalogSkip(name=name, source=self.kind, reason=str(error)))
                continue
            found.append(BuiltinDescribable(name=name, collection=collection))
        return found, skipped

    def collect(self) -> CatalogBuildResult:
        describables, skipped = self.describables()
        result = _describe_all(describables, kind=self.kind)
        result.skipped[:0] = skipped
        return result


class ExternalPluginCatalogSource:
    """Executable files found in the plugin directory."""

    kind = CatalogSourceKind.EXTERNAL

    def __init__(self, plugin_dir: Path) -> None:
        self.plugin_dir = plugin_dir

    def describables(self) -> tuple[list[DescribableCollection], list[CatalogSkip]]:
        found: list[DescribableCollection] = []
        skipped: list[CatalogSkip] = []
        if not self.plugin_dir.exists():
            logger.debug("plugin directory does not exist: %s", self.plugin_dir)
            return found, skipped

        try:
            entries = sorted(self.plugin_dir.iterdir())
        except OSError as error:
            logger.debug("failed to read plugin directory %s: %s", self.plugin_dir, error)
            return found, skipped

        for entry in entries:
            try:
                mode = entry.stat().st_mode
            except OSError as error:
                logger.debug("failed to stat plugin candidate %s: %s", entry, error)
                skipped.append(CatalogSkip(name=entry.name, source=self.kind, reason=str(error)))
                continue
            if stat.S_ISDIR(mode):
                continue
            if not stat.S_ISREG(mode):
                logger.debug("skipping %s: not a regular file", entry)
                skipped.append(
                    CatalogSkip(name=entry.name, source=self.kind, reason="not a regular file"),
                )
                continue
            if not is_executable(mode):
                logger.debug("skipping %s: not executable", entry)
                skipped.append(
                    CatalogSkip(name=entry.name, source=self.kind, reason="not executable"),
                )
                continue
            found.append(ExternalPlugin(path=entry))
        return found, skipped

    def collect(self) -> CatalogBuildResult:
        describables, skipped = self.describables()
        result = _describe_all(describables, kind=self.kind)
        result.skipped[:0] = skipped
        return result


def _describe_all(
    describables: list[DescribableCollection],
    *,
    kind: CatalogSourceKind,
) -> CatalogBuildResult:
    result = CatalogBuildResult()
    for describable in describables:
        if not describable.name:
            result.skipped.append(
                CatalogSkip(name=describable.name, source=kind, reason="empty collection name"),
            )
            continue
        try:
            chunks = describable.describe()
        except DescribeError as error:
            logger.debug("skipping collection %s: %s", describable.name, error)
            result.skipped.append(CatalogSkip(name=describable.name, source=kind, reason=str(error)))
            continue
        result.catalog[describable.name] = parse_collection(describable.name, chunks)
    return result
