from __future__ import annotations

import os
import stat
from pathlib import Path

import allure
import pytest

from jack_cli.catalog.builder import CatalogBuilder
from jack_cli.catalog.models import CatalogSourceKind
from jack_cli.catalog.registry import BuiltinCollection, BuiltinTask, CollectionRegistry
from jack_cli.catalog.sources import (
    BuiltinCatalogSource,
    ExternalPlugin,
    ExternalPluginCatalogSource,
)

pytestmark = [
    allure.epic("Catalog"),
    allure.feature("Collection Discovery"),
    pytest.mark.skipif(os.name == "nt", reason="plugins are POSIX executables"),
]


class _BrokenCollection:
    name = "broken"

    def help(self, task_filter: str = "") -> list[str]:
        raise RuntimeError("help exploded")


class _VanishingRegistry(CollectionRegistry):
    """Lists a name it cannot return."""

    def names(self) -> list[str]:
        return [*super().names(), "ghost"]


def test_builtin_source_parses_every_registered_collection(registry: CollectionRegistry) -> None:
    result = BuiltinCatalogSource(registry).collect()

    assert set(result.catalog) == {"cmd", "health", "plugins"}
    assert set(result.catalog["health"].tasks) == {"instant-ping", "ping"}
    assert result.catalog["plugins"].tasks["sync"].summary.endswith("[exclusive-lock]")
    assert result.skipped == []


def test_builtin_source_skips_failing_collections() -> None:
    registry = _VanishingRegistry()
    registry.register(_BrokenCollection())
    healthy = BuiltinCollection(name="ok")
    healthy.register_task(BuiltinTask(name="go", summary="Go."))
    registry.register(healthy)

    result = BuiltinCatalogSource(registry).collect()

    assert set(result.catalog) == {"ok"}
    assert {skip.name for skip in result.skipped} == {"broken", "ghost"}
    assert all(skip.source is CatalogSourceKind.BUILTIN for skip in result.skipped)


def test_external_source_missing_directory_is_empty(tmp_path: Path) -> None:
    result = ExternalPluginCatalogSource(tmp_path / "missing").collect()

    assert result.catalog == {}
    assert result.skipped == []


def test_external_source_uses_file_name_as_collection_name(plugin_dir: Path, make_plugin) -> None:
    make_plugin(plugin_dir, "demo", "Plugin demo:\n  hello  Say hello.\n  bye    Say bye.\n")

    result = ExternalPluginCatalogSource(plugin_dir).collect()

    assert list(result.catalog) == ["demo"]
    assert result.catalog["demo"].name == "demo"
    assert result.catalog["demo"].tasks["bye"].summary == "bye    Say bye."


def test_external_source_skips_non_executable_files(plugin_dir: Path, make_plugin) -> None:
    make_plugin(plugin_dir, "readme", "  hidden  Never listed.\n", executable=False)

    result = ExternalPluginCatalogSource(plugin_dir).collect()

    assert "readme" not in result.catalog
    assert [(skip.name, skip.reason) for skip in result.skipped] == [("readme", "not executable")]


def test_external_source_skips_failing_plugins_and_directories(
    plugin_dir: Path,
    make_plugin,
) -> None:
    make_plugin(plugin_dir, "crashy", "  boom  Fails.\n", exit_code=3)
    make_plugin(plugin_dir, "fine", "  ok  Works.\n")
    (plugin_dir / "nested").mkdir()

    result = ExternalPluginCatalogSource(plugin_dir).collect()

    assert list(result.catalog) == ["fine"]
    assert [skip.name for skip in result.skipped] == ["crashy"]
    assert "exit code=3" in result.skipped[0].reason


def test_external_plugin_describe_passes_describe_flag(plugin_dir: Path, make_plugin) -> None:
    path = make_plugin(plugin_dir, "echoer", "  a  A.\n")

    assert ExternalPlugin(path=path).describe() == ["  a  A.\n"]


def test_builder_prefers_external_collection_on_name_clash(
    registry: CollectionRegistry,
    plugin_dir: Path,
    make_plugin,
) -> None:
    make_plugin(plugin_dir, "health", "  custom  Replacement health check.\n")

    catalog = CatalogBuilder(registry=registry, plugin_dir=plugin_dir).collections()

    assert set(catalog["health"].tasks) == {"custom"}
    assert "ping" not in catalog["health"].tasks
    assert {"cmd", "plugins"} <= set(catalog)


def test_builder_rebuilds_on_every_call(
    registry: CollectionRegistry,
    plugin_dir: Path,
    make_plugin,
) -> None:
    builder = CatalogBuilder(registry=registry, plugin_dir=plugin_dir)
    assert "late" not in builder.collections()

    make_plugin(plugin_dir, "late", "  arrive  Shows up later.\n")

    assert "late" in builder.collections()


def test_builder_reports_skips_from_both_sources(plugin_dir: Path, make_plugin) -> None:
    registry = CollectionRegistry()
    registry.register(_BrokenCollection())
    make_plugin(plugin_dir, "notes.txt", "  x  y\n", executable=False)

    result = CatalogBuilder(registry=registry, plugin_dir=plugin_dir).build()

    assert result.catalog == {}
    assert [(skip.name, skip.source) for skip in result.skipped] == [
        ("broken", CatalogSourceKind.BUILTIN),
        ("notes.txt", CatalogSourceKind.EXTERNAL),
    ]


def test_external_source_replaces_invalid_utf8_in_describe_output(
    plugin_dir: Path,
    make_plugin,
) -> None:
    make_plugin(plugin_dir, "fine", "  ok  Works.\n")
    latin = plugin_dir / "latin"
    latin.write_text(
        "#!/bin/sh\n"
        "printf '  caf\\351  Caf\\351 task.\\n'\n",
        "utf-8",
    )
    latin.chmod(latin.stat().st_mode | stat.S_IXUSR)

    result = CatalogBuilder(registry=CollectionRegistry(), plugin_dir=plugin_dir).build()

    assert sorted(result.catalog) == ["fine", "latin"]
    assert list(result.catalog["latin"].tasks) == ["caf\ufffd"]
    assert result.skipped == []


def test_external_source_skips_named_pipes_without_running_them(plugin_dir: Path) -> None:
    plugin_dir.mkdir()
    fifo = plugin_dir / "pipe"
    os.mkfifo(fifo)
    fifo.chmod(0o755)

    result = ExternalPluginCatalogSource(plugin_dir).collect()

    assert result.catalog == {}
    assert [(skip.name, skip.reason) for skip in result.skipped] == [
        ("pipe", "not a regular file"),
    ]
