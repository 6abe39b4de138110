"""Controller for catalog queries: shell completion and collection listing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jack_cli import style
from jack_cli.catalog.builder import CatalogBuilder
from jack_cli.catalog.completion import CompletionEngine, CompletionResult
from jack_cli.catalog.registry import CollectionRegistry
from jack_cli.config import CatalogSettings


@dataclass(slots=True)
class CollectionsListCommand:
    """CLI input for catalog listing."""

    plugin_dir: Path | None
    show_skipped: bool = False


class CatalogCliController:
    """Builds the catalog on demand from the startup registry and the plugin directory."""

    def __init__(self, registry: CollectionRegistry) -> None:
        self.registry = registry

    def builder(self, plugin_dir: Path | None = None) -> CatalogBuilder:
        settings = CatalogSettings.from_env(plugin_dir)
        return CatalogBuilder(registry=self.registry, plugin_dir=settings.plugin_dir)

    def complete(self, partial: str) -> CompletionResult:
        return CompletionEngine(self.builder().collections).complete(partial)

    def list_collections(self, command: CollectionsListCommand) -> str:
        result = self.builder(command.plugin_dir).build()

        out = style.title("Collections")
        items = ""
        for name in sorted(result.catalog):
            items += style.item(f"{name}:")
            for task in sorted(result.catalog[name].tasks.values(), key=lambda task: task.name):
                items += style.sub_item(task.summary)
        out += style.spaced_block(items or style.item("No collections found"))

        out += style.subtitle(
            f"{len(result.catalog)} collections, {len(result.skipped)} skipped",
        )
        if command.show_skipped:
            for skip in result.skipped:
                out += style.item(f"{skip.name} ({skip.source.value}): {skip.reason}")
        return out
