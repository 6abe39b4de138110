"""Merge builtin and plugin collections into one namespace."""

from __future__ import annotations

import logging
from pathlib import Path

from jack_cli.catalog.models import Catalog, CatalogBuildResult
from jack_cli.catalog.registry import CollectionRegistry
from jack_cli.catalog.sources import BuiltinCatalogSource, ExternalPluginCatalogSource

logger = logging.getLogger(__name__)


class CatalogBuilder:
    """Builds the catalog from scratch on every call; nothing is cached.

    Builtins are collected first and plugins second, so a plugin file named
    like a builtin collection replaces it entirely.
    """

    def __init__(self, *, registry: CollectionRegistry, plugin_dir: Path) -> None:
        self.builtin_source = BuiltinCatalogSource(registry)
        self.external_source = ExternalPluginCatalogSource(plugin_dir)

    def build(self) -> CatalogBuildResult:
        result = self.builtin_source.collect()
        result.merge(self.external_source.collect())
        logger.debug(
            "Catalog built: collections=%d skipped=%d",
            len(result.catalog),
            len(result.skipped),
        )
        return result

    def collections(self) -> Catalog:
        return self.build().catalog
