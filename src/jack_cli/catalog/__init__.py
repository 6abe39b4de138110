"""Collection and task catalog: builtins, external plugins, completion."""

from jack_cli.catalog.builder import CatalogBuilder
from jack_cli.catalog.builtins import load_builtins
from jack_cli.catalog.completion import (
    CompletionDirective,
    CompletionEngine,
    CompletionResult,
    TaskReferenceError,
    resolve_task_reference,
)
from jack_cli.catalog.describe import parse_collection, parse_describe_text
from jack_cli.catalog.models import (
    Catalog,
    CatalogBuildResult,
    CatalogSkip,
    CatalogSourceKind,
    CollectionInfo,
    TaskInfo,
)
from jack_cli.catalog.registry import CollectionRegistry

__all__ = [
    "Catalog",
    "CatalogBuildResult",
    "CatalogBuilder",
    "CatalogSkip",
    "CatalogSourceKind",
    "CollectionInfo",
    "CollectionRegistry",
    "CompletionDirective",
    "CompletionEngine",
    "CompletionResult",
    "TaskInfo",
    "TaskReferenceError",
    "load_builtins",
    "parse_collection",
    "parse_describe_text",
    "resolve_task_reference",
]
