"""Runtime configuration for the jack CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

DEFAULT_MANAGER_URL = "http://127.0.0.1:40080"
DEFAULT_PLUGIN_DIR = Path("/opt/jackadi/plugins")


@dataclass(slots=True)
class ManagerSettings:
    """Connection settings for the manager web API."""

    url: str = DEFAULT_MANAGER_URL
    request_timeout_seconds: float = 60.0


@dataclass(slots=True)
class CatalogSettings:
    """Where collections are discovered."""

    plugin_dir: Path = DEFAULT_PLUGIN_DIR

    @classmethod
    def from_env(cls, plugin_dir: Path | None = None) -> CatalogSettings:
        """Read only `JACK_PLUGIN_DIR`; other variables are not parsed."""

        return cls(
            plugin_dir=plugin_dir
            or Path(os.getenv("JACK_PLUGIN_DIR", str(DEFAULT_PLUGIN_DIR))),
        )


@dataclass(slots=True)
class ResultsSettings:
    """`jack results list` limits."""

    default_limit: int = 100
    page_limit: int = 100


@dataclass(slots=True)
class TaskSettings:
    """Defaults for `jack run`."""

    timeout_seconds: int = 30
    sort_output: bool = True


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    manager: ManagerSettings = field(default_factory=ManagerSettings)
    catalog: CatalogSettings = field(default_factory=CatalogSettings)
    results: ResultsSettings = field(default_factory=ResultsSettings)
    task: TaskSettings = field(default_factory=TaskSettings)

    @classmethod
    def from_env(cls, plugin_dir: Path | None = None) -> Settings:
        """Load settings from environment, falling back to the stock install paths."""

        return cls(
            manager=ManagerSettings(
                url=os.getenv("JACK_MANAGER_URL", DEFAULT_MANAGER_URL).strip(),
                request_timeout_seconds=float(
                    os.getenv("JACK_REQUEST_TIMEOUT_SECONDS", "60"),
                ),
            ),
            catalog=CatalogSettings.from_env(plugin_dir),
            results=ResultsSettings(
                default_limit=int(os.getenv("JACK_RESULTS_LIMIT", "100")),
                page_limit=int(os.getenv("JACK_RESULTS_PAGE_LIMIT", "100")),
            ),
            task=TaskSettings(
                timeout_seconds=int(os.getenv("JACK_TASK_TIMEOUT_SECONDS", "30")),
                sort_output=_env_bool("JACK_SORT_OUTPUT", default=True),
            ),
        )

    def validate(self) -> None:
        """Raise configuration error on unusable values."""

        parsed = urlparse(self.manager.url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                "Invalid JACK_MANAGER_URL: "
                f"{self.manager.url!r}. Expected an absolute URL with http:// or https:// scheme.",
            )
        if self.manager.request_timeout_seconds <= 0:
            raise ValueError("JACK_REQUEST_TIMEOUT_SECONDS must be > 0.")
        if self.results.page_limit <= 0:
            raise ValueError("JACK_RESULTS_PAGE_LIMIT must be a positive integer.")
        if self.results.default_limit <= 0:
            raise ValueError("JACK_RESULTS_LIMIT must be a positive integer.")
        if self.task.timeout_seconds <= 0:
            raise ValueError("JACK_TASK_TIMEOUT_SECONDS must be > 0.")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
