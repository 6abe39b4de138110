"""Target and lock-mode selection for `jack run`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jack_cli.service.models import LockMode, TargetMode

LIST_SEPARATOR = ","

LOCK_MODE_HELP = {
    "default": "Use default mode defined by the task",
    "none": "Allow concurrent execution",
    "write": "Single writer - one write task at a time, allows concurrent readers",
    "exclusive": "Exclusive lock - only one task runs at a time",
}

_LOCK_MODES = {
    "none": LockMode.NO_LOCK,
    "write": LockMode.WRITE,
    "exclusive": LockMode.EXCLUSIVE,
    "default": LockMode.UNSPECIFIED,
}


@dataclass(slots=True)
class TargetSelection:
    """Mutually exclusive target flags; none set means glob."""

    exact: bool = False
    list: bool = False
    file: bool = False
    glob: bool = False
    regexp: bool = False
    query: bool = False

    def selected(self) -> list[str]:
        return [
            name
            for name in ("exact", "list", "file", "glob", "regexp", "query")
            if getattr(self, name)
        ]

    def mode(self) -> TargetMode:
        if self.exact:
            return TargetMode.EXACT
        if self.list or self.file:
            return TargetMode.LIST
        if self.glob:
            return TargetMode.GLOB
        if self.regexp:
            return TargetMode.REGEX
        if self.query:
            return TargetMode.QUERY
        return TargetMode.GLOB


def parse_lock_mode(value: str) -> LockMode:
    """Map the user's lock choice; anything unknown falls back to the task default."""

    return _LOCK_MODES.get(value.strip().lower(), LockMode.UNSPECIFIED)


def targets_from_file(path: Path) -> str:
    """Read one agent per line, keeping first occurrences, joined as a list target."""

    agents: list[str] = []
    for line in path.read_text("utf-8").splitlines():
        agent = line.strip()
        if not agent or agent in agents:
            continue
        agents.append(agent)
    return LIST_SEPARATOR.join(agents)
