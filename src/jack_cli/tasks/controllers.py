"""Controller for `jack run`."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from jack_cli.catalog.completion import resolve_task_reference
from jack_cli.config import Settings
from jack_cli.service.client import ManagerClient
from jack_cli.service.models import TaskRequest
from jack_cli.tasks.arguments import parse_task_args
from jack_cli.tasks.render import render_task_responses, responses_to_json
from jack_cli.tasks.targeting import TargetSelection, parse_lock_mode, targets_from_file

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TaskRunCommand:
    """CLI input for one task dispatch."""

    target: str
    task: str
    args: tuple[str, ...]
    selection: TargetSelection
    lock_mode: str
    timeout_seconds: int | None = None
    json_format: bool = False
    sort_output: bool | None = None


@dataclass(slots=True)
class TaskRunOutput:
    """Rendered dispatch outcome; `markup` is False for raw JSON."""

    text: str
    markup: bool


class TaskCliController:
    """Sends one task to the manager and renders every agent's answer."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def run(self, command: TaskRunCommand) -> TaskRunOutput:
        settings = self._settings or Settings.from_env()
        settings.validate()

        selected = command.selection.selected()
        if len(selected) > 1:
            raise ValueError(f"target flags are mutually exclusive: {', '.join(selected)}")
        if not command.target:
            raise ValueError("target must not be empty")
        resolve_task_reference(command.task)

        target = command.target
        if command.selection.file:
            target = targets_from_file(Path(command.target))

        timeout = command.timeout_seconds or settings.task.timeout_seconds
        request = TaskRequest(
            target=target,
            target_mode=command.selection.mode(),
            lock_mode=parse_lock_mode(command.lock_mode),
            task=command.task,
            input=parse_task_args(command.args),
            timeout=timeout,
        )
        logger.debug(
            "Dispatching %s to %s (mode=%s lock=%s)",
            request.task,
            request.target,
            request.target_mode.value,
            request.lock_mode.value,
        )

        with ManagerClient(
            settings.manager.url,
            timeout_seconds=settings.manager.request_timeout_seconds,
            transport=self._transport,
        ) as client:
            responses = client.exec_task(request)

        sort_output = settings.task.sort_output if command.sort_output is None else command.sort_output
        if command.json_format:
            return TaskRunOutput(
                text=responses_to_json(responses, sort_output=sort_output),
                markup=False,
            )
        return TaskRunOutput(
            text=render_task_responses(responses, sort_output=sort_output),
            markup=True,
        )
