from __future__ import annotations

import json
from pathlib import Path

import allure
import pytest
from rich.text import Text

from jack_cli.catalog.completion import TaskReferenceError
from jack_cli.config import Settings
from jack_cli.service.models import LockMode, TargetMode, TaskResponse
from jack_cli.tasks.arguments import ArgumentParseError, parse_task_args
from jack_cli.tasks.controllers import TaskCliController, TaskRunCommand
from jack_cli.tasks.render import render_task_responses, responses_to_json
from jack_cli.tasks.targeting import TargetSelection, parse_lock_mode, targets_from_file

pytestmark = [
    allure.epic("Task Dispatch"),
    allure.feature("jack run"),
]


def _plain(markup: str) -> str:
    return Text.from_markup(markup).plain


def _command(**overrides: object) -> TaskRunCommand:
    values: dict[str, object] = {
        "target": "web-*",
        "task": "cmd:run",
        "args": ("ls -l",),
        "selection": TargetSelection(),
        "lock_mode": "default",
    }
    values.update(overrides)
    return TaskRunCommand(**values)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("selection", "mode"),
    [
        (TargetSelection(), TargetMode.GLOB),
        (TargetSelection(exact=True), TargetMode.EXACT),
        (TargetSelection(list=True), TargetMode.LIST),
        (TargetSelection(file=True), TargetMode.LIST),
        (TargetSelection(glob=True), TargetMode.GLOB),
        (TargetSelection(regexp=True), TargetMode.REGEX),
        (TargetSelection(query=True), TargetMode.QUERY),
    ],
)
def test_target_selection_maps_to_mode(selection: TargetSelection, mode: TargetMode) -> None:
    assert selection.mode() is mode


@pytest.mark.parametrize(
    ("value", "mode"),
    [
        ("default", LockMode.UNSPECIFIED),
        ("none", LockMode.NO_LOCK),
        ("Write", LockMode.WRITE),
        (" exclusive ", LockMode.EXCLUSIVE),
        ("bogus", LockMode.UNSPECIFIED),
    ],
)
def test_parse_lock_mode(value: str, mode: LockMode) -> None:
    assert parse_lock_mode(value) is mode


def test_targets_from_file_deduplicates_and_skips_blanks(tmp_path: Path) -> None:
    path = tmp_path / "agents.txt"
    path.write_text("web-1\n\n  web-2  \nweb-1\n", "utf-8")

    assert targets_from_file(path) == "web-1,web-2"


def test_parse_task_args_splits_positionals_and_options() -> None:
    task_input = parse_task_args(["ls -l", "/tmp", "cwd=/var/log", "env=a=b"])

    assert task_input.args == ["ls -l", "/tmp"]
    assert task_input.options == {"cwd": "/var/log", "env": "a=b"}


@pytest.mark.parametrize("arg", ["=value", "key=", "bad-key=1"])
def test_parse_task_args_keeps_non_options_positional(arg: str) -> None:
    assert parse_task_args([arg]).args == [arg]


def test_parse_task_args_rejects_positional_after_option() -> None:
    with pytest.raises(ArgumentParseError, match="cannot be after key values"):
        parse_task_args(["a=1", "b"])


def test_render_task_responses_shows_output_error_and_retcode() -> None:
    responses = {
        "web-2": TaskResponse(id=2, output=None, error="permission denied", retcode=2),
        "web-1": TaskResponse(id=1, output={"stdout": "done"}),
    }

    plain = _plain(render_task_responses(responses))

    assert plain.index(" web-1 ") < plain.index(" web-2 ")
    assert "→ output:\n    stdout: done" in plain
    assert "→ output: empty" in plain
    assert "→ err:\n    permission denied" in plain
    assert "→ retcode: 2" in plain


def test_render_task_responses_shows_internal_errors() -> None:
    responses = {
        "web-1": TaskResponse(
            id=3,
            group_id=9,
            internal_error="module crashed",
            module_error="[trace] line 1",
        ),
    }

    plain = _plain(render_task_responses(responses))

    assert "→ id: 3" in plain
    assert "→ groupID: 9" in plain
    assert "→ internal error: module crashed" in plain
    assert "    [trace] line 1" in plain
    assert "→ output" not in plain


def test_render_task_responses_keeps_manager_order_when_unsorted() -> None:
    responses = {"b": TaskResponse(output="x"), "a": TaskResponse(output="y")}

    plain = _plain(render_task_responses(responses, sort_output=False))

    assert plain.index(" b ") < plain.index(" a ")


def test_responses_to_json_is_sorted_and_indented() -> None:
    text = responses_to_json({"b": TaskResponse(id=2), "a": TaskResponse(id=1, output=[1])})

    assert list(json.loads(text)) == ["a", "b"]
    assert json.loads(text)["a"]["output"] == [1]
    assert '\n  "a": {' in text


def test_controller_dispatches_and_renders(settings: Settings, manager_transport) -> None:
    transport = manager_transport(
        exec_responses={"web-1": {"Id": 1, "Output": "total 0", "InternalError": "OK"}},
    )
    controller = TaskCliController(settings, transport=transport)

    output = controller.run(
        _command(args=("ls", "cwd=/tmp"), lock_mode="exclusive", timeout_seconds=12),
    )

    assert output.markup
    assert "total 0" in _plain(output.text)
    path, body = transport.calls[0]
    assert path == "/v1/task/exec"
    assert body == {
        "target": "web-*",
        "targetMode": "GLOB",
        "lockMode": "EXCLUSIVE",
        "task": "cmd:run",
        "input": {"args": ["ls"], "options": {"cwd": "/tmp"}},
        "timeout": 12,
    }


def test_controller_reads_targets_from_file(
    settings: Settings,
    manager_transport,
    tmp_path: Path,
) -> None:
    agents = tmp_path / "agents"
    agents.write_text("web-1\nweb-2\n", "utf-8")
    transport = manager_transport(exec_responses={})

    output = TaskCliController(settings, transport=transport).run(
        _command(target=str(agents), selection=TargetSelection(file=True), json_format=True),
    )

    assert output.markup is False
    assert json.loads(output.text) == {}
    body = transport.calls[0][1]
    assert body["target"] == "web-1,web-2"
    assert body["targetMode"] == "LIST"
    assert body["timeout"] == settings.task.timeout_seconds


def test_controller_rejects_several_target_flags(settings: Settings) -> None:
    with pytest.raises(ValueError, match="mutually exclusive: exact, regexp"):
        TaskCliController(settings).run(
            _command(selection=TargetSelection(exact=True, regexp=True)),
        )


def test_controller_rejects_bad_task_reference(settings: Settings) -> None:
    with pytest.raises(TaskReferenceError):
        TaskCliController(settings).run(_command(task="cmd"))
