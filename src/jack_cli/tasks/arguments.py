"""Split trailing `jack run` arguments into positional args and options."""

from __future__ import annotations

import re

from jack_cli.service.models import TaskInput

_OPTION_PATTERN = re.compile(r"^(?P<key>[a-zA-Z0-9_]+)=(?P<value>.+)$", re.DOTALL)


class ArgumentParseError(ValueError):
    """Arguments are not `positional... key=value...`."""


def parse_task_args(args: list[str] | tuple[str, ...]) -> TaskInput:
    """Positional arguments first, then `key=value` options.

    The shell already removed quoting, so `key="a b"` arrives as `key=a b`.
    """

    task_input = TaskInput()
    for arg in args:
        match = _OPTION_PATTERN.match(arg)
        if match is None:
            if task_input.options:
                raise ArgumentParseError("positional arguments cannot be after key values")
            task_input.args.append(arg)
            continue
        task_input.options[match.group("key")] = match.group("value")
    return task_input
