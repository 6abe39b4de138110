"""Rendering of per-agent task responses."""

from __future__ import annotations

import json
from typing import Any

from jack_cli import style
from jack_cli.results.render import to_yaml
from jack_cli.service.models import TaskResponse


def render_task_responses(responses: dict[str, TaskResponse], *, sort_output: bool = True) -> str:
    agents = sorted(responses) if sort_output else list(responses)
    out = ""
    for agent in agents:
        response = responses[agent]
        out += style.title(agent)

        if response.failed_internally:
            out += style.inline_block_title("id") + str(response.id)
            out += style.inline_block_title("groupID") + str(response.group_id or 0)
            out += style.inline_block_title("internal error") + style.render_error(
                response.internal_error,
            )
            if response.module_error:
                out += "\n" + style.block(response.module_error)
            out += "\n"
            continue

        if response.output is not None:
            out += style.block_title("output") + style.block(_output_text(response.output))
        else:
            out += style.inline_block_title("output") + style.emph("empty")

        if response.error:
            out += style.block_title("err") + style.block(response.error)

        if response.retcode > 0:
            out += style.inline_block_title("retcode") + str(response.retcode)

        out += "\n"
    return out


def responses_to_json(responses: dict[str, TaskResponse], *, sort_output: bool = True) -> str:
    agents = sorted(responses) if sort_output else list(responses)
    payload = {agent: responses[agent].to_payload() for agent in agents}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _output_text(output: Any) -> str:
    if isinstance(output, str):
        return output
    return to_yaml(output)
