"""Shared test fixtures."""

from __future__ import annotations

import json
import stat
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from jack_cli.catalog.builtins import load_builtins
from jack_cli.catalog.registry import CollectionRegistry
from jack_cli.config import Settings


def write_plugin(
    directory: Path,
    name: str,
    describe_text: str,
    *,
    executable: bool = True,
    exit_code: int = 0,
) -> Path:
    """Write a fake plugin answering `--describe` with `describe_text`."""

    directory.mkdir(parents=True, exist_ok=True)
    if not describe_text.endswith("\n"):
        describe_text += "\n"
    path = directory / name
    path.write_text(
        "#!/bin/sh\n"
        'if [ "$1" = "--describe" ]; then\n'
        "cat <<'DESCRIBE'\n"
        f"{describe_text}"
        "DESCRIBE\n"
        f"exit {exit_code}\n"
        "fi\n"
        "exit 1\n",
        "utf-8",
    )
    mode = path.stat().st_mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    if executable:
        mode |= stat.S_IXUSR
    path.chmod(mode)
    return path


@pytest.fixture()
def plugin_dir(tmp_path: Path) -> Path:
    return tmp_path / "plugins"


@pytest.fixture()
def make_plugin() -> Callable[..., Path]:
    return write_plugin


@pytest.fixture()
def registry() -> CollectionRegistry:
    return load_builtins()


@pytest.fixture()
def settings(plugin_dir: Path) -> Settings:
    settings = Settings()
    settings.manager.url = "http://manager.test"
    settings.catalog.plugin_dir = plugin_dir
    return settings


@pytest.fixture()
def manager_transport() -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport serving stored results, requests and agents.

    Every request body is recorded in `transport.calls` as `(path, body)`.
    """

    def _factory(
        *,
        results: dict[str, str] | None = None,
        requests: dict[str, dict[str, object]] | None = None,
        listing: list[dict[str, object]] | None = None,
        exec_responses: dict[str, dict[str, object]] | None = None,
        agents: dict[str, list[dict[str, object]]] | None = None,
    ) -> httpx.MockTransport:
        calls: list[tuple[str, dict[str, object]]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content or b"{}")
            calls.append((request.url.path, body))
            path = request.url.path
            if path == "/v1/results/get":
                result_id = body["resultID"]
                if results is None or result_id not in results:
                    return httpx.Response(404, json={"message": f"result {result_id} not found"})
                return httpx.Response(200, json={"result": results[result_id]})
            if path == "/v1/requests/get":
                request_id = body["requestID"]
                if requests is None or request_id not in requests:
                    return httpx.Response(404, json={"message": f"request {request_id} not found"})
                return httpx.Response(200, json={"request": json.dumps(requests[request_id])})
            if path == "/v1/results/list":
                return httpx.Response(200, json={"results": listing or []})
            if path == "/v1/task/exec":
                return httpx.Response(200, json=exec_responses or {})
            if path == "/v1/agents/list":
                return httpx.Response(200, json=agents or {})
            if path == "/v1/agents/accept":
                return httpx.Response(200, json={"agent": body["agent"]})
            if path in {"/v1/agents/reject", "/v1/agents/remove"}:
                return httpx.Response(200, json={})
            return httpx.Response(404, json={"message": "unknown endpoint"})

        transport = httpx.MockTransport(handler)
        transport.calls = calls  # type: ignore[attr-defined]
        return transport

    return _factory
