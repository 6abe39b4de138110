"""CLI entrypoint for jack."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import rich_click as click
from click.shell_completion import CompletionItem, get_completion_class

from jack_cli import __version__, style
from jack_cli.agents.controllers import (
    AgentAcceptCommand,
    AgentsCliController,
    AgentsListCommand,
)
from jack_cli.catalog.builtins import load_builtins
from jack_cli.catalog.completion import CompletionDirective
from jack_cli.catalog.controllers import CatalogCliController, CollectionsListCommand
from jack_cli.results.controllers import (
    ResultsCliController,
    ResultsGetCommand,
    ResultsListCommand,
)
from jack_cli.results.grouped import GroupedResultCycleError
from jack_cli.service.client import ManagerError
from jack_cli.tasks.controllers import TaskCliController, TaskRunCommand
from jack_cli.tasks.targeting import LOCK_MODE_HELP, TargetSelection

click.rich_click.USE_MARKDOWN = True
COMPLETE_VAR = "_JACK_COMPLETE"
SUPPORTED_SHELLS = ("bash", "zsh", "fish")

REGISTRY = load_builtins()
CATALOG_CONTROLLER = CatalogCliController(REGISTRY)
AGENTS_CONTROLLER = AgentsCliController()
RESULTS_CONTROLLER = ResultsCliController()
TASK_CONTROLLER = TaskCliController()


@click.group()
@click.version_option(version=__version__, prog_name="jack")
@click.option("--json", "json_format", is_flag=True, help="Display result in JSON.")
@click.option(
    "--sort/--no-sort",
    "sort_output",
    default=None,
    help="Sort output by agent. Defaults to JACK_SORT_OUTPUT (on).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log discovery and API calls to stderr.")
@click.pass_context
def jack(ctx: click.Context, json_format: bool, sort_output: bool | None, verbose: bool) -> None:
    """Jack is the CLI to operate Jackadi."""

    ctx.ensure_object(dict)
    ctx.obj["json_format"] = json_format
    ctx.obj["sort_output"] = sort_output
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _complete_task_reference(
    ctx: click.Context,
    param: click.Parameter,
    incomplete: str,
) -> list[CompletionItem]:
    result = CATALOG_CONTROLLER.complete(incomplete)
    items = []
    for suggestion in result.suggestions:
        value, _, summary = suggestion.partition("\t")
        items.append(CompletionItem(value, help=summary or None))
    if result.directive is CompletionDirective.DEFAULT:
        items.append(CompletionItem(incomplete, type="file"))
    return items


def _complete_nothing(
    ctx: click.Context,
    param: click.Parameter,
    incomplete: str,
) -> list[CompletionItem]:
    return []


def _complete_lock_mode(
    ctx: click.Context,
    param: click.Parameter,
    incomplete: str,
) -> list[CompletionItem]:
    return [
        CompletionItem(name, help=help_text)
        for name, help_text in LOCK_MODE_HELP.items()
        if name.startswith(incomplete)
    ]


@jack.command("run")
@click.option("--target", "-t", "exact", is_flag=True, help="Target a specific agent.")
@click.option("--list", "-l", "list_", is_flag=True, help="Target a list of agents, separator: ','.")
@click.option(
    "--file",
    "-f",
    "file",
    is_flag=True,
    help="Target a list of agents from a file (one agent per line).",
)
@click.option("--glob", "-g", is_flag=True, help="Target agents matching the glob pattern.")
@click.option(
    "--regexp",
    "-e",
    is_flag=True,
    help="Target agents matching the regular expression.",
)
@click.option("--query", "-q", is_flag=True, help="Target agents using a query.")
@click.option(
    "--timeout",
    "timeout_seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Task timeout in seconds. Defaults to JACK_TASK_TIMEOUT_SECONDS (30).",
)
@click.option(
    "--lock-mode",
    type=click.Choice(list(LOCK_MODE_HELP), case_sensitive=False),
    default="default",
    show_default=True,
    shell_complete=_complete_lock_mode,
    help="Task lock mode: none (concurrent), write (single writer), exclusive.",
)
@click.argument("target", shell_complete=_complete_nothing)
@click.argument("task", metavar="COLLECTION:TASK", shell_complete=_complete_task_reference)
@click.argument("args", nargs=-1, shell_complete=_complete_nothing)
@click.pass_context
def run(  # noqa: PLR0913
    ctx: click.Context,
    exact: bool,
    list_: bool,
    file: bool,
    glob: bool,
    regexp: bool,
    query: bool,
    timeout_seconds: int | None,
    lock_mode: str,
    target: str,
    task: str,
    args: tuple[str, ...],
) -> None:
    """Run a task on one or multiple agents.

    Arguments after the task are positional values then `key=value` options.
    """

    with _cli_errors():
        output = TASK_CONTROLLER.run(
            TaskRunCommand(
                target=target,
                task=task,
                args=args,
                selection=TargetSelection(
                    exact=exact,
                    list=list_,
                    file=file,
                    glob=glob,
                    regexp=regexp,
                    query=query,
                ),
                lock_mode=lock_mode,
                timeout_seconds=timeout_seconds,
                json_format=ctx.obj["json_format"],
                sort_output=ctx.obj["sort_output"],
            ),
        )
    if output.markup:
        style.pretty_print(output.text)
    else:
        click.echo(output.text)


@jack.group()
def results() -> None:
    """Manage results."""


@results.command("get")
@click.argument("result_ids", metavar="ID ...", nargs=-1, required=True)
def results_get(result_ids: tuple[str, ...]) -> None:
    """Get results from ID. Grouped results are expanded into their members."""

    for result_id in result_ids:
        with _cli_errors():
            rendered = RESULTS_CONTROLLER.get(ResultsGetCommand(result_id=result_id))
        style.pretty_print(rendered)


@results.command("list")
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of results to return. Defaults to JACK_RESULTS_LIMIT (100).",
)
@click.option(
    "--offset",
    "-o",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Starting position for pagination.",
)
@click.option(
    "--from",
    "from_date",
    default=None,
    help="Filter results from this date (format: 2006-01-02 or 2006-01-02 15:04:05).",
)
@click.option(
    "--to",
    "to_date",
    default=None,
    help="Filter results up to this date (format: 2006-01-02 or 2006-01-02 15:04:05).",
)
@click.option(
    "--targets",
    "-t",
    default="",
    help="Filter results by agent IDs (comma separated).",
)
def results_list(
    limit: int | None,
    offset: int,
    from_date: str | None,
    to_date: str | None,
    targets: str,
) -> None:
    """List results."""

    with _cli_errors():
        rendered = RESULTS_CONTROLLER.list_results(
            ResultsListCommand(
                limit=limit,
                offset=offset,
                from_date=from_date,
                to_date=to_date,
                targets=tuple(part.strip() for part in targets.split(",") if part.strip()),
            ),
        )
    style.pretty_print(rendered)


@jack.group()
def agents() -> None:
    """Manage agents."""


@agents.command("list")
@click.option("--details", "-d", is_flag=True, help="Show agent details.")
@click.pass_context
def agents_list(ctx: click.Context, details: bool) -> None:
    """List accepted, candidate and rejected agents."""

    with _cli_errors():
        output = AGENTS_CONTROLLER.list_agents(_agents_list_command(ctx, details))
    _emit_agents(output.text, markup=output.markup)


@agents.command("health")
@click.option("--details", "-d", is_flag=True, help="Show agent details.")
@click.pass_context
def agents_health(ctx: click.Context, details: bool) -> None:
    """Show connection state of accepted agents."""

    with _cli_errors():
        output = AGENTS_CONTROLLER.health(_agents_list_command(ctx, details))
    _emit_agents(output.text, markup=output.markup)


@agents.command("accept")
@click.argument("agent_id", metavar="AGENT")
@click.option("--address", default="", help="Address of the agent to accept.")
@click.option("--certificate", default="", help="Certificate of the agent to accept.")
def agents_accept(agent_id: str, address: str, certificate: str) -> None:
    """Accept a candidate agent."""

    with _cli_errors():
        agent = AGENTS_CONTROLLER.accept(
            AgentAcceptCommand(agent_id=agent_id, address=address, certificate=certificate),
        )
    details = " ".join(part for part in (agent.address, agent.certificate) if part)
    style.pretty_print(style.item(f"agent registered: {agent.id} {details}".rstrip()))


@agents.command("reject")
@click.argument("agent_id", metavar="AGENT")
def agents_reject(agent_id: str) -> None:
    """Reject an agent."""

    with _cli_errors():
        AGENTS_CONTROLLER.reject(agent_id)
    style.pretty_print(style.item(f"agent rejected: {agent_id}"))


@agents.command("remove")
@click.argument("agent_id", metavar="AGENT")
def agents_remove(agent_id: str) -> None:
    """Remove an agent."""

    with _cli_errors():
        AGENTS_CONTROLLER.remove(agent_id)
    style.pretty_print(style.item(f"agent removed: {agent_id}"))


def _agents_list_command(ctx: click.Context, details: bool) -> AgentsListCommand:
    return AgentsListCommand(
        details=details,
        json_format=ctx.obj["json_format"],
        sort_output=ctx.obj["sort_output"],
    )


def _emit_agents(text: str, *, markup: bool) -> None:
    if markup:
        style.pretty_print(text)
    else:
        click.echo(text)


@jack.command("collections")
@click.option(
    "--plugin-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Plugin directory. Defaults to JACK_PLUGIN_DIR.",
)
@click.option("--show-skipped", is_flag=True, help="List plugins and collections left out.")
def collections(plugin_dir: Path | None, show_skipped: bool) -> None:
    """List builtin and plugin collections with their tasks."""

    with _cli_errors():
        rendered = CATALOG_CONTROLLER.list_collections(
            CollectionsListCommand(plugin_dir=plugin_dir, show_skipped=show_skipped),
        )
    style.pretty_print(rendered)


@jack.command("completion")
@click.argument("shell", type=click.Choice(SUPPORTED_SHELLS))
def completion(shell: str) -> None:
    """Generate shell completion scripts."""

    completion_class = get_completion_class(shell)
    if completion_class is None:  # pragma: no cover
        raise click.ClickException(f"Unsupported shell: {shell}")
    click.echo(completion_class(jack, {}, "jack", COMPLETE_VAR).source())


@contextmanager
def _cli_errors() -> Iterator[None]:
    try:
        yield
    except (ManagerError, GroupedResultCycleError, ValueError, OSError) as error:
        raise click.ClickException(str(error)) from error
    except RecursionError as error:
        # Grouped results referencing each other (A -> B -> A) end here.
        raise click.ClickException(f"grouped results reference each other: {error}") from error


if __name__ == "__main__":  # pragma: no cover
    jack()
