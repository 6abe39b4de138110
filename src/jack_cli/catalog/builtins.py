"""Collections shipped with every agent, known to the CLI without a plugin file."""

from __future__ import annotations

from jack_cli.catalog.registry import BuiltinCollection, BuiltinTask, CollectionRegistry

INSTANT_PING_NAME = "instant-ping"
EXCLUSIVE_LOCK_FLAG = "exclusive-lock"


def cmd_collection() -> BuiltinCollection:
    collection = BuiltinCollection(name="cmd")
    collection.register_task(
        BuiltinTask(
            name="run",
            summary="Execute a command.",
            description=(
                "The executed command is not canceled when the agent is closed.\n"
                "It runs the command without a shell."
            ),
            args=(("cmd", "string", "ls -l"),),
        ),
    )
    return collection


def health_collection() -> BuiltinCollection:
    collection = BuiltinCollection(name="health")
    collection.register_task(
        BuiltinTask(
            name=INSTANT_PING_NAME,
            summary="Execute immediate ping.",
            description=(
                "This healthcheck bypasses any tasks queue and lock. "
                "The goal is to check connectivity only."
            ),
        ),
    )
    collection.register_task(
        BuiltinTask(
            name="ping",
            summary="Ping.",
            description="Normal healthcheck using the task queue.",
        ),
    )
    return collection


def plugins_collection() -> BuiltinCollection:
    collection = BuiltinCollection(name="plugins")
    collection.register_task(
        BuiltinTask(
            name="help",
            summary="Provide help for the given collection or collection:task.",
            description=(
                "Help for 'collection': gives the list of task with their summary.\n"
                "Help for 'collection:task': gives the full details of the task."
            ),
            args=(("name", "collection[:task]", "cmd or cmd:run"),),
        ),
    )
    collection.register_task(
        BuiltinTask(
            name="version",
            summary="Provide version of the given collection.",
            description="Info for 'collection': gives version, commit id, build time.",
            args=(("name", "collection", "cmd"),),
        ),
    )
    collection.register_task(
        BuiltinTask(
            name="list",
            summary="List of task in the given collection.",
            args=(("name", "collection", "cmd"),),
        ),
    )
    collection.register_task(
        BuiltinTask(
            name="sync",
            summary="Sync plugin with the manager.",
            description=(
                "The agent sync its plugins with the manager.\n"
                "It adds, updates and removes the collections following the manager "
                "configuration."
            ),
            flags=(EXCLUSIVE_LOCK_FLAG,),
        ),
    )
    return collection


def load_builtins(registry: CollectionRegistry | None = None) -> CollectionRegistry:
    """Register the stock collections into `registry` (a fresh one by default)."""

    if registry is None:
        registry = CollectionRegistry()
    for collection in (cmd_collection(), health_collection(), plugins_collection()):
        registry.register(collection)
    return registry
