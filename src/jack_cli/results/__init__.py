"""Result retrieval: grouped-result expansion and rendering."""

from jack_cli.results.grouped import (
    GROUPED_PREFIX,
    GroupedResultCycleError,
    GroupedResultResolver,
    cut_group_prefix,
    extract_request_id,
)
from jack_cli.results.render import (
    FieldRendering,
    ResultRenderError,
    decode_output,
    render_result,
)

__all__ = [
    "GROUPED_PREFIX",
    "FieldRendering",
    "GroupedResultCycleError",
    "GroupedResultResolver",
    "ResultRenderError",
    "cut_group_prefix",
    "decode_output",
    "extract_request_id",
    "render_result",
]
