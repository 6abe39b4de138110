"""Terminal markup helpers shared by every jack sub-command.

Helpers return rich console markup. Text passed in is escaped, so values coming
from agents (which may contain square brackets) are printed verbatim.
"""

from __future__ import annotations

import textwrap

from rich.console import Console
from rich.markup import escape

YELLOW = "#e9a015"
RED = "#d0523c"
GREEN = "#00aa00"
DARK_RED = "#aa0000"
GRAY = "#888888"
BLACK = "#111111"

H1_STYLE = f"bold {BLACK} on {YELLOW}"
H2_STYLE = f"bold {YELLOW}"
EMPH_STYLE = f"italic {RED}"
SUBTITLE_STYLE = f"italic {GRAY}"
SUCCESS_STYLE = f"bold {GREEN}"
ERROR_STYLE = f"bold {DARK_RED}"
UNKNOWN_STYLE = f"bold {GRAY}"
ID_STYLE = f"bold {YELLOW}"

BLOCK_MARGIN = 4


def _styled(style: str, text: str) -> str:
    return f"[{style}]{escape(text)}[/]"


def title(text: str) -> str:
    return f"\n{_styled(H1_STYLE, f' {text} ')}\n"


def block_title(text: str) -> str:
    return f"\n{_styled(H2_STYLE, f'→ {text}:')}\n"


def inline_block_title(text: str) -> str:
    return f"\n{_styled(H2_STYLE, f'→ {text}:')} "


def block(text: str) -> str:
    return textwrap.indent(escape(text.strip("\n")), " " * BLOCK_MARGIN)


def spaced_block(markup: str) -> str:
    """Surround already-rendered markup with blank lines."""

    markup = markup.strip("\n")
    if not markup:
        return "\n"
    return f"\n{markup}\n"


def item(text: str) -> str:
    return f" • {escape(text)}\n"


def sub_item(text: str) -> str:
    return f"   • {escape(text)}\n"


def subtitle(text: str) -> str:
    return f"\n{_styled(SUBTITLE_STYLE, text)}\n"


def emph(text: str) -> str:
    return _styled(EMPH_STYLE, text)


def render_success(text: str) -> str:
    return _styled(SUCCESS_STYLE, text)


def render_error(text: str) -> str:
    return _styled(ERROR_STYLE, text)


def render_unknown(text: str) -> str:
    return _styled(UNKNOWN_STYLE, text)


def render_id(text: str) -> str:
    return _styled(ID_STYLE, text)


def pretty_print(markup: str, *, console: Console | None = None) -> None:
    """Print rendered markup, stripping styles when stdout is not a terminal."""

    (console or Console()).print(markup, highlight=False, emoji=False, soft_wrap=True)
