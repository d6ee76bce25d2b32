"""Off-screen Rich rendering for CLI output.

Formatters build renderables and call :func:`render` to get plain text
back; color codes are dropped automatically when stdout is not a TTY.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console, RenderableType
from rich.theme import Theme

BRIDGE_THEME = Theme(
    {
        "bridge.ok": "bold green",
        "bridge.error": "bold red",
        "bridge.method": "bold cyan",
        "bridge.key": "dim",
        "bridge.id": "bold blue",
        "bridge.family": "magenta",
    }
)

DEFAULT_WIDTH = 120


def create_console(*, no_color: bool = False, width: int = DEFAULT_WIDTH) -> Console:
    """A themed console writing into a private buffer."""
    return Console(
        file=StringIO(),
        theme=BRIDGE_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


def render(*lines: RenderableType | tuple[RenderableType, ...], width: int = DEFAULT_WIDTH) -> str:
    """Print each line (a renderable or a tuple printed side by side) and return the text."""
    console = create_console(width=width)
    for line in lines:
        if isinstance(line, tuple):
            console.print(*line)
        else:
            console.print(line)
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue().rstrip("\n")
