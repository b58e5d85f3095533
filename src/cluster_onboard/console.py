"""Status output for cluster-onboard.

Everything here prints to stderr through a themed Rich console, leaving
stdout to commands that write data (the graphviz command writes images).
Messages are Rich markup; wrap user supplied values in highlight(), which
escapes them.
"""

from collections.abc import Generator, Mapping
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "cyan bold",
    }
)

console = Console(theme=_THEME, stderr=True)


def _print(style: str, icon: str, message: str) -> None:
    console.print(f"[{style}]{icon}[/{style}] {message}")


def info(message: str) -> None:
    """Print an informational message, e.g. a configuration override."""
    _print("info", "ℹ", message)


def success(message: str) -> None:
    """Print the outcome of a completed step."""
    _print("success", "✓", message)


def warning(message: str) -> None:
    _print("warning", "⚠", message)


def error(message: str) -> None:
    """Print an error message.

    Args:
        message: The message to display. Escape error text coming from
                 exceptions, it may contain brackets.

    """
    _print("error", "✗", message)


def action(message: str) -> None:
    """Print what is about to happen."""
    _print("info", "→", message)


def highlight(text: str) -> str:
    """Return markup showing text in the highlight style.

    Args:
        text: A cluster name, context or path. Markup in it is escaped.

    Returns:
        Rich markup for the highlighted text.

    """
    return f"[highlight]{escape(text)}[/highlight]"


@contextmanager
def spinner(message: str) -> Generator[None, None, None]:
    """Show a spinner on stderr while the block runs."""
    with console.status(f"[info]{message}[/info]", spinner="dots"):
        yield


def summary_panel(title: str, items: Mapping[str, str]) -> None:
    """Print a panel listing the results of a command.

    Args:
        title: Title for the panel.
        items: Label to value pairs, shown as plain text.

    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column(style="highlight")

    for label, value in items.items():
        table.add_row(Text(f"{label}:"), Text(value))

    console.print(Panel(table, title=f"[bold]{escape(title)}[/bold]", border_style="success"))
