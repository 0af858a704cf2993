# contractgen/cli_theme.py
"""Terminal theme for the contractgen CLI.

Teal & sand palette:
  - Numbered section headers ("01 · SECTION NAME")
  - Rounded tables with sand borders
  - One-line status markers (ok / info / warn / err)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator

from rich import box
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.style import Style
from rich.table import Table
from rich.text import Text

# ── Brand ─────────────────────────────────────────────────────────

BRAND = "contractgen"
TAGLINE = "Schema patching and Python bindings for CosmWasm contracts"

# ── Palette ───────────────────────────────────────────────────────

TEAL = "#3BA99C"
SAND = "#C2B280"
MUTED = "dim"


def print_version(version: str, console: Console) -> None:
    """Print a compact branded version line."""
    t = Text()
    t.append(BRAND, style=f"bold {TEAL}")
    t.append(f"  v{version}", style=MUTED)
    console.print(t)


# ── Section headers ──────────────────────────────────────────────


def section(title: str, console: Console, number: str | None = None) -> None:
    """Print a numbered section header."""
    console.print()
    t = Text("  ")
    if number:
        t.append(number, style=f"bold {TEAL}")
        t.append(" · ", style=MUTED)
    t.append(title.upper(), style="bold")
    console.print(t)
    console.print(f"  {'─' * len(TAGLINE)}", style=SAND)


# ── Tables ───────────────────────────────────────────────────────


def make_table(title: str | None = None, **kwargs: object) -> Table:
    """Create a rounded table with sand borders."""
    return Table(
        title=title,
        box=box.ROUNDED,
        border_style=SAND,
        title_style=f"bold {TEAL}",
        header_style="bold",
        padding=(0, 1),
        **kwargs,
    )


def make_kv_table() -> Table:
    """Create a headerless two-column key–value table."""
    t = make_table(show_header=False)
    t.add_column("Key", style=f"bold {TEAL}", no_wrap=True)
    t.add_column("Value")
    return t


# ── Status lines ─────────────────────────────────────────────────


def info(msg: str) -> str:
    return f"  [{TEAL}]›[/{TEAL}] [{MUTED}]{msg}[/{MUTED}]"


def ok(msg: str) -> str:
    return f"  [bold green]✓[/bold green] {msg}"


def warn(msg: str) -> str:
    return f"  [bold yellow]![/bold yellow] [yellow]{msg}[/yellow]"


def err(msg: str) -> str:
    return f"  [bold red]✗[/bold red] {msg}"


# ── Progress ────────────────────────────────────────────────────


@contextmanager
def progress(total: int, label: str, console: Console) -> Generator[Callable[[], None], None, None]:
    """Progress bar for countable operations; yields an ``advance()`` callable."""
    p = Progress(
        TextColumn(f"  [{TEAL}]▸[/{TEAL}]"),
        BarColumn(complete_style=Style(color=TEAL), finished_style=Style(color=TEAL)),
        MofNCompleteColumn(),
        TextColumn(f"[{MUTED}]{label}[/{MUTED}]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with p:
        task = p.add_task(label, total=total)
        yield lambda: p.advance(task)
