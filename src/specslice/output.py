"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (encoded extractions, generated DTOs,
  tables). This is what downstream tools pipe and parse.
* **stderr** -- all diagnostics (statistics, warnings, errors,
  suggestions). Never contaminates the data stream.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~specslice.app.main_callback` and installed via :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from specslice.models import DeepField


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise. Callers can force a specific
    format via the ``--json`` or ``--plain`` CLI flags.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
        output_file: If set, redirect primary data output to this file
            path instead of stdout. The file is truncated by the first
            write of the run.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._file_started = False

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout (or to the configured output file).

        Args:
            text: The string to write. A trailing newline is appended if
                missing.
        """
        if self._output_file:
            mode = "a" if self._file_started else "w"
            with open(self._output_file, mode, encoding="utf-8") as f:
                f.write(text)
                if not text.endswith("\n"):
                    f.write("\n")
            self._file_started = True
        else:
            print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any, indent: int = 2) -> None:
        """Print *data* as JSON, highlighted in Rich mode."""
        text = json.dumps(data, indent=indent, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH and not self._output_file:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_code(self, source: str, lexer: str) -> None:
        """Print generated source code, syntax-highlighted in Rich mode.

        Args:
            source: The code to print.
            lexer: Pygments lexer name used for highlighting.
        """
        if self._format == OutputFormat.RICH and not self._output_file:
            self._stdout.print(Syntax(source, lexer, theme="monokai", word_wrap=True))
        else:
            self.print_data(source)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout in the active format.

        * **Rich mode** -- styled :class:`~rich.table.Table` with column
          headers.
        * **JSON mode** -- array of objects keyed by header names.
        * **Plain mode** -- tab-separated values, one row per line.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))

        elif self._format == OutputFormat.PLAIN or self._output_file:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))

        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def print_fields(self, name: str, fields: dict[str, DeepField]) -> None:
        """Print a deeply resolved schema.

        Rich mode draws a :class:`~rich.tree.Tree`; plain mode prints one
        indented ``field: type`` line per node; JSON mode prints the
        serialised field tree.
        """
        if self._format == OutputFormat.JSON:
            self.print_json(
                {key: field.model_dump(exclude_none=True) for key, field in fields.items()}
            )
        elif self._format == OutputFormat.PLAIN or self._output_file:
            self.print_data(f"{name}:")
            for line in _field_lines(fields, depth=1):
                self.print_data(line)
        else:
            tree = Tree(f"[bold]{name}[/bold]")
            _add_tree_nodes(tree, fields)
            self._stdout.print(tree)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr. Suppressed by ``--quiet``.

        Args:
            message: The suggestion text (prefixed with an arrow on output).
        """
        if not self._quiet:
            formatted = f"→ {message}"
            if self._no_color:
                print(formatted, file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{formatted}[/dim]")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim][debug] {message}[/dim]")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _field_lines(fields: dict[str, DeepField], depth: int) -> list[str]:
    lines: list[str] = []
    for key, field in fields.items():
        lines.append(f"{'  ' * depth}{key}: {field.type}")
        if field.fields:
            lines.extend(_field_lines(field.fields, depth + 1))
    return lines


def _add_tree_nodes(tree: Tree, fields: dict[str, DeepField]) -> None:
    for key, field in fields.items():
        branch = tree.add(f"{key}: [cyan]{field.type}[/cyan]")
        if field.fields:
            _add_tree_nodes(branch, field.fields)


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` with ``AUTO`` format is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def print_data(text: str) -> None:
    """Print raw text to stdout via the global :class:`OutputManager`."""
    get_output().print_data(text)


def print_json(data: Any, indent: int = 2) -> None:
    """Print JSON data via the global :class:`OutputManager`."""
    get_output().print_json(data, indent=indent)


def print_code(source: str, lexer: str) -> None:
    """Print generated source via the global :class:`OutputManager`."""
    get_output().print_code(source, lexer)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    """Print a table via the global :class:`OutputManager`."""
    get_output().print_table(headers, rows, title=title)


def print_fields(name: str, fields: dict[str, DeepField]) -> None:
    """Print a deep field tree via the global :class:`OutputManager`."""
    get_output().print_fields(name, fields)


def info(message: str) -> None:
    """Print info to stderr via the global :class:`OutputManager`."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global :class:`OutputManager`."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success to stderr via the global :class:`OutputManager`."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global :class:`OutputManager`."""
    get_output().warning(message)


def suggest(message: str) -> None:
    """Print suggestion to stderr via the global :class:`OutputManager`."""
    get_output().suggest(message)


def debug(message: str) -> None:
    """Print debug to stderr via the global :class:`OutputManager`."""
    get_output().debug(message)
