"""Terminal rendering for storefront: data on stdout, diagnostics on stderr.

Product tables, quote text and JSON payloads are written to stdout so
they can be piped.  Status lines, latency readouts, errors and
``--verbose`` request traces go to stderr.  Colour is dropped when
``NO_COLOR`` is set, ``TERM=dumb``, or ``--no-color`` is passed, in which
case everything is written with plain ``print``.

The CLI builds one :class:`OutputManager` in
:func:`~storefront.app.main_callback` and installs it with
:func:`set_output`.  Library code (the transport, the controller) only
calls the module-level :func:`debug`, so it stays silent unless a front
end asked for verbose output.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from storefront.models import Product


class OutputFormat(str, Enum):
    """How stdout data is rendered.

    ``AUTO`` picks ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes storefront output to the right stream in the chosen format.

    Args:
        format: Rendering for stdout data.
        no_color: Write plain text everywhere, without Rich markup.
        quiet: Hide informational and success lines on stderr.
        verbose: Show ``[debug]`` lines on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            interactive = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
            format = OutputFormat.RICH if interactive and not self._no_color else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # --- stdout ---

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write a JSON-like payload (or plain string) to stdout."""
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.RICH and isinstance(data, (dict, list)):
            rendered = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(rendered, "json", theme="monokai", word_wrap=True))
        elif isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{value}")
        else:
            self.print_data(str(data))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Rich table, JSON array of records, or tab-separated lines."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    def print_products(self, products: Sequence[Product]) -> None:
        """Render the catalog; JSON mode emits the products as the backend sent them."""
        if self._format == OutputFormat.JSON:
            self.format_response([p.model_dump() for p in products])
        elif not products:
            self.info("No products yet.")
        else:
            rows = [[str(p.id), p.name, f"${format_price(p.price)}"] for p in products]
            self.print_table(["ID", "Name", "Price"], rows, title="Products")

    # --- stderr ---

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, escape(message))

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        """Always shown, even with ``--quiet``."""
        self._diagnostic(f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    def _diagnostic(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)


def _color_disabled_by_env() -> bool:
    """``NO_COLOR`` (any value) or ``TERM=dumb`` turns colour off, per clig.dev."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def format_price(value: float) -> str:
    """Two decimals with thousands separators: ``3.5`` -> ``"3.50"``."""
    return f"{value:,.2f}"


def format_latency(ms: Optional[float]) -> str:
    """``"⏱ 12 ms"``, or an empty string before the first measurement."""
    if ms is None:
        return ""
    return f"⏱ {round(ms)} ms"


# --- process-wide manager ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; tests call this between runs."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def debug(message: str) -> None:
    get_output().debug(message)
