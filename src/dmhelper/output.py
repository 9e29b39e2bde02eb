"""
Operator-facing output: section headers and ``[+]`` / ``[!]`` / ``[-]`` markers.

Progress goes to stdout, failures to stderr so that piping a wrapped command's
output keeps working.
"""

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def print_header(title: str) -> None:
    console.print(f"[bold]===== {escape(title)} =====[/]")


def print_ok(message: str) -> None:
    console.print(f"\\[[green]+[/]] {escape(message)}")


def print_error(message: str) -> None:
    err_console.print(f"\\[[red]![/]] {escape(message)}")


def print_missing(message: str) -> None:
    err_console.print(f"\\[[red]-[/]] {escape(message)}")
