"""``krfiles doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can drive the krfiles native library.

This module lives in the CLI layer — it may import from ``infra``
and ``config``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import importlib.util
import platform
import sys

from krfiles.cli import exit_codes
from krfiles.cli.console import console, escape
from krfiles.config import Settings
from krfiles.infra.library_locator import LibraryStatus, detect_native_library
from krfiles.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _library_check(status_obj: LibraryStatus) -> tuple[str, str, str]:
    """Return (label, value, status) for the native library row."""
    if status_obj.found:
        return "native library", status_obj.location or "found", "[green]OK[/green]"
    return "native library", status_obj.version_hint, "[red]FAIL[/red]"


def _module_check(module: str) -> tuple[str, str, str]:
    """Return (label, value, status) for an optional UI dependency."""
    if importlib.util.find_spec(module) is not None:
        return module, "installed", "[green]OK[/green]"
    return module, "NOT INSTALLED", "[yellow]WARN[/yellow]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nkrfiles doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<38} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<38} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    library_status = detect_native_library(settings.library)
    checks = [
        ("krfiles", __version__, "[green]OK[/green]"),
        _python_version_check(),
        _library_check(library_status),
        _module_check("rich"),
        _module_check("questionary"),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
    else:
        table = Table(
            title="krfiles doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=14)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, escape(value), status)
        console.print()
        console.print(table)
        console.print()

    if not library_status.found:
        console.print("[yellow]The krfiles native library was not found.[/yellow]")
        for line in library_status.install_hints:
            console.print(f"  [bold]{escape(line)}[/bold]")
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
