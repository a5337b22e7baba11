"""CLI application entry point and command routing for krfiles.

This module is the **sole error boundary** for the entire application.
It catches :class:`~krfiles.exceptions.KrfilesError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the dispatcher
  and the core/infrastructure layers.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from loguru import logger

from krfiles.cli import exit_codes
from krfiles.cli.console import console, escape
from krfiles.config import Settings, load_settings, setup_logging
from krfiles.exceptions import KrfilesError
from krfiles.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _global_options() -> argparse.ArgumentParser:
    """Options accepted both before and after the sub-command.

    ``SUPPRESS`` defaults keep a sub-parser from overwriting a value that
    was given before the sub-command name.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--server",
        default=argparse.SUPPRESS,
        help="Server URL (overrides KRFILES_SERVER).",
    )
    common.add_argument(
        "--token",
        default=argparse.SUPPRESS,
        help="Auth token from a previous login (or set KRFILES_TOKEN).",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Write debug logs to stderr.",
    )
    return common


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser and its sub-commands."""
    common = _global_options()
    parser = argparse.ArgumentParser(
        prog="krfiles",
        description="Filebrowser command-line client.",
        parents=[common],
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    login = sub.add_parser("login", parents=[common], help="Authenticate with a Filebrowser server.")
    login.add_argument("-u", "--username", required=True, help="Username.")
    login.add_argument("-p", "--password", default=None, help="Password (prompted if omitted).")

    ls = sub.add_parser("ls", parents=[common], help="List directory contents.")
    ls.add_argument("path", nargs="?", default="/", help="Path to list (default: /).")

    info = sub.add_parser("info", parents=[common], help="Show info about a file or directory.")
    info.add_argument("path", help="Path to inspect.")

    get = sub.add_parser("get", parents=[common], help="Download a file.")
    get.add_argument("remote_path", help="Remote file path.")
    get.add_argument("local_path", nargs="?", default=None, help="Local file path.")

    put = sub.add_parser("put", parents=[common], help="Upload a file.")
    put.add_argument("local_path", help="Local file path.")
    put.add_argument("remote_path", help="Remote file path.")
    put.add_argument("-f", "--force", action="store_true", help="Overwrite if it exists.")

    rm = sub.add_parser("rm", parents=[common], help="Delete a file or directory.")
    rm.add_argument("path", help="Path to delete.")

    for name, verb in (("mv", "Rename/move"), ("cp", "Copy")):
        cmd = sub.add_parser(name, parents=[common], help=f"{verb} a file or directory.")
        cmd.add_argument("source", help="Source path.")
        cmd.add_argument("destination", help="Destination path.")
        cmd.add_argument("-f", "--force", action="store_true", help="Overwrite if it exists.")

    mkdir = sub.add_parser("mkdir", parents=[common], help="Create a directory.")
    mkdir.add_argument("path", help="Path for the new directory.")

    search = sub.add_parser("search", parents=[common], help="Search for files.")
    search.add_argument("query", help="Search query.")
    search.add_argument("path", nargs="?", default="/", help="Path to search within (default: /).")

    sub.add_parser("doctor", help="Run environment diagnostics.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_command(args: argparse.Namespace, settings: Settings) -> int:
    """Run a remote command on a fresh event loop."""
    from krfiles.cli.commands import CommandDispatcher

    return asyncio.run(CommandDispatcher(args, settings).run())


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from krfiles.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the krfiles CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging("DEBUG" if getattr(args, "verbose", False) else settings.log_level)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor(settings)

    return _handle_command(args, settings)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except KrfilesError as exc:
        console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.opt(exception=exc).debug("unhandled exception")
        console.print(
            f"[bold red]error:[/bold red] unexpected {type(exc).__name__}: {escape(str(exc))}"
        )
        console.print("[yellow]hint:[/yellow] Please report this issue; rerun with -v for details.")
        sys.exit(exit_codes.GENERAL_ERROR)
