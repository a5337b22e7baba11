"""Interactive prompts for the CLI layer.

Only the password prompt lives here: input is read through questionary
with echo disabled, and cancellation is reported as a configuration
problem rather than an empty password.
"""

from __future__ import annotations

from typing import Any

from krfiles.exceptions import ConfigurationError, EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive input."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def prompt_password(username: str) -> str:
    """Ask for *username*'s password without echoing it.

    Raises
    ------
    ConfigurationError
        If the user cancels the prompt (Esc / Ctrl+C returns ``None``).
    EnvironmentError
        If questionary is not installed.
    """
    questionary = _import_questionary()

    password: str | None = questionary.password(f"Password for {username}:").ask()
    if password is None:
        raise ConfigurationError(
            "No password provided.",
            hint="Pass --password or enter it at the prompt.",
        )
    return password
