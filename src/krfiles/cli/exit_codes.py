"""Process exit statuses returned by ``krfiles``.

Every reported failure, typed or not, exits with :data:`GENERAL_ERROR`
after printing an ``error:`` line; only an interrupt differs.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The command ran to completion."""

GENERAL_ERROR: int = 1
"""An error was reported on stderr (configuration, auth, transport, decode, task, or unexpected)."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
