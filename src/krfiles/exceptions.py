"""Custom exception hierarchy for krfiles.

All exceptions that cross layer boundaries must inherit from
:class:`KrfilesError`.  Raw ``ctypes`` and third-party exceptions must
NEVER propagate beyond the infrastructure layer — they must be caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
KrfilesError
├── ConfigurationError
├── AuthError
├── TransportError
├── DecodeError
├── TaskError
└── EnvironmentError
    └── NativeLibraryNotFoundError
"""

from __future__ import annotations


class KrfilesError(Exception):
    """Base exception for all krfiles errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Invocation setup ------------------------------------------------------

class ConfigurationError(KrfilesError):
    """Raised when required settings are missing before any handle exists."""


# --- Remote service --------------------------------------------------------

class AuthError(KrfilesError):
    """Raised when the remote service rejects a login or token."""


class TransportError(KrfilesError):
    """Raised when a native boundary call reports failure."""


class DecodeError(KrfilesError):
    """Raised when a successful call returns JSON we cannot decode."""


# --- Offloading ------------------------------------------------------------

class TaskError(KrfilesError):
    """Raised when an offloaded worker fails to complete."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(KrfilesError):
    """Raised when a required runtime dependency is not available."""


class NativeLibraryNotFoundError(EnvironmentError):
    """Raised when the krfiles native library cannot be located or loaded."""
