"""Infrastructure: native library discovery and platform guidance.

This module is responsible for locating the krfiles shim library and
providing platform-specific guidance when it is missing.

Rules
-----
* An explicit path (``KRFILES_LIBRARY``) always wins.
* Otherwise discovery goes through :func:`ctypes.util.find_library`.
* No loading happens here — see :mod:`krfiles.infra.native_library`.
* No ``print()`` — callers handle user-facing output.
"""

from __future__ import annotations

import ctypes.util
import platform
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from krfiles.exceptions import NativeLibraryNotFoundError

LIBRARY_NAME: str = "krfiles_shim"


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LibraryStatus:
    """Result of a native library lookup.

    Attributes
    ----------
    found : bool
        Whether the library was located.
    location : str | None
        Path or loader name to pass to :class:`ctypes.CDLL`, or ``None``.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_hints : tuple[str, ...]
        Suggested steps for making the library available on the current
        platform.  Empty when the library was found.
    """

    found: bool
    location: str | None
    version_hint: str
    install_hints: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def detect_native_library(explicit: Path | None = None) -> LibraryStatus:
    """Look for the krfiles shim library.

    Returns a :class:`LibraryStatus` regardless of the outcome — the
    caller decides whether to abort or merely warn.
    """
    if explicit is not None:
        if explicit.is_file():
            resolved = explicit.resolve()
            logger.debug("using native library from explicit path {}", resolved)
            return LibraryStatus(
                found=True,
                location=str(resolved),
                version_hint=f"found at {resolved}",
                install_hints=(),
            )
        return LibraryStatus(
            found=False,
            location=None,
            version_hint=f"not found at {explicit}",
            install_hints=_platform_install_hints(),
        )

    result = ctypes.util.find_library(LIBRARY_NAME)
    if result is not None:
        logger.debug("native library resolved by loader as {}", result)
        return LibraryStatus(
            found=True,
            location=result,
            version_hint=f"found as {result}",
            install_hints=(),
        )

    return LibraryStatus(
        found=False,
        location=None,
        version_hint="not found",
        install_hints=_platform_install_hints(),
    )


def require_native_library(explicit: Path | None = None) -> str:
    """Locate the library or raise :class:`NativeLibraryNotFoundError`."""
    status = detect_native_library(explicit)
    if not status.found or status.location is None:
        hint_lines = ["Make the krfiles native library available:"]
        hint_lines.extend(f"  {line}" for line in status.install_hints)
        raise NativeLibraryNotFoundError(
            f"krfiles native library {status.version_hint}.",
            hint="\n".join(hint_lines),
        )
    return status.location


# ---------------------------------------------------------------------------
# Platform-specific guidance
# ---------------------------------------------------------------------------

def _platform_library_filename() -> str:
    system = platform.system().lower()
    if system == "windows":
        return f"{LIBRARY_NAME}.dll"
    if system == "darwin":
        return f"lib{LIBRARY_NAME}.dylib"
    return f"lib{LIBRARY_NAME}.so"


def _platform_install_hints() -> tuple[str, ...]:
    """Return guidance appropriate for the current OS."""
    filename = _platform_library_filename()
    system = platform.system().lower()
    hints = [f"export KRFILES_LIBRARY=/path/to/{filename}"]
    if system == "windows":
        hints.append(f"or place {filename} next to krfiles or on PATH")
    elif system == "darwin":
        hints.append(f"or add the directory holding {filename} to DYLD_LIBRARY_PATH")
    else:
        hints.append(f"or add the directory holding {filename} to LD_LIBRARY_PATH")
    return tuple(hints)
