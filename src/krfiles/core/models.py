"""Domain models for krfiles.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# File / directory record
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Resource:
    """A file or directory reported by the Filebrowser service.

    Directory listings carry their children in :attr:`items`; plain
    files never do.
    """

    name: str
    """File or directory name, without its parent path."""

    size: float
    """Size in bytes.  A float so every runtime decodes it identically."""

    extension: str
    """File extension (e.g. ``.txt``); empty for directories."""

    path: str
    """Full path on the server (e.g. ``/documents/report.pdf``)."""

    modified: str
    """ISO-8601 timestamp of the last modification, verbatim."""

    is_dir: bool = False
    """Whether this resource is a directory."""

    items: tuple[Resource, ...] | None = None
    """Child resources; present only for directory listings."""

    num_files: int = 0
    """Number of files in this directory (``0`` for files)."""

    num_dirs: int = 0
    """Number of subdirectories in this directory (``0`` for files)."""


# ---------------------------------------------------------------------------
# Search hit
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single match returned by the search API."""

    path: str
    is_dir: bool = False
