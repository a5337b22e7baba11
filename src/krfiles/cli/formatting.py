"""Presentation helpers for command output.

Pure transforms from domain models to display lines — no I/O.  Lines
carry Rich markup; every server-supplied value is escaped.
"""

from __future__ import annotations

from collections.abc import Sequence

from krfiles.cli.console import escape
from krfiles.core.models import Resource, SearchResult

KB: float = 1024.0
MB: float = KB * 1024.0
GB: float = MB * 1024.0

TOKEN_PREVIEW_LENGTH: int = 20


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def format_size(size: float) -> str:
    """Render a byte count like ``ls -lh`` does.

    ``500`` → ``"500 B"``, ``2048`` → ``"2.0 KB"``,
    ``5 MiB`` → ``"5.0 MB"``, ``3 GiB`` → ``"3.00 GB"``.
    """
    if size < KB:
        return f"{size:.0f} B"
    if size < MB:
        return f"{size / KB:.1f} KB"
    if size < GB:
        return f"{size / MB:.1f} MB"
    return f"{size / GB:.2f} GB"


def token_preview(token: str) -> str:
    """First characters of *token* followed by an ellipsis."""
    return f"{token[:TOKEN_PREVIEW_LENGTH]}..."


def default_local_path(remote_path: str) -> str:
    """Last segment of *remote_path*, or ``"download"`` when it is empty."""
    return remote_path.rsplit("/", 1)[-1] or "download"


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

def resource_line(resource: Resource) -> str:
    """One directory-listing line: ``name/`` for dirs, name + size for files."""
    if resource.is_dir:
        return f"  [bold blue]{escape(resource.name)}[/bold blue]/"
    padded = escape(f"{resource.name:<40}")
    return f"  {padded} [dim]{format_size(resource.size):>10}[/dim]"


def listing_summary(resource: Resource) -> str:
    return f"{resource.num_files} files, {resource.num_dirs} directories"


def info_lines(resource: Resource) -> list[str]:
    """Key/value lines for ``krfiles info``."""
    lines = [
        f"  Name: {escape(resource.name)}",
        f"  Path: {escape(resource.path)}",
        f"  Type: {'directory' if resource.is_dir else 'file'}",
        f"  Size: {format_size(resource.size)}",
        f"  Modified: {escape(resource.modified)}",
    ]
    if resource.is_dir:
        lines.append(f"  Files: {resource.num_files}")
        lines.append(f"  Dirs:  {resource.num_dirs}")
    return lines


def search_lines(results: Sequence[SearchResult]) -> list[str]:
    """One ``[dir ]``/``[file]`` line per hit."""
    lines: list[str] = []
    for result in results:
        kind = "dir " if result.is_dir else "file"
        lines.append(f"  {escape(f'[{kind}]')} {escape(result.path)}")
    return lines
