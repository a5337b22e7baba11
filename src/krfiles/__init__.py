"""krfiles — Filebrowser command-line client.

Drives the krfiles native shared library through a narrow C boundary,
with a strict layered architecture.
"""

from krfiles.version import __version__

__all__: list[str] = ["__version__"]
