"""Core layer — domain models, decoding, and the native call discipline.

Rules
-----
* No ``print()`` calls and no user interaction.
* No imports from ``cli`` or ``infra``.
* The native library is reached only through the
  :class:`~krfiles.core.protocols.NativeBoundary` protocol.
"""

from krfiles.core.bridge import CommandBridge
from krfiles.core.decoder import decode_resource, decode_search_results
from krfiles.core.models import Resource, SearchResult
from krfiles.core.offloader import TaskOffloader
from krfiles.core.protocols import NativeBoundary

__all__: list[str] = [
    "CommandBridge",
    "NativeBoundary",
    "Resource",
    "SearchResult",
    "TaskOffloader",
    "decode_resource",
    "decode_search_results",
]
