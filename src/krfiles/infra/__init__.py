"""Infrastructure layer — native library integration.

This layer wraps all interaction with the krfiles shared library and
the operating system's dynamic loader.  Every raw ``ctypes``/``OSError``
failure must be caught here and re-raised as a
:class:`~krfiles.exceptions.KrfilesError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from krfiles.infra.library_locator import (
    LibraryStatus,
    detect_native_library,
    require_native_library,
)
from krfiles.infra.native_library import CtypesNativeLibrary, load_native_library

__all__: list[str] = [
    "CtypesNativeLibrary",
    "LibraryStatus",
    "detect_native_library",
    "load_native_library",
    "require_native_library",
]
