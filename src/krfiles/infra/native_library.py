"""ctypes-backed implementation of :class:`~krfiles.core.protocols.NativeBoundary`.

This module is the **only** place in the codebase that touches the
krfiles shim library.  Strings cross the boundary as UTF-8; ``OSError``
and missing-symbol failures are re-raised as
:class:`~krfiles.exceptions.NativeLibraryNotFoundError` — nothing raw
escapes the infrastructure boundary.

The shim exposes flat ``krfiles_*`` C functions over the library's
exported symbol table.  Returned ``char*`` values are owned by the
native side and are copied into Python strings immediately.
"""

from __future__ import annotations

import ctypes
from pathlib import Path
from typing import Any

from loguru import logger

from krfiles.exceptions import NativeLibraryNotFoundError, TransportError
from krfiles.infra.library_locator import require_native_library

_STR = ctypes.c_char_p
_BOOL = ctypes.c_bool

# symbol name → (argtypes, restype)
_SIGNATURES: dict[str, tuple[list[Any], Any]] = {
    "krfiles_create_client": ([_STR], None),
    "krfiles_destroy_client": ([], None),
    "krfiles_get_last_error": ([], _STR),
    "krfiles_login": ([_STR, _STR], _STR),
    "krfiles_set_token": ([_STR], _BOOL),
    "krfiles_logout": ([], _BOOL),
    "krfiles_is_authenticated": ([], _BOOL),
    "krfiles_get_resource": ([_STR], _STR),
    "krfiles_list_directory": ([_STR], _STR),
    "krfiles_search": ([_STR, _STR], _STR),
    "krfiles_download_to_file": ([_STR, _STR], _BOOL),
    "krfiles_upload_from_file": ([_STR, _STR, _BOOL], _BOOL),
    "krfiles_create_directory": ([_STR], _BOOL),
    "krfiles_delete": ([_STR], _BOOL),
    "krfiles_rename": ([_STR, _STR, _BOOL], _BOOL),
    "krfiles_copy": ([_STR, _STR, _BOOL], _BOOL),
}


class CtypesNativeLibrary:
    """Concrete :class:`NativeBoundary` backed by a loaded shared library.

    Usage::

        native = CtypesNativeLibrary("/opt/krfiles/libkrfiles_shim.so")
        native.create("https://files.example.com")

    This class satisfies the protocol structurally — no explicit
    inheritance required.  It adds no locking; see
    :class:`~krfiles.core.bridge.CommandBridge`.
    """

    def __init__(self, location: str) -> None:
        try:
            self._lib = ctypes.CDLL(location)
        except OSError as exc:
            raise NativeLibraryNotFoundError(
                f"Failed to load krfiles native library: {exc}",
                hint="Check that KRFILES_LIBRARY points at the shim library.",
            ) from exc

        self._fns: dict[str, Any] = {}
        for symbol, (argtypes, restype) in _SIGNATURES.items():
            try:
                fn = getattr(self._lib, symbol)
            except AttributeError as exc:
                raise NativeLibraryNotFoundError(
                    f"krfiles native library at {location} lacks symbol {symbol}.",
                    hint="The library may be outdated; rebuild the shim.",
                ) from exc
            fn.argtypes = argtypes
            fn.restype = restype
            self._fns[symbol] = fn
        logger.debug("loaded native library {}", location)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, base_url: str) -> None:
        self._fns["krfiles_create_client"](_encode(base_url))

    def destroy(self) -> None:
        self._fns["krfiles_destroy_client"]()

    def get_last_error(self) -> str | None:
        return _decode(self._fns["krfiles_get_last_error"]())

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> str | None:
        return _decode(self._fns["krfiles_login"](_encode(username), _encode(password)))

    def set_token(self, token: str) -> bool:
        return bool(self._fns["krfiles_set_token"](_encode(token)))

    def logout(self) -> bool:
        return bool(self._fns["krfiles_logout"]())

    def is_authenticated(self) -> bool:
        return bool(self._fns["krfiles_is_authenticated"]())

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def get_resource(self, path: str) -> str | None:
        return _decode(self._fns["krfiles_get_resource"](_encode(path)))

    def list_directory(self, path: str) -> str | None:
        return _decode(self._fns["krfiles_list_directory"](_encode(path)))

    def search(self, query: str, path: str) -> str | None:
        return _decode(self._fns["krfiles_search"](_encode(query), _encode(path)))

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def download_to_file(self, remote_path: str, local_path: str) -> bool:
        return bool(
            self._fns["krfiles_download_to_file"](_encode(remote_path), _encode(local_path))
        )

    def upload_from_file(self, remote_path: str, local_path: str, overwrite: bool) -> bool:
        return bool(
            self._fns["krfiles_upload_from_file"](
                _encode(remote_path), _encode(local_path), overwrite,
            )
        )

    def create_directory(self, path: str) -> bool:
        return bool(self._fns["krfiles_create_directory"](_encode(path)))

    def delete(self, path: str) -> bool:
        return bool(self._fns["krfiles_delete"](_encode(path)))

    def rename(self, source: str, destination: str, overwrite: bool) -> bool:
        return bool(
            self._fns["krfiles_rename"](_encode(source), _encode(destination), overwrite)
        )

    def copy(self, source: str, destination: str, overwrite: bool) -> bool:
        return bool(
            self._fns["krfiles_copy"](_encode(source), _encode(destination), overwrite)
        )


def load_native_library(explicit: Path | None = None) -> CtypesNativeLibrary:
    """Locate and load the shim library in one step."""
    return CtypesNativeLibrary(require_native_library(explicit))


# ---------------------------------------------------------------------------
# String marshalling
# ---------------------------------------------------------------------------

def _encode(value: str) -> bytes:
    if "\x00" in value:
        raise TransportError(f"Argument contains a NUL character: {value!r}")
    return value.encode("utf-8")


def _decode(raw: bytes | None) -> str | None:
    if raw is None:
        return None
    return raw.decode("utf-8", errors="replace")
