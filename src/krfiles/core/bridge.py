"""Safe call surface over the krfiles native boundary.

:class:`CommandBridge` is the explicit handle for one native session.
It owns two things the native library leaves to its caller:

* **Lifecycle** — ``create`` exactly once, ``destroy`` exactly once per
  successful ``create``.  :meth:`CommandBridge.open` is the scoped form
  and releases the handle on every exit path.
* **Error retrieval** — the native side reports failure as ``None`` /
  ``False`` and parks the reason in a single shared last-error slot that
  the next call overwrites.  Each call and its error read run under one
  lock owned by the boundary object, so a message is always attributed
  to the call that produced it, even across bridges.

The native library keeps one client per process, so the boundary is the
real session identity: at most one bridge may hold a live client on a
given boundary at a time.

Ordering (no calls before ``create`` or after ``destroy``) is the
caller's responsibility; this layer does not police it.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger

from krfiles.core.protocols import NativeBoundary
from krfiles.exceptions import AuthError, KrfilesError, TransportError

UNKNOWN_ERROR: str = "Unknown error"


class _BoundarySlot:
    """Per-boundary call lock and live-client flag."""

    __slots__ = ("lock", "live")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.live = False


_SLOTS: weakref.WeakKeyDictionary[object, _BoundarySlot] = weakref.WeakKeyDictionary()
_SLOTS_GUARD = threading.Lock()


def _slot_for(boundary: object) -> _BoundarySlot:
    with _SLOTS_GUARD:
        slot = _SLOTS.get(boundary)
        if slot is None:
            slot = _BoundarySlot()
            _SLOTS[boundary] = slot
        return slot


class CommandBridge:
    """One native session handle.

    Parameters
    ----------
    boundary:
        Any object satisfying the :class:`NativeBoundary` protocol.
    """

    def __init__(self, boundary: NativeBoundary) -> None:
        self._boundary: NativeBoundary = boundary
        self._slot = _slot_for(boundary)
        self._lock = self._slot.lock
        self._live: bool = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    @contextmanager
    def open(cls, boundary: NativeBoundary, base_url: str) -> Iterator[CommandBridge]:
        """Create a handle for *base_url* and destroy it on exit.

        Usage::

            with CommandBridge.open(boundary, "https://files.example") as bridge:
                bridge.set_token(token)
        """
        bridge = cls(boundary)
        bridge.create_client(base_url)
        try:
            yield bridge
        finally:
            bridge.destroy_client()

    @property
    def boundary(self) -> NativeBoundary:
        """The native boundary; bridges sharing it share one lock."""
        return self._boundary

    @property
    def is_live(self) -> bool:
        """Whether :meth:`create_client` succeeded and no destroy followed."""
        return self._live

    def create_client(self, base_url: str) -> None:
        """Create the native client for *base_url*."""
        with self._lock:
            if self._live:
                raise TransportError("Client already created for this handle.")
            if self._slot.live:
                raise TransportError(
                    "Client already created for this native library by another handle.",
                    hint="Destroy the other session before opening a new one.",
                )
            self._boundary.create(base_url)
            self._slot.live = True
            self._live = True
        logger.debug("native client created for {}", base_url)

    def destroy_client(self) -> None:
        """Destroy the native client.

        A no-op when no client is live, so it is safe on every exit path.
        """
        with self._lock:
            if not self._live:
                return
            self._live = False
            self._slot.live = False
            self._boundary.destroy()
        logger.debug("native client destroyed")

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> str:
        """Authenticate and return the auth token.

        Raises
        ------
        AuthError
            When the service rejects the credentials; the message is the
            one the native side reported for this call.
        """
        return self._call_text("login", username, password, error=AuthError, allow_empty=False)

    def set_token(self, token: str) -> bool:
        """Install *token* on the client.  ``True`` means accepted."""
        with self._lock:
            return bool(self._boundary.set_token(token))

    def logout(self) -> bool:
        """Clear the client's token.  ``True`` means a client was live."""
        with self._lock:
            return bool(self._boundary.logout())

    def is_authenticated(self) -> bool:
        """Whether the client currently holds a token."""
        with self._lock:
            return bool(self._boundary.is_authenticated())

    # ------------------------------------------------------------------
    # Resources (JSON text)
    # ------------------------------------------------------------------

    def get_resource(self, path: str) -> str:
        return self._call_text("get_resource", path)

    def list_directory(self, path: str) -> str:
        return self._call_text("list_directory", path)

    def search(self, query: str, path: str) -> str:
        return self._call_text("search", query, path)

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def download_to_file(self, remote_path: str, local_path: str) -> None:
        self._call_bool("download_to_file", remote_path, local_path)

    def upload_from_file(self, remote_path: str, local_path: str, overwrite: bool) -> None:
        self._call_bool("upload_from_file", remote_path, local_path, overwrite)

    def create_directory(self, path: str) -> None:
        self._call_bool("create_directory", path)

    def delete(self, path: str) -> None:
        self._call_bool("delete", path)

    def rename(self, source: str, destination: str, overwrite: bool) -> None:
        self._call_bool("rename", source, destination, overwrite)

    def copy(self, source: str, destination: str, overwrite: bool) -> None:
        self._call_bool("copy", source, destination, overwrite)

    # ------------------------------------------------------------------
    # Call-then-read-error protocol
    # ------------------------------------------------------------------

    def _call_text(
        self,
        name: str,
        *args: Any,
        error: type[KrfilesError] = TransportError,
        allow_empty: bool = True,
    ) -> str:
        """Issue a text-returning call; ``None`` means failure."""
        with self._lock:
            result: str | None = getattr(self._boundary, name)(*args)
            failed = result is None or (not allow_empty and result == "")
            message = self._read_last_error() if failed else None

        if message is not None:
            logger.debug("native {} failed: {}", name, message)
            raise error(message)
        logger.debug("native {} ok", name)
        return result  # type: ignore[return-value]

    def _call_bool(self, name: str, *args: Any) -> None:
        """Issue a bool-returning call; ``False`` means failure."""
        with self._lock:
            ok = bool(getattr(self._boundary, name)(*args))
            message = None if ok else self._read_last_error()

        if message is not None:
            logger.debug("native {} failed: {}", name, message)
            raise TransportError(message)
        logger.debug("native {} ok", name)

    def _read_last_error(self) -> str:
        # Caller holds self._lock.
        return self._boundary.get_last_error() or UNKNOWN_ERROR
