"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Protocol


class NativeBoundary(Protocol):
    """Primitive call surface of the krfiles native library.

    Every method maps one-to-one onto a C symbol of the shim library.
    Results are primitive: text calls return ``None`` on failure and
    bool calls return ``False``; the reason is then available from
    :meth:`get_last_error` until the next call overwrites it.

    The native side keeps a single process-wide client and a single
    last-error slot.  Implementations must not add locking of their
    own; :class:`~krfiles.core.bridge.CommandBridge` owns that
    discipline.
    """

    # --- Lifecycle -------------------------------------------------------

    def create(self, base_url: str) -> None: ...

    def destroy(self) -> None: ...

    def get_last_error(self) -> str | None: ...

    # --- Auth ------------------------------------------------------------

    def login(self, username: str, password: str) -> str | None: ...

    def set_token(self, token: str) -> bool: ...

    def logout(self) -> bool: ...

    def is_authenticated(self) -> bool: ...

    # --- Resources (JSON text) -------------------------------------------

    def get_resource(self, path: str) -> str | None: ...

    def list_directory(self, path: str) -> str | None: ...

    def search(self, query: str, path: str) -> str | None: ...

    # --- File operations -------------------------------------------------

    def download_to_file(self, remote_path: str, local_path: str) -> bool: ...

    def upload_from_file(
        self, remote_path: str, local_path: str, overwrite: bool,
    ) -> bool: ...

    def create_directory(self, path: str) -> bool: ...

    def delete(self, path: str) -> bool: ...

    def rename(self, source: str, destination: str, overwrite: bool) -> bool: ...

    def copy(self, source: str, destination: str, overwrite: bool) -> bool: ...
