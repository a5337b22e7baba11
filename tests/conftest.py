"""Shared pytest fixtures and configuration for the krfiles test suite.

Guidelines
----------
* No network access and no real native library in any test.
* The native boundary is replaced by :class:`FakeBoundary`, which keeps
  one shared last-error slot exactly like the real library does.
* Tests must not depend on ``KRFILES_*`` variables from the host.
"""

from __future__ import annotations

from typing import Any

import pytest
from loguru import logger

_TEXT_CALLS = ("login", "get_resource", "list_directory", "search")


class FakeBoundary:
    """In-memory stand-in for the native library.

    ``responses`` maps a call name to its successful return value;
    ``errors`` maps a call name to the message it parks in the
    last-error slot when it fails.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.responses: dict[str, Any] = {}
        self.errors: dict[str, str] = {}
        self.last_error: str | None = None
        self.token: str | None = None

    # --- helpers ---------------------------------------------------------

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def count(self, name: str) -> int:
        return self.names().count(name)

    def args_of(self, name: str) -> tuple[Any, ...]:
        return next(args for call, args in self.calls if call == name)

    def _invoke(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if name in self.errors:
            self.last_error = self.errors[name]
            return None if name in _TEXT_CALLS else False
        self.last_error = None
        return self.responses.get(name, "" if name in _TEXT_CALLS else True)

    # --- lifecycle -------------------------------------------------------

    def create(self, base_url: str) -> None:
        self.calls.append(("create", (base_url,)))

    def destroy(self) -> None:
        self.calls.append(("destroy", ()))

    def get_last_error(self) -> str | None:
        self.calls.append(("get_last_error", ()))
        return self.last_error

    # --- auth ------------------------------------------------------------

    def login(self, username: str, password: str) -> str | None:
        return self._invoke("login", username, password)

    def set_token(self, token: str) -> bool:
        self.token = token
        return self._invoke("set_token", token)

    def logout(self) -> bool:
        return self._invoke("logout")

    def is_authenticated(self) -> bool:
        self.calls.append(("is_authenticated", ()))
        return self.token is not None

    # --- resources -------------------------------------------------------

    def get_resource(self, path: str) -> str | None:
        return self._invoke("get_resource", path)

    def list_directory(self, path: str) -> str | None:
        return self._invoke("list_directory", path)

    def search(self, query: str, path: str) -> str | None:
        return self._invoke("search", query, path)

    # --- file operations -------------------------------------------------

    def download_to_file(self, remote_path: str, local_path: str) -> bool:
        return self._invoke("download_to_file", remote_path, local_path)

    def upload_from_file(self, remote_path: str, local_path: str, overwrite: bool) -> bool:
        return self._invoke("upload_from_file", remote_path, local_path, overwrite)

    def create_directory(self, path: str) -> bool:
        return self._invoke("create_directory", path)

    def delete(self, path: str) -> bool:
        return self._invoke("delete", path)

    def rename(self, source: str, destination: str, overwrite: bool) -> bool:
        return self._invoke("rename", source, destination, overwrite)

    def copy(self, source: str, destination: str, overwrite: bool) -> bool:
        return self._invoke("copy", source, destination, overwrite)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    for name in ("SERVER", "TOKEN", "LIBRARY", "LOG_LEVEL"):
        monkeypatch.delenv(f"KRFILES_{name}", raising=False)
    # Keep a stray .env in the working directory out of Settings.
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging() -> Any:
    """Keep loguru sinks from leaking between tests and captured streams."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def fake_boundary(monkeypatch: pytest.MonkeyPatch) -> FakeBoundary:
    """Install a :class:`FakeBoundary` in place of the native library."""
    fake = FakeBoundary()
    monkeypatch.setattr(
        "krfiles.infra.native_library.load_native_library",
        lambda explicit=None: fake,
    )
    return fake
