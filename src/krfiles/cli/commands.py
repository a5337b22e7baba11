"""Command dispatch for one krfiles invocation.

:class:`CommandDispatcher` sequences a single CLI command through the
session states::

    UNAUTHENTICATED → HANDLE_CREATED → TOKEN_SET → OPERATION_COMPLETE → CLEANED

Settings are validated before any native handle exists, so a missing
server or token never acquires a native resource.  Once a handle is
created it is destroyed exactly once, whether the operation succeeds or
fails.  Every native call that may reach the network goes through
:class:`TaskOffloader`.
"""

from __future__ import annotations

import argparse
import enum
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger

from krfiles.cli import exit_codes
from krfiles.cli.console import escape, out
from krfiles.cli.formatting import (
    default_local_path,
    info_lines,
    listing_summary,
    resource_line,
    search_lines,
    token_preview,
)
from krfiles.cli.progress import ActivitySpinner
from krfiles.config import Settings
from krfiles.core.bridge import CommandBridge
from krfiles.core.decoder import decode_resource, decode_search_results
from krfiles.core.offloader import TaskOffloader
from krfiles.core.protocols import NativeBoundary
from krfiles.exceptions import AuthError, ConfigurationError, TaskError

T = TypeVar("T")

CHECK = "[bold green]✓[/bold green]"


class SessionState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    HANDLE_CREATED = "handle-created"
    TOKEN_SET = "token-set"
    OPERATION_COMPLETE = "operation-complete"
    CLEANED = "cleaned"


def _load_boundary(settings: Settings) -> NativeBoundary:
    """Load the native library (deferred so ``--help`` never needs it)."""
    from krfiles.infra.native_library import load_native_library

    return load_native_library(settings.library)


class CommandDispatcher:
    """Runs one parsed command against a freshly created native handle.

    Parameters
    ----------
    args:
        Namespace produced by the CLI parser.
    settings:
        Environment-sourced defaults; explicit flags in *args* win.
    boundary_factory:
        Returns the native boundary.  Only called once configuration has
        been validated.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        settings: Settings,
        boundary_factory: Callable[[], NativeBoundary] | None = None,
    ) -> None:
        self._args = args
        self._settings = settings
        self._boundary_factory = boundary_factory or (lambda: _load_boundary(settings))
        self._offloader: TaskOffloader | None = None
        self.state: SessionState = SessionState.UNAUTHENTICATED

        self._handlers: dict[str, Callable[[CommandBridge], Awaitable[None]]] = {
            "ls": self._ls,
            "info": self._info,
            "get": self._get,
            "put": self._put,
            "rm": self._rm,
            "mv": self._mv,
            "cp": self._cp,
            "mkdir": self._mkdir,
            "search": self._search,
        }

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self) -> int:
        """Execute the command and return the process exit code."""
        command: str = self._args.command
        if command == "login":
            return await self._login()

        handler = self._handlers[command]
        server = self._require_server()
        token = self._require_token()
        boundary = self._boundary_factory()

        with TaskOffloader() as offloader:
            self._offloader = offloader
            try:
                with CommandBridge.open(boundary, server) as bridge:
                    self._transition(SessionState.HANDLE_CREATED)
                    accepted = await offloader.run(bridge.boundary, bridge.set_token, token)
                    if not accepted:
                        raise AuthError(
                            "Token was not accepted by the client.",
                            hint="Run `krfiles login` to obtain a fresh token.",
                        )
                    if not await offloader.run(bridge.boundary, bridge.is_authenticated):
                        raise AuthError(
                            "Client reports no active session after setting the token.",
                            hint="Run `krfiles login` to obtain a fresh token.",
                        )
                    self._transition(SessionState.TOKEN_SET)

                    await handler(bridge)
                    self._transition(SessionState.OPERATION_COMPLETE)
            finally:
                self._transition(SessionState.CLEANED)
        return exit_codes.SUCCESS

    # ------------------------------------------------------------------
    # Configuration (validated before any handle exists)
    # ------------------------------------------------------------------

    def _require_server(self) -> str:
        server = getattr(self._args, "server", None) or self._settings.server
        if not server:
            raise ConfigurationError(
                "No server specified. Use --server URL or set KRFILES_SERVER.",
            )
        return server

    def _require_token(self) -> str:
        token = getattr(self._args, "token", None) or self._settings.token
        if not token:
            raise ConfigurationError(
                "No token provided. Use --token, set KRFILES_TOKEN, "
                "or run `krfiles login` first.",
            )
        return token

    def _transition(self, state: SessionState) -> None:
        logger.debug("session {} -> {}", self.state.value, state.value)
        self.state = state

    async def _offload(
        self,
        bridge: CommandBridge,
        description: str,
        operation: Callable[..., T],
        *args: Any,
    ) -> T:
        offloader = self._offloader
        if offloader is None:
            raise TaskError("No task offloader is active for this command.")
        with ActivitySpinner(escape(description)):
            return await offloader.run(bridge.boundary, operation, *args)

    # ------------------------------------------------------------------
    # login (independent of the shared token path)
    # ------------------------------------------------------------------

    async def _login(self) -> int:
        server = self._require_server()
        username: str = self._args.username
        password: str | None = self._args.password
        if password is None:
            from krfiles.cli.prompts import prompt_password

            password = prompt_password(username)

        boundary = self._boundary_factory()
        with TaskOffloader() as offloader:
            self._offloader = offloader
            try:
                with CommandBridge.open(boundary, server) as bridge:
                    self._transition(SessionState.HANDLE_CREATED)
                    token = await self._offload(
                        bridge, f"Logging in to {server}", bridge.login, username, password,
                    )
                    self._transition(SessionState.TOKEN_SET)
            finally:
                self._transition(SessionState.CLEANED)

        out.print(f"{CHECK} Logged in to {escape(server)}")
        out.print(f"  Token: {escape(token_preview(token))}")
        return exit_codes.SUCCESS

    # ------------------------------------------------------------------
    # Resource commands
    # ------------------------------------------------------------------

    async def _ls(self, bridge: CommandBridge) -> None:
        path: str = self._args.path
        text = await self._offload(bridge, f"Listing {path}", bridge.list_directory, path)
        resource = decode_resource(text)

        if resource.items is None:
            out.print("(not a directory)")
            return
        if not resource.items:
            out.print("(empty directory)")
            return
        for item in resource.items:
            out.print(resource_line(item))
        out.print(f"\n{listing_summary(resource)}")

    async def _info(self, bridge: CommandBridge) -> None:
        path: str = self._args.path
        text = await self._offload(bridge, f"Inspecting {path}", bridge.get_resource, path)
        for line in info_lines(decode_resource(text)):
            out.print(line)

    async def _search(self, bridge: CommandBridge) -> None:
        query: str = self._args.query
        path: str = self._args.path
        text = await self._offload(bridge, f"Searching {path}", bridge.search, query, path)
        results = decode_search_results(text)

        if not results:
            out.print(f"No results found for '{escape(query)}'")
            return
        for line in search_lines(results):
            out.print(line)
        out.print(f"\n{len(results)} result(s)")

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    async def _get(self, bridge: CommandBridge) -> None:
        remote: str = self._args.remote_path
        local: str = self._args.local_path or default_local_path(remote)
        await self._offload(
            bridge, f"Downloading {remote}", bridge.download_to_file, remote, local,
        )
        out.print(f"{CHECK} Downloaded {escape(remote)} → {escape(local)}")

    async def _put(self, bridge: CommandBridge) -> None:
        local: str = self._args.local_path
        remote: str = self._args.remote_path
        await self._offload(
            bridge, f"Uploading {local}", bridge.upload_from_file, remote, local, self._args.force,
        )
        out.print(f"{CHECK} Uploaded {escape(local)} → {escape(remote)}")

    async def _rm(self, bridge: CommandBridge) -> None:
        path: str = self._args.path
        await self._offload(bridge, f"Deleting {path}", bridge.delete, path)
        out.print(f"{CHECK} Deleted {escape(path)}")

    async def _mv(self, bridge: CommandBridge) -> None:
        source: str = self._args.source
        dest: str = self._args.destination
        await self._offload(bridge, f"Moving {source}", bridge.rename, source, dest, self._args.force)
        out.print(f"{CHECK} Moved {escape(source)} → {escape(dest)}")

    async def _cp(self, bridge: CommandBridge) -> None:
        source: str = self._args.source
        dest: str = self._args.destination
        await self._offload(bridge, f"Copying {source}", bridge.copy, source, dest, self._args.force)
        out.print(f"{CHECK} Copied {escape(source)} → {escape(dest)}")

    async def _mkdir(self, bridge: CommandBridge) -> None:
        path: str = self._args.path
        await self._offload(bridge, f"Creating {path}", bridge.create_directory, path)
        out.print(f"{CHECK} Created directory {escape(path)}")
