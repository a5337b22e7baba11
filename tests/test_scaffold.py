"""Smoke tests — verify scaffold wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
* The ``cli()`` error boundary renders ``error:`` and exit codes.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from krfiles import __version__
from krfiles.cli import exit_codes
from krfiles.cli.app import cli, main
from krfiles.exceptions import (
    AuthError,
    ConfigurationError,
    DecodeError,
    EnvironmentError,
    KrfilesError,
    NativeLibraryNotFoundError,
    TaskError,
    TransportError,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            ConfigurationError,
            AuthError,
            TransportError,
            DecodeError,
            TaskError,
            EnvironmentError,
            NativeLibraryNotFoundError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[KrfilesError]) -> None:
        assert issubclass(exc_class, KrfilesError)

    def test_library_error_is_environment_error(self) -> None:
        assert issubclass(NativeLibraryNotFoundError, EnvironmentError)

    def test_hint_is_stored(self) -> None:
        err = KrfilesError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert KrfilesError("boom").hint is None


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self) -> None:
        assert main([]) == exit_codes.SUCCESS

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_unknown_command_is_usage_error(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["frobnicate"])
        assert exc_info.value.code == 2

    @patch("krfiles.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_routes(self, mock_doc: object) -> None:
        assert main(["doctor"]) == exit_codes.SUCCESS

    def test_remote_command_routes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from krfiles.cli import app as app_module

        seen: list[str] = []
        monkeypatch.setattr(
            app_module,
            "_handle_command",
            lambda args, settings: seen.append(args.command) or exit_codes.SUCCESS,
        )
        assert main(["ls"]) == exit_codes.SUCCESS
        assert seen == ["ls"]


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run_cli(self, monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
        monkeypatch.setattr(sys, "argv", ["krfiles", *argv])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return int(exc_info.value.code or 0)

    def test_success_exits_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert self._run_cli(monkeypatch) == exit_codes.SUCCESS

    def test_config_error_reports_and_exits_one(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = self._run_cli(monkeypatch, "--server", "https://files.test", "ls")
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert err.startswith("error: No token provided")

    def test_hint_is_rendered(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def boom(argv: object = None) -> int:
            raise TransportError("[500] server exploded", hint="retry later")

        monkeypatch.setattr("krfiles.cli.app.main", boom)
        code = self._run_cli(monkeypatch)
        err = capsys.readouterr().err
        assert code == exit_codes.GENERAL_ERROR
        assert "error: [500] server exploded" in err
        assert "hint: retry later" in err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def interrupted(argv: object = None) -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr("krfiles.cli.app.main", interrupted)
        assert self._run_cli(monkeypatch) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        def broken(argv: object = None) -> int:
            raise ValueError("bad state")

        monkeypatch.setattr("krfiles.cli.app.main", broken)
        assert self._run_cli(monkeypatch) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert err.startswith("error: unexpected ValueError: bad state")
        assert "hint: Please report this issue" in err
