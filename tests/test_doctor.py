"""Tests for the ``krfiles doctor`` command (cli/doctor.py).

Library discovery is mocked, so no native library is needed.

Coverage:
* Doctor returns SUCCESS when the library is found.
* Doctor returns GENERAL_ERROR and prints install hints when it is not.
* Individual check functions return correct tuples.
* CLI routing dispatches to ``run_doctor``.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from krfiles.cli import exit_codes
from krfiles.config import Settings
from krfiles.infra.library_locator import LibraryStatus


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _library_found() -> LibraryStatus:
    return LibraryStatus(
        found=True,
        location="/opt/krfiles/libkrfiles_shim.so",
        version_hint="found at /opt/krfiles/libkrfiles_shim.so",
        install_hints=(),
    )


def _library_missing() -> LibraryStatus:
    return LibraryStatus(
        found=False,
        location=None,
        version_hint="not found",
        install_hints=("export KRFILES_LIBRARY=/path/to/libkrfiles_shim.so",),
    )


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestPythonVersionCheck:
    def test_returns_tuple(self) -> None:
        from krfiles.cli.doctor import _python_version_check

        label, value, status = _python_version_check()
        assert label == "Python"
        assert isinstance(value, str)
        assert "OK" in status


class TestLibraryCheck:
    def test_found(self) -> None:
        from krfiles.cli.doctor import _library_check

        label, value, status = _library_check(_library_found())
        assert label == "native library"
        assert value == "/opt/krfiles/libkrfiles_shim.so"
        assert "OK" in status

    def test_missing(self) -> None:
        from krfiles.cli.doctor import _library_check

        label, value, status = _library_check(_library_missing())
        assert value == "not found"
        assert "FAIL" in status


class TestModuleCheck:
    def test_installed(self) -> None:
        from krfiles.cli.doctor import _module_check

        assert _module_check("pytest") == ("pytest", "installed", "[green]OK[/green]")

    @patch.dict("sys.modules", {"questionary": None})
    def test_not_installed_is_warning(self) -> None:
        from krfiles.cli.doctor import _module_check

        label, value, status = _module_check("questionary")
        assert value == "NOT INSTALLED"
        assert "WARN" in status


class TestOsCheck:
    @patch("krfiles.cli.doctor.platform.machine", return_value="arm64")
    @patch("krfiles.cli.doctor.platform.release", return_value="23.4.0")
    @patch("krfiles.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        from krfiles.cli.doctor import _os_check

        label, value, status = _os_check()
        assert label == "OS"
        assert value == "macOS 23.4.0 (arm64)"
        assert "OK" in status


# ---------------------------------------------------------------------------
# run_doctor integration
# ---------------------------------------------------------------------------

class TestRunDoctor:
    @patch("krfiles.cli.doctor.detect_native_library")
    def test_library_found_returns_success(self, mock_detect: MagicMock) -> None:
        from krfiles.cli.doctor import run_doctor

        mock_detect.return_value = _library_found()
        assert run_doctor(Settings()) == exit_codes.SUCCESS

    @patch("krfiles.cli.doctor.detect_native_library")
    def test_library_missing_returns_general_error(self, mock_detect: MagicMock) -> None:
        from krfiles.cli.doctor import run_doctor

        mock_detect.return_value = _library_missing()
        assert run_doctor(Settings()) == exit_codes.GENERAL_ERROR

    @patch("krfiles.cli.doctor.detect_native_library")
    def test_explicit_library_setting_is_checked(self, mock_detect: MagicMock) -> None:
        from krfiles.cli.doctor import run_doctor

        mock_detect.return_value = _library_found()
        settings = Settings(library="/opt/krfiles/libkrfiles_shim.so")
        run_doctor(settings)
        mock_detect.assert_called_once_with(settings.library)

    @patch("krfiles.cli.doctor.detect_native_library")
    @patch.dict("sys.modules", {"rich": None, "rich.table": None, "rich.console": None})
    def test_plain_output_lists_checks_and_hints(
        self,
        mock_detect: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        from krfiles.cli.doctor import run_doctor

        mock_detect.return_value = _library_missing()
        run_doctor(Settings())

        err = capsys.readouterr().err
        assert "krfiles doctor" in err
        assert "native library" in err
        assert "FAIL" in err
        assert "export KRFILES_LIBRARY=/path/to/libkrfiles_shim.so" in err
        assert "Some checks failed." in err


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestDoctorRouting:
    @patch("krfiles.cli.doctor.run_doctor", return_value=exit_codes.SUCCESS)
    def test_doctor_dispatches(self, mock_run: MagicMock) -> None:
        from krfiles.cli.app import main

        assert main(["doctor"]) == exit_codes.SUCCESS
        mock_run.assert_called_once()

    @patch("krfiles.cli.doctor.run_doctor", return_value=exit_codes.GENERAL_ERROR)
    def test_doctor_failure_propagates(self, mock_run: MagicMock) -> None:
        from krfiles.cli.app import main

        assert main(["doctor"]) == exit_codes.GENERAL_ERROR
