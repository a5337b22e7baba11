"""Tests for the password prompt (cli/prompts.py)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from krfiles.cli.prompts import prompt_password
from krfiles.exceptions import ConfigurationError, EnvironmentError


class TestPromptPassword:
    @patch("questionary.password")
    def test_returns_entered_password(self, mock_password: MagicMock) -> None:
        mock_password.return_value.ask.return_value = "s3cret"

        assert prompt_password("alice") == "s3cret"
        mock_password.assert_called_once_with("Password for alice:")

    @patch("questionary.password")
    def test_empty_password_is_allowed(self, mock_password: MagicMock) -> None:
        mock_password.return_value.ask.return_value = ""
        assert prompt_password("alice") == ""

    @patch("questionary.password")
    def test_cancelled_prompt_raises(self, mock_password: MagicMock) -> None:
        mock_password.return_value.ask.return_value = None

        with pytest.raises(ConfigurationError, match="No password provided"):
            prompt_password("alice")

    @patch.dict("sys.modules", {"questionary": None})
    def test_missing_questionary(self) -> None:
        with pytest.raises(EnvironmentError, match="pip install questionary"):
            prompt_password("alice")
