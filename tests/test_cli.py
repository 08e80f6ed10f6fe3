"""
Tests for the command-line front-end.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.cli import build_parser, main
from app.utils.exceptions import AuthenticationError


class TestCli:
    """Tests for argument parsing and the plans command."""

    def test_plans_lists_catalog(self, capsys):
        """Test the plans command prints every plan."""
        assert main(["plans"]) == 0

        out = capsys.readouterr().out
        assert "basic" in out
        assert "$19.99" in out
        assert "(most popular)" in out

    def test_generate_defaults(self):
        """Test generate defaults to a medium article."""
        args = build_parser().parse_args(["generate", "--topic", "space travel"])

        assert args.style == "article"
        assert args.length == "medium"
        assert args.count == 1

    def test_rejects_unknown_style(self):
        """Test argparse refuses styles outside the supported set."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["generate", "--topic", "x", "--style", "poem"])


class TestCliSessionCleanup:
    """Tests that the identity provider is closed even when sign-in fails."""

    @pytest.fixture
    def failing_provider(self):
        provider = AsyncMock()
        provider.sign_in.side_effect = AuthenticationError(message="Invalid login credentials")
        with patch("app.cli.build_identity_provider", return_value=provider):
            yield provider

    def test_generate_closes_provider_on_failed_sign_in(self, failing_provider, capsys):
        """Test generate reports the error and still closes the provider."""
        code = main(["generate", "--email", "writer@example.com", "--password", "bad-pass", "--topic", "x"])

        assert code == 1
        assert "Invalid login credentials" in capsys.readouterr().err
        failing_provider.aclose.assert_awaited_once()
        failing_provider.sign_out.assert_not_called()

    def test_subscribe_closes_provider_on_failed_sign_in(self, failing_provider):
        """Test subscribe closes the provider when sign-in fails."""
        code = main(["subscribe", "--email", "writer@example.com", "--password", "bad-pass", "--plan", "pro"])

        assert code == 1
        failing_provider.aclose.assert_awaited_once()
