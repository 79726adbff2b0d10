"""
Tests for CLI functionality.

These tests verify the command-line interface logic.
"""

from __future__ import annotations

import argparse
import unittest.mock
from io import StringIO
from typing import TYPE_CHECKING
from unittest.mock import patch

if TYPE_CHECKING:
    from pathlib import Path

import pytest
import requests

from bioblitz_tree.cli import cmd_info, cmd_report, cmd_serve, create_parser, main
from bioblitz_tree.errors import SubtreeInductionError


def mock_http_server() -> unittest.mock.MagicMock:
    server = unittest.mock.MagicMock()
    server.__enter__ = unittest.mock.Mock(return_value=server)
    server.__exit__ = unittest.mock.Mock(return_value=False)
    server.serve_forever = unittest.mock.Mock(side_effect=KeyboardInterrupt)
    return server


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self) -> None:
        """Parser is created successfully."""
        parser = create_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "bioblitz-tree"

    def test_parser_has_version(self) -> None:
        """Parser has version argument."""
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["--version"])

    def test_parser_has_debug_flag(self) -> None:
        """Parser accepts --debug flag."""
        parser = create_parser()
        args = parser.parse_args(["--debug", "info"])
        assert args.debug is True

    def test_parser_report_defaults(self) -> None:
        """Report command defaults to settings."""
        parser = create_parser()
        args = parser.parse_args(["report"])
        assert args.command == "report"
        assert args.project is None
        assert args.output_dir is None

    def test_parser_report_options(self, tmp_path: Path) -> None:
        """Report command accepts --project and --output-dir."""
        parser = create_parser()
        args = parser.parse_args(["report", "--project", "my-bioblitz", "--output-dir", str(tmp_path)])
        assert args.project == "my-bioblitz"
        assert args.output_dir == tmp_path

    def test_parser_serve_with_port(self) -> None:
        """Parser accepts serve --port."""
        parser = create_parser()
        args = parser.parse_args(["serve", "--port", "3000"])
        assert args.port == 3000


class TestCmdReport:
    """Tests for cmd_report function."""

    def test_success_returns_zero(self) -> None:
        """Successful report returns exit code 0 and lists outputs."""
        args = argparse.Namespace(project="my-bioblitz", output_dir=None, debug=False)

        with (
            patch("bioblitz_tree.cli.build_report") as mock_build,
            patch("sys.stdout", new=StringIO()) as mock_stdout,
        ):
            mock_build.return_value = {"outputs": ["output/tree.svg", "output/tree.pdf"]}
            exit_code = cmd_report(args)

            assert exit_code == 0
            mock_build.assert_called_once_with(project_id="my-bioblitz", output_dir=None)
            assert "output/tree.pdf" in mock_stdout.getvalue()

    def test_report_error_returns_one(self) -> None:
        """A named report failure returns exit code 1."""
        args = argparse.Namespace(project=None, output_dir=None, debug=False)

        with (
            patch("bioblitz_tree.cli.build_report") as mock_build,
            patch("sys.stderr", new=StringIO()) as mock_stderr,
        ):
            mock_build.side_effect = SubtreeInductionError([1, 2], "node_id 'ott1' was not found")
            exit_code = cmd_report(args)

            assert exit_code == 1
            assert "was not found" in mock_stderr.getvalue()

    def test_http_error_returns_one(self) -> None:
        """A transport failure returns exit code 1."""
        args = argparse.Namespace(project=None, output_dir=None, debug=False)

        with (
            patch("bioblitz_tree.cli.build_report") as mock_build,
            patch("sys.stderr", new=StringIO()),
        ):
            mock_build.side_effect = requests.ConnectionError("unreachable")
            assert cmd_report(args) == 1

    def test_debug_mode_prints_settings(self) -> None:
        """Debug mode prints settings."""
        args = argparse.Namespace(project=None, output_dir=None, debug=True)

        with (
            patch("bioblitz_tree.cli.build_report") as mock_build,
            patch("sys.stdout", new=StringIO()) as mock_stdout,
        ):
            mock_build.return_value = {"outputs": []}
            cmd_report(args)
            assert "Settings" in mock_stdout.getvalue()


class TestCmdInfo:
    """Tests for cmd_info function."""

    def test_prints_app_info(self) -> None:
        """Info command prints application information."""
        args = argparse.Namespace()

        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            exit_code = cmd_info(args)
            output = mock_stdout.getvalue()

        assert exit_code == 0
        assert "Application" in output
        assert "Project" in output


class TestCmdServe:
    """Tests for cmd_serve function."""

    def test_missing_output_dir_returns_one(self, tmp_path: Path) -> None:
        """Serve returns 1 when the output directory doesn't exist."""
        args = argparse.Namespace(port=8080)

        with (
            patch("bioblitz_tree.cli.get_settings") as mock_settings,
            patch("sys.stderr", new=StringIO()),
        ):
            mock_settings.return_value.output_dir = tmp_path / "no-such-dir"
            exit_code = cmd_serve(args)
            assert exit_code == 1

    def test_uses_port_from_args(self, tmp_path: Path) -> None:
        """Serve uses --port when provided and serves the output directory."""
        args = argparse.Namespace(port=9999)
        server = mock_http_server()

        with (
            patch("bioblitz_tree.cli.get_settings") as mock_settings,
            patch("bioblitz_tree.cli.http.server.HTTPServer", return_value=server) as mock_ctor,
        ):
            mock_settings.return_value.output_dir = tmp_path
            cmd_serve(args)

            mock_ctor.assert_called_once()
            assert mock_ctor.call_args[0][0] == ("", 9999)
            handler = mock_ctor.call_args[0][1]
            assert handler.keywords["directory"] == str(tmp_path)

    def test_uses_port_from_settings_when_none(self, tmp_path: Path) -> None:
        """Serve falls back to api_port from settings."""
        args = argparse.Namespace(port=None)
        server = mock_http_server()

        with (
            patch("bioblitz_tree.cli.get_settings") as mock_settings,
            patch("bioblitz_tree.cli.http.server.HTTPServer", return_value=server) as mock_ctor,
        ):
            mock_settings.return_value.output_dir = tmp_path
            mock_settings.return_value.api_port = 5555
            cmd_serve(args)
            assert mock_ctor.call_args[0][0] == ("", 5555)


class TestMain:
    """Tests for main function."""

    def test_no_command_shows_help(self) -> None:
        """No command shows help and exits 0."""
        with patch("sys.argv", ["bioblitz-tree"]):
            assert main() == 0

    @pytest.mark.parametrize(
        ("command", "handler"),
        [("report", "cmd_report"), ("info", "cmd_info"), ("serve", "cmd_serve")],
    )
    def test_dispatch(self, command: str, handler: str) -> None:
        """Each command dispatches to its handler."""
        with (
            patch("sys.argv", ["bioblitz-tree", command]),
            patch(f"bioblitz_tree.cli.{handler}") as mock_cmd,
        ):
            mock_cmd.return_value = 0
            assert main() == 0
            mock_cmd.assert_called_once()

    def test_unknown_command_shows_help(self) -> None:
        """Unknown command shows help and returns 1."""
        with (
            patch("sys.argv", ["bioblitz-tree", "info"]),
            patch("bioblitz_tree.cli.create_parser") as mock_parser,
        ):
            mock_parser.return_value.parse_args.return_value = argparse.Namespace(command="unknown")
            assert main() == 1
