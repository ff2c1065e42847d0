"""Tests for the qsm command group and exit code mapping."""

import json
import sys

from click.testing import CliRunner

from querysmith import __version__
from querysmith.cli.errors import EXIT_INVALID_ARGS, EXIT_NOT_FOUND, EXIT_SUCCESS
from querysmith.cli.main import cli, main


class TestCliGroup:
    """Tests invoking commands through click."""

    def test_version(self):
        """Test --version."""
        result = CliRunner().invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_filter(self):
        """Test the filter command end to end."""
        result = CliRunner().invoke(cli, ['filter', '{"price": [{"gte": 1}, {"lt": 0}]}'])

        assert result.exit_code == 0
        assert result.output.strip() == "(price:>=1 || price:<0)"

    def test_params_json(self, config_file):
        """Test the params command with --json."""
        result = CliRunner().invoke(cli, [
            'params', '{"q": "desk", "include": ["id"]}',
            '--collection', 'products', '--config', str(config_file), '--json',
        ])

        assert result.exit_code == 0
        params = json.loads(result.output)["data"]["params"]
        assert params["q"] == "desk"
        assert params["include_fields"] == "id"

    def test_unknown_collection_subcommand(self):
        """Test that the collection group lists valid subcommands."""
        result = CliRunner().invoke(cli, ['collection', 'drop'])

        assert result.exit_code != 0
        assert "Available subcommands" in result.output
        assert "qsm collection ensure" in result.output


class TestMainExitCodes:
    """Tests for main() error handling."""

    def test_success(self, monkeypatch, capsys):
        """Test a successful command returns EXIT_SUCCESS."""
        monkeypatch.setattr(sys, 'argv', ['qsm', 'filter', '{"a": 1}'])

        assert main() == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "a:=1"

    def test_invalid_argument(self, monkeypatch, capsys):
        """Test that invalid predicates exit with EXIT_INVALID_ARGS."""
        monkeypatch.setattr(sys, 'argv', ['qsm', 'filter', '{"a": {"like": 1}}'])

        assert main() == EXIT_INVALID_ARGS
        assert "[ERROR]" in capsys.readouterr().err

    def test_usage_error(self, monkeypatch):
        """Test that click usage errors exit with EXIT_INVALID_ARGS."""
        monkeypatch.setattr(sys, 'argv', ['qsm', 'params'])
        assert main() == EXIT_INVALID_ARGS

    def test_not_found(self, config_file, monkeypatch, capsys):
        """Test that unknown collections exit with EXIT_NOT_FOUND."""
        monkeypatch.setattr(sys, 'argv', [
            'qsm', 'fields', '--collection', 'orders', '--config', str(config_file),
        ])

        assert main() == EXIT_NOT_FOUND
        assert "orders" in capsys.readouterr().err
