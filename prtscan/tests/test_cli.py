"""
test_cli.py - Tests for the command-line interface
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from prtscan.cli import cli
from prtscan.core import ScanRequest

WORKFLOW_PATH = ".github/workflows"


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def test_cli_version(cli_runner):
    """Test getting the version with --version."""
    from prtscan.utils.version import __version__

    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_help(cli_runner):
    """Test getting help with --help."""
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Discover all pull_request_target workflows in a repository." in result.output
    assert "--token" in result.output
    assert "--complete" in result.output
    assert "--quiet" in result.output
    assert "--strict" in result.output


def test_cli_requires_repository(cli_runner):
    """Test that the repository argument is required."""
    result = cli_runner.invoke(cli, [])
    assert result.exit_code != 0
    assert "REPOSITORY" in result.output


def test_cli_builds_request(cli_runner):
    """Test that flags are passed to the scanner."""
    with patch("prtscan.cli.WorkflowScanner") as mock_scanner:
        mock_scanner.return_value.run.return_value = "Scan completed successfully"

        result = cli_runner.invoke(
            cli, ["https://github.com/octo/repo", "-t", "abc", "-c", "-q", "--strict"]
        )

    assert result.exit_code == 0
    mock_scanner.assert_called_once_with(
        ScanRequest(
            repository_url="https://github.com/octo/repo",
            token="abc",
            complete=True,
            quiet=True,
            strict=True,
        )
    )


def test_cli_ignores_token_in_environment(cli_runner):
    """Test that a GITHUB_TOKEN in the environment is never sent."""
    with patch("prtscan.cli.WorkflowScanner") as mock_scanner:
        mock_scanner.return_value.run.return_value = "Scan completed successfully"

        result = cli_runner.invoke(
            cli, ["https://example.com/octo/repo"], env={"GITHUB_TOKEN": "ghs_secret"}
        )

    assert result.exit_code == 0
    request = mock_scanner.call_args[0][0]
    assert request.token == ""
    assert request.complete is False


def test_cli_help_has_no_token_envvar(cli_runner):
    """Test that the token option does not advertise an environment variable."""
    result = cli_runner.invoke(cli, ["--help"])
    assert "GITHUB_TOKEN" not in result.output


def test_cli_empty_repository_url(cli_runner):
    """Test that an empty repository URL exits with an error."""
    result = cli_runner.invoke(cli, [" "])
    assert result.exit_code == 1
    assert "Repository URL must not be empty" in result.output


def test_cli_unreachable_repository(cli_runner, temp_dir):
    """Test that an unreachable repository exits non-zero with no findings."""
    result = cli_runner.invoke(cli, [f"file://{temp_dir}/missing", "--quiet"])

    assert result.exit_code == 1
    assert result.output == ""


def test_cli_unreachable_repository_narrates(cli_runner, temp_dir):
    """Test that clone errors are described unless quiet."""
    result = cli_runner.invoke(cli, [f"file://{temp_dir}/missing"])

    assert result.exit_code == 1
    assert "Started analyzing" in result.output
    assert "Error cloning repository" in result.output


def test_cli_keyboard_interrupt(cli_runner):
    """Test the exit status of an interrupted scan."""
    with patch("prtscan.cli.WorkflowScanner") as mock_scanner:
        mock_scanner.return_value.run.side_effect = KeyboardInterrupt

        result = cli_runner.invoke(cli, ["https://github.com/octo/repo", "-q"])

    assert result.exit_code == 130


def test_cli_scan_finds_workflow(cli_runner, make_repo, pr_target_workflow_content):
    """Test a workflow on the default branch and no workflows on another branch."""
    repo_url = make_repo(
        {
            "main": {f"{WORKFLOW_PATH}/ci.yml": pr_target_workflow_content},
            "feature": {"README.md": "# feature\n"},
        }
    )

    result = cli_runner.invoke(cli, [repo_url, "-q"])

    assert result.exit_code == 0
    assert result.output.splitlines() == [f"{repo_url}/blob/main/{WORKFLOW_PATH}/ci.yml"]


def test_cli_scan_complete_mode(cli_runner, make_repo, pr_target_workflow_content):
    """Test duplicate reporting with and without --complete."""
    repo_url = make_repo(
        {
            "main": {f"{WORKFLOW_PATH}/ci.yml": pr_target_workflow_content},
            "feature": {f"{WORKFLOW_PATH}/ci.yml": pr_target_workflow_content},
        }
    )

    result = cli_runner.invoke(cli, [repo_url, "-q"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [f"{repo_url}/blob/main/{WORKFLOW_PATH}/ci.yml"]

    result = cli_runner.invoke(cli, [repo_url, "-q", "--complete"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        f"{repo_url}/blob/main/{WORKFLOW_PATH}/ci.yml",
        f"{repo_url}/blob/feature/{WORKFLOW_PATH}/ci.yml",
    ]


def test_cli_scan_push_only(cli_runner, make_repo, push_workflow_content):
    """Test that a push-only workflow is not reported and the scan succeeds."""
    repo_url = make_repo({"main": {f"{WORKFLOW_PATH}/ci.yml": push_workflow_content}})

    result = cli_runner.invoke(cli, [repo_url])

    assert result.exit_code == 0
    assert "/blob/main/" not in result.output
    assert "Scan completed successfully" in result.output
