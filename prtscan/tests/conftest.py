"""
conftest.py - Pytest fixtures for prtscan tests
"""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Dict

import pytest

GIT_ENV = {
    "GIT_AUTHOR_NAME": "prtscan tests",
    "GIT_AUTHOR_EMAIL": "tests@example.com",
    "GIT_COMMITTER_NAME": "prtscan tests",
    "GIT_COMMITTER_EMAIL": "tests@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


def git(cwd, *args):
    """Run a git command in a test repository."""
    env = dict(os.environ)
    env.update(GIT_ENV)
    env.pop("GIT_DIR", None)
    env.pop("GIT_WORK_TREE", None)
    subprocess.run(
        ["git", "-c", "commit.gpgsign=false", *args],
        cwd=str(cwd),
        env=env,
        check=True,
        capture_output=True,
        text=True,
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory that is removed after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def pr_target_workflow_content():
    """Workflow triggered by pull_request_target."""
    return """
name: Label pull requests

on:
  pull_request_target:
    branches: [ main ]

jobs:
  label:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/labeler@v5
"""


@pytest.fixture
def push_workflow_content():
    """Workflow triggered by push only."""
    return """
name: CI

on: push

jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - run: make test
"""


@pytest.fixture
def malformed_workflow_content():
    """Content that is not valid YAML."""
    return "on: [pull_request_target\njobs: {build: \n"


@pytest.fixture
def make_repo(temp_dir):
    """Factory building a local git repository with one commit per branch.

    Takes a mapping of branch name to {relative path: content}. The first
    branch becomes the default branch. Returns the file:// URL of the
    repository.
    """

    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    def _make_repo(branches: Dict[str, Dict[str, str]], name: str = "repo") -> str:
        repo_dir = Path(temp_dir) / name
        repo_dir.mkdir()
        branch_names = list(branches)
        default = branch_names[0]

        git(repo_dir, "init", "--quiet", "--initial-branch", default)

        for branch in branch_names:
            if branch != default:
                git(repo_dir, "checkout", "--quiet", "-b", branch, default)
                git(repo_dir, "rm", "-r", "--quiet", "--ignore-unmatch", ".")

            for relative_path, content in branches[branch].items():
                file_path = repo_dir / relative_path
                file_path.parent.mkdir(parents=True, exist_ok=True)
                file_path.write_text(content)

            git(repo_dir, "add", "--all")
            git(repo_dir, "commit", "--quiet", "--allow-empty", "-m", f"Commit on {branch}")

        git(repo_dir, "checkout", "--quiet", default)

        return repo_dir.as_uri()

    return _make_repo


@pytest.fixture
def run_git():
    """Expose the git helper to tests that need to poke at repositories."""
    return git
