"""
repository.py - Git access for prtscan

This module clones the repository under audit and materializes the workflow
directory of one branch at a time. All work happens through the ``git``
command-line client inside a private temporary directory that is removed
when the scan finishes. Nothing is ever pushed back to the remote.
"""

import base64
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import AUTH_USERNAME, GITHUB_WORKFLOW_DIR
from .errors import (
    BranchListFailure,
    CheckoutFailure,
    CloneFailure,
    HeadResolutionFailure,
    WorkflowDirectoryNotFound,
)

BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class BranchRef:
    """A branch of the cloned repository"""

    short_name: str
    ref_name: str

    @classmethod
    def from_ref_name(cls, ref_name: str) -> "BranchRef":
        short_name = ref_name
        if ref_name.startswith(BRANCH_REF_PREFIX):
            short_name = ref_name[len(BRANCH_REF_PREFIX) :]
        return cls(short_name=short_name, ref_name=ref_name)


def build_git_env(token: str = "") -> Dict[str, str]:
    """
    Build the environment for git commands

    The token is passed as an HTTP basic auth header through git's
    environment configuration, so it is neither stored in the clone nor
    visible on the command line.

    Args:
        token: Optional access token

    Returns:
        Environment mapping for subprocess calls
    """
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"

    if token:
        credentials = base64.b64encode(f"{AUTH_USERNAME}:{token}".encode()).decode()
        # Appended after any GIT_CONFIG_* entries the caller already set
        index = int(env.get("GIT_CONFIG_COUNT") or 0)
        env["GIT_CONFIG_COUNT"] = str(index + 1)
        env[f"GIT_CONFIG_KEY_{index}"] = "http.extraHeader"
        env[f"GIT_CONFIG_VALUE_{index}"] = f"Authorization: Basic {credentials}"

    return env


def _run_git_command(
    args: Sequence[str], env: Optional[Dict[str, str]] = None
) -> Tuple[int, str, str]:
    """
    Run a git command

    Args:
        args: Arguments after ``git``
        env: Environment for the process

    Returns:
        Tuple of (returncode, stdout, stderr)
    """
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            env=env,
            check=False,
        )
    except OSError as e:
        return 127, "", str(e)

    return result.returncode, result.stdout, result.stderr


class GitRepository:
    """Shallow mirror clone of a remote repository with a scratch work tree"""

    def __init__(self, repository_url: str, token: str = "") -> None:
        """
        Initialize the repository handle

        Args:
            repository_url: URL of the remote repository
            token: Optional access token
        """
        self.repository_url = repository_url
        self.env = build_git_env(token)
        self.base_dir: Optional[str] = None

    @property
    def git_dir(self) -> str:
        return os.path.join(self._require_base_dir(), "repository.git")

    @property
    def worktree(self) -> str:
        return os.path.join(self._require_base_dir(), "worktree")

    def _require_base_dir(self) -> str:
        if self.base_dir is None:
            self.base_dir = tempfile.mkdtemp(prefix="prtscan-")
        return self.base_dir

    def _git(self, *args: str) -> Tuple[int, str, str]:
        return _run_git_command(["--git-dir", self.git_dir, *args], env=self.env)

    def clone(self) -> None:
        """
        Clone the remote repository (depth 1, all branches, no working tree)

        Raises:
            CloneFailure: If the repository cannot be cloned
        """
        returncode, stdout, stderr = _run_git_command(
            [
                "clone",
                "--mirror",
                "--depth",
                "1",
                "--no-single-branch",
                "--quiet",
                "--",
                self.repository_url,
                self.git_dir,
            ],
            env=self.env,
        )

        if returncode != 0:
            message = (stderr or stdout).strip()
            raise CloneFailure(message or f"git clone exited with {returncode}")

    def default_branch(self) -> BranchRef:
        """
        Resolve the branch HEAD points to

        Returns:
            The default branch

        Raises:
            HeadResolutionFailure: If HEAD is not a branch or the branch is missing
        """
        returncode, stdout, stderr = self._git("symbolic-ref", "--quiet", "HEAD")
        ref_name = stdout.strip()
        if returncode != 0 or not ref_name:
            raise HeadResolutionFailure(stderr.strip() or "HEAD is not a symbolic reference")

        returncode, _, stderr = self._git(
            "rev-parse", "--verify", "--quiet", f"{ref_name}^{{commit}}"
        )
        if returncode != 0:
            raise HeadResolutionFailure(stderr.strip() or f"reference not found: {ref_name}")

        return BranchRef.from_ref_name(ref_name)

    def list_branches(self) -> List[BranchRef]:
        """
        List every branch, default branch first

        Returns:
            The default branch followed by the other branches in ref order

        Raises:
            HeadResolutionFailure: If the default branch cannot be resolved
            BranchListFailure: If the branches cannot be enumerated
        """
        default = self.default_branch()

        returncode, stdout, stderr = self._git(
            "for-each-ref", "--format=%(refname)", BRANCH_REF_PREFIX
        )
        if returncode != 0:
            raise BranchListFailure(stderr.strip() or f"git for-each-ref exited with {returncode}")

        branches = [default]
        for line in stdout.splitlines():
            ref_name = line.strip()
            if not ref_name:
                continue
            branch = BranchRef.from_ref_name(ref_name)
            if branch.short_name != default.short_name:
                branches.append(branch)

        return branches

    def checkout_workflows(self, branch: BranchRef) -> str:
        """
        Materialize only the workflow directory of a branch

        Whatever an earlier branch left in the work tree is removed first.

        Args:
            branch: Branch to check out

        Returns:
            Path of the work tree root

        Raises:
            WorkflowDirectoryNotFound: If the branch has no workflow directory
            CheckoutFailure: If the checkout fails for any other reason
        """
        self.reset_worktree()

        returncode, stdout, _ = self._git(
            "cat-file", "-t", f"{branch.ref_name}:{GITHUB_WORKFLOW_DIR}"
        )
        if returncode != 0 or stdout.strip() != "tree":
            raise WorkflowDirectoryNotFound(
                f"{GITHUB_WORKFLOW_DIR} not found on branch {branch.short_name}"
            )

        returncode, stdout, stderr = self._git(
            "--work-tree",
            self.worktree,
            "checkout",
            "--force",
            branch.ref_name,
            "--",
            GITHUB_WORKFLOW_DIR,
        )
        if returncode != 0:
            message = (stderr or stdout).strip()
            raise CheckoutFailure(message or f"git checkout exited with {returncode}")

        return self.worktree

    def reset_worktree(self) -> None:
        """Replace the work tree with an empty directory"""
        try:
            if os.path.exists(self.worktree):
                shutil.rmtree(self.worktree)
            os.makedirs(self.worktree)
        except OSError as e:
            raise CheckoutFailure(f"Cannot reset work tree: {e}") from e

    def close(self) -> None:
        """Delete the clone and the work tree"""
        if self.base_dir is not None:
            shutil.rmtree(self.base_dir, ignore_errors=True)
            self.base_dir = None

    def __enter__(self) -> "GitRepository":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def acquire(repository_url: str, token: str = "") -> GitRepository:
    """
    Clone a repository and return its handle

    The caller owns the handle and must close it (or use it as a context
    manager).

    Args:
        repository_url: URL of the remote repository
        token: Optional access token

    Returns:
        The cloned repository

    Raises:
        CloneFailure: If the repository cannot be cloned
    """
    repository = GitRepository(repository_url, token)
    try:
        repository.clone()
    except CloneFailure:
        repository.close()
        raise
    return repository
