"""
file_handler.py - Utilities for reading checked out workflow files

This module lists the workflow directory of a checked out branch and reads
every candidate workflow file in it.
"""

import os
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from ..core.config import GITHUB_WORKFLOW_DIR, WORKFLOW_EXTENSIONS
from ..core.errors import DirectoryReadFailure

ErrorCallback = Callable[[str, Exception], None]


@dataclass
class WorkflowCandidate:
    """A workflow file read from one branch"""

    branch: str
    path: str
    url: str
    content: bytes


def is_workflow_filename(name: str) -> bool:
    """Check for a YAML extension (case-sensitive, like GitHub)"""
    return name.endswith(WORKFLOW_EXTENSIONS)


def build_file_url(repository_url: str, branch: str, relative_path: str) -> str:
    """
    Build the browsable URL of a file on a branch

    Args:
        repository_url: Normalized repository URL
        branch: Branch short name
        relative_path: Path of the file inside the repository

    Returns:
        URL of the form <repository>/blob/<branch>/<path>
    """
    return f"{repository_url}/blob/{branch}/{relative_path}"


def list_workflow_entries(worktree: str) -> List[str]:
    """
    List the workflow file names of a checked out branch

    Args:
        worktree: Root of the checked out tree

    Returns:
        Sorted names of non-directory entries with a YAML extension. Empty
        if the workflow directory does not exist.

    Raises:
        DirectoryReadFailure: If the directory exists but cannot be listed
    """
    workflows_dir = os.path.join(worktree, GITHUB_WORKFLOW_DIR)

    try:
        with os.scandir(workflows_dir) as entries:
            names = [
                entry.name
                for entry in entries
                if not entry.is_dir(follow_symlinks=False) and is_workflow_filename(entry.name)
            ]
    except FileNotFoundError:
        return []
    except OSError as e:
        raise DirectoryReadFailure(str(e)) from e

    return sorted(names)


def _read_file(file_path: str) -> bytes:
    # Symlinks fail with ELOOP instead of being followed out of the work tree
    fd = os.open(file_path, os.O_RDONLY | getattr(os, "O_NOFOLLOW", 0))
    with os.fdopen(fd, "rb") as f:
        return f.read()


def list_workflow_candidates(
    worktree: str,
    branch: str,
    repository_url: str,
    on_error: Optional[ErrorCallback] = None,
) -> Iterator[WorkflowCandidate]:
    """
    Yield the workflow files of a checked out branch

    Directories and files without a YAML extension are skipped. A file that
    cannot be read, including a symlink, is passed to on_error and skipped.

    Args:
        worktree: Root of the checked out tree
        branch: Branch short name, used for display URLs
        repository_url: Normalized repository URL
        on_error: Called with a description and the error for unreadable files

    Yields:
        WorkflowCandidate for every readable workflow file, in name order

    Raises:
        DirectoryReadFailure: If the directory exists but cannot be listed
    """
    for name in list_workflow_entries(worktree):
        relative_path = f"{GITHUB_WORKFLOW_DIR}/{name}"
        url = build_file_url(repository_url, branch, relative_path)

        try:
            content = _read_file(os.path.join(worktree, relative_path))
        except OSError as e:
            if on_error is not None:
                on_error(f"Error reading workflow file {url}", e)
            continue

        yield WorkflowCandidate(branch=branch, path=relative_path, url=url, content=content)
