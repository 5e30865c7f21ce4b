"""
prtscan - Pull Request Target Scan

Discovers every GitHub Actions workflow that uses the pull_request_target
event, across all branches of a repository. Workflows using this event run
with write permissions and secrets, and can be triggered by pull requests
from forks.
"""

from typing import Optional, cast

from .core import (
    ConfigurationError,
    Finding,
    ScanError,
    ScanRequest,
    WorkflowScanner,
    scan_repository,
)
from .rules import has_target_trigger, has_target_trigger_strict
from .utils.hashing import fingerprint
from .utils.version import __version__, get_version, get_version_info

__all__ = [
    "__version__",
    "get_version",
    "get_version_info",
    "ScanRequest",
    "Finding",
    "WorkflowScanner",
    "scan_repository",
    "ScanError",
    "ConfigurationError",
    "has_target_trigger",
    "has_target_trigger_strict",
    "fingerprint",
    "main",
]


def main() -> Optional[int]:
    """Main entry point for the prtscan CLI tool"""
    from .cli import cli

    return cast(Optional[int], cli())
