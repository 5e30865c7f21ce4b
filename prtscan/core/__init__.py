"""
core package for prtscan

This package contains the repository access and scanning functionality.
"""

from .config import (
    GITHUB_WORKFLOW_DIR,
    TARGET_TRIGGER,
    ConfigurationError,
    ScanRequest,
    validate_request,
)
from .errors import (
    BranchListFailure,
    CheckoutFailure,
    CloneFailure,
    DirectoryReadFailure,
    HeadResolutionFailure,
    MalformedDocument,
    ScanCancelled,
    ScanError,
    WorkflowDirectoryNotFound,
)
from .repository import BranchRef, GitRepository, acquire
from .scanner import Finding, WorkflowScanner, scan_repository

__all__ = [
    "GITHUB_WORKFLOW_DIR",
    "TARGET_TRIGGER",
    "ConfigurationError",
    "ScanRequest",
    "validate_request",
    "ScanError",
    "CloneFailure",
    "HeadResolutionFailure",
    "BranchListFailure",
    "DirectoryReadFailure",
    "ScanCancelled",
    "CheckoutFailure",
    "WorkflowDirectoryNotFound",
    "MalformedDocument",
    "BranchRef",
    "GitRepository",
    "acquire",
    "Finding",
    "WorkflowScanner",
    "scan_repository",
]
