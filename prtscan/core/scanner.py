"""
scanner.py - Core scanning functionality for prtscan

This module walks every branch of a repository, reads the workflow files of
each one and reports the files that declare the pull_request_target trigger.

Branches are scanned one at a time, default branch first, because each
branch replaces the work tree of the previous one. Identical files seen on
an earlier branch are skipped unless a complete scan was requested.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import click

from ..rules.triggers import get_trigger_check
from ..utils.file_handler import WorkflowCandidate, list_workflow_candidates
from ..utils.hashing import fingerprint
from .config import (
    SUCCESS_MESSAGE,
    ScanRequest,
    normalize_repository_url,
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
    WorkflowDirectoryNotFound,
)
from .repository import BranchRef, GitRepository, acquire


@dataclass
class Finding:
    """A workflow file that declares the target trigger"""

    url: str
    branch: str
    path: str
    fingerprint: str

    def __str__(self) -> str:
        return self.url


def new_stats(repository_url: str) -> Dict[str, Any]:
    """Create an empty statistics dictionary for a scan"""
    return {
        "repository_url": repository_url,
        "branches_total": 0,
        "branches_scanned": 0,
        "branches_skipped": 0,
        "files_scanned": 0,
        "files_duplicate": 0,
        "files_malformed": 0,
        "files_unreadable": 0,
        "total_findings": 0,
    }


class WorkflowScanner:
    """Scans every branch of a repository for pull_request_target workflows"""

    def __init__(
        self, request: ScanRequest, cancel_event: Optional[threading.Event] = None
    ) -> None:
        """
        Initialize the scanner

        Args:
            request: What to scan and how
            cancel_event: Set by the caller to stop the scan between branches or files

        Raises:
            ConfigurationError: If the request is invalid
        """
        validate_request(request)
        self.request = request
        self.repository_url = normalize_repository_url(request.repository_url)
        self.cancel_event = cancel_event
        self.trigger_check = get_trigger_check(request.strict)
        self.seen_fingerprints: Set[str] = set()
        self.stats = new_stats(self.repository_url)

    def narrate(self, message: str) -> None:
        """Print progress to stderr unless quiet"""
        if not self.request.quiet:
            click.echo(message, err=True)

    def report_error(self, description: str, error: Exception) -> None:
        """Print a described error to stderr unless quiet"""
        if not self.request.quiet:
            click.echo(f"  {description}: {error}", err=True)

    def check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ScanCancelled("Scan cancelled")

    def scan(self) -> Iterator[Finding]:
        """
        Scan the repository

        Yields:
            Findings in discovery order, as soon as each one is found

        Raises:
            CloneFailure: If the repository cannot be cloned
            HeadResolutionFailure: If the default branch cannot be resolved
            BranchListFailure: If the branches cannot be listed
            DirectoryReadFailure: If a workflow directory cannot be listed
            ScanCancelled: If cancel_event was set
        """
        self.narrate(f"Started analyzing {self.repository_url}")

        try:
            repository = acquire(self.repository_url, self.request.token)
        except CloneFailure as e:
            self.report_error("Error cloning repository", e)
            raise

        with repository:
            try:
                branches = repository.list_branches()
            except HeadResolutionFailure as e:
                self.report_error("Error getting the repository HEAD", e)
                raise
            except BranchListFailure as e:
                self.report_error("Error listing repository branches", e)
                raise

            self.stats["branches_total"] = len(branches)

            for branch in branches:
                self.check_cancelled()
                yield from self.scan_branch(repository, branch)

    def scan_branch(self, repository: GitRepository, branch: BranchRef) -> Iterator[Finding]:
        """
        Scan the workflow files of one branch

        Args:
            repository: Cloned repository
            branch: Branch to scan

        Yields:
            Findings on this branch
        """
        self.narrate(f"Scanning {self.repository_url}/tree/{branch.short_name}")

        try:
            worktree = repository.checkout_workflows(branch)
        except WorkflowDirectoryNotFound:
            self.stats["branches_skipped"] += 1
            return
        except CheckoutFailure as e:
            self.report_error(f"Error checking out branch {branch.short_name}", e)
            self.stats["branches_skipped"] += 1
            return

        try:
            candidates = list_workflow_candidates(
                worktree, branch.short_name, self.repository_url, on_error=self._on_unreadable
            )
            for candidate in candidates:
                self.check_cancelled()
                finding = self.scan_candidate(candidate)
                if finding is not None:
                    yield finding
        except DirectoryReadFailure as e:
            self.report_error("Error reading workflow directory", e)
            raise

        self.stats["branches_scanned"] += 1

    def scan_candidate(self, candidate: WorkflowCandidate) -> Optional[Finding]:
        """
        Check one workflow file

        Args:
            candidate: File read from a branch

        Returns:
            A Finding if the file declares the target trigger, otherwise None
        """
        file_hash = fingerprint(candidate.content)
        if not self.request.complete and file_hash in self.seen_fingerprints:
            self.stats["files_duplicate"] += 1
            return None
        self.seen_fingerprints.add(file_hash)

        self.stats["files_scanned"] += 1
        try:
            matched = self.trigger_check(candidate.content)
        except MalformedDocument as e:
            self.stats["files_malformed"] += 1
            self.report_error(f"Malformed YAML for file {candidate.url}", e)
            return None

        if not matched:
            return None

        self.stats["total_findings"] += 1
        return Finding(
            url=candidate.url,
            branch=candidate.branch,
            path=candidate.path,
            fingerprint=file_hash,
        )

    def _on_unreadable(self, description: str, error: Exception) -> None:
        self.stats["files_unreadable"] += 1
        self.report_error(description, error)

    def run(self) -> str:
        """
        Scan the repository, printing each finding to stdout as it is found

        Returns:
            Summary message

        Raises:
            ScanError: On any fatal scan failure
        """
        for finding in self.scan():
            click.echo(finding.url)
        return SUCCESS_MESSAGE


def scan_repository(
    request: ScanRequest, cancel_event: Optional[threading.Event] = None
) -> Tuple[List[Finding], Dict[str, Any]]:
    """
    Scan a repository and collect the results

    Args:
        request: What to scan and how
        cancel_event: Optional cancellation flag

    Returns:
        Tuple of (findings, stats)
    """
    scanner = WorkflowScanner(request, cancel_event=cancel_event)
    findings = list(scanner.scan())
    return findings, scanner.stats
