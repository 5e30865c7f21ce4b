"""
errors.py - Exceptions raised while scanning a repository

Subclasses of ScanError are fatal: they abort the scan and make the command
exit non-zero. CheckoutFailure and MalformedDocument are recoverable; the
scanner narrates them and moves on to the next branch or file.
"""


class ScanError(Exception):
    """Base class for errors that abort the whole scan"""

    pass


class CloneFailure(ScanError):
    """The repository could not be cloned"""

    pass


class HeadResolutionFailure(ScanError):
    """The repository HEAD could not be resolved to a branch"""

    pass


class BranchListFailure(ScanError):
    """The repository branches could not be enumerated"""

    pass


class DirectoryReadFailure(ScanError):
    """The workflow directory exists but could not be listed"""

    pass


class ScanCancelled(ScanError):
    """The caller asked the scan to stop"""

    pass


class CheckoutFailure(Exception):
    """A branch could not be checked out"""

    pass


class WorkflowDirectoryNotFound(CheckoutFailure):
    """The branch has no workflow directory"""

    pass


class MalformedDocument(Exception):
    """A workflow file is not a loadable YAML document"""

    pass
