"""
config.py - Scan request and settings for prtscan

prtscan reads no configuration file. Everything a scan needs is carried by
an immutable ScanRequest built from the command line.
"""

from dataclasses import dataclass

GITHUB_WORKFLOW_DIR = ".github/workflows"
TARGET_TRIGGER = "pull_request_target"
WORKFLOW_EXTENSIONS = (".yml", ".yaml")

# Username sent alongside a token; GitHub ignores it but git requires one
AUTH_USERNAME = "PRTscan"

SUCCESS_MESSAGE = "Scan completed successfully"


class ConfigurationError(Exception):
    """Exception raised for an invalid scan request"""

    pass


@dataclass(frozen=True)
class ScanRequest:
    """Everything needed to run one scan"""

    repository_url: str
    token: str = ""
    complete: bool = False
    quiet: bool = False
    strict: bool = False


def normalize_repository_url(url: str) -> str:
    """
    Normalize a repository URL for building display URLs

    Args:
        url: Repository URL as given by the user

    Returns:
        The URL without surrounding whitespace or trailing slashes
    """
    return url.strip().rstrip("/")


def validate_request(request: ScanRequest) -> None:
    """
    Validate a scan request before any network access

    Args:
        request: Request to validate

    Raises:
        ConfigurationError: If the request cannot be scanned
    """
    if not isinstance(request.repository_url, str) or not normalize_repository_url(
        request.repository_url
    ):
        raise ConfigurationError("Repository URL must not be empty")

    if not isinstance(request.token, str):
        raise ConfigurationError("Token must be a string")
