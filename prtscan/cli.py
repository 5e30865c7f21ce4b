"""
cli.py - Command-line interface for prtscan

Findings are printed to stdout, one URL per line. Progress and errors go to
stderr and are silenced by --quiet. The exit status is 1 when the scan could
not be completed, whether or not anything was found.
"""

import sys

import click

from .core import ConfigurationError, ScanError, ScanRequest, WorkflowScanner
from .utils.version import __version__

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


@click.command()
@click.version_option(version=__version__, prog_name="prtscan")
@click.argument("repository")
@click.option(
    "-t",
    "--token",
    default="",
    help="Optional GitHub token",
)
@click.option(
    "-c", "--complete", is_flag=True, help="Report identical files in different branches"
)
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress and error output")
@click.option(
    "-s",
    "--strict",
    is_flag=True,
    help="Only match the exact pull_request_target event name",
)
def cli(repository: str, token: str, complete: bool, quiet: bool, strict: bool) -> None:
    """Discover all pull_request_target workflows in a repository.

    Pull Request Target Scan (prtscan) finds every GitHub Actions workflow
    using the pull_request_target event in a given repository, in all
    branches. Workflows using this event run with write permissions and can
    be exploited by malicious pull requests.

    REPOSITORY: URL of the repository to scan
    """
    request = ScanRequest(
        repository_url=repository,
        token=token or "",
        complete=complete,
        quiet=quiet,
        strict=strict,
    )

    try:
        scanner = WorkflowScanner(request)
        summary = scanner.run()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILURE)
    except ScanError:
        sys.exit(EXIT_FAILURE)
    except KeyboardInterrupt:
        if not quiet:
            click.echo("Scan interrupted", err=True)
        sys.exit(EXIT_INTERRUPTED)

    scanner.narrate(summary)


if __name__ == "__main__":
    cli()
