"""
Bucket-Purge CLI - S3 Bucket Emptying Tool

Main entry point for the command-line interface.
"""

import logging
import signal
import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import click
from rich.console import Console
from rich.prompt import Confirm

from . import __version__
from .batch.assembler import DEFAULT_BATCH_SIZE
from .cleaners.bucket_cleaner import BucketCleaner, DeleteStatus
from .core.aws_client import AWSClient, AWSClientError
from .core.logging import LogContext, setup_logging
from .reporters.cli_reporter import CLIReporter


console = Console()
logger = logging.getLogger(__name__)


@contextmanager
def cancel_on_interrupt(cancel_event: threading.Event) -> Iterator[threading.Event]:
    """
    Turn the first Ctrl-C into a graceful stop.

    The first SIGINT sets ``cancel_event`` so the purge stops before its next
    batch; a second one raises KeyboardInterrupt as usual.
    """
    previous = signal.getsignal(signal.SIGINT)

    def handler(signum, frame):
        if cancel_event.is_set():
            raise KeyboardInterrupt
        cancel_event.set()
        console.print(
            "\n[yellow]Stopping before the next batch "
            "(Ctrl-C again to abort)...[/yellow]"
        )

    signal.signal(signal.SIGINT, handler)
    try:
        yield cancel_event
    finally:
        signal.signal(signal.SIGINT, previous)


@click.group()
@click.version_option(version=__version__, prog_name="bucket-purge")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level (default: WARNING)",
)
@click.option("--log-file", default=None, help="Also write logs to this file")
def cli(log_level: str, log_file: Optional[str]):
    """
    Bucket-Purge: S3 Bucket Emptying Tool

    Deletes every object (and optionally every version) in an S3 bucket
    using batched DeleteObjects calls, then optionally removes the bucket.
    """
    setup_logging(level=log_level, log_file=log_file)


@cli.command("purge")
@click.argument("bucket")
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region of the bucket (default: us-east-1)",
)
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option("--prefix", default=None, help="Only delete keys under this prefix")
@click.option(
    "--versions",
    is_flag=True,
    help="Delete every object version and delete marker",
)
@click.option(
    "--batch-size",
    default=DEFAULT_BATCH_SIZE,
    type=click.IntRange(1, DEFAULT_BATCH_SIZE),
    help=f"Objects per DeleteObjects call (default: {DEFAULT_BATCH_SIZE})",
)
@click.option("--mfa", default=None, help="MFA token for MFA-delete buckets")
@click.option(
    "--request-payer",
    type=click.Choice(["requester"]),
    default=None,
    help="Confirm requester-pays charges",
)
@click.option(
    "--bypass-governance",
    is_flag=True,
    help="Delete objects under governance-mode object lock",
)
@click.option(
    "--delete-bucket",
    is_flag=True,
    help="Delete the bucket once it is empty",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="List what would be deleted without deleting",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    default=False,
    help="Skip the confirmation prompt",
)
@click.option("--verbose", "-v", is_flag=True, help="Print one line per object")
@click.option("--debug-sdk", is_flag=True, help="Show botocore debug logs")
def purge(
    bucket: str,
    region: str,
    profile: Optional[str],
    prefix: Optional[str],
    versions: bool,
    batch_size: int,
    mfa: Optional[str],
    request_payer: Optional[str],
    bypass_governance: bool,
    delete_bucket: bool,
    dry_run: bool,
    yes: bool,
    verbose: bool,
    debug_sdk: bool,
):
    """
    Delete every object in BUCKET.

    Examples:

        # Preview what would be deleted (safe)
        bucket-purge purge my-bucket --dry-run

        # Empty a versioned bucket and remove it
        bucket-purge purge my-bucket --versions --delete-bucket

        # Only remove a prefix, no prompt
        bucket-purge purge my-bucket --prefix logs/2023/ --yes
    """
    reporter = CLIReporter(console, verbose=verbose)
    cancel_event = threading.Event()

    try:
        client = AWSClient(region=region, profile=profile)
        cleaner = BucketCleaner(client, batch_size=batch_size)

        reporter.print_mode_banner(dry_run, bucket)

        if not dry_run and not yes:
            confirmed = Confirm.ask(
                f"[yellow]Permanently delete "
                f"{'all versions in' if versions else 'all objects in'} "
                f"{bucket}{'/' + prefix if prefix else ''}?[/yellow]",
                default=False,
                console=console,
            )
            if not confirmed:
                console.print("\n[yellow]Purge cancelled by user.[/yellow]")
                return

        botocore_logger = logging.getLogger("botocore")
        if debug_sdk:
            sdk_context = LogContext(
                botocore_logger, "DEBUG", handlers=logging.getLogger().handlers
            )
        else:
            sdk_context = LogContext(botocore_logger, botocore_logger.level)
        with sdk_context, cancel_on_interrupt(cancel_event):
            result = cleaner.purge_bucket(
                bucket,
                prefix=prefix,
                versions=versions,
                dry_run=dry_run,
                mfa=mfa,
                request_payer=request_payer,
                bypass_governance_retention=bypass_governance,
                progress_callback=reporter.progress,
                cancel_event=cancel_event,
            )
        reporter.report(result)

        if delete_bucket:
            if prefix:
                console.print("\n[yellow]--delete-bucket ignored with --prefix.[/yellow]")
            elif not result.success:
                console.print(
                    "\n[yellow]Bucket left in place because some objects "
                    "could not be deleted.[/yellow]"
                )
            else:
                bucket_result = cleaner.delete_bucket(
                    bucket, dry_run=dry_run, purge=False
                )
                reporter.print_bucket_result(bucket_result)
                if bucket_result.status == DeleteStatus.FAILED:
                    sys.exit(1)

        if not result.success:
            sys.exit(1)

    except AWSClientError as e:
        console.print(f"\n[red bold]AWS Error:[/red bold] {str(e)}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Purge cancelled by user.[/yellow]")
        sys.exit(130)


@cli.command("validate")
@click.option(
    "--profile",
    "-p",
    default=None,
    help="AWS profile name from ~/.aws/credentials",
)
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region to use for validation",
)
def validate_credentials(profile: Optional[str], region: str):
    """Validate AWS credentials and show account info."""
    try:
        client = AWSClient(region=region, profile=profile)
        client.validate_credentials()
        account_id = client.get_account_id()

        console.print("\n[green bold]AWS credentials are valid![/green bold]")
        console.print(f"\n  Account ID: {account_id}")
        console.print(f"  Region: {region}")
        if profile:
            console.print(f"  Profile: {profile}")
        console.print()

    except AWSClientError as e:
        console.print(f"\n[red bold]Validation Failed:[/red bold] {str(e)}")
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
