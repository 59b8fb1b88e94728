#!/usr/bin/env python3
"""
Command Line Interface for Apigee Backup.
`run` performs the scheduled backup, the other commands help with manual upkeep.
"""

from __future__ import annotations

import sys
import logging

import click

from apigee_backup import __version__
from apigee_backup.config.loader import ConfigLoader
from apigee_backup.core.exceptions import RetentionError, StorageError
from apigee_backup.core.logger import setup_logging
from apigee_backup.backup.project_list import read_project_file
from apigee_backup.backup.retention_manager import RetentionManager
from apigee_backup.storage.gcs_storage import GcsStorage
from apigee_backup.main import init_logging, check_tools, run_backup

logger = logging.getLogger(__name__)

# CLI root
@click.group()
@click.version_option(__version__, prog_name="apigee-backup")
def cli():
    """Apigee Backup - export Apigee organizations to GCS"""

@cli.command(name="run")
@click.option("--file", "-f", "project_file", required=True,
              help="File containing list of Google Cloud project IDs")
@click.option("--gcs", "bucket", required=True, help="GCS bucket name")
@click.option("--token", required=True, envvar="APIGEE_TOKEN",
              help="Authorization token for Apigee")
@click.option("--retention", "retention_days", type=int, default=None,
              help="Retention period in days [default: 7]")
@click.option("--webhook", "webhook_url", default=None, help="Discord webhook URL")
@click.option("--tagid", "tag_ids", default=None,
              help="Comma-separated list of Discord tag IDs")
@click.option("--workspace", "workspace_webhook_url", default=None,
              help="Google Workspace webhook URL")
@click.option("--config", "options_path", type=click.Path(dir_okay=False), default=None,
              help="JSON options file with additional settings")
@click.option("--backup-dir", default=None, help="Local staging directory")
@click.option("--log-file", default=None, help="Runtime log file")
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR or OFF")
@click.option("--notify-all-failures", is_flag=True, default=False,
              help="Send a failure notification for every failed step, not just the export")
def backup_run(options_path, **options):
    """Back up every project listed in the project file"""
    # An unset flag must not override the options file
    options["notify_all_failures"] = options["notify_all_failures"] or None

    try:
        config = ConfigLoader.load(overrides=options, options_path=options_path)
    except (OSError, ValueError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    try:
        init_logging(config)
    except OSError as e:
        click.echo(f"Failed to set up logging: {e}", err=True)
        sys.exit(1)

    check_tools(config)

    try:
        outcomes = run_backup(config)
    except OSError as e:
        logger.error(f"Failed to read project file: {e}")
        sys.exit(1)

    if not all(outcome.succeeded for outcome in outcomes):
        sys.exit(1)

@cli.command(name="cleanup")
@click.option("--file", "-f", "project_file", required=True,
              help="File containing list of Google Cloud project IDs")
@click.option("--gcs", "bucket", required=True, help="GCS bucket name")
@click.option("--retention", "retention_days", type=click.IntRange(min=1), default=7, show_default=True,
              help="Retention period in days")
@click.option("--log-level", default="INFO", show_default=True)
def cleanup_command(project_file: str, bucket: str, retention_days: int, log_level: str):
    """Run only the retention sweep for every listed project"""
    setup_logging(log_level=log_level, log_file=None)

    try:
        projects = read_project_file(project_file)
    except OSError as e:
        click.echo(f"Failed to read project file: {e}", err=True)
        sys.exit(1)

    retention = RetentionManager(GcsStorage(), bucket, retention_days)
    failures = 0

    for project in projects:
        try:
            result = retention.cleanup(project)
            click.echo(f"{project}: deleted {len(result.deleted)}, kept {len(result.kept)}")
        except RetentionError as e:
            failures += 1
            click.echo(f"❌ {project}: {e}", err=True)

    if failures:
        sys.exit(1)

@cli.command(name="list")
@click.argument("project")
@click.option("--gcs", "bucket", required=True, help="GCS bucket name")
@click.option("--retention", "retention_days", type=click.IntRange(min=1), default=7, show_default=True,
              help="Retention period used to flag expired archives")
def list_command(project: str, bucket: str, retention_days: int):
    """List remote archives of a project"""
    retention = RetentionManager(GcsStorage(), bucket, retention_days)

    try:
        archives = retention.list_archives(project)
    except StorageError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if not archives:
        click.echo(f"No archives found for {project}")
        return

    cutoff = retention.cutoff()
    for uri, archive_date in archives:
        if archive_date is None:
            click.echo(f"  ?          {uri}")
            continue
        expired = retention.is_expired(uri, project, cutoff)
        marker = " (expired)" if expired else ""
        click.echo(f"  {archive_date.isoformat()} {uri}{marker}")

if __name__ == "__main__":
    cli()
