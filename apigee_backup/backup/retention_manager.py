#!/usr/bin/env python3
"""
Retention manager for archived exports in GCS.
Deletes remote archives older than the configured number of days.
"""

import logging
from datetime import date, datetime, time, timedelta
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from apigee_backup.backup.archiver import archive_name
from apigee_backup.core.exceptions import RetentionError, StorageError
from apigee_backup.storage.gcs_storage import GcsStorage, gcs_uri

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

@dataclass
class CleanupResult:
    """Result of one retention sweep"""
    project: str
    cutoff: datetime
    deleted: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # Name did not parse
    failed: List[str] = field(default_factory=list)   # Delete call failed

def parse_archive_date(uri: str, project: str) -> Optional[date]:
    """
    Read the date out of ``.../backup_<project>_<YYYY-MM-DD>.zip``.

    Returns:
        The embedded date, or None when the name does not follow the pattern
    """
    base = uri.rstrip("/").rsplit("/", 1)[-1]
    prefix = f"backup_{project}_"
    suffix = ".zip"

    if not base.startswith(prefix) or not base.endswith(suffix):
        return None

    date_str = base[len(prefix):-len(suffix)]
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError:
        return None

class RetentionManager:
    """
    Checks for and prunes archives under ``gs://<bucket>/<project>/``.
    """

    def __init__(
        self,
        storage: GcsStorage,
        bucket: str,
        retention_days: int,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Args:
            storage: Object storage client
            bucket: Bucket name
            retention_days: Archives dated before now minus this are deleted
            clock: Source of "now"
        """
        self.storage = storage
        self.bucket = bucket
        self.retention_days = retention_days
        self.clock = clock

    def project_prefix(self, project: str) -> str:
        return gcs_uri(self.bucket, project) + "/"

    def archive_uri(self, project: str, date_str: str) -> str:
        return gcs_uri(self.bucket, project, archive_name(project, date_str))

    def cutoff(self) -> datetime:
        return self.clock() - timedelta(days=self.retention_days)

    def backup_exists(self, project: str, date_str: str) -> bool:
        """
        Check whether the archive for ``date_str`` is already uploaded.

        Raises:
            StorageError: If the listing fails for a reason other than absence
        """
        return self.storage.exists(self.archive_uri(project, date_str))

    def is_expired(self, uri: str, project: str, cutoff: datetime) -> Optional[bool]:
        """
        Decide whether an archive is past retention.

        Returns:
            True or False, or None when the date cannot be parsed
        """
        archive_date = parse_archive_date(uri, project)
        if archive_date is None:
            return None
        return datetime.combine(archive_date, time.min) < cutoff

    def cleanup(self, project: str) -> CleanupResult:
        """
        Delete expired archives of one project.

        Unparseable names are skipped. A failed delete is logged and the
        sweep moves on.

        Raises:
            RetentionError: If the initial listing fails
        """
        cutoff = self.cutoff()
        prefix = self.project_prefix(project)
        result = CleanupResult(project=project, cutoff=cutoff)

        try:
            objects = self.storage.list_objects(prefix)
        except StorageError as e:
            raise RetentionError(f"failed to list GCS bucket: {e}") from e

        for uri in objects:
            expired = self.is_expired(uri, project, cutoff)

            if expired is None:
                logger.warning(f"Failed to parse date from path {uri}, skipping")
                result.skipped.append(uri)
                continue

            if not expired:
                result.kept.append(uri)
                continue

            try:
                self.storage.remove(uri)
                result.deleted.append(uri)
                logger.info(f"Deleted old backup {uri}")
            except StorageError as e:
                result.failed.append(uri)
                logger.error(f"Failed to delete old backup {uri}: {e}")

        logger.info(
            f"Retention sweep for {project} (cutoff {cutoff.strftime(DATE_FORMAT)}): "
            f"deleted {len(result.deleted)}, kept {len(result.kept)}, "
            f"skipped {len(result.skipped)}, failed {len(result.failed)}"
        )

        return result

    def list_archives(self, project: str) -> List[tuple]:
        """
        List remote archives with their parsed dates, oldest first.

        Unparseable entries sort last with a None date.

        Raises:
            StorageError: If the listing fails
        """
        entries = [
            (uri, parse_archive_date(uri, project))
            for uri in self.storage.list_objects(self.project_prefix(project))
        ]
        return sorted(entries, key=lambda entry: (entry[1] is None, entry[1] or date.min))
