#!/usr/bin/env python3
"""
Main backup orchestrator.
Runs export, archive, upload and retention for each project in turn.
"""

import shutil
import logging
from pathlib import Path
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List

from apigee_backup.config.loader import Config
from apigee_backup.core.exceptions import ArchiveError, RetentionError, StorageError
from apigee_backup.backup.apigee_exporter import ApigeeExporter
from apigee_backup.backup.archiver import ZipArchiver, archive_name
from apigee_backup.backup.error_classifier import classify_export_error, is_precondition_failure
from apigee_backup.backup.retention_manager import RetentionManager
from apigee_backup.notification.webhook_sender import NotificationDispatcher, DEFAULT_REASON
from apigee_backup.storage.gcs_storage import GcsStorage

logger = logging.getLogger(__name__)

STATUS_COMPLETE = "Complete"
STATUS_FAILED = "Failed"

@dataclass(frozen=True)
class BackupOutcome:
    """Final result of one project's backup"""
    project: str
    status: str = STATUS_COMPLETE
    reason: str = DEFAULT_REASON

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_COMPLETE

class BackupOrchestrator:
    """
    Backs up projects one after another.

    Every project yields exactly one BackupOutcome. Failures never escape
    backup_project, so one bad project cannot stop the run.
    """

    def __init__(
        self,
        config: Config,
        exporter: ApigeeExporter,
        archiver: ZipArchiver,
        storage: GcsStorage,
        retention: RetentionManager,
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Args:
            config: Run configuration
            exporter: apigeecli wrapper
            archiver: zip wrapper
            storage: gsutil wrapper used for uploads
            retention: Duplicate check and retention sweep
            dispatcher: Webhook notifications
            clock: Source of "now", used for archive dates
        """
        self.config = config
        self.exporter = exporter
        self.archiver = archiver
        self.storage = storage
        self.retention = retention
        self.dispatcher = dispatcher
        self.clock = clock

    def run(self, projects: Iterable[str]) -> List[BackupOutcome]:
        """
        Back up every project in order, then send the summary.

        Returns:
            One outcome per project, in input order
        """
        projects = list(projects)
        outcomes = []

        for index, project in enumerate(projects, 1):
            logger.info("=" * 60)
            logger.info(f"[{index}/{len(projects)}] Backing up project {project}")
            outcome = self.backup_project(project)
            logger.info(f"Project {project}: {outcome.status} ({outcome.reason})")
            outcomes.append(outcome)

        failed = len([o for o in outcomes if not o.succeeded])
        logger.info("=" * 60)
        logger.info(f"Backup run finished: {len(outcomes) - failed} complete, {failed} failed")

        self.dispatcher.notify_summary(outcomes, self._today())
        return outcomes

    def backup_project(self, project: str) -> BackupOutcome:
        """Back up one project, converting any error into a failed outcome"""
        try:
            return self._backup_project(project)
        except Exception as e:
            logger.error(f"Unexpected error while backing up {project}: {e}", exc_info=True)
            return BackupOutcome(project, STATUS_FAILED, f"Unexpected error: {e}")

    def _today(self) -> str:
        return self.clock().strftime("%Y-%m-%d")

    def _backup_project(self, project: str) -> BackupOutcome:
        today = self._today()

        # 1. Fresh workspace
        try:
            self._reset_workspace()
        except OSError as e:
            return self._fail(project, today, f"Failed to reset backup directory: {e}")

        # 2. Skip if today's archive is already uploaded
        try:
            if self.retention.backup_exists(project, today):
                logger.info(f"Backup for {today} already exists in GCS. Skipping new backup.")
                return BackupOutcome(project)
        except StorageError as e:
            return self._fail(project, today, f"Failed to check existing backup: {e}")

        # 3. Export
        date_folder = self.config.date_path(today)
        export_folder = self.config.export_path
        try:
            date_folder.mkdir(parents=True, exist_ok=True)
            export_folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return self._fail(project, today, f"Failed to create backup folders: {e}")

        export = self.exporter.export_all(project, self.config.token, export_folder)
        if not export.success:
            error_message = classify_export_error(export.stderr) or "apigeecli export failed"
            if not is_precondition_failure(error_message):
                logger.error(f"Failed to execute apigeecli command: {error_message}")
                return self._fail(project, today, error_message, notify=True)
            logger.warning(f"Continuing despite FAILED_PRECONDITION error: {error_message}")

        # 4. Archive
        archive_path = date_folder / archive_name(project, today)
        try:
            self.archiver.create(export_folder, archive_path)
        except ArchiveError as e:
            return self._fail(project, today, f"Failed to zip folder: {e}")

        # 5. Upload
        try:
            self.storage.upload(archive_path, self.retention.archive_uri(project, today))
        except StorageError as e:
            return self._fail(project, today, f"Failed to upload backup to GCS: {e}")

        # 6. Success is announced before retention runs
        self.dispatcher.notify_project(project, today, STATUS_COMPLETE, DEFAULT_REASON)

        # 7. Retention, a failure here does not retract the notification
        try:
            self.retention.cleanup(project)
        except RetentionError as e:
            logger.error(f"Failed to clean up old backups: {e}")
            return BackupOutcome(project, STATUS_FAILED, f"Failed to clean up old backups: {e}")

        return BackupOutcome(project)

    def _reset_workspace(self) -> None:
        backup_path: Path = self.config.backup_path
        if backup_path.exists():
            shutil.rmtree(backup_path)
        backup_path.mkdir(parents=True)

    def _fail(self, project: str, date: str, reason: str, notify: bool = False) -> BackupOutcome:
        """
        Build a failed outcome.

        Export failures always notify. Other failures notify only when
        notify_all_failures is set.
        """
        logger.error(f"Backup of {project} failed: {reason}")
        if notify or self.config.notify_all_failures:
            self.dispatcher.notify_project(project, date, STATUS_FAILED, reason)
        return BackupOutcome(project, STATUS_FAILED, reason)
