#!/usr/bin/env python3
"""
Top level wiring for a backup run.
Rotates the log, sets up logging, builds the components and runs them.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from apigee_backup.config.loader import Config, ConfigLoader
from apigee_backup.core.logger import setup_logging
from apigee_backup.core.log_rotation import LogRotator
from apigee_backup.core.shell_executor import CommandRunner, check_command_available
from apigee_backup.backup.apigee_exporter import ApigeeExporter
from apigee_backup.backup.archiver import ZipArchiver
from apigee_backup.backup.backup_orchestrator import BackupOrchestrator, BackupOutcome
from apigee_backup.backup.project_list import read_project_file
from apigee_backup.backup.retention_manager import RetentionManager
from apigee_backup.notification.webhook_sender import NotificationDispatcher
from apigee_backup.storage.gcs_storage import GcsStorage

logger = logging.getLogger(__name__)

def init_logging(config: Config) -> logging.Logger:
    """Rotate the log file if it is too large, then attach handlers"""
    rotator = LogRotator(config.log_file, config.max_log_size, config.max_log_archives)
    rotated = rotator.rotate_if_needed()

    root_logger = setup_logging(log_level=config.log_level, log_file=config.log_file)
    if rotated:
        root_logger.info(f"Log file rotated into {rotator.archive_path(1)}")
    return root_logger

def check_tools(config: Config) -> List[str]:
    """Names of required tools missing from PATH, each logged as a warning"""
    missing = []
    for tool in (config.export_binary, config.storage_binary, config.archive_binary):
        if not check_command_available(tool):
            logger.warning(f"Required tool not found on PATH: {tool}")
            missing.append(tool)
    return missing

def build_orchestrator(
    config: Config,
    runner: Optional[CommandRunner] = None,
    session=None,
    clock: Callable[[], datetime] = datetime.now
) -> BackupOrchestrator:
    """
    Assemble the orchestrator and its collaborators.

    Args:
        config: Run configuration
        runner: Command runner shared by the external tools
        session: Optional requests session for the webhooks
        clock: Source of "now"
    """
    storage = GcsStorage(runner, binary=config.storage_binary)
    return BackupOrchestrator(
        config=config,
        exporter=ApigeeExporter(runner, binary=config.export_binary),
        archiver=ZipArchiver(runner, binary=config.archive_binary),
        storage=storage,
        retention=RetentionManager(storage, config.bucket, config.retention_days, clock=clock),
        dispatcher=NotificationDispatcher.from_config(config, session=session, clock=clock),
        clock=clock
    )

def run_backup(
    config: Config,
    runner: Optional[CommandRunner] = None,
    session=None,
    clock: Callable[[], datetime] = datetime.now
) -> List[BackupOutcome]:
    """
    Back up every project listed in config.project_file.

    Logging must already be set up.

    Raises:
        OSError: If the project file cannot be read
    """
    logger.info("=" * 60)
    logger.info("Starting Apigee backup")
    for key, value in ConfigLoader.describe(config).items():
        logger.info(f"  {key}: {value}")
    logger.info("=" * 60)

    projects = read_project_file(config.project_file)
    logger.info(f"Loaded {len(projects)} project(s) from {config.project_file}")

    orchestrator = build_orchestrator(config, runner=runner, session=session, clock=clock)
    return orchestrator.run(projects)
