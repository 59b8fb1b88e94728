#!/usr/bin/env python3
"""
Creates zip archives of the export staging folder with the zip tool.
"""

import logging
from pathlib import Path
from typing import Optional

from apigee_backup.core.exceptions import ArchiveError
from apigee_backup.core.shell_executor import run_command, CommandRunner

logger = logging.getLogger(__name__)

def archive_name(project: str, date: str) -> str:
    """Archive basename, e.g. backup_my-project_2024-03-01.zip"""
    return f"backup_{project}_{date}.zip"

class ZipArchiver:
    """Wraps ``zip -r``"""

    def __init__(self, runner: Optional[CommandRunner] = None, binary: str = "zip"):
        self.runner = runner or run_command
        self.binary = binary

    def create(self, source_dir: Path, archive_path: Path) -> Path:
        """
        Compress the contents of ``source_dir`` into ``archive_path``.

        Paths inside the archive are relative to ``source_dir``.

        Returns:
            The archive path

        Raises:
            ArchiveError: If zip fails
        """
        command = [self.binary, "-r", str(archive_path), ".", "-i", "*"]

        logger.info(f"Creating archive {archive_path.name} from {source_dir}")
        success, _, stderr = self.runner(command, cwd=source_dir)

        if not success:
            raise ArchiveError(
                f"zip failed: {stderr or 'unknown error'}",
                command=command,
                stderr=stderr
            )

        return archive_path
