#!/usr/bin/env python3
"""
Runs the apigeecli organization export.
"""

import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

from apigee_backup.core.shell_executor import run_command, CommandRunner

logger = logging.getLogger(__name__)

@dataclass
class ExportResult:
    """Outcome of one apigeecli export"""
    success: bool
    stdout: str
    stderr: str

class ApigeeExporter:
    """
    Exports every Apigee organization resource of a project.

    apigeecli writes into its working directory, so the staging folder is
    passed as cwd.
    """

    def __init__(self, runner: Optional[CommandRunner] = None, binary: str = "apigeecli"):
        self.runner = runner or run_command
        self.binary = binary

    def export_all(self, project: str, token: str, output_dir: Path) -> ExportResult:
        """
        Export all organization resources for ``project`` into ``output_dir``.

        Args:
            project: Google Cloud project ID, which is also the org name
            token: Bearer token for the Apigee API
            output_dir: Existing staging folder

        Returns:
            ExportResult with captured stdout and stderr
        """
        command = [
            self.binary, "organizations", "export", "--all",
            "-o", project,
            "-t", token
        ]

        logger.info(f"Exporting Apigee organization {project} into {output_dir}")
        success, stdout, stderr = self.runner(command, cwd=output_dir, redact=[token])

        return ExportResult(success=success, stdout=stdout, stderr=stderr)
