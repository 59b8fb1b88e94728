#!/usr/bin/env python3
"""
Google Cloud Storage access through the gsutil command line tool.
"""

import logging
from pathlib import Path
from typing import List, Optional

from apigee_backup.core.exceptions import StorageError
from apigee_backup.core.shell_executor import run_command, CommandRunner

logger = logging.getLogger(__name__)

# gsutil stderr when a listed URL has nothing behind it
NO_MATCH_MARKER = "matched no objects"

def gcs_uri(bucket: str, *parts: str) -> str:
    """Build a gs:// URI from a bucket and path segments"""
    path = "/".join(part.strip("/") for part in parts if part)
    return f"gs://{bucket}/{path}" if path else f"gs://{bucket}/"

class GcsStorage:
    """
    Thin wrapper over gsutil ls / cp / rm.

    All calls are synchronous and captured. Failures raise StorageError
    carrying gsutil's stderr.
    """

    def __init__(self, runner: Optional[CommandRunner] = None, binary: str = "gsutil"):
        """
        Args:
            runner: Command runner, defaults to run_command
            binary: gsutil executable
        """
        self.runner = runner or run_command
        self.binary = binary

    def list_objects(self, prefix_uri: str) -> List[str]:
        """
        List object URIs under a prefix.

        Args:
            prefix_uri: gs:// URI, usually ending with "/"

        Returns:
            Listed URIs in gsutil order, blank lines removed. Empty when
            gsutil reports that the prefix matched no objects.

        Raises:
            StorageError: If the listing command fails for any other reason
        """
        command = [self.binary, "ls", prefix_uri]
        success, stdout, stderr = self.runner(command)

        if not success and NO_MATCH_MARKER in stderr:
            logger.debug(f"No objects under {prefix_uri}")
            return []

        if not success:
            raise StorageError(
                f"Failed to list {prefix_uri}: {stderr or 'gsutil ls failed'}",
                command=command,
                stderr=stderr
            )

        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def exists(self, uri: str) -> bool:
        """
        Check whether anything exists at a URI.

        A "matched no objects" answer means absent. Any other listing
        failure is an error, not an absence.

        Raises:
            StorageError: If gsutil fails for another reason
        """
        command = [self.binary, "ls", uri]
        success, stdout, stderr = self.runner(command)

        if success:
            return bool(stdout.strip())

        if NO_MATCH_MARKER in stderr:
            return False

        raise StorageError(
            f"Failed to check {uri}: {stderr or 'gsutil ls failed'}",
            command=command,
            stderr=stderr
        )

    def upload(self, local_path: Path, uri: str) -> None:
        """
        Copy a local file to a gs:// URI.

        Raises:
            StorageError: If gsutil cp fails
        """
        command = [self.binary, "cp", str(local_path), uri]
        logger.info(f"Uploading {Path(local_path).name} to {uri}")
        success, _, stderr = self.runner(command)

        if not success:
            raise StorageError(
                f"gsutil cp failed: {stderr or 'unknown error'}",
                command=command,
                stderr=stderr
            )

    def remove(self, uri: str) -> None:
        """
        Delete one object.

        Raises:
            StorageError: If gsutil rm fails
        """
        command = [self.binary, "rm", uri]
        success, _, stderr = self.runner(command)

        if not success:
            raise StorageError(
                f"gsutil rm failed: {stderr or 'unknown error'}",
                command=command,
                stderr=stderr
            )
