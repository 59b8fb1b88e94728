#!/usr/bin/env python3
"""
Size based rotation of the runtime log file.
Keeps a bounded ring of zipped archives next to the live log.
"""

import zipfile
from pathlib import Path
from typing import List

DEFAULT_MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
DEFAULT_MAX_ARCHIVES = 10

class LogRotator:
    """
    Rotates the log file into numbered zip archives.

    Archive slots are named ``<stem><index>.zip`` in the log directory,
    e.g. ``/var/log/apigee1.zip``. Slot 1 is always the newest archive.
    Once every slot is taken, the archive in the last slot is evicted.
    """

    def __init__(
        self,
        log_file: Path,
        max_size: int = DEFAULT_MAX_LOG_SIZE,
        max_archives: int = DEFAULT_MAX_ARCHIVES
    ):
        if max_archives < 1:
            raise ValueError(f"max_archives must be >= 1, got {max_archives}")

        self.log_file = Path(log_file)
        self.max_size = max_size
        self.max_archives = max_archives

    def archive_path(self, index: int) -> Path:
        """Path of the archive in ring slot ``index`` (1-based)"""
        return self.log_file.with_name(f"{self.log_file.stem}{index}.zip")

    def needs_rotation(self) -> bool:
        """True if the live log exists and has reached the size threshold"""
        try:
            return self.log_file.stat().st_size >= self.max_size
        except FileNotFoundError:
            return False

    def rotate_if_needed(self) -> bool:
        """
        Rotate the live log when it is too large.

        Must run before any handler opens the log file.

        Returns:
            True if a rotation took place
        """
        if not self.needs_rotation():
            return False

        self.rotate()
        return True

    def rotate(self) -> None:
        """
        Shift the archive ring by one and compress the live log into slot 1.
        """
        oldest = self.archive_path(self.max_archives)
        if oldest.exists():
            oldest.unlink()

        for index in range(self.max_archives - 1, 0, -1):
            current = self.archive_path(index)
            if current.exists():
                current.replace(self.archive_path(index + 1))

        with zipfile.ZipFile(self.archive_path(1), "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.write(self.log_file, arcname=self.log_file.name)

        self.log_file.unlink()

    def list_archives(self) -> List[Path]:
        """Existing archives, newest first"""
        return [
            self.archive_path(index)
            for index in range(1, self.max_archives + 1)
            if self.archive_path(index).exists()
        ]
