"""
Exception types raised by the backup components.
The orchestrator turns all of them into a failed project outcome.
"""

from typing import List, Optional


class BackupError(Exception):
    """Base class for backup errors"""


class CommandError(BackupError):
    """An external tool exited with a failure"""

    def __init__(self, message: str, command: Optional[List[str]] = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr


class StorageError(CommandError):
    """Object storage listing, upload or delete failed"""


class ArchiveError(CommandError):
    """Archive creation failed"""


class RetentionError(BackupError):
    """Retention sweep could not run"""
