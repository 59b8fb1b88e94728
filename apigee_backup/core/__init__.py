"""
Core utilities: logging, log rotation, command execution, errors.
"""

from .logger import setup_logging
from .log_rotation import LogRotator
from .shell_executor import run_command, check_command_available, CommandRunner
from .exceptions import BackupError, CommandError, StorageError, ArchiveError, RetentionError

__all__ = [
    "setup_logging",
    "LogRotator",
    "run_command",
    "check_command_available",
    "CommandRunner",
    "BackupError",
    "CommandError",
    "StorageError",
    "ArchiveError",
    "RetentionError"
]
