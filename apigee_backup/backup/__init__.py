"""
Backup processing module.
"""

from .backup_orchestrator import BackupOrchestrator, BackupOutcome, STATUS_COMPLETE, STATUS_FAILED
from .apigee_exporter import ApigeeExporter, ExportResult
from .archiver import ZipArchiver, archive_name
from .error_classifier import classify_export_error, is_precondition_failure
from .project_list import read_project_file
from .retention_manager import RetentionManager, CleanupResult, parse_archive_date

__all__ = [
    "BackupOrchestrator",
    "BackupOutcome",
    "STATUS_COMPLETE",
    "STATUS_FAILED",
    "ApigeeExporter",
    "ExportResult",
    "ZipArchiver",
    "archive_name",
    "classify_export_error",
    "is_precondition_failure",
    "read_project_file",
    "RetentionManager",
    "CleanupResult",
    "parse_archive_date"
]
