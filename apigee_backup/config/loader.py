#!/usr/bin/env python3
"""
Configuration loader for Apigee Backup.
Merges defaults, an optional JSON options file and command line values.
"""

import json
from pathlib import Path
from dataclasses import dataclass
from typing import Optional, Any, Dict, Tuple

from apigee_backup.core.logger import LOG_LEVELS

@dataclass(frozen=True)
class Config:
    """Run configuration, built once at startup and never mutated"""
    project_file: str                 # Newline separated list of project IDs
    bucket: str                       # GCS bucket name, without gs://
    token: str                        # Apigee bearer token
    retention_days: int = 7           # Remote archives older than this are deleted
    webhook_url: str = ""             # Discord webhook, empty disables
    tag_ids: Tuple[str, ...] = ()     # Discord user/role IDs to mention
    workspace_webhook_url: str = ""   # Google Workspace webhook, empty disables
    backup_dir: str = "/tmp/apigee_backup"
    log_file: str = "/var/log/apigee.log"
    max_log_size: int = 10 * 1024 * 1024
    max_log_archives: int = 10
    log_level: str = "INFO"
    notify_all_failures: bool = False  # Notify on every failure, not just export
    notify_timeout: int = 10           # Seconds per webhook request
    export_binary: str = "apigeecli"
    storage_binary: str = "gsutil"
    archive_binary: str = "zip"

    @property
    def backup_path(self) -> Path:
        return Path(self.backup_dir)

    @property
    def export_path(self) -> Path:
        """Flat staging folder the export tool writes into"""
        return self.backup_path / "export"

    def date_path(self, date: str) -> Path:
        """Dated folder holding the finished archive"""
        return self.backup_path / date

def parse_tag_ids(value: Any) -> Tuple[str, ...]:
    """
    Normalise tag IDs from a comma separated string or a list.

    Blank entries are dropped.
    """
    if not value:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    return tuple(item.strip() for item in items if item.strip())

def parse_bool(value: Any) -> bool:
    """
    Read a boolean from JSON, an environment style string or a bool.

    Raises:
        ValueError: If a string is not one of the known spellings
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off", ""):
        return False
    raise ValueError(f"invalid boolean value: {value!r}")

class ConfigLoader:
    """Loads and validates configuration"""

    DEFAULT_CONFIG = {
        "project_file": "",
        "bucket": "",
        "token": "",
        "retention_days": 7,
        "webhook_url": "",
        "tag_ids": "",
        "workspace_webhook_url": "",
        "backup_dir": "/tmp/apigee_backup",
        "log_file": "/var/log/apigee.log",
        "max_log_size": 10 * 1024 * 1024,
        "max_log_archives": 10,
        "log_level": "INFO",
        "notify_all_failures": False,
        "notify_timeout": 10,
        "export_binary": "apigeecli",
        "storage_binary": "gsutil",
        "archive_binary": "zip"
    }

    @staticmethod
    def load(
        overrides: Optional[Dict[str, Any]] = None,
        options_path: Optional[str] = None
    ) -> Config:
        """
        Build the run configuration.

        Values are taken, lowest priority first, from DEFAULT_CONFIG, the
        JSON options file and ``overrides``. ``None`` overrides are ignored
        so unset command line options do not mask the options file.

        Args:
            overrides: Values from the command line
            options_path: Optional path to a JSON options file

        Returns:
            Validated Config

        Raises:
            FileNotFoundError: If options_path is given but missing
            json.JSONDecodeError: If the options file is invalid JSON
            ValueError: If any value is invalid
        """
        config_dict = ConfigLoader.DEFAULT_CONFIG.copy()

        if options_path:
            config_dict.update(ConfigLoader.get_raw_config(options_path))

        for key, value in (overrides or {}).items():
            if value is not None:
                config_dict[key] = value

        return ConfigLoader._create_config(config_dict)

    @staticmethod
    def _create_config(config_dict: dict) -> Config:
        """Create Config object from dictionary with validation"""
        unknown = set(config_dict) - set(ConfigLoader.DEFAULT_CONFIG)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        try:
            config = Config(
                project_file=str(config_dict["project_file"]).strip(),
                bucket=str(config_dict["bucket"]).strip(),
                token=str(config_dict["token"]).strip(),
                retention_days=int(config_dict["retention_days"]),
                webhook_url=str(config_dict["webhook_url"] or "").strip(),
                tag_ids=parse_tag_ids(config_dict["tag_ids"]),
                workspace_webhook_url=str(config_dict["workspace_webhook_url"] or "").strip(),
                backup_dir=str(config_dict["backup_dir"]),
                log_file=str(config_dict["log_file"]),
                max_log_size=int(config_dict["max_log_size"]),
                max_log_archives=int(config_dict["max_log_archives"]),
                log_level=str(config_dict["log_level"]).upper(),
                notify_all_failures=parse_bool(config_dict["notify_all_failures"]),
                notify_timeout=int(config_dict["notify_timeout"]),
                export_binary=str(config_dict["export_binary"]),
                storage_binary=str(config_dict["storage_binary"]),
                archive_binary=str(config_dict["archive_binary"])
            )
        except (ValueError, TypeError) as e:
            print(f"[ERROR] Invalid configuration value: {e}")
            raise ValueError(f"Configuration error: {e}")

        ConfigLoader._validate_config(config)

        return config

    @staticmethod
    def _validate_config(config: Config) -> None:
        """Validate configuration values"""
        errors = []

        if not config.project_file:
            errors.append("project_file is required")

        if not config.bucket:
            errors.append("bucket is required")
        elif config.bucket.startswith("gs://") or "/" in config.bucket:
            errors.append(f"bucket must be a bare bucket name, got {config.bucket}")

        if not config.token:
            errors.append("token is required")

        if config.retention_days < 1:
            errors.append(f"retention_days must be >= 1, got {config.retention_days}")

        if config.max_log_size < 1:
            errors.append(f"max_log_size must be >= 1, got {config.max_log_size}")

        if config.max_log_archives < 1:
            errors.append(f"max_log_archives must be >= 1, got {config.max_log_archives}")

        if config.notify_timeout < 1:
            errors.append(f"notify_timeout must be >= 1, got {config.notify_timeout}")

        if config.log_level not in LOG_LEVELS:
            errors.append(f"log_level must be one of {sorted(LOG_LEVELS)}, got {config.log_level}")

        for url_field in ("webhook_url", "workspace_webhook_url"):
            url = getattr(config, url_field)
            if url and not url.startswith(("http://", "https://")):
                errors.append(f"{url_field} must be an http(s) URL, got {url}")

        if errors:
            error_msg = "; ".join(errors)
            print(f"[ERROR] Configuration validation failed: {error_msg}")
            raise ValueError(f"Invalid configuration: {error_msg}")

    @staticmethod
    def get_raw_config(options_path: str) -> dict:
        """
        Read the JSON options file.

        Args:
            options_path: Path to the options file

        Returns:
            Raw configuration dictionary
        """
        options_file = Path(options_path)

        with open(options_file, 'r', encoding='utf-8') as f:
            raw = json.load(f)

        if not isinstance(raw, dict):
            raise ValueError(f"Options file {options_path} must contain a JSON object")

        print(f"[INFO] Loaded options from {options_path}")
        return raw

    @staticmethod
    def describe(config: Config) -> Dict[str, Any]:
        """Configuration summary for logging, secrets masked"""
        return {
            "project_file": config.project_file,
            "bucket": config.bucket,
            "token": "****" if config.token else "",
            "retention_days": config.retention_days,
            "discord_webhook": "set" if config.webhook_url else "not set",
            "tag_ids": len(config.tag_ids),
            "workspace_webhook": "set" if config.workspace_webhook_url else "not set",
            "backup_dir": config.backup_dir,
            "log_file": config.log_file,
            "notify_all_failures": config.notify_all_failures
        }
