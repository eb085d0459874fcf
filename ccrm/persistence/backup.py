"""
ZIP backups of the data directory, backup housekeeping and health-check reports.
"""

import logging
import platform
import shutil
import zipfile
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

from ..config import AppConfig
from ..core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "ccrm_backup_"
BACKUP_GLOB = f"{BACKUP_PREFIX}*.zip"
_TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S"


@dataclass
class BackupInfo:
    """Information about a backup archive."""
    path: Path
    size: int  # bytes
    created_time: datetime
    file_count: int = 0

    @property
    def size_mb(self) -> float:
        return self.size / (1024 * 1024)


def format_file_size(size: int) -> str:
    """Human-readable size such as "512 B" or "1.5 KB"."""
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in "KMGTPE":
        value /= 1024
        if value < 1024 or unit == "E":
            return f"{value:.1f} {unit}B"
    return f"{value:.1f} EB"


class BackupService:
    """ZIP backups of the data directory plus a health-check report."""

    def __init__(self, config: AppConfig):
        self.config = config

    @property
    def backup_root(self) -> Path:
        return Path(self.config.backup_dir)

    def _build_archive_name(self) -> Path:
        timestamp = datetime.now().strftime(_TIMESTAMP_FORMAT)
        archive = self.backup_root / f"{BACKUP_PREFIX}{timestamp}.zip"
        counter = 1
        while archive.exists():
            archive = self.backup_root / f"{BACKUP_PREFIX}{timestamp}_{counter}.zip"
            counter += 1
        return archive

    def _should_skip(self, path: Path) -> bool:
        if path.name.startswith(".") or path.name.endswith(".tmp"):
            return True
        try:
            path.resolve().relative_to(self.backup_root.resolve())
            return True
        except ValueError:
            return False

    def create_backup(self) -> Path:
        """Archive every regular file under the data directory."""
        data_dir = Path(self.config.data_dir)
        if not data_dir.is_dir():
            raise PersistenceError(f"Data directory does not exist: {data_dir}",
                                   details={"path": str(data_dir)})

        self.backup_root.mkdir(parents=True, exist_ok=True)
        archive_path = self._build_archive_name()
        file_count = 0
        total_size = 0
        try:
            with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                for path in sorted(data_dir.rglob("*")):
                    if not path.is_file() or self._should_skip(path):
                        continue
                    if any(part.startswith(".") for part in path.relative_to(data_dir).parts):
                        continue
                    archive.write(path, path.relative_to(data_dir).as_posix())
                    file_count += 1
                    total_size += path.stat().st_size
        except OSError as exc:
            archive_path.unlink(missing_ok=True)
            logger.exception("Backup failed: %s", exc)
            raise PersistenceError(f"Backup failed: {exc}", details={"path": str(archive_path)})

        logger.info("Backup created at %s (%d files, %s)", archive_path, file_count, format_file_size(total_size))
        return archive_path

    def list_backups(self) -> List[BackupInfo]:
        """Backups sorted newest first."""
        if not self.backup_root.is_dir():
            return []
        backups = [self.get_backup_info(path) for path in self.backup_root.glob(BACKUP_GLOB)]
        return sorted(backups, key=lambda info: (info.created_time, info.path.name), reverse=True)

    def get_backup_info(self, backup_path: Path) -> BackupInfo:
        backup_path = Path(backup_path)
        if not backup_path.is_file():
            raise PersistenceError(f"Backup file does not exist: {backup_path}",
                                   details={"path": str(backup_path)})
        stat = backup_path.stat()
        try:
            with zipfile.ZipFile(backup_path) as archive:
                file_count = len(archive.namelist())
        except zipfile.BadZipFile:
            file_count = 0
        return BackupInfo(
            path=backup_path,
            size=stat.st_size,
            created_time=datetime.fromtimestamp(stat.st_mtime),
            file_count=file_count,
        )

    def clean_old_backups(self, days_to_keep: int) -> int:
        """Delete backups last modified more than ``days_to_keep`` days ago."""
        if not self.backup_root.is_dir():
            return 0
        cutoff = datetime.now() - timedelta(days=days_to_keep)
        deleted = 0
        freed = 0
        for backup in self.backup_root.glob(BACKUP_GLOB):
            stat = backup.stat()
            if datetime.fromtimestamp(stat.st_mtime) < cutoff:
                try:
                    backup.unlink()
                except OSError as exc:
                    logger.warning("Failed to remove old backup %s: %s", backup, exc)
                    continue
                deleted += 1
                freed += stat.st_size
                logger.info("Removed old backup %s", backup.name)
        if deleted:
            logger.info("Cleanup completed: %d files deleted, %s freed", deleted, format_file_size(freed))
        return deleted

    def _directory_status(self, label: str, directory: Path) -> str:
        if not directory.exists():
            return f"✗ {label}: DOES NOT EXIST"
        if not directory.is_dir():
            return f"✗ {label}: EXISTS BUT NOT A DIRECTORY"
        return f"✓ {label}: EXISTS ({sum(1 for _ in directory.iterdir())} files)"

    def create_health_check_report(self) -> Path:
        """Write a system health report into the data directory."""
        now = datetime.now()
        data_dir = Path(self.config.data_dir)
        lines = [
            "CCRM System Health Check Report",
            "===============================",
            f"Generated: {now.isoformat(timespec='seconds')}",
            "",
            "Directory Status:",
            "-----------------",
            self._directory_status("Data Directory", data_dir),
            self._directory_status("Export Directory", Path(self.config.export_dir)),
            self._directory_status("Backup Directory", self.backup_root),
            "",
            "Disk Space:",
            "-----------",
        ]
        try:
            usage = shutil.disk_usage(data_dir if data_dir.exists() else Path.cwd())
            percent = usage.used / usage.total * 100 if usage.total else 0.0
            lines.extend([
                f"Total Space: {format_file_size(usage.total)}",
                f"Used Space: {format_file_size(usage.used)}",
                f"Available Space: {format_file_size(usage.free)}",
                f"Usage: {percent:.1f}%",
            ])
            if percent > 90:
                lines.append("⚠ WARNING: Disk usage is high (>90%)")
        except OSError as exc:
            lines.append(f"Error getting disk space info: {exc}")

        lines.extend(["", "Backup Status:", "--------------"])
        backups = self.list_backups()
        lines.append(f"Total Backups: {len(backups)}")
        latest: Optional[BackupInfo] = backups[0] if backups else None
        if latest is not None:
            days_since = (now - latest.created_time).days
            lines.append(f"Latest Backup: {latest.path.name}")
            lines.append(f"Days Since Last Backup: {days_since}")
            if days_since > 7:
                lines.append("⚠ WARNING: No recent backup (>7 days)")

        lines.extend([
            "",
            "System Properties:",
            "------------------",
            f"Python Version: {platform.python_version()}",
            f"Operating System: {platform.system()} {platform.release()}",
            f"Application: {self.config.app_name} v{self.config.app_version}",
        ])

        data_dir.mkdir(parents=True, exist_ok=True)
        report_path = data_dir / f"health_check_{now.strftime(_TIMESTAMP_FORMAT)}.txt"
        try:
            report_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot write health check report: {exc}",
                                   details={"path": str(report_path)})
        logger.info("Health check report created: %s", report_path)
        return report_path
