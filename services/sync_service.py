"""
Backup Sync Service

Exports a snapshot of the clinic data to an external backup target and, on
success, stamps ClinicSettings.last_sync.

Returns:
{
    "success": True/False,
    "file_id": "clinic-backup-...",   # opaque reference from the target
    "error": "Explanation..."          # only when success is False
}

Targets are fire-and-forget from the store's point of view: no retries.
"""

import json
import os
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime

import requests

from core.config import get_backup_dir, get_backup_url
from core.logging import get_logger
from core.time_utils import now_local
from services.settings_service import record_sync
from storage import Storage

logger = get_logger("services.sync")


# ---------------------------------------------------------
# Snapshot
# ---------------------------------------------------------
def build_snapshot(storage: Storage) -> dict:
    """Read-only copy of patients, today's appointments and all records."""
    return {
        "patients": [p.to_dict() for p in storage.get_all_patients()],
        "appointments": [a.to_dict() for a in storage.get_today_appointments()],
        "treatment_records": [r.to_dict() for r in storage.get_all_treatment_records()],
    }


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def snapshot_to_json(snapshot: dict) -> str:
    return json.dumps(snapshot, default=_json_default, indent=2)


# ---------------------------------------------------------
# Backup targets
# ---------------------------------------------------------
class BackupTarget(ABC):
    """Destination for snapshots. `upload` returns an opaque file id or raises."""

    @abstractmethod
    def upload(self, payload: str, account: str | None = None) -> str: ...


class LocalFileBackup(BackupTarget):
    """Writes each snapshot as a JSON file into a folder."""

    def __init__(self, folder_path: str | None = None):
        self.folder_path = folder_path or get_backup_dir()

    def upload(self, payload: str, account: str | None = None) -> str:
        if not os.path.exists(self.folder_path):
            os.makedirs(self.folder_path)

        file_id = f"clinic-backup-{now_local():%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8]}"
        file_path = os.path.join(self.folder_path, f"{file_id}.json")

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(payload)

        return file_id


class HttpBackupTarget(BackupTarget):
    """POSTs the snapshot to a backup endpoint that answers with {"file_id": ...}."""

    def __init__(self, url: str | None = None, timeout: float = 10):
        self.url = url or get_backup_url()
        if not self.url:
            raise ValueError("No backup URL configured (CLINIC_BACKUP_URL).")
        self.timeout = timeout

    def upload(self, payload: str, account: str | None = None) -> str:
        headers = {"Content-Type": "application/json"}
        if account:
            headers["X-Backup-Account"] = account

        response = requests.post(self.url, data=payload, headers=headers, timeout=self.timeout)
        response.raise_for_status()

        data = response.json()
        file_id = data.get("file_id") if isinstance(data, dict) else None
        if not file_id:
            raise ValueError("Backup service response did not include a file_id")
        return file_id


def default_backup_target() -> BackupTarget:
    """HTTP target when CLINIC_BACKUP_URL is set, local folder otherwise."""
    if get_backup_url():
        return HttpBackupTarget()
    return LocalFileBackup()


# ---------------------------------------------------------
# Main sync function
# ---------------------------------------------------------
def sync_to_backup(storage: Storage, target: BackupTarget | None = None) -> dict:
    target = target or default_backup_target()

    settings = storage.get_clinic_settings()
    account = settings.google_account if settings else None

    payload = snapshot_to_json(build_snapshot(storage))

    try:
        file_id = target.upload(payload, account=account or None)
    except (requests.RequestException, OSError, ValueError) as e:
        logger.warning(f"Backup sync failed: {e}")
        return {"success": False, "file_id": None, "error": str(e)}

    record_sync(storage)
    logger.info(f"Backup sync complete: {file_id}")
    return {"success": True, "file_id": file_id, "error": None}
