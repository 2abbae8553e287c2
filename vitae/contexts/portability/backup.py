"""
Backup Bundles

A backup is a zip archive of independent JSON entries:

    metadata.json          always present: {exportDate, version, dataTypes}
    master-resume.json     optional
    variants.json          optional
    job-applications.json  optional
    cover-letters.json     optional

Reading a backup is all-or-nothing: a corrupt archive, unparsable JSON or an
invalid document raises BackupError and nothing is returned, so a restore can
never write half a backup.
"""

import json
import os
import shutil
import tempfile
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from vitae.contexts.documents.application_data_structure import CoverLetter, JobApplication
from vitae.contexts.documents.defaults import EXPORT_FORMAT_VERSION
from vitae.contexts.documents.exceptions import BackupError, InvalidDocumentError
from vitae.contexts.documents.resume_data_structure import ResumeMaster
from vitae.contexts.documents.variant_data_structure import Variant
from vitae.contexts.portability.logger import _log_debug, log_backup_result
from vitae.contexts.portability.validation import validate_master, validate_variant
from vitae.utils.timestamp import now_exact

METADATA_FILE = "metadata.json"

# Data type name (as listed in metadata.dataTypes) -> archive entry
BACKUP_FILES = {
    "masterResume": "master-resume.json",
    "variants": "variants.json",
    "jobApplications": "job-applications.json",
    "coverLetters": "cover-letters.json",
}


@dataclass
class BackupData:
    """Documents carried by a backup. None means the entry is absent."""

    master: Optional[ResumeMaster] = None
    variants: Optional[List[Variant]] = None
    jobs: Optional[List[JobApplication]] = None
    cover_letters: Optional[List[CoverLetter]] = None

    def entries(self) -> Dict[str, Any]:
        """JSON content per data type, for the types present."""
        entries = {
            "masterResume": self.master.to_dict() if self.master is not None else None,
            "variants": [v.to_dict() for v in self.variants] if self.variants is not None else None,
            "jobApplications": [j.to_dict() for j in self.jobs] if self.jobs is not None else None,
            "coverLetters": [c.to_dict() for c in self.cover_letters] if self.cover_letters is not None else None,
        }
        return {key: value for key, value in entries.items() if value is not None}

    @property
    def data_types(self) -> List[str]:
        return list(self.entries())


def backup_filename(when: Optional[datetime] = None) -> str:
    """
    Default archive name.

    Examples:
        backup_filename(datetime(2025, 11, 13, 18, 45, 40))
        # "resume-backup-2025-11-13T18-45-40.zip"
    """
    when = when or datetime.now()
    return f"resume-backup-{when.strftime('%Y-%m-%dT%H-%M-%S')}.zip"


def export_backup(data: BackupData, path: Path) -> Path:
    """
    Write a backup archive.

    Args:
        data: Documents to include
        path: Archive path, or an existing directory to place a
            backup_filename() archive in

    Returns:
        Path of the written archive
    """
    path = Path(path)
    if path.is_dir():
        path = path / backup_filename()
    path.parent.mkdir(parents=True, exist_ok=True)

    entries = data.entries()
    metadata = {
        "exportDate": now_exact(),
        "version": EXPORT_FORMAT_VERSION,
        "dataTypes": list(entries),
    }

    # Write to temp file first (atomic write pattern)
    temp_fd, temp_path = tempfile.mkstemp(suffix=".zip", dir=path.parent)
    try:
        with os.fdopen(temp_fd, "wb") as f:
            with zipfile.ZipFile(f, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(METADATA_FILE, json.dumps(metadata, indent=2))
                for data_type, content in entries.items():
                    archive.writestr(BACKUP_FILES[data_type], json.dumps(content, indent=2))

        shutil.move(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    log_backup_result(path, metadata["dataTypes"], action="written")
    return path


def _read_entry(archive: zipfile.ZipFile, name: str) -> Any:
    return json.loads(archive.read(name).decode("utf-8"))


def _parse_list(data_type: str, content: Any, from_dict) -> list:
    if not isinstance(content, list):
        raise InvalidDocumentError(f"{data_type} must be a list", document_kind=data_type)
    return [from_dict(item) for item in content]


def import_backup(path: Path) -> BackupData:
    """
    Read a backup archive.

    Entries missing from the archive come back as None. The master and the
    variants are checked with validate_master() and validate_variant() before
    anything is parsed.

    Raises:
        BackupError: If the archive is missing, corrupt, lacks metadata.json,
            or holds a document that cannot be read
    """
    path = Path(path)
    try:
        with zipfile.ZipFile(path) as archive:
            names = set(archive.namelist())
            if METADATA_FILE not in names:
                raise BackupError("Backup has no metadata.json", archive_path=path)

            metadata = _read_entry(archive, METADATA_FILE)
            _log_debug(f"Backup metadata: {metadata}")

            raw = {
                data_type: _read_entry(archive, entry)
                for data_type, entry in BACKUP_FILES.items()
                if entry in names
            }
    except (OSError, zipfile.BadZipFile) as e:
        raise BackupError("Failed to read backup file", archive_path=path, original_error=e)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BackupError("Backup contains invalid JSON", archive_path=path, original_error=e)

    if "masterResume" in raw:
        master_errors = validate_master(raw["masterResume"])
        if master_errors:
            raise BackupError(
                "Backup contains an invalid master resume: " + "; ".join(master_errors), archive_path=path
            )

    variant_errors = []
    variants = raw.get("variants")
    for index, variant in enumerate(variants if isinstance(variants, list) else []):
        variant_errors.extend(f"variants[{index}]: {error}" for error in validate_variant(variant))
    if variant_errors:
        raise BackupError("Backup contains invalid variants: " + "; ".join(variant_errors), archive_path=path)

    try:
        result = BackupData(
            master=ResumeMaster.from_dict(raw["masterResume"]) if "masterResume" in raw else None,
            variants=_parse_list("variants", raw["variants"], Variant.from_dict) if "variants" in raw else None,
            jobs=(
                _parse_list("jobApplications", raw["jobApplications"], JobApplication.from_dict)
                if "jobApplications" in raw
                else None
            ),
            cover_letters=(
                _parse_list("coverLetters", raw["coverLetters"], CoverLetter.from_dict)
                if "coverLetters" in raw
                else None
            ),
        )
    except InvalidDocumentError as e:
        raise BackupError("Backup contains an invalid document", archive_path=path, original_error=e)

    log_backup_result(path, result.data_types, action="read")
    return result


def validate_backup_file(path: Path) -> bool:
    """True if the archive opens, has metadata.json and at least one data entry."""
    try:
        with zipfile.ZipFile(Path(path)) as archive:
            names = set(archive.namelist())
    except (OSError, zipfile.BadZipFile):
        return False
    return METADATA_FILE in names and any(entry in names for entry in BACKUP_FILES.values())
