"""
Document Store

Local JSON key-value persistence. Each document kind lives in its own file
under the store directory (VITAE_DATA_PATH, default data/store):

    resume_master.json     the single ResumeMaster
    resume_variants.json   list of Variant
    job_applications.json  list of JobApplication
    cover_letters.json     list of CoverLetter
    resume_templates.json  list of Template (built-in catalog when absent)

Writes go to a temp file in the same directory and are moved into place, so a
failed write leaves the previous document intact.

Usage:
    from vitae.contexts.portability.storage import DocumentStore

    store = DocumentStore()
    snapshot = store.load()
    store.add_variant(Variant.new("v1", "Platform Engineering"))
"""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar

from dotenv import load_dotenv

from vitae.contexts.documents.application_data_structure import CoverLetter, JobApplication, find_by_id
from vitae.contexts.documents.exceptions import InvalidDocumentError
from vitae.contexts.documents.resume_data_structure import ResumeMaster
from vitae.contexts.documents.template_catalog import Template, load_template_catalog
from vitae.contexts.documents.variant_data_structure import Variant
from vitae.contexts.portability.backup import BackupData
from vitae.contexts.portability.logger import _log_debug, _log_info
from vitae.utils.timestamp import now_exact

load_dotenv()
DATA_PATH = Path(os.getenv("VITAE_DATA_PATH", "data/store"))

MASTER_KEY = "resume_master"
VARIANTS_KEY = "resume_variants"
JOBS_KEY = "job_applications"
COVER_LETTERS_KEY = "cover_letters"
TEMPLATES_KEY = "resume_templates"

STORE_KEYS = (MASTER_KEY, VARIANTS_KEY, JOBS_KEY, COVER_LETTERS_KEY, TEMPLATES_KEY)

T = TypeVar("T")


@dataclass
class StoreSnapshot:
    """Everything in the store at one moment."""

    master: Optional[ResumeMaster] = None
    variants: List[Variant] = field(default_factory=list)
    jobs: List[JobApplication] = field(default_factory=list)
    cover_letters: List[CoverLetter] = field(default_factory=list)
    templates: List[Template] = field(default_factory=list)


class DocumentStore:
    """JSON file per document kind under one directory."""

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else DATA_PATH

    # =========================================================================
    # RAW KEY-VALUE ACCESS
    # =========================================================================

    def path_for(self, key: str) -> Path:
        if key not in STORE_KEYS:
            raise KeyError(f"Unknown store key: {key}")
        return self.root / f"{key}.json"

    def read(self, key: str, default: Any = None) -> Any:
        """
        Parsed JSON stored under key, or default when nothing is stored.

        Raises:
            InvalidDocumentError: If the stored file is not valid JSON
        """
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidDocumentError(f"Stored document is not valid JSON: {e}", document_kind=key)

    def write(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key (atomic)."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file first (atomic write pattern)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=path.parent, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            shutil.move(temp_path, path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        _log_debug(f"Wrote {key} to {path}")

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()

    def _read_list(self, key: str, from_dict: Callable[[Any], T]) -> List[T]:
        items = self.read(key, default=[])
        if not isinstance(items, list):
            raise InvalidDocumentError("Stored value must be a list", document_kind=key)
        return [from_dict(item) for item in items]

    def _write_list(self, key: str, items: List[Any]) -> None:
        self.write(key, [item.to_dict() for item in items])

    def _add(self, key: str, from_dict, item) -> None:
        items = self._read_list(key, from_dict)
        if find_by_id(items, item.id) is not None:
            raise ValueError(f"{key}: id '{item.id}' already exists")
        self._write_list(key, items + [item])

    def _update(self, key: str, from_dict, item) -> bool:
        items = self._read_list(key, from_dict)
        if find_by_id(items, item.id) is None:
            return False
        stamped = replace(item, updated_at=now_exact())
        self._write_list(key, [stamped if existing.id == item.id else existing for existing in items])
        return True

    def _delete(self, key: str, from_dict, item_id: str) -> bool:
        items = self._read_list(key, from_dict)
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._write_list(key, remaining)
        return True

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def load(self) -> StoreSnapshot:
        """Read every document kind."""
        return StoreSnapshot(
            master=self.get_master(),
            variants=self.get_variants(),
            jobs=self.get_jobs(),
            cover_letters=self.get_cover_letters(),
            templates=self.get_templates(),
        )

    # =========================================================================
    # MASTER RESUME
    # =========================================================================

    def get_master(self) -> Optional[ResumeMaster]:
        data = self.read(MASTER_KEY)
        return ResumeMaster.from_dict(data) if data is not None else None

    def save_master(self, master: ResumeMaster) -> None:
        self.write(MASTER_KEY, master.to_dict())

    # =========================================================================
    # VARIANTS
    # =========================================================================

    def get_variants(self) -> List[Variant]:
        return self._read_list(VARIANTS_KEY, Variant.from_dict)

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        return find_by_id(self.get_variants(), variant_id)

    def save_variants(self, variants: List[Variant]) -> None:
        self._write_list(VARIANTS_KEY, variants)

    def add_variant(self, variant: Variant) -> None:
        self._add(VARIANTS_KEY, Variant.from_dict, variant)

    def update_variant(self, variant: Variant) -> bool:
        """Replace the stored variant with the same id. False if there is none."""
        return self._update(VARIANTS_KEY, Variant.from_dict, variant)

    def delete_variant(self, variant_id: str) -> bool:
        return self._delete(VARIANTS_KEY, Variant.from_dict, variant_id)

    # =========================================================================
    # JOB APPLICATIONS
    # =========================================================================

    def get_jobs(self) -> List[JobApplication]:
        return self._read_list(JOBS_KEY, JobApplication.from_dict)

    def save_jobs(self, jobs: List[JobApplication]) -> None:
        self._write_list(JOBS_KEY, jobs)

    def add_job(self, job: JobApplication) -> None:
        self._add(JOBS_KEY, JobApplication.from_dict, job)

    def update_job(self, job: JobApplication) -> bool:
        return self._update(JOBS_KEY, JobApplication.from_dict, job)

    def delete_job(self, job_id: str) -> bool:
        return self._delete(JOBS_KEY, JobApplication.from_dict, job_id)

    # =========================================================================
    # COVER LETTERS
    # =========================================================================

    def get_cover_letters(self) -> List[CoverLetter]:
        return self._read_list(COVER_LETTERS_KEY, CoverLetter.from_dict)

    def save_cover_letters(self, cover_letters: List[CoverLetter]) -> None:
        self._write_list(COVER_LETTERS_KEY, cover_letters)

    def add_cover_letter(self, cover_letter: CoverLetter) -> None:
        self._add(COVER_LETTERS_KEY, CoverLetter.from_dict, cover_letter)

    def update_cover_letter(self, cover_letter: CoverLetter) -> bool:
        return self._update(COVER_LETTERS_KEY, CoverLetter.from_dict, cover_letter)

    def delete_cover_letter(self, cover_letter_id: str) -> bool:
        return self._delete(COVER_LETTERS_KEY, CoverLetter.from_dict, cover_letter_id)

    # =========================================================================
    # TEMPLATES
    # =========================================================================

    def get_templates(self) -> List[Template]:
        """Stored templates, or the built-in catalog when none are stored."""
        if not self.path_for(TEMPLATES_KEY).exists():
            return load_template_catalog()
        return self._read_list(TEMPLATES_KEY, Template.from_dict)

    def save_templates(self, templates: List[Template]) -> None:
        self._write_list(TEMPLATES_KEY, templates)

    def delete_template(self, template_id: str) -> bool:
        templates = self.get_templates()
        remaining = [template for template in templates if template.id != template_id]
        if len(remaining) == len(templates):
            return False
        self.save_templates(remaining)
        return True

    # =========================================================================
    # BACKUP
    # =========================================================================

    def to_backup(self) -> BackupData:
        """Everything a backup carries (templates are not backed up)."""
        snapshot = self.load()
        return BackupData(
            master=snapshot.master,
            variants=snapshot.variants,
            jobs=snapshot.jobs,
            cover_letters=snapshot.cover_letters,
        )

    def restore(self, backup: BackupData) -> List[str]:
        """
        Write every document kind present in a backup.

        Kinds absent from the backup are left as they are.

        Returns:
            Data types restored
        """
        if backup.master is not None:
            self.save_master(backup.master)
        if backup.variants is not None:
            self.save_variants(backup.variants)
        if backup.jobs is not None:
            self.save_jobs(backup.jobs)
        if backup.cover_letters is not None:
            self.save_cover_letters(backup.cover_letters)

        restored = backup.data_types
        _log_info(f"Restored {', '.join(restored) or 'nothing'} into {self.root}")
        return restored
