"""
Portability Context

Responsibilities:
- Exports and imports master sections as self-describing JSON (section_transfer)
- Validates externally-authored documents before they are merged (validation)
- Writes and reads zip backup bundles (backup)
- Persists documents to the local JSON store (storage)

Owns: Everything that crosses the local file boundary
Never: Resolves variants
"""

from vitae.contexts.portability.backup import (
    BackupData,
    backup_filename,
    export_backup,
    import_backup,
    validate_backup_file,
)
from vitae.contexts.portability.section_transfer import (
    SectionExportData,
    clear_section_data,
    export_master_resume_sections,
    export_single_section,
    import_master_resume_sections,
    import_single_section,
    section_export_filename,
)
from vitae.contexts.portability.storage import DocumentStore, StoreSnapshot
from vitae.contexts.portability.validation import (
    validate_import_data,
    validate_section_data,
    validate_variant,
)

__all__ = [
    # Section transfer
    "SectionExportData",
    "export_single_section",
    "import_single_section",
    "clear_section_data",
    "section_export_filename",
    "export_master_resume_sections",
    "import_master_resume_sections",
    # Validation
    "validate_import_data",
    "validate_section_data",
    "validate_variant",
    # Backup
    "BackupData",
    "backup_filename",
    "export_backup",
    "import_backup",
    "validate_backup_file",
    # Storage
    "DocumentStore",
    "StoreSnapshot",
]
