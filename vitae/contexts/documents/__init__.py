"""
Documents Context

Responsibilities:
- Defines the entity schemas (master resume, variant, template, job application, cover letter)
- Reads and writes their stored JSON shape
- Provides copy-on-write helpers so no caller ever observes a half-updated document

Owns: Entity dataclasses, section vocabulary and defaults, exception types
Never: Decides what a variant's resolved content looks like
"""

from vitae.contexts.documents.application_data_structure import (
    CoverLetter,
    JobApplication,
    extract_variables,
    find_by_id,
)
from vitae.contexts.documents.exceptions import (
    BackupError,
    ImportValidationError,
    InvalidDocumentError,
    SectionMismatchError,
    UnknownSectionError,
)
from vitae.contexts.documents.resume_data_structure import (
    Award,
    Contacts,
    Education,
    Experience,
    ResumeMaster,
    SectionState,
    Skills,
)
from vitae.contexts.documents.template_catalog import Template, load_template_catalog
from vitae.contexts.documents.variant_data_structure import (
    Variant,
    VariantOverride,
    parse_override_path,
    parse_rule,
)

__all__ = [
    # Master resume
    "ResumeMaster",
    "Contacts",
    "Experience",
    "Education",
    "Award",
    "Skills",
    "SectionState",
    # Variants
    "Variant",
    "VariantOverride",
    "parse_rule",
    "parse_override_path",
    # Presentation and tracking
    "Template",
    "load_template_catalog",
    "JobApplication",
    "CoverLetter",
    "extract_variables",
    "find_by_id",
    # Errors
    "InvalidDocumentError",
    "UnknownSectionError",
    "ImportValidationError",
    "SectionMismatchError",
    "BackupError",
]
