"""
Section Import/Export

Moves individual master sections in and out as self-describing JSON:

    {"section": "experience", "data": [...], "exportedAt": "2025-11-13T18:45:40"}

and several sections at once as a versioned bundle:

    {"sections": ["summary", "skills"], "data": {...}, "exportedAt": "...", "version": "1.0"}

Imports validate first and raise before anything is merged; once validation
passes the merge itself cannot fail. The master passed in is never modified.

Merge semantics per section kind:
    record lists (experience, education, awards)  append items whose id is new
    string lists (summary, key_achievements)      append items whose normalized text is new
    skills                                        primary and secondary merged as string lists
    contacts, headline, sections                  replace
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from vitae.contexts.documents.defaults import (
    EXPORT_FORMAT_VERSION,
    EXPORTABLE_SECTIONS,
    get_default_master_sections,
)
from vitae.contexts.documents.exceptions import (
    ImportValidationError,
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
from vitae.contexts.portability.logger import (
    _log_debug,
    log_import_result,
    log_validation_failure,
)
from vitae.contexts.portability.validation import validate_import_data
from vitae.utils.timestamp import now_exact

IMPORT_MODES = ("replace", "merge")

_RECORD_TYPES = {"experience": Experience, "education": Education, "awards": Award}


@dataclass
class SectionExportData:
    """One exported section."""

    section: str
    data: Any
    exported_at: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SectionExportData":
        # Older exports used exportDate
        return cls(
            section=data.get("section"),
            data=data.get("data"),
            exported_at=data.get("exportedAt") or data.get("exportDate") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"section": self.section, "data": self.data, "exportedAt": self.exported_at}


def _require_section(section: str) -> None:
    if section not in EXPORTABLE_SECTIONS:
        raise UnknownSectionError(section, EXPORTABLE_SECTIONS)


def _require_mode(mode: str) -> None:
    if mode not in IMPORT_MODES:
        raise ValueError(f"Unknown import mode '{mode}'. Expected one of: {', '.join(IMPORT_MODES)}")


# =============================================================================
# SECTION <-> JSON
# =============================================================================


def section_to_data(master: ResumeMaster, section: str) -> Any:
    """Plain JSON value of one section."""
    value = master.get_section(section)
    if section == "headline":
        return value
    if section in ("summary", "key_achievements"):
        return list(value)
    if section in _RECORD_TYPES:
        return [item.to_dict() for item in value]
    if section == "sections":
        return {key: state.to_dict() for key, state in value.items()}
    return value.to_dict()


def section_from_data(section: str, data: Any) -> Any:
    """Typed section value from validated JSON."""
    if section == "headline":
        return data
    if section in ("summary", "key_achievements"):
        return list(data)
    if section in _RECORD_TYPES:
        return [_RECORD_TYPES[section].from_dict(item) for item in data]
    if section == "contacts":
        return Contacts.from_dict(data)
    if section == "skills":
        return Skills.from_dict(data)
    if section == "sections":
        return {key: SectionState.from_dict(state) for key, state in data.items()}
    raise UnknownSectionError(section, EXPORTABLE_SECTIONS)


def _section_size(value: Any) -> int:
    if isinstance(value, (list, dict)):
        return len(value)
    if isinstance(value, Skills):
        return len(value.primary) + len(value.secondary or [])
    return 1 if value else 0


# =============================================================================
# MERGE
# =============================================================================


def normalize_text(text: str) -> str:
    """Whitespace-collapsed, case-folded text used to detect duplicate strings."""
    return " ".join(text.split()).casefold()


def _merge_unique(existing: Iterable[Any], incoming: Iterable[Any], key: Callable[[Any], Any]) -> List[Any]:
    merged = list(existing)
    seen = {key(item) for item in merged}
    for item in incoming:
        item_key = key(item)
        if item_key in seen:
            _log_debug(f"Skipping duplicate item during merge: {item_key!r}")
            continue
        merged.append(item)
        seen.add(item_key)
    return merged


def merge_section(section: str, existing: Any, incoming: Any) -> Any:
    """
    Merge an incoming section value into the existing one.

    Args:
        section: Section key
        existing: Current typed value
        incoming: Imported typed value

    Returns:
        Merged value (new objects; neither input is modified)
    """
    if section in _RECORD_TYPES:
        return _merge_unique(existing, incoming, key=lambda record: record.id)
    if section in ("summary", "key_achievements"):
        return _merge_unique(existing, incoming, key=normalize_text)
    if section == "skills":
        if incoming.secondary is None:
            secondary = existing.secondary
        else:
            secondary = _merge_unique(existing.secondary or [], incoming.secondary, key=normalize_text)
        return Skills(
            primary=_merge_unique(existing.primary, incoming.primary, key=normalize_text),
            secondary=list(secondary) if secondary is not None else None,
        )
    return incoming


def _apply_section(master: ResumeMaster, section: str, data: Any, mode: str) -> ResumeMaster:
    incoming = section_from_data(section, data)
    if mode == "merge":
        incoming = merge_section(section, master.get_section(section), incoming)
    return master.with_section(section, incoming)


# =============================================================================
# SINGLE SECTION
# =============================================================================


def export_single_section(master: ResumeMaster, section: str) -> SectionExportData:
    """
    Export one section of the master.

    Raises:
        UnknownSectionError: If section is not exportable
    """
    _require_section(section)
    return SectionExportData(section=section, data=section_to_data(master, section), exported_at=now_exact())


def section_export_filename(section: str, when: Optional[date] = None) -> str:
    """
    File name for a single-section export.

    Examples:
        section_export_filename("experience", date(2025, 11, 13))
        # "resume-experience-2025-11-13.json"
    """
    when = when or date.today()
    return f"resume-{section}-{when.isoformat()}.json"


def import_single_section(
    master: ResumeMaster,
    import_data: Union[SectionExportData, Dict[str, Any]],
    mode: str = "merge",
    expected_section: Optional[str] = None,
) -> ResumeMaster:
    """
    Import one exported section into the master.

    Args:
        master: Current master (not modified)
        import_data: SectionExportData or its parsed JSON form
        mode: "replace" substitutes the section, "merge" appends new items
        expected_section: Section the caller asked to import; a document
            holding any other section is rejected

    Returns:
        New ResumeMaster with the section imported and updated_at refreshed

    Raises:
        SectionMismatchError: If the document holds a different section than expected
        ImportValidationError: If the document fails validation (carries every problem)
        ValueError: If mode is not "replace" or "merge"
    """
    _require_mode(mode)
    if isinstance(import_data, SectionExportData):
        import_data = import_data.to_dict()

    actual = import_data.get("section") if isinstance(import_data, dict) else None
    if expected_section is not None and isinstance(actual, str) and actual != expected_section:
        _log_debug(f"Rejecting import: expected '{expected_section}', got '{actual}'")
        raise SectionMismatchError(expected_section, actual)

    errors = validate_import_data(import_data, expected_section)
    if not errors and "section" not in import_data:
        errors = ["Expected a single-section export, got a multi-section export"]
    if errors:
        log_validation_failure("Section import", errors)
        raise ImportValidationError(errors)

    section = import_data["section"]
    before = _section_size(master.get_section(section))
    updated = _apply_section(master, section, import_data["data"], mode).touch()
    log_import_result(section, mode, before, _section_size(updated.get_section(section)))
    return updated


def clear_section_data(master: ResumeMaster, section: str) -> ResumeMaster:
    """
    Reset one section to its empty form, leaving the others untouched.

    contacts -> blank strings, headline -> "", lists -> [], skills -> empty
    primary and secondary, sections -> every section enabled in default order.

    Raises:
        UnknownSectionError: If section is not exportable
    """
    _require_section(section)

    if section == "contacts":
        empty: Any = Contacts(email="", phone="", website="", linkedin="")
    elif section == "headline":
        empty = ""
    elif section == "skills":
        empty = Skills(primary=[], secondary=[])
    elif section == "sections":
        empty = section_from_data("sections", get_default_master_sections())
    else:
        empty = []

    _log_debug(f"Clearing section '{section}'")
    return master.with_section(section, empty).touch()


# =============================================================================
# MULTI-SECTION BUNDLES
# =============================================================================


def export_master_resume_sections(master: ResumeMaster, sections: Iterable[str]) -> Dict[str, Any]:
    """
    Export several sections plus the master's identity fields.

    Raises:
        UnknownSectionError: If any section is not exportable
    """
    sections = list(sections)
    for section in sections:
        _require_section(section)

    data: Dict[str, Any] = {section: section_to_data(master, section) for section in sections}
    data.update(
        {
            "id": master.id,
            "owner": master.owner,
            "createdAt": master.created_at,
            "updatedAt": master.updated_at,
        }
    )

    return {
        "sections": sections,
        "data": data,
        "exportedAt": now_exact(),
        "version": EXPORT_FORMAT_VERSION,
    }


def import_master_resume_sections(
    master: ResumeMaster, import_data: Dict[str, Any], mode: str = "merge"
) -> ResumeMaster:
    """
    Import every listed section of a multi-section export.

    Sections listed but absent from the data are skipped. The whole bundle is
    validated before any section is applied.

    Raises:
        ImportValidationError: If the bundle fails validation
        ValueError: If mode is not "replace" or "merge"
    """
    _require_mode(mode)

    errors = validate_import_data(import_data)
    if not errors and not isinstance(import_data.get("sections"), list):
        errors = ["Expected a multi-section export, got a single-section export"]
    if errors:
        log_validation_failure("Bundle import", errors)
        raise ImportValidationError(errors)

    updated = master
    for section in import_data["sections"]:
        if section not in import_data["data"]:
            _log_debug(f"Section '{section}' listed but not present, skipping")
            continue
        before = _section_size(updated.get_section(section))
        updated = _apply_section(updated, section, import_data["data"][section], mode)
        log_import_result(section, mode, before, _section_size(updated.get_section(section)))

    return updated.touch()
