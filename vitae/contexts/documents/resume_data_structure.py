"""
Master Resume Document Structure

Defines the structured representation of the master resume: the single source
of truth every variant is derived from.

Documents owns:
- Reading/writing the stored JSON shape (camelCase timestamps, snake_case content)
- Copy-on-write helpers (copy, touch, with_section)

Resolution and Portability operate on ResumeMaster instances and never mutate them.
"""

import copy
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from vitae.contexts.documents.defaults import (
    EXPORTABLE_SECTIONS,
    MASTER_SECTION_KEYS,
)
from vitae.contexts.documents.exceptions import InvalidDocumentError, UnknownSectionError
from vitae.utils.timestamp import now_exact


def _require_mapping(data: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise InvalidDocumentError(
            f"Expected an object, got {type(data).__name__}", document_kind=kind
        )
    return data


def _require_id(data: Dict[str, Any], kind: str) -> str:
    value = data.get("id")
    if not value or not isinstance(value, str):
        raise InvalidDocumentError("Missing or invalid id", document_kind=kind, field_name="id")
    return value


def _string_list(value: Any, kind: str, field_name: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidDocumentError(
            f"Expected a list of strings, got {type(value).__name__}",
            document_kind=kind,
            field_name=field_name,
        )
    if any(isinstance(item, (dict, list, tuple)) for item in value):
        raise InvalidDocumentError("Expected a list of strings", document_kind=kind, field_name=field_name)
    return [str(item) for item in value]


def _record_list(value: Any, kind: str, field_name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidDocumentError(
            f"Expected a list of records, got {type(value).__name__}",
            document_kind=kind,
            field_name=field_name,
        )
    return list(value)


@dataclass
class Contacts:
    """Contact block shown in the resume header."""

    email: str = ""
    phone: str = ""
    website: Optional[str] = None
    linkedin: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Contacts":
        data = _require_mapping(data or {}, "Contacts")
        return cls(
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            website=data.get("website"),
            linkedin=data.get("linkedin"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"email": self.email, "phone": self.phone}
        if self.website is not None:
            result["website"] = self.website
        if self.linkedin is not None:
            result["linkedin"] = self.linkedin
        return result


@dataclass
class Experience:
    """
    Single work experience entry.

    Attributes:
        id: Caller-assigned stable identifier (referenced by variant overrides)
        company: Employer name
        title: Role title
        location: Free-form location
        date_start: Start date ("YYYY", "YYYY-MM" or "YYYY-MM-DD")
        date_end: End date, None while the role is ongoing
        bullets: Ordered accomplishment bullets
        tags: Labels used by include/exclude tag rules (order kept, matched as a set)
    """

    id: str
    company: str = ""
    title: str = ""
    location: str = ""
    date_start: str = ""
    date_end: Optional[str] = None
    bullets: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    @property
    def is_current(self) -> bool:
        return not self.date_end

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Experience":
        data = _require_mapping(data, "Experience")
        return cls(
            id=_require_id(data, "Experience"),
            company=data.get("company") or "",
            title=data.get("title") or "",
            location=data.get("location") or "",
            date_start=data.get("date_start") or "",
            date_end=data.get("date_end") or None,
            bullets=_string_list(data.get("bullets"), "Experience", "bullets"),
            tags=_string_list(data.get("tags"), "Experience", "tags"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "company": self.company,
            "title": self.title,
            "location": self.location,
            "date_start": self.date_start,
            "date_end": self.date_end,
            "bullets": list(self.bullets),
            "tags": list(self.tags),
        }


@dataclass
class Education:
    """Single education entry."""

    id: str
    degree: str = ""
    school: str = ""
    location: str = ""
    year: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Education":
        data = _require_mapping(data, "Education")
        year = data.get("year")
        return cls(
            id=_require_id(data, "Education"),
            degree=data.get("degree") or "",
            school=data.get("school") or "",
            location=data.get("location") or "",
            year=str(year) if year not in (None, "") else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "degree": self.degree,
            "school": self.school,
            "location": self.location,
        }
        if self.year is not None:
            result["year"] = self.year
        return result


@dataclass
class Award:
    """Single award entry."""

    id: str
    title: str = ""
    date: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Award":
        data = _require_mapping(data, "Award")
        return cls(
            id=_require_id(data, "Award"),
            title=data.get("title") or "",
            date=data.get("date") or None,
            description=data.get("description") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"id": self.id, "title": self.title}
        if self.date is not None:
            result["date"] = self.date
        if self.description is not None:
            result["description"] = self.description
        return result


@dataclass
class Skills:
    """Primary and optional secondary skill lists."""

    primary: List[str] = field(default_factory=list)
    secondary: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Skills":
        data = _require_mapping(data or {}, "Skills")
        secondary = data.get("secondary")
        return cls(
            primary=_string_list(data.get("primary"), "Skills", "primary"),
            secondary=_string_list(secondary, "Skills", "secondary") if secondary is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"primary": list(self.primary)}
        if self.secondary is not None:
            result["secondary"] = list(self.secondary)
        return result


@dataclass
class SectionState:
    """Master-level enable flag and render position for one section."""

    enabled: bool = True
    order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SectionState":
        data = _require_mapping(data, "SectionState")
        enabled = data.get("enabled", True)
        order = data.get("order", 0)
        if not isinstance(enabled, bool):
            raise InvalidDocumentError("Expected true or false", document_kind="SectionState", field_name="enabled")
        if isinstance(order, bool) or not isinstance(order, int):
            raise InvalidDocumentError("Expected an integer", document_kind="SectionState", field_name="order")
        return cls(enabled=enabled, order=order)

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "order": self.order}


def _sections_from_dict(data: Optional[Dict[str, Any]]) -> Dict[str, SectionState]:
    # No table means no explicit master settings; DEFAULT_SECTION_ENABLED applies
    if data is None:
        return {}
    data = _require_mapping(data, "sections")
    return {key: SectionState.from_dict(value) for key, value in data.items()}


@dataclass
class ResumeMaster:
    """
    The master resume: canonical store of all professional content.

    Exactly one master is active per document store. All mutation helpers
    return a new ResumeMaster; the receiver is never modified.
    """

    id: str
    owner: str = ""
    contacts: Contacts = field(default_factory=Contacts)
    headline: str = ""
    summary: List[str] = field(default_factory=list)
    key_achievements: List[str] = field(default_factory=list)
    experience: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    awards: List[Award] = field(default_factory=list)
    skills: Skills = field(default_factory=Skills)
    sections: Dict[str, SectionState] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def new(cls, resume_id: str, owner: str) -> "ResumeMaster":
        """Create an empty master with fresh timestamps and no explicit section settings."""
        timestamp = now_exact()
        return cls(id=resume_id, owner=owner, created_at=timestamp, updated_at=timestamp)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResumeMaster":
        """
        Build a ResumeMaster from its stored JSON shape.

        Args:
            data: Dict as written by to_dict() (or the browser storage format)

        Returns:
            ResumeMaster instance

        Raises:
            InvalidDocumentError: If data is not an object, lacks an id, or a
                nested record is malformed
        """
        data = _require_mapping(data, "ResumeMaster")
        return cls(
            id=_require_id(data, "ResumeMaster"),
            owner=data.get("owner") or "",
            contacts=Contacts.from_dict(data.get("contacts")),
            headline=data.get("headline") or "",
            summary=_string_list(data.get("summary"), "ResumeMaster", "summary"),
            key_achievements=_string_list(data.get("key_achievements"), "ResumeMaster", "key_achievements"),
            experience=[
                Experience.from_dict(item)
                for item in _record_list(data.get("experience"), "ResumeMaster", "experience")
            ],
            education=[
                Education.from_dict(item)
                for item in _record_list(data.get("education"), "ResumeMaster", "education")
            ],
            awards=[Award.from_dict(item) for item in _record_list(data.get("awards"), "ResumeMaster", "awards")],
            skills=Skills.from_dict(data.get("skills")),
            sections=_sections_from_dict(data.get("sections")),
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "contacts": self.contacts.to_dict(),
            "headline": self.headline,
            "summary": list(self.summary),
            "key_achievements": list(self.key_achievements),
            "experience": [item.to_dict() for item in self.experience],
            "education": [item.to_dict() for item in self.education],
            "awards": [item.to_dict() for item in self.awards],
            "skills": self.skills.to_dict(),
            "sections": {key: state.to_dict() for key, state in self.sections.items()},
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    # =========================================================================
    # COPY-ON-WRITE HELPERS
    # =========================================================================

    def copy(self) -> "ResumeMaster":
        """Deep copy; nothing is shared with the receiver."""
        return copy.deepcopy(self)

    def touch(self) -> "ResumeMaster":
        """Return a deep copy with updated_at set to now."""
        return replace(self.copy(), updated_at=now_exact())

    def get_section(self, section: str) -> Any:
        """
        Get the content stored under an exportable section key.

        Raises:
            UnknownSectionError: If section is not an exportable section
        """
        if section not in EXPORTABLE_SECTIONS:
            raise UnknownSectionError(section, EXPORTABLE_SECTIONS)
        return getattr(self, section)

    def with_section(self, section: str, value: Any) -> "ResumeMaster":
        """
        Return a copy with one section's content replaced.

        The value is deep-copied so the result never aliases caller data.
        Does not refresh updated_at; callers that represent a user edit
        should chain touch().
        """
        if section not in EXPORTABLE_SECTIONS:
            raise UnknownSectionError(section, EXPORTABLE_SECTIONS)
        return replace(self.copy(), **{section: copy.deepcopy(value)})

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    @property
    def experience_ids(self) -> List[str]:
        return [item.id for item in self.experience]

    def get_experience(self, experience_id: str) -> Optional[Experience]:
        for item in self.experience:
            if item.id == experience_id:
                return item
        return None

    def ordered_master_sections(self) -> List[str]:
        """
        Section keys sorted by their master order.

        Sections missing from the table sort after known ones, in
        MASTER_SECTION_KEYS order.
        """
        fallback = len(MASTER_SECTION_KEYS) + 1

        def sort_key(key: str):
            state = self.sections.get(key)
            return (state.order if state is not None else fallback, MASTER_SECTION_KEYS.index(key))

        return sorted(MASTER_SECTION_KEYS, key=sort_key)
