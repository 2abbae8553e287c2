"""
Variant Document Structure

A Variant is a named recipe applied to the master resume: declarative rules,
ordered overrides and per-section enable flags. It never stores resume content
of its own beyond what overrides carry.

Rules and override paths are closed sets of small dataclasses. Anything the
parser does not recognise becomes UnknownRule / UnknownTarget so that older
code can read documents written by newer code; the resolution pipeline treats
those as no-ops.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from vitae.contexts.documents.defaults import (
    CONTACT_FIELDS,
    DEFAULT_SECTION_ENABLED,
    EXPERIENCE_SCALAR_FIELDS,
)
from vitae.contexts.documents.exceptions import InvalidDocumentError
from vitae.utils.timestamp import now_exact

RULE_TYPES = ("include_tags", "exclude_tags", "max_bullets", "section_order", "date_range")
OVERRIDE_OPERATIONS = ("set", "add", "remove", "move")


# =============================================================================
# RULES
# =============================================================================


@dataclass(frozen=True)
class IncludeTagsRule:
    """Keep only experiences carrying at least one of these tags."""

    tags: Tuple[str, ...] = ()
    type: str = field(default="include_tags", init=False)

    @property
    def value(self) -> List[str]:
        return list(self.tags)


@dataclass(frozen=True)
class ExcludeTagsRule:
    """Drop experiences carrying any of these tags."""

    tags: Tuple[str, ...] = ()
    type: str = field(default="exclude_tags", init=False)

    @property
    def value(self) -> List[str]:
        return list(self.tags)


@dataclass(frozen=True)
class MaxBulletsRule:
    """Truncate every experience's bullets to the first `count` entries."""

    count: int
    type: str = field(default="max_bullets", init=False)

    @property
    def value(self) -> int:
        return self.count


@dataclass(frozen=True)
class SectionOrderRule:
    """Render sections in this order; consumed by the section composer only."""

    order: Tuple[str, ...] = ()
    type: str = field(default="section_order", init=False)

    @property
    def value(self) -> List[str]:
        return list(self.order)


@dataclass(frozen=True)
class DateRangeRule:
    """Keep experiences whose active period overlaps [start, end]. Either bound may be None."""

    start: Optional[str] = None
    end: Optional[str] = None
    type: str = field(default="date_range", init=False)

    @property
    def value(self) -> Dict[str, Optional[str]]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class UnknownRule:
    """A rule whose type (or payload) this version cannot interpret. Preserved verbatim."""

    type: str
    value: Any = None


VariantRule = Union[
    IncludeTagsRule, ExcludeTagsRule, MaxBulletsRule, SectionOrderRule, DateRangeRule, UnknownRule
]


def _tag_tuple(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple, set)) and all(isinstance(tag, str) for tag in value):
        return tuple(value)
    return None


def parse_rule(data: Dict[str, Any]) -> VariantRule:
    """
    Parse a stored {"type": ..., "value": ...} rule.

    Never raises for unrecognised content: unknown types and payloads of the
    wrong shape come back as UnknownRule.
    """
    if not isinstance(data, dict):
        return UnknownRule(type="", value=data)

    rule_type = data.get("type")
    value = data.get("value")

    if rule_type in ("include_tags", "exclude_tags"):
        tags = _tag_tuple(value)
        if tags is not None:
            return IncludeTagsRule(tags) if rule_type == "include_tags" else ExcludeTagsRule(tags)
    elif rule_type == "max_bullets":
        if isinstance(value, int) and not isinstance(value, bool):
            return MaxBulletsRule(value)
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            return MaxBulletsRule(int(value))
    elif rule_type == "section_order":
        order = _tag_tuple(value)
        if order is not None:
            return SectionOrderRule(order)
    elif rule_type == "date_range":
        if isinstance(value, dict):
            return DateRangeRule(start=value.get("start") or None, end=value.get("end") or None)

    return UnknownRule(type=str(rule_type or ""), value=value)


def rule_to_dict(rule: VariantRule) -> Dict[str, Any]:
    return {"type": rule.type, "value": rule.value}


# =============================================================================
# OVERRIDE TARGETS
# =============================================================================


@dataclass(frozen=True)
class ExperienceOrder:
    """`experience_order`: ordering of experience ids."""


@dataclass(frozen=True)
class Headline:
    """`headline`: scalar string."""


@dataclass(frozen=True)
class SummaryList:
    """`summary`: list of strings."""


@dataclass(frozen=True)
class KeyAchievementsList:
    """`key_achievements`: list of strings."""


@dataclass(frozen=True)
class PrimarySkills:
    """`skills.primary`: list of strings."""


@dataclass(frozen=True)
class SecondarySkills:
    """`skills.secondary`: list of strings."""


@dataclass(frozen=True)
class ExperienceList:
    """`experience`: id-keyed list of Experience records."""


@dataclass(frozen=True)
class EducationList:
    """`education`: id-keyed list of Education records."""


@dataclass(frozen=True)
class AwardsList:
    """`awards`: id-keyed list of Award records."""


@dataclass(frozen=True)
class ExperienceBullets:
    """`experience.<id>.bullets`: bullets of one experience."""

    experience_id: str


@dataclass(frozen=True)
class ExperienceField:
    """`experience.<id>.<field>`: one scalar field of one experience."""

    experience_id: str
    field_name: str


@dataclass(frozen=True)
class ContactField:
    """`contacts.<field>`: one contact field."""

    field_name: str


@dataclass(frozen=True)
class UnknownTarget:
    """Any path this version does not address. Overrides on it are no-ops."""

    path: str


OverrideTarget = Union[
    ExperienceOrder,
    Headline,
    SummaryList,
    KeyAchievementsList,
    PrimarySkills,
    SecondarySkills,
    ExperienceList,
    EducationList,
    AwardsList,
    ExperienceBullets,
    ExperienceField,
    ContactField,
    UnknownTarget,
]

_FIXED_PATHS = {
    "experience_order": ExperienceOrder(),
    "headline": Headline(),
    "summary": SummaryList(),
    "key_achievements": KeyAchievementsList(),
    "skills.primary": PrimarySkills(),
    "skills.secondary": SecondarySkills(),
    "experience": ExperienceList(),
    "education": EducationList(),
    "awards": AwardsList(),
}

STRING_LIST_TARGETS = (SummaryList, KeyAchievementsList, PrimarySkills, SecondarySkills, ExperienceBullets)
RECORD_LIST_TARGETS = (ExperienceList, EducationList, AwardsList)
SCALAR_TARGETS = (Headline, ExperienceField, ContactField)


def parse_override_path(path: str) -> OverrideTarget:
    """
    Map a dotted override path onto its target.

    Examples:
        parse_override_path("experience_order")          # ExperienceOrder()
        parse_override_path("experience.e1.bullets")     # ExperienceBullets("e1")
        parse_override_path("experience.e1.title")       # ExperienceField("e1", "title")
        parse_override_path("portfolio.links")           # UnknownTarget("portfolio.links")
    """
    if not isinstance(path, str):
        return UnknownTarget(path=str(path))

    if path in _FIXED_PATHS:
        return _FIXED_PATHS[path]

    parts = path.split(".")
    if len(parts) == 3 and parts[0] == "experience" and parts[1]:
        experience_id, leaf = parts[1], parts[2]
        if leaf == "bullets":
            return ExperienceBullets(experience_id)
        if leaf in EXPERIENCE_SCALAR_FIELDS:
            return ExperienceField(experience_id, leaf)
    if len(parts) == 2 and parts[0] == "contacts" and parts[1] in CONTACT_FIELDS:
        return ContactField(parts[1])

    return UnknownTarget(path=path)


@dataclass(frozen=True)
class VariantOverride:
    """
    One edit instruction applied after rules.

    Attributes:
        path: Dotted path into the resolved document (see parse_override_path)
        operation: "set", "add", "remove" or "move"
        value: Operation payload (replacement, element, element id/index, or
            {"from": index-or-id, "to": index})
    """

    path: str
    operation: str
    value: Any = None

    @property
    def target(self) -> OverrideTarget:
        return parse_override_path(self.path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VariantOverride":
        if not isinstance(data, dict):
            raise InvalidDocumentError("Override must be an object", document_kind="VariantOverride")
        return cls(
            path=str(data.get("path", "")),
            operation=str(data.get("operation", "")),
            value=data.get("value"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"path": self.path, "operation": self.operation}
        if self.value is not None:
            result["value"] = self.value
        return result


# =============================================================================
# VARIANT
# =============================================================================


def _list_field(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidDocumentError(
            f"Expected a list, got {type(value).__name__}", document_kind="Variant", field_name=key
        )
    return list(value)


def _section_settings_from_dict(data: Any) -> Dict[str, bool]:
    """
    Read {"summary": {"enabled": true}, ...}.

    Entries that are not objects with an `enabled` flag are skipped; the
    section then has no explicit variant setting.
    """
    settings: Dict[str, bool] = {}
    if not isinstance(data, dict):
        return settings
    for key, entry in data.items():
        if isinstance(entry, dict) and "enabled" in entry:
            settings[key] = bool(entry["enabled"])
        elif isinstance(entry, bool):
            settings[key] = entry
    return settings


@dataclass
class Variant:
    """
    Named transformation recipe producing a tailored view of the master.

    Attributes:
        id: Stable identifier
        name: Display name (e.g., "Platform Engineering")
        description: Optional free text
        rules: Filters applied to master content before overrides
        overrides: Ordered edits applied after rules
        section_settings: Explicit per-section enable flags; missing keys fall
            back to the master, then to defaults
        section_order: Explicit section ordering from a section-order editor
        template_id: Weak reference to a Template
    """

    id: str
    name: str = ""
    description: Optional[str] = None
    rules: List[VariantRule] = field(default_factory=list)
    overrides: List[VariantOverride] = field(default_factory=list)
    section_settings: Dict[str, bool] = field(default_factory=dict)
    section_order: Optional[List[str]] = None
    template_id: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, variant_id: str, name: str, **kwargs) -> "Variant":
        """Create a variant with fresh timestamps and the default section toggles."""
        timestamp = now_exact()
        kwargs.setdefault("section_settings", dict(DEFAULT_SECTION_ENABLED))
        return cls(id=variant_id, name=name, created_at=timestamp, updated_at=timestamp, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Variant":
        """
        Build a Variant from its stored JSON shape.

        Raises:
            InvalidDocumentError: If data is not an object, lacks an id, or
                rules, overrides or sectionOrder is not a list
        """
        if not isinstance(data, dict):
            raise InvalidDocumentError("Variant must be an object", document_kind="Variant")
        variant_id = data.get("id")
        if not variant_id or not isinstance(variant_id, str):
            raise InvalidDocumentError("Missing or invalid id", document_kind="Variant", field_name="id")

        section_order = _list_field(data, "sectionOrder")
        return cls(
            id=variant_id,
            name=data.get("name") or "",
            description=data.get("description") or None,
            rules=[parse_rule(rule) for rule in _list_field(data, "rules")],
            overrides=[VariantOverride.from_dict(item) for item in _list_field(data, "overrides")],
            section_settings=_section_settings_from_dict(data.get("sectionSettings")),
            section_order=[str(key) for key in section_order] if section_order else None,
            template_id=data.get("templateId") or None,
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "rules": [rule_to_dict(rule) for rule in self.rules],
            "overrides": [override.to_dict() for override in self.overrides],
            "sectionSettings": {
                key: {"enabled": enabled} for key, enabled in self.section_settings.items()
            },
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.description is not None:
            result["description"] = self.description
        if self.section_order is not None:
            result["sectionOrder"] = list(self.section_order)
        if self.template_id is not None:
            result["templateId"] = self.template_id
        return result

    @property
    def section_order_rule(self) -> Optional[List[str]]:
        """Order from the last section_order rule, if any."""
        order = None
        for rule in self.rules:
            if isinstance(rule, SectionOrderRule):
                order = list(rule.order)
        return order
