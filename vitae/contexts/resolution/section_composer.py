"""
Section Composition

Decides which sections a resolved resume shows and in what order, then emits
a ResolvedResume whose `resolved` document can be rendered without any further
filtering.

Enablement precedence (resolve_section_enabled):
    1. variant.section_settings[section], when the variant says anything
    2. master.sections[section].enabled, when the master has an entry
    3. DEFAULT_SECTION_ENABLED (summary and key_achievements off, the rest on)

Ordering precedence (resolve_section_order):
    1. the last section_order rule on the variant
    2. variant.section_order
    3. master.sections[*].order ascending, headline first
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

from vitae.contexts.documents.defaults import (
    DEFAULT_SECTION_ENABLED,
    MASTER_SECTION_KEYS,
    VARIANT_SECTION_KEYS,
)
from vitae.contexts.documents.resume_data_structure import ResumeMaster, SectionState, Skills
from vitae.contexts.documents.template_catalog import Template
from vitae.contexts.documents.variant_data_structure import Variant
from vitae.contexts.resolution.logger import _log_debug


@dataclass
class ResolvedResume:
    """
    A variant applied to a master. Derived on demand, never persisted.

    Attributes:
        master: The master the resolution started from
        variant: The variant applied, or None for identity resolution
        resolved: Master-shaped document with rules, overrides and section
            settings applied; disabled sections are emptied
        sections: Enabled section keys in render order
        template: Template the variant points at, if it could be found
    """

    master: ResumeMaster
    variant: Optional[Variant]
    resolved: ResumeMaster
    sections: List[str] = field(default_factory=list)
    template: Optional[Template] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "master": self.master.to_dict(),
            "variant": self.variant.to_dict() if self.variant is not None else None,
            "resolved": self.resolved.to_dict(),
            "sections": list(self.sections),
            "templateId": self.template.id if self.template is not None else None,
        }


def resolve_section_enabled(
    section: str,
    variant_settings: Optional[Mapping[str, bool]],
    master_sections: Optional[Mapping[str, SectionState]],
) -> bool:
    """
    Three-level enablement lookup for one section.

    Args:
        section: Section key (e.g., "summary")
        variant_settings: Variant's explicit flags (None when no variant)
        master_sections: Master's section table

    Returns:
        True if the section should be rendered

    Examples:
        resolve_section_enabled("summary", {"summary": True}, {})           # True (variant)
        resolve_section_enabled("summary", {}, {"summary": SectionState()}) # True (master)
        resolve_section_enabled("summary", {}, {})                          # False (default)
    """
    if variant_settings and section in variant_settings:
        return bool(variant_settings[section])
    if master_sections and section in master_sections:
        return master_sections[section].enabled
    return DEFAULT_SECTION_ENABLED.get(section, True)


def _complete_order(preferred: List[str], base: List[str]) -> List[str]:
    """
    Merge a (possibly partial) preferred order with the base order.

    Unknown and duplicate keys are dropped. Base keys the preferred order
    leaves out follow in base order, except headline, which leads.
    """
    ordered = []
    for key in preferred:
        if key in base and key not in ordered:
            ordered.append(key)

    if "headline" not in ordered:
        ordered.insert(0, "headline")

    return ordered + [key for key in base if key not in ordered]


def resolve_section_order(master: ResumeMaster, variant: Optional[Variant] = None) -> List[str]:
    """
    Render order for every section key (enabled or not).

    Returns:
        All VARIANT_SECTION_KEYS, ordered
    """
    base = ["headline"] + master.ordered_master_sections()

    if variant is None:
        return base

    rule_order = variant.section_order_rule
    if rule_order:
        return _complete_order(rule_order, base)
    if variant.section_order:
        return _complete_order(variant.section_order, base)
    return base


def _clear_section(document: ResumeMaster, section: str) -> ResumeMaster:
    """Empty one section's content in place of rendering it."""
    if section == "headline":
        return replace(document, headline="")
    if section == "skills":
        secondary = [] if document.skills.secondary is not None else None
        return replace(document, skills=Skills(primary=[], secondary=secondary))
    return replace(document, **{section: []})


def compose(
    master: ResumeMaster,
    variant: Optional[Variant],
    content: ResumeMaster,
    template: Optional[Template] = None,
) -> ResolvedResume:
    """
    Build the ResolvedResume from filtered and overridden content.

    Args:
        master: Original master (section table and default order come from here)
        variant: Variant being resolved; None means identity resolution
        content: Output of rule evaluation and override application
        template: Already looked-up template, if any

    Returns:
        ResolvedResume. With no variant, `resolved` equals the master.
    """
    if variant is None:
        sections = [
            key
            for key in resolve_section_order(master)
            if resolve_section_enabled(key, None, master.sections)
        ]
        return ResolvedResume(master=master, variant=None, resolved=master.copy(), sections=sections)

    enabled = {
        key: resolve_section_enabled(key, variant.section_settings, master.sections)
        for key in VARIANT_SECTION_KEYS
    }
    order = resolve_section_order(master, variant)
    emitted = [key for key in order if enabled[key]]

    resolved = content.copy()
    for key in order:
        if not enabled[key]:
            resolved = _clear_section(resolved, key)

    # Master-table positions: enabled sections 1..n in render order, disabled ones after
    ranked = [key for key in emitted if key in MASTER_SECTION_KEYS] + [
        key for key in order if key in MASTER_SECTION_KEYS and not enabled[key]
    ]
    resolved = replace(
        resolved,
        sections={
            key: SectionState(enabled=enabled[key], order=position)
            for position, key in enumerate(ranked, start=1)
        },
    )

    _log_debug(f"Composed sections for '{variant.name}': {', '.join(emitted) or '(none)'}")

    return ResolvedResume(
        master=master,
        variant=variant,
        resolved=resolved,
        sections=emitted,
        template=template,
    )
