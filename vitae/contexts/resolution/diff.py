"""
Variant diff report.

Explains a resolution in terms a user can act on: which sections were turned
on or off or moved, which experiences disappeared and why, what changed inside
the ones that remain, and what each rule and override did.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from vitae.contexts.documents.defaults import MASTER_SECTION_KEYS
from vitae.contexts.documents.resume_data_structure import Experience, ResumeMaster
from vitae.contexts.documents.variant_data_structure import (
    DateRangeRule,
    ExcludeTagsRule,
    IncludeTagsRule,
    MaxBulletsRule,
    SectionOrderRule,
    Variant,
    VariantOverride,
    VariantRule,
)
from vitae.contexts.resolution.rule_evaluator import consolidate_rules, experience_overlaps
from vitae.contexts.resolution.section_composer import ResolvedResume, resolve_section_enabled


@dataclass
class SectionChanges:
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    reordered: List[str] = field(default_factory=list)


@dataclass
class RemovedExperience:
    title: str
    company: str
    reason: str


@dataclass
class ModifiedExperience:
    title: str
    company: str
    changes: List[str]


@dataclass
class ExperienceChanges:
    added: List[str] = field(default_factory=list)
    removed: List[RemovedExperience] = field(default_factory=list)
    modified: List[ModifiedExperience] = field(default_factory=list)
    reordered: bool = False
    original_order: List[str] = field(default_factory=list)
    new_order: List[str] = field(default_factory=list)


@dataclass
class ListChange:
    changed: bool
    original_count: int
    modified_count: int

    @property
    def difference(self) -> int:
        return self.modified_count - self.original_count


@dataclass
class AppliedRule:
    type: str
    description: str
    impact: str


@dataclass
class AppliedOverride:
    path: str
    operation: str
    description: str


@dataclass
class DiffStats:
    master_experiences: int
    resolved_experiences: int
    total_bullets_original: int
    total_bullets_resolved: int

    @property
    def experience_reduction(self) -> int:
        return self.master_experiences - self.resolved_experiences

    @property
    def bullet_reduction(self) -> int:
        return self.total_bullets_original - self.total_bullets_resolved


@dataclass
class VariantDiff:
    """Everything that differs between a master and one resolution of it."""

    sections: SectionChanges
    experiences: ExperienceChanges
    headline_changed: bool
    summary: ListChange
    key_achievements: ListChange
    rules: List[AppliedRule]
    overrides: List[AppliedOverride]
    stats: DiffStats

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["stats"]["experience_reduction"] = self.stats.experience_reduction
        result["stats"]["bullet_reduction"] = self.stats.bullet_reduction
        return result


def _section_label(key: str) -> str:
    return key.replace("_", " ").title()


def _experience_label(experience: Experience) -> str:
    return f"{experience.company} - {experience.title}"


def _count_bullets(document: ResumeMaster) -> int:
    return sum(len(experience.bullets) for experience in document.experience)


def compare_sections(master: ResumeMaster, resolved: ResumeMaster) -> SectionChanges:
    """
    Sections switched on or off, and sections that moved.

    Moves are judged by relative order among sections enabled on both sides,
    so renumbering around a disabled section is not reported.
    """
    changes = SectionChanges()
    kept = []
    for key in MASTER_SECTION_KEYS:
        was_enabled = resolve_section_enabled(key, None, master.sections)
        is_enabled = resolve_section_enabled(key, None, resolved.sections)
        if was_enabled and not is_enabled:
            changes.removed.append(_section_label(key))
        elif is_enabled and not was_enabled:
            changes.added.append(_section_label(key))
        elif is_enabled:
            kept.append(key)

    before = [key for key in master.ordered_master_sections() if key in kept]
    after = [key for key in resolved.ordered_master_sections() if key in kept]
    for new_position, key in enumerate(after, start=1):
        old_position = before.index(key) + 1
        if old_position != new_position:
            changes.reordered.append(
                f"{_section_label(key)} moved from position {old_position} to {new_position}"
            )

    return changes


def describe_rule(rule: VariantRule, master: ResumeMaster, reference_day: date) -> AppliedRule:
    """Human-readable description and impact of one rule against the master."""
    total = len(master.experience)

    if isinstance(rule, IncludeTagsRule):
        kept = sum(1 for exp in master.experience if set(rule.tags).intersection(exp.tags))
        return AppliedRule(
            rule.type,
            f"Include only experiences with tags: {', '.join(rule.tags)}",
            f"{kept if rule.tags else total} of {total} experiences included",
        )
    if isinstance(rule, ExcludeTagsRule):
        dropped = sum(1 for exp in master.experience if set(rule.tags).intersection(exp.tags))
        return AppliedRule(
            rule.type, f"Exclude experiences with tags: {', '.join(rule.tags)}", f"{dropped} experiences excluded"
        )
    if isinstance(rule, MaxBulletsRule):
        removed = sum(max(0, len(exp.bullets) - max(rule.count, 0)) for exp in master.experience)
        return AppliedRule(
            rule.type, f"Limit bullets to maximum {rule.count} per experience", f"{removed} bullets removed total"
        )
    if isinstance(rule, SectionOrderRule):
        return AppliedRule(rule.type, f"Reorder sections: {' -> '.join(rule.order)}", "Section order customized")
    if isinstance(rule, DateRangeRule):
        in_range = sum(1 for exp in master.experience if experience_overlaps(exp, rule, reference_day))
        return AppliedRule(
            rule.type,
            f"Filter by date range: {rule.start or 'any'} to {rule.end or 'present'}",
            f"{in_range} of {total} experiences in range",
        )
    return AppliedRule(rule.type or "unknown", "Unrecognised rule", "Ignored")


def describe_override(override: VariantOverride) -> AppliedOverride:
    """Human-readable description of one override."""
    if override.operation == "set" and override.path == "experience_order":
        count = len(override.value) if isinstance(override.value, list) else 0
        description = f"Reorder experiences: {count} positions specified"
    elif override.operation == "set":
        description = f"Set {override.path} to new value"
    elif override.operation == "add":
        description = f"Add item to {override.path}"
    elif override.operation == "remove":
        description = f"Remove item from {override.path}"
    elif override.operation == "move":
        description = f"Move item within {override.path}"
    else:
        description = f"Unrecognised operation '{override.operation}'"
    return AppliedOverride(override.path, override.operation, description)


def _removal_reason(experience: Experience, variant: Optional[Variant], reference_day: date) -> str:
    if variant is None:
        return "Unknown"

    rule_set = consolidate_rules(variant.rules)
    tags = set(experience.tags)

    if rule_set.include_tags and not rule_set.include_tags.intersection(tags):
        return f"Missing required tags: {', '.join(sorted(rule_set.include_tags))}"
    if rule_set.exclude_tags.intersection(tags):
        return f"Excluded by tags: {', '.join(sorted(rule_set.exclude_tags.intersection(tags)))}"
    if rule_set.date_range is not None and not experience_overlaps(experience, rule_set.date_range, reference_day):
        return f"Outside date range ({rule_set.date_range.start or 'any'} to {rule_set.date_range.end or 'present'})"
    return "Removed by override"


def _compare_experience(original: Experience, resolved: Experience) -> List[str]:
    changes = []
    if len(original.bullets) != len(resolved.bullets):
        reduction = len(original.bullets) - len(resolved.bullets)
        changes.append(f"{'Reduced' if reduction > 0 else 'Added'} {abs(reduction)} bullet points")
    elif original.bullets != resolved.bullets:
        changes.append("Bullet text changed")
    for field_name in ("title", "company", "location", "date_start", "date_end"):
        before, after = getattr(original, field_name), getattr(resolved, field_name)
        if before != after:
            changes.append(f"{_section_label(field_name)} changed from \"{before}\" to \"{after}\"")
    return changes


def generate_diff(resolved_resume: ResolvedResume, reference_day: Optional[date] = None) -> VariantDiff:
    """
    Compare a resolution with the master it came from.

    Args:
        resolved_resume: Output of resolve()
        reference_day: "Today" for ongoing experiences (defaults to date.today())

    Returns:
        VariantDiff
    """
    reference_day = reference_day or date.today()
    master = resolved_resume.master
    resolved = resolved_resume.resolved
    variant = resolved_resume.variant

    sections = compare_sections(master, resolved)

    master_ids = master.experience_ids
    resolved_ids = resolved.experience_ids
    experiences = ExperienceChanges(
        added=[_experience_label(exp) for exp in resolved.experience if exp.id not in master_ids],
        original_order=[_experience_label(exp) for exp in master.experience],
        new_order=[_experience_label(exp) for exp in resolved.experience],
    )

    experience_section_on = "experience" in resolved_resume.sections or variant is None
    for experience in master.experience:
        if experience.id not in resolved_ids:
            reason = (
                _removal_reason(experience, variant, reference_day)
                if experience_section_on
                else "Experience section disabled"
            )
            experiences.removed.append(RemovedExperience(experience.title, experience.company, reason))

    kept_master_order = [exp_id for exp_id in master_ids if exp_id in resolved_ids]
    kept_resolved_order = [exp_id for exp_id in resolved_ids if exp_id in master_ids]
    experiences.reordered = kept_master_order != kept_resolved_order

    for resolved_experience in resolved.experience:
        original = master.get_experience(resolved_experience.id)
        if original is None:
            continue
        changes = _compare_experience(original, resolved_experience)
        if changes:
            experiences.modified.append(
                ModifiedExperience(resolved_experience.title, resolved_experience.company, changes)
            )

    rules = variant.rules if variant is not None else []
    overrides = variant.overrides if variant is not None else []

    return VariantDiff(
        sections=sections,
        experiences=experiences,
        headline_changed=master.headline != resolved.headline,
        summary=ListChange(
            master.summary != resolved.summary, len(master.summary), len(resolved.summary)
        ),
        key_achievements=ListChange(
            master.key_achievements != resolved.key_achievements,
            len(master.key_achievements),
            len(resolved.key_achievements),
        ),
        rules=[describe_rule(rule, master, reference_day) for rule in rules],
        overrides=[describe_override(override) for override in overrides],
        stats=DiffStats(
            master_experiences=len(master.experience),
            resolved_experiences=len(resolved.experience),
            total_bullets_original=_count_bullets(master),
            total_bullets_resolved=_count_bullets(resolved),
        ),
    )
