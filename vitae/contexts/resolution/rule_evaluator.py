"""
Rule Evaluation

Applies a variant's declarative rules to master content. Rules are first
consolidated into a single RuleSet so that repeated rules combine predictably:

- include_tags / exclude_tags: tag sets are unioned across repeats
- max_bullets / date_range: the last rule wins
- section_order: not a content filter (read by the section composer)
- unknown rules: ignored

An experience must pass every applicable filter. Include runs before exclude,
so exclude settles any conflict.

Evaluation is total: it never raises for well-formed ResumeMaster input and
never mutates it.
"""

from dataclasses import dataclass, replace
from datetime import date
from typing import FrozenSet, Iterable, List, Optional

from vitae.contexts.documents.resume_data_structure import Experience, ResumeMaster
from vitae.contexts.documents.variant_data_structure import (
    DateRangeRule,
    ExcludeTagsRule,
    IncludeTagsRule,
    MaxBulletsRule,
    UnknownRule,
    VariantRule,
)
from vitae.contexts.resolution.logger import _log_debug
from vitae.utils.timestamp import parse_calendar_date


@dataclass(frozen=True)
class RuleSet:
    """Consolidated view of a rule list."""

    include_tags: FrozenSet[str] = frozenset()
    exclude_tags: FrozenSet[str] = frozenset()
    max_bullets: Optional[int] = None
    date_range: Optional[DateRangeRule] = None

    @property
    def is_identity(self) -> bool:
        return (
            not self.include_tags
            and not self.exclude_tags
            and self.max_bullets is None
            and self.date_range is None
        )


def consolidate_rules(rules: Iterable[VariantRule]) -> RuleSet:
    """
    Fold a rule list into a RuleSet.

    Examples:
        consolidate_rules([IncludeTagsRule(("eng",)), IncludeTagsRule(("ops",)), MaxBulletsRule(3), MaxBulletsRule(2)])
        # RuleSet(include_tags={"eng", "ops"}, max_bullets=2)
    """
    include: set = set()
    exclude: set = set()
    max_bullets = None
    date_range = None

    for rule in rules or []:
        if isinstance(rule, IncludeTagsRule):
            include.update(rule.tags)
        elif isinstance(rule, ExcludeTagsRule):
            exclude.update(rule.tags)
        elif isinstance(rule, MaxBulletsRule):
            max_bullets = max(rule.count, 0)
        elif isinstance(rule, DateRangeRule):
            date_range = rule
        elif isinstance(rule, UnknownRule):
            _log_debug(f"Ignoring unknown rule type '{rule.type}'")

    return RuleSet(
        include_tags=frozenset(include),
        exclude_tags=frozenset(exclude),
        max_bullets=max_bullets,
        date_range=date_range,
    )


# =============================================================================
# INDIVIDUAL FILTERS
# =============================================================================


def filter_by_include_tags(experiences: List[Experience], tags: FrozenSet[str]) -> List[Experience]:
    """Keep experiences sharing at least one tag. Empty tags keep everything."""
    if not tags:
        return list(experiences)
    return [exp for exp in experiences if tags.intersection(exp.tags)]


def filter_by_exclude_tags(experiences: List[Experience], tags: FrozenSet[str]) -> List[Experience]:
    """Drop experiences sharing any tag. Empty tags keep everything."""
    if not tags:
        return list(experiences)
    return [exp for exp in experiences if not tags.intersection(exp.tags)]


def limit_bullets(experiences: List[Experience], max_bullets: int) -> List[Experience]:
    """Truncate each experience's bullets to the first max_bullets entries, keeping order."""
    limit = max(max_bullets, 0)
    return [replace(exp, bullets=list(exp.bullets[:limit])) for exp in experiences]


def experience_overlaps(experience: Experience, date_range: DateRangeRule, reference_day: date) -> bool:
    """
    Whether an experience's active period overlaps a date range.

    The experience runs from date_start to date_end. An ongoing experience
    runs to reference_day, or indefinitely when the range has no end. Missing
    range bounds are unbounded. An experience whose dates cannot be read is
    kept.
    """
    exp_start = parse_calendar_date(experience.date_start)
    if exp_start is None:
        return True

    range_start = parse_calendar_date(date_range.start)
    range_end = parse_calendar_date(date_range.end, end_of_period=True)

    if experience.date_end:
        exp_end = parse_calendar_date(experience.date_end, end_of_period=True)
        if exp_end is None:
            return True
    elif range_end is None:
        exp_end = date.max
    else:
        exp_end = max(reference_day, exp_start)

    if range_start is not None and exp_end < range_start:
        return False
    if range_end is not None and exp_start > range_end:
        return False
    return True


def filter_by_date_range(
    experiences: List[Experience], date_range: DateRangeRule, reference_day: Optional[date] = None
) -> List[Experience]:
    """Keep experiences overlapping the range (see experience_overlaps)."""
    reference_day = reference_day or date.today()
    return [exp for exp in experiences if experience_overlaps(exp, date_range, reference_day)]


# =============================================================================
# ORCHESTRATION
# =============================================================================


def evaluate_rules(
    master: ResumeMaster, rules: Iterable[VariantRule], reference_day: Optional[date] = None
) -> ResumeMaster:
    """
    Apply a rule list to a master resume.

    Args:
        master: Source document (not modified)
        rules: Variant rules in stored order
        reference_day: "Today" for ongoing experiences (defaults to date.today())

    Returns:
        New ResumeMaster with the experience list filtered and truncated
    """
    rule_set = consolidate_rules(rules)
    result = master.copy()

    if rule_set.is_identity:
        return result

    experiences = result.experience
    experiences = filter_by_include_tags(experiences, rule_set.include_tags)
    experiences = filter_by_exclude_tags(experiences, rule_set.exclude_tags)
    if rule_set.date_range is not None:
        experiences = filter_by_date_range(experiences, rule_set.date_range, reference_day)
    if rule_set.max_bullets is not None:
        experiences = limit_bullets(experiences, rule_set.max_bullets)

    _log_debug(
        f"Rules kept {len(experiences)}/{len(master.experience)} experience(s)"
        + (f", max {rule_set.max_bullets} bullet(s)" if rule_set.max_bullets is not None else "")
    )

    return replace(result, experience=experiences)
