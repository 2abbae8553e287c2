"""
Override Application

Applies a variant's overrides, in order, on top of rule-filtered content. Each
override sees the document left by the previous one, so a later `set` on a
path replaces an earlier one while `add`s accumulate.

Operations by target kind:

| target kind      | set                  | add            | remove              | move                 |
|------------------|----------------------|----------------|---------------------|----------------------|
| experience_order | reorder by id list   | -              | -                   | as experience list   |
| string list      | replace list         | append string  | index or equal text | {"from", "to"}       |
| record list      | replace list         | append record  | index or id         | {"from", "to"}       |
| scalar           | replace value        | -              | -                   | -                    |

Cells marked "-", unknown paths, unknown operations, dangling experience ids
and payloads of the wrong shape are no-ops (logged at debug). Nothing here
raises for a well-formed ResumeMaster, and the input is never mutated.
"""

import copy
from dataclasses import replace
from typing import Any, Callable, Iterable, List, Optional

from vitae.contexts.documents.exceptions import InvalidDocumentError
from vitae.contexts.documents.resume_data_structure import (
    Award,
    Education,
    Experience,
    ResumeMaster,
)
from vitae.contexts.documents.variant_data_structure import (
    OVERRIDE_OPERATIONS,
    AwardsList,
    ContactField,
    EducationList,
    ExperienceBullets,
    ExperienceField,
    ExperienceList,
    ExperienceOrder,
    Headline,
    KeyAchievementsList,
    OverrideTarget,
    PrimarySkills,
    RECORD_LIST_TARGETS,
    SCALAR_TARGETS,
    STRING_LIST_TARGETS,
    SecondarySkills,
    SummaryList,
    UnknownTarget,
    VariantOverride,
)
from vitae.contexts.resolution.logger import _log_debug

_MISSING = object()

# Scalar fields that may be cleared with `set` to null
_NULLABLE_FIELDS = ("date_end", "website", "linkedin")

_RECORD_TYPES = {
    ExperienceList: Experience,
    EducationList: Education,
    AwardsList: Award,
}


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# TARGET ACCESS
# =============================================================================


def _read_target(master: ResumeMaster, target: OverrideTarget) -> Any:
    """Current value at a target, or _MISSING when it does not exist."""
    if isinstance(target, Headline):
        return master.headline
    if isinstance(target, SummaryList):
        return master.summary
    if isinstance(target, KeyAchievementsList):
        return master.key_achievements
    if isinstance(target, PrimarySkills):
        return master.skills.primary
    if isinstance(target, SecondarySkills):
        return master.skills.secondary or []
    if isinstance(target, (ExperienceList, ExperienceOrder)):
        return master.experience
    if isinstance(target, EducationList):
        return master.education
    if isinstance(target, AwardsList):
        return master.awards
    if isinstance(target, ContactField):
        return getattr(master.contacts, target.field_name)
    if isinstance(target, (ExperienceBullets, ExperienceField)):
        experience = master.get_experience(target.experience_id)
        if experience is None:
            return _MISSING
        if isinstance(target, ExperienceBullets):
            return experience.bullets
        return getattr(experience, target.field_name)
    return _MISSING


def _write_target(master: ResumeMaster, target: OverrideTarget, value: Any) -> ResumeMaster:
    """Return a new master with the value stored at target."""
    if isinstance(target, Headline):
        return replace(master, headline=value)
    if isinstance(target, SummaryList):
        return replace(master, summary=value)
    if isinstance(target, KeyAchievementsList):
        return replace(master, key_achievements=value)
    if isinstance(target, PrimarySkills):
        return replace(master, skills=replace(master.skills, primary=value))
    if isinstance(target, SecondarySkills):
        return replace(master, skills=replace(master.skills, secondary=value))
    if isinstance(target, (ExperienceList, ExperienceOrder)):
        return replace(master, experience=value)
    if isinstance(target, EducationList):
        return replace(master, education=value)
    if isinstance(target, AwardsList):
        return replace(master, awards=value)
    if isinstance(target, ContactField):
        return replace(master, contacts=replace(master.contacts, **{target.field_name: value}))
    if isinstance(target, (ExperienceBullets, ExperienceField)):
        field_name = "bullets" if isinstance(target, ExperienceBullets) else target.field_name
        experience = [
            replace(item, **{field_name: value}) if item.id == target.experience_id else item
            for item in master.experience
        ]
        return replace(master, experience=experience)
    return master


# =============================================================================
# ELEMENT COERCION
# =============================================================================


def _coerce_string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _record_coercer(record_type) -> Callable[[Any], Optional[Any]]:
    def coerce(value: Any):
        if isinstance(value, record_type):
            return copy.deepcopy(value)
        if isinstance(value, dict):
            try:
                return record_type.from_dict(value)
            except InvalidDocumentError as e:
                _log_debug(f"Override payload is not a valid {record_type.__name__}: {e.message}")
        return None

    return coerce


def _coerce_list(values: Any, coerce: Callable[[Any], Optional[Any]]) -> Optional[List[Any]]:
    if not isinstance(values, (list, tuple)):
        return None
    coerced = [coerce(value) for value in values]
    if any(item is None for item in coerced):
        return None
    return coerced


# =============================================================================
# SEQUENCE OPERATIONS
# =============================================================================


def reorder_experience(experiences: List[Experience], order: Iterable[str]) -> List[Experience]:
    """
    Put the listed experience ids first, in the given order.

    Ids not in `order` follow in their current relative order, so a stale or
    partial ordering never hides an experience. Unknown ids are ignored.

    Examples:
        [e1, e2, e3] with ["e3", "e1"]  ->  [e3, e1, e2]
    """
    by_id = {experience.id: experience for experience in experiences}
    placed: List[Experience] = []
    seen = set()

    for experience_id in order:
        if experience_id in by_id and experience_id not in seen:
            placed.append(by_id[experience_id])
            seen.add(experience_id)

    remainder = [experience for experience in experiences if experience.id not in seen]
    return placed + remainder


def _locate(items: List[Any], selector: Any, keyed: bool) -> Optional[int]:
    """Index of the element a selector refers to (index, id, or equal string)."""
    if _is_index(selector):
        return selector if -len(items) <= selector < len(items) else None
    if keyed:
        if isinstance(selector, dict):
            selector = selector.get("id")
        for index, item in enumerate(items):
            if item.id == selector:
                return index
        return None
    for index, item in enumerate(items):
        if item == selector:
            return index
    return None


def _remove(items: List[Any], selector: Any, keyed: bool) -> Optional[List[Any]]:
    if not keyed and isinstance(selector, str):
        remaining = [item for item in items if item != selector]
        return remaining if len(remaining) != len(items) else None
    index = _locate(items, selector, keyed)
    if index is None:
        return None
    remaining = list(items)
    del remaining[index]
    return remaining


def _move(items: List[Any], instruction: Any, keyed: bool) -> Optional[List[Any]]:
    if not isinstance(instruction, dict) or "from" not in instruction or not _is_index(instruction.get("to")):
        return None
    index = _locate(items, instruction["from"], keyed)
    if index is None:
        return None
    reordered = list(items)
    element = reordered.pop(index)
    destination = min(max(instruction["to"], 0), len(reordered))
    reordered.insert(destination, element)
    return reordered


def _apply_sequence_operation(
    current: List[Any], operation: str, value: Any, coerce: Callable[[Any], Optional[Any]], keyed: bool
) -> Optional[List[Any]]:
    """New list after the operation, or None for a no-op."""
    if operation == "set":
        return _coerce_list(value, coerce)
    if operation == "add":
        element = coerce(value)
        if element is None:
            return None
        if keyed and any(item.id == element.id for item in current):
            _log_debug(f"Not adding duplicate id '{element.id}'")
            return None
        return list(current) + [element]
    if operation == "remove":
        return _remove(current, value, keyed)
    if operation == "move":
        return _move(current, value, keyed)
    return None


# =============================================================================
# ORCHESTRATION
# =============================================================================


def apply_override(master: ResumeMaster, override: VariantOverride) -> ResumeMaster:
    """
    Apply one override.

    Returns:
        New ResumeMaster, or the input unchanged when the override is a no-op
    """
    target = override.target
    operation = override.operation
    value = override.value

    if operation not in OVERRIDE_OPERATIONS:
        _log_debug(f"Ignoring override with unknown operation '{operation}' on '{override.path}'")
        return master
    if isinstance(target, UnknownTarget):
        _log_debug(f"Ignoring override on unknown path '{override.path}'")
        return master

    current = _read_target(master, target)
    if current is _MISSING:
        _log_debug(f"Ignoring override on '{override.path}': target does not exist")
        return master

    updated: Any = _MISSING

    if isinstance(target, ExperienceOrder):
        if operation == "set":
            if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
                updated = reorder_experience(current, value)
        elif operation == "move":
            updated = _move(current, value, keyed=True)
    elif isinstance(target, SCALAR_TARGETS):
        if operation == "set":
            nullable = getattr(target, "field_name", None) in _NULLABLE_FIELDS
            if isinstance(value, str) or (value is None and nullable):
                updated = value
    elif isinstance(target, STRING_LIST_TARGETS):
        updated = _apply_sequence_operation(current, operation, value, _coerce_string, keyed=False)
    elif isinstance(target, RECORD_LIST_TARGETS):
        coerce = _record_coercer(_RECORD_TYPES[type(target)])
        updated = _apply_sequence_operation(current, operation, value, coerce, keyed=True)

    if updated is _MISSING or (updated is None and not isinstance(target, SCALAR_TARGETS)):
        _log_debug(f"Override {operation} on '{override.path}' had no effect")
        return master

    return _write_target(master, target, updated)


def apply_overrides(master: ResumeMaster, overrides: Iterable[VariantOverride]) -> ResumeMaster:
    """
    Apply overrides in order.

    Args:
        master: Rule-filtered content (not modified)
        overrides: Variant overrides in stored order

    Returns:
        New ResumeMaster with every applicable override applied
    """
    result = master.copy()
    for override in overrides or []:
        result = apply_override(result, override)
    return result
