"""
Variant resolution entry points.

resolve() runs the full pipeline:

    master --evaluate_rules--> filtered --apply_overrides--> overridden --compose--> ResolvedResume

Every call recomputes from the master and variant it is given; nothing is
cached between calls, so a caller holding an updated document always gets a
result that reflects it.
"""

from datetime import date
from typing import Iterable, Optional

from vitae.contexts.documents.application_data_structure import find_by_id
from vitae.contexts.documents.resume_data_structure import ResumeMaster
from vitae.contexts.documents.template_catalog import Template, find_template
from vitae.contexts.documents.variant_data_structure import Variant
from vitae.contexts.resolution.logger import _log_debug, log_resolution_result
from vitae.contexts.resolution.override_applicator import apply_overrides
from vitae.contexts.resolution.rule_evaluator import evaluate_rules
from vitae.contexts.resolution.section_composer import ResolvedResume, compose


def resolve(
    master: ResumeMaster,
    variant: Optional[Variant] = None,
    templates: Optional[Iterable[Template]] = None,
    reference_day: Optional[date] = None,
) -> ResolvedResume:
    """
    Apply a variant to a master resume.

    Args:
        master: Master resume (not modified)
        variant: Variant to apply; None gives identity resolution
        templates: Templates to look the variant's template_id up in
        reference_day: "Today" for ongoing experiences in date_range rules

    Returns:
        ResolvedResume

    Example:
        resolved = resolve(master, variant)
        resolved.sections            # ["headline", "experience", "skills"]
        resolved.resolved.experience # filtered, overridden experiences
    """
    if variant is None:
        resolved = compose(master, None, master)
        log_resolution_result(resolved)
        return resolved

    filtered = evaluate_rules(master, variant.rules, reference_day=reference_day)
    overridden = apply_overrides(filtered, variant.overrides)

    template = find_template(list(templates or []), variant.template_id)
    if template is None and variant.template_id:
        _log_debug(f"Variant '{variant.name}': template '{variant.template_id}' not found")

    resolved = compose(master, variant, overridden, template=template)
    log_resolution_result(resolved)
    return resolved


def resolve_by_id(
    master: ResumeMaster,
    variants: Iterable[Variant],
    variant_id: Optional[str],
    templates: Optional[Iterable[Template]] = None,
) -> ResolvedResume:
    """
    Resolve the variant with the given id.

    A missing or dangling id resolves to the master itself.
    """
    variant = find_by_id(list(variants), variant_id)
    if variant is None and variant_id:
        _log_debug(f"Variant '{variant_id}' not found, resolving master")
    return resolve(master, variant, templates=templates)
