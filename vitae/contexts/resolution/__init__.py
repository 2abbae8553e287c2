"""
Resolution Context

Responsibilities:
- Applies variant rules to master content (rule_evaluator)
- Applies variant overrides on top of filtered content (override_applicator)
- Decides section enablement and order and emits ResolvedResume (section_composer)
- Explains a resolution relative to the master (diff)

Owns: The master + variant -> ResolvedResume computation
Never: Reads or writes storage, holds state between calls
"""

from vitae.contexts.resolution.diff import VariantDiff, generate_diff
from vitae.contexts.resolution.override_applicator import apply_override, apply_overrides
from vitae.contexts.resolution.resolver import resolve, resolve_by_id
from vitae.contexts.resolution.rule_evaluator import consolidate_rules, evaluate_rules
from vitae.contexts.resolution.section_composer import (
    ResolvedResume,
    compose,
    resolve_section_enabled,
    resolve_section_order,
)

__all__ = [
    # Entry points
    "resolve",
    "resolve_by_id",
    "ResolvedResume",
    # Pipeline stages
    "evaluate_rules",
    "consolidate_rules",
    "apply_override",
    "apply_overrides",
    "compose",
    "resolve_section_enabled",
    "resolve_section_order",
    # Reporting
    "generate_diff",
    "VariantDiff",
]
