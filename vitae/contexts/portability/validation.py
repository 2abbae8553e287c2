"""
Import Validation

Structural checks for documents entering from outside: single-section
exports, multi-section exports and variant documents. Every check returns a
list of human-readable problems instead of raising, so a caller can show them
all at once. An empty list means the document is safe to merge.

Forward compatibility is kept where resolution is lenient: unknown rule types
and unknown override paths are accepted here as well, because the pipeline
ignores them. Known rules and overrides with a payload of the wrong shape are
reported.
"""

from typing import Any, Dict, List, Optional

from vitae.contexts.documents.defaults import (
    CONTACT_FIELDS,
    EXPORT_FORMAT_VERSION,
    EXPORTABLE_SECTIONS,
    MASTER_SECTION_KEYS,
    VARIANT_SECTION_KEYS,
)
from vitae.contexts.documents.variant_data_structure import (
    OVERRIDE_OPERATIONS,
    RULE_TYPES,
    AwardsList,
    EducationList,
    ExperienceList,
    ExperienceOrder,
    RECORD_LIST_TARGETS,
    SCALAR_TARGETS,
    UnknownRule,
    UnknownTarget,
    parse_override_path,
    parse_rule,
)

# Fields every record in an id-keyed section must carry
REQUIRED_RECORD_FIELDS = {
    "experience": ("id", "company", "title"),
    "education": ("id", "degree", "school"),
    "awards": ("id", "title"),
}

_NULLABLE_SCALARS = ("date_end", "website", "linkedin")

_RECORD_SECTIONS = {
    ExperienceList: "experience",
    EducationList: "education",
    AwardsList: "awards",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _check_string_list(value: Any, label: str, errors: List[str]) -> None:
    if not isinstance(value, list):
        errors.append(f"{label}: expected a list of strings, got {_type_name(value)}")
        return
    for index, item in enumerate(value):
        if not isinstance(item, str):
            errors.append(f"{label}[{index}]: expected a string, got {_type_name(item)}")


def _check_records(section: str, value: Any, errors: List[str], require_fields: bool = True) -> None:
    if not isinstance(value, list):
        errors.append(f"{section}: expected a list, got {_type_name(value)}")
        return

    required = REQUIRED_RECORD_FIELDS[section] if require_fields else ("id",)
    seen_ids = set()
    for index, record in enumerate(value):
        label = f"{section}[{index}]"
        if not isinstance(record, dict):
            errors.append(f"{label}: expected an object, got {_type_name(record)}")
            continue
        for field_name in required:
            field_value = record.get(field_name)
            if not isinstance(field_value, str) or not field_value.strip():
                errors.append(f"{label}: missing {field_name}")
        record_id = record.get("id")
        if isinstance(record_id, str) and record_id:
            if record_id in seen_ids:
                errors.append(f"{label}: duplicate id '{record_id}'")
            seen_ids.add(record_id)
        for list_field in ("bullets", "tags"):
            if section == "experience" and record.get(list_field) is not None:
                _check_string_list(record[list_field], f"{label}.{list_field}", errors)


def validate_section_data(section: str, data: Any, require_fields: bool = True) -> List[str]:
    """
    Check that data has the shape of one master section.

    Args:
        section: Exportable section key
        data: Section content as exported (plain JSON values)
        require_fields: Require every REQUIRED_RECORD_FIELDS entry on records;
            when False only the id is required (stored masters may hold blanks)

    Returns:
        List of problems (empty when valid)

    Examples:
        validate_section_data("summary", ["Built things"])   # []
        validate_section_data("experience", [{"id": "e1"}])
        # ["experience[0]: missing company", "experience[0]: missing title"]
    """
    errors: List[str] = []

    if section not in EXPORTABLE_SECTIONS:
        return [f"Unknown section '{section}'"]

    if section == "headline":
        if not isinstance(data, str):
            errors.append(f"headline: expected a string, got {_type_name(data)}")

    elif section in ("summary", "key_achievements"):
        _check_string_list(data, section, errors)

    elif section in REQUIRED_RECORD_FIELDS:
        _check_records(section, data, errors, require_fields)

    elif section == "contacts":
        if not isinstance(data, dict):
            errors.append(f"contacts: expected an object, got {_type_name(data)}")
        else:
            for field_name in CONTACT_FIELDS:
                value = data.get(field_name)
                if value is None:
                    continue
                if not isinstance(value, str):
                    errors.append(f"contacts.{field_name}: expected a string, got {_type_name(value)}")

    elif section == "skills":
        if not isinstance(data, dict):
            errors.append(f"skills: expected an object, got {_type_name(data)}")
        else:
            _check_string_list(data.get("primary"), "skills.primary", errors)
            if data.get("secondary") is not None:
                _check_string_list(data["secondary"], "skills.secondary", errors)

    elif section == "sections":
        if not isinstance(data, dict):
            errors.append(f"sections: expected an object, got {_type_name(data)}")
        else:
            for key, state in data.items():
                label = f"sections.{key}"
                if key not in MASTER_SECTION_KEYS:
                    errors.append(f"{label}: unknown section")
                elif not isinstance(state, dict):
                    errors.append(f"{label}: expected an object, got {_type_name(state)}")
                else:
                    if not isinstance(state.get("enabled"), bool):
                        errors.append(f"{label}.enabled: expected true or false")
                    if not _is_int(state.get("order")):
                        errors.append(f"{label}.order: expected an integer")

    return errors


def _validate_section_export(data: Dict[str, Any], expected_section: Optional[str]) -> List[str]:
    section = data.get("section")
    if not isinstance(section, str) or not section:
        return ["Invalid section export: missing or invalid section name"]
    if section not in EXPORTABLE_SECTIONS:
        return [f"Invalid section export: unknown section '{section}'"]

    errors = []
    if expected_section is not None and section != expected_section:
        errors.append(f"Section mismatch: expected '{expected_section}', found '{section}'")
    if "data" not in data:
        errors.append("Invalid section export: missing data")
    else:
        errors.extend(validate_section_data(section, data["data"]))
    return errors


def _validate_multi_section_export(data: Dict[str, Any]) -> List[str]:
    errors = []

    version = data.get("version")
    if not version:
        errors.append("Invalid export format: missing version")
    elif str(version) != EXPORT_FORMAT_VERSION:
        errors.append(f"Unsupported export version '{version}' (expected {EXPORT_FORMAT_VERSION})")

    content = data.get("data")
    if not isinstance(content, dict):
        errors.append("Invalid export format: missing data object")
        return errors

    for section in data["sections"]:
        if section not in EXPORTABLE_SECTIONS:
            errors.append(f"Unknown section '{section}'")
        elif section in content:
            errors.extend(validate_section_data(section, content[section]))
    return errors


def validate_import_data(data: Any, expected_section: Optional[str] = None) -> List[str]:
    """
    Validate an import document before anything is merged.

    Recognises both export formats:
        {"section": "experience", "data": [...], "exportedAt": "..."}
        {"sections": ["summary", ...], "data": {...}, "version": "1.0", ...}

    Args:
        data: Parsed JSON document
        expected_section: Section the caller intends to import (single-section only)

    Returns:
        List of problems (empty when valid)
    """
    if not isinstance(data, dict):
        return [f"Invalid export format: expected a JSON object, got {_type_name(data)}"]

    if isinstance(data.get("sections"), list):
        return _validate_multi_section_export(data)
    if "section" in data:
        return _validate_section_export(data, expected_section)
    return ["Invalid export format: not a recognized master resume export"]


# =============================================================================
# VARIANT DOCUMENTS
# =============================================================================


def _check_rule(index: int, rule: Any, errors: List[str]) -> None:
    label = f"rules[{index}]"
    if not isinstance(rule, dict):
        errors.append(f"{label}: expected an object, got {_type_name(rule)}")
        return
    rule_type = rule.get("type")
    if not isinstance(rule_type, str) or not rule_type:
        errors.append(f"{label}: missing type")
        return
    if rule_type not in RULE_TYPES:
        return

    parsed = parse_rule(rule)
    if isinstance(parsed, UnknownRule):
        errors.append(f"{label}: invalid value for {rule_type}")
    elif rule_type == "section_order":
        for key in parsed.value:
            if key not in VARIANT_SECTION_KEYS:
                errors.append(f"{label}: unknown section '{key}'")


def _record_problems(section: str, records: List[Any]) -> Optional[str]:
    problems = validate_section_data(section, records)
    return "; ".join(problems) if problems else None


def _override_payload_problem(target, operation: str, value: Any) -> Optional[str]:
    """Why a payload cannot apply to a target, or None if it can."""
    def is_move(payload: Any) -> bool:
        return (
            isinstance(payload, dict)
            and (_is_int(payload.get("from")) or isinstance(payload.get("from"), str))
            and _is_int(payload.get("to"))
        )

    if isinstance(target, ExperienceOrder):
        if operation == "set":
            if isinstance(value, list) and all(isinstance(item, str) for item in value):
                return None
            return "set on experience_order expects a list of experience ids"
        if operation == "move":
            return None if is_move(value) else 'move expects {"from": index-or-id, "to": index}'
        return f"{operation} is not supported on experience_order"

    if isinstance(target, SCALAR_TARGETS):
        if operation != "set":
            return f"{operation} is not supported on a scalar field"
        nullable = getattr(target, "field_name", None) in _NULLABLE_SCALARS
        if isinstance(value, str) or (value is None and nullable):
            return None
        return "set on a scalar field expects a string"

    keyed = isinstance(target, RECORD_LIST_TARGETS)
    if operation == "set":
        if not isinstance(value, list):
            return "set expects a list"
        if keyed and not all(isinstance(item, dict) and isinstance(item.get("id"), str) for item in value):
            return "set expects records that each carry an id"
        if not keyed and not all(isinstance(item, str) for item in value):
            return "set expects a list of strings"
        return _record_problems(_RECORD_SECTIONS[type(target)], value) if keyed else None
    if operation == "add":
        if keyed:
            if not (isinstance(value, dict) and isinstance(value.get("id"), str)):
                return "add expects a record with an id"
            return _record_problems(_RECORD_SECTIONS[type(target)], [value])
        return None if isinstance(value, str) else "add expects a string"
    if operation == "remove":
        if _is_int(value) or isinstance(value, str):
            return None
        return "remove expects an index" + (" or id" if keyed else " or the exact text")
    if operation == "move":
        return None if is_move(value) else 'move expects {"from": index-or-id, "to": index}'
    return None


def _check_override(index: int, override: Any, errors: List[str]) -> None:
    label = f"overrides[{index}]"
    if not isinstance(override, dict):
        errors.append(f"{label}: expected an object, got {_type_name(override)}")
        return

    path = override.get("path")
    operation = override.get("operation")
    if not isinstance(path, str) or not path:
        errors.append(f"{label}: missing path")
        return
    if operation not in OVERRIDE_OPERATIONS:
        errors.append(f"{label}: unknown operation '{operation}'")
        return

    target = parse_override_path(path)
    if isinstance(target, UnknownTarget):
        return

    problem = _override_payload_problem(target, operation, override.get("value"))
    if problem:
        errors.append(f"{label} ({path}): {problem}")


def validate_master(data: Any) -> List[str]:
    """
    Validate a stored master resume document, section by section.

    Records need an id but may leave other fields blank, as the store allows.

    Returns:
        List of problems (empty when valid)
    """
    if not isinstance(data, dict):
        return [f"Master resume must be an object, got {_type_name(data)}"]

    errors: List[str] = []
    if not isinstance(data.get("id"), str) or not data.get("id"):
        errors.append("Master resume is missing an id")
    for section in EXPORTABLE_SECTIONS:
        if data.get(section) is not None:
            errors.extend(validate_section_data(section, data[section], require_fields=False))
    return errors


def validate_variant(data: Any) -> List[str]:
    """
    Validate a variant document entering through restore or import.

    Args:
        data: Variant in its stored JSON shape

    Returns:
        List of problems (empty when valid)
    """
    if not isinstance(data, dict):
        return [f"Variant must be an object, got {_type_name(data)}"]

    errors: List[str] = []
    variant_id = data.get("id")
    if not isinstance(variant_id, str) or not variant_id:
        errors.append("Variant is missing an id")
    if not isinstance(data.get("name", ""), str):
        errors.append("name: expected a string")

    rules = data.get("rules")
    if rules is None:
        rules = []
    if not isinstance(rules, list):
        errors.append(f"rules: expected a list, got {_type_name(rules)}")
    else:
        for index, rule in enumerate(rules):
            _check_rule(index, rule, errors)

    overrides = data.get("overrides")
    if overrides is None:
        overrides = []
    if not isinstance(overrides, list):
        errors.append(f"overrides: expected a list, got {_type_name(overrides)}")
    else:
        for index, override in enumerate(overrides):
            _check_override(index, override, errors)

    settings = data.get("sectionSettings") or {}
    if not isinstance(settings, dict):
        errors.append(f"sectionSettings: expected an object, got {_type_name(settings)}")
    else:
        for key, entry in settings.items():
            if key not in VARIANT_SECTION_KEYS:
                errors.append(f"sectionSettings.{key}: unknown section")
            elif not (isinstance(entry, dict) and isinstance(entry.get("enabled"), bool)):
                errors.append(f"sectionSettings.{key}: expected {{\"enabled\": true|false}}")

    section_order = data.get("sectionOrder")
    if section_order is not None:
        if not isinstance(section_order, list):
            errors.append(f"sectionOrder: expected a list, got {_type_name(section_order)}")
        else:
            for key in section_order:
                if key not in VARIANT_SECTION_KEYS:
                    errors.append(f"sectionOrder: unknown section '{key}'")

    template_id = data.get("templateId")
    if template_id is not None and not isinstance(template_id, str):
        errors.append("templateId: expected a string")

    return errors
