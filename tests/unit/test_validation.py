"""Unit tests for import validation."""

import pytest

from vitae.contexts.portability.validation import (
    validate_import_data,
    validate_master,
    validate_section_data,
    validate_variant,
)


# =============================================================================
# SECTION DATA
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "section,data",
    [
        ("headline", "Builder"),
        ("summary", []),
        ("summary", ["One", "Two"]),
        ("experience", [{"id": "e1", "company": "A", "title": "Eng", "bullets": ["x"], "tags": []}]),
        ("education", [{"id": "ed1", "degree": "BS", "school": "U"}]),
        ("awards", [{"id": "a1", "title": "Best"}]),
        ("skills", {"primary": ["Go"], "secondary": None}),
        ("contacts", {"email": "a@b.c", "website": None}),
        ("sections", {"skills": {"enabled": False, "order": 1}}),
    ],
)
def test_valid_section_data(section, data):
    assert validate_section_data(section, data) == []


@pytest.mark.unit
def test_experience_reports_every_problem():
    """All problems are collected rather than stopping at the first."""
    errors = validate_section_data(
        "experience",
        [
            {"id": "e1"},
            "not a record",
            {"id": "e1", "company": "B", "title": "T", "bullets": "one bullet"},
        ],
    )

    assert errors == [
        "experience[0]: missing company",
        "experience[0]: missing title",
        "experience[1]: expected an object, got str",
        "experience[2]: duplicate id 'e1'",
        "experience[2].bullets: expected a list of strings, got str",
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "section,data,expected",
    [
        ("headline", ["x"], "headline: expected a string, got list"),
        ("summary", "text", "summary: expected a list of strings, got str"),
        ("summary", ["ok", 3], "summary[1]: expected a string, got int"),
        ("skills", {"primary": None}, "skills.primary: expected a list of strings, got null"),
        ("contacts", {"email": 5}, "contacts.email: expected a string, got int"),
        ("sections", {"portfolio": {"enabled": True, "order": 1}}, "sections.portfolio: unknown section"),
        ("sections", {"skills": {"enabled": "yes", "order": 1}}, "sections.skills.enabled: expected true or false"),
        ("projects", [], "Unknown section 'projects'"),
    ],
)
def test_invalid_section_data(section, data, expected):
    assert expected in validate_section_data(section, data)


# =============================================================================
# IMPORT DOCUMENTS
# =============================================================================


@pytest.mark.unit
def test_single_section_export_valid():
    document = {"section": "summary", "data": ["Line"], "exportedAt": "2025-01-01T00:00:00"}
    assert validate_import_data(document) == []
    assert validate_import_data(document, expected_section="summary") == []


@pytest.mark.unit
def test_single_section_export_mismatch_reported():
    document = {"section": "skills", "data": {"primary": []}}
    assert validate_import_data(document, expected_section="experience") == [
        "Section mismatch: expected 'experience', found 'skills'"
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "document,expected",
    [
        ([], "Invalid export format: expected a JSON object, got list"),
        ({"foo": 1}, "Invalid export format: not a recognized master resume export"),
        ({"section": ""}, "Invalid section export: missing or invalid section name"),
        ({"section": "projects", "data": []}, "Invalid section export: unknown section 'projects'"),
        ({"section": "summary"}, "Invalid section export: missing data"),
    ],
)
def test_malformed_import_documents(document, expected):
    assert expected in validate_import_data(document)


@pytest.mark.unit
def test_multi_section_export():
    document = {
        "sections": ["summary", "headline", "awards"],
        "data": {"summary": ["Line"], "headline": 7},
        "version": "1.0",
    }
    assert validate_import_data(document) == ["headline: expected a string, got int"]


@pytest.mark.unit
def test_multi_section_export_version_checked():
    base = {"sections": ["summary"], "data": {"summary": []}}

    assert validate_import_data(base) == ["Invalid export format: missing version"]
    assert validate_import_data({**base, "version": "2.0"}) == [
        "Unsupported export version '2.0' (expected 1.0)"
    ]


# =============================================================================
# VARIANTS
# =============================================================================


@pytest.mark.unit
def test_valid_variant_with_unknown_rule_and_path():
    """Unknown rule types and override paths pass; resolution ignores them."""
    variant = {
        "id": "v1",
        "name": "Platform",
        "rules": [
            {"type": "include_tags", "value": ["eng"]},
            {"type": "keyword_boost", "value": ["ml"]},
            {"type": "section_order", "value": ["skills", "experience"]},
        ],
        "overrides": [
            {"path": "experience_order", "operation": "set", "value": ["e2", "e1"]},
            {"path": "experience.e1.date_end", "operation": "set", "value": None},
            {"path": "awards", "operation": "add", "value": {"id": "a9", "title": "X"}},
            {"path": "summary", "operation": "move", "value": {"from": 0, "to": 2}},
            {"path": "portfolio.links", "operation": "set", "value": 42},
        ],
        "sectionSettings": {"summary": {"enabled": True}},
        "sectionOrder": ["skills"],
        "templateId": "template-classic",
    }
    assert validate_variant(variant) == []


@pytest.mark.unit
def test_invalid_variant_reports_everything():
    variant = {
        "name": "Broken",
        "rules": [{"type": "max_bullets", "value": "lots"}, {"type": "section_order", "value": ["portfolio"]}],
        "overrides": [
            {"path": "headline", "operation": "add", "value": "x"},
            {"path": "summary", "operation": "rename", "value": "x"},
            {"path": "experience_order", "operation": "set", "value": "e1"},
            {"path": "education", "operation": "add", "value": {"degree": "BS"}},
        ],
        "sectionSettings": {"awards": True, "portfolio": {"enabled": False}},
        "templateId": 3,
    }
    errors = validate_variant(variant)

    assert errors == [
        "Variant is missing an id",
        "rules[0]: invalid value for max_bullets",
        "rules[1]: unknown section 'portfolio'",
        "overrides[0] (headline): add is not supported on a scalar field",
        "overrides[1]: unknown operation 'rename'",
        "overrides[2] (experience_order): set on experience_order expects a list of experience ids",
        "overrides[3] (education): add expects a record with an id",
        'sectionSettings.awards: expected {"enabled": true|false}',
        "sectionSettings.portfolio: unknown section",
        "templateId: expected a string",
    ]


@pytest.mark.unit
def test_variant_must_be_object():
    assert validate_variant(["v1"]) == ["Variant must be an object, got list"]


@pytest.mark.unit
def test_override_record_payload_checked_like_section_data():
    variant = {
        "id": "v1",
        "overrides": [
            {"path": "experience", "operation": "add", "value": {"id": "e9", "company": "X", "title": "Y", "bullets": 5}},
            {"path": "awards", "operation": "set", "value": [{"id": "a1"}]},
        ],
    }
    assert validate_variant(variant) == [
        "overrides[0] (experience): experience[0].bullets: expected a list of strings, got int",
        "overrides[1] (awards): awards[0]: missing title",
    ]


@pytest.mark.unit
def test_variant_list_fields_must_be_lists():
    errors = validate_variant({"id": "v1", "rules": "", "overrides": {}, "sectionOrder": "skills"})

    assert errors == [
        "rules: expected a list, got str",
        "overrides: expected a list, got dict",
        "sectionOrder: expected a list, got str",
    ]


@pytest.mark.unit
def test_validate_master_requires_only_ids_on_records():
    assert validate_master({"id": "m", "experience": [{"id": "e1", "company": ""}]}) == []
    assert validate_master({"id": "m", "summary": "Hello", "awards": [{"title": "X"}]}) == [
        "summary: expected a list of strings, got str",
        "awards[0]: missing id",
    ]
    assert validate_master("m") == ["Master resume must be an object, got str"]
