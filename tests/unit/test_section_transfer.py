"""Unit tests for single-section and bundle import/export."""

from datetime import date

import pytest

from vitae.contexts.documents.defaults import EXPORTABLE_SECTIONS
from vitae.contexts.documents.exceptions import (
    ImportValidationError,
    SectionMismatchError,
    UnknownSectionError,
)
from vitae.contexts.documents.resume_data_structure import Contacts, ResumeMaster, Skills
from vitae.contexts.portability.section_transfer import (
    SectionExportData,
    clear_section_data,
    export_master_resume_sections,
    export_single_section,
    import_master_resume_sections,
    import_single_section,
    normalize_text,
    section_export_filename,
)


# =============================================================================
# EXPORT
# =============================================================================


@pytest.mark.unit
def test_export_single_section(master):
    export = export_single_section(master, "experience")

    assert export.section == "experience"
    assert export.data[0]["id"] == "e1"
    assert export.exported_at
    assert set(export.to_dict()) == {"section", "data", "exportedAt"}


@pytest.mark.unit
def test_export_unknown_section(master):
    with pytest.raises(UnknownSectionError):
        export_single_section(master, "projects")


@pytest.mark.unit
def test_export_filename():
    assert section_export_filename("skills", date(2025, 11, 13)) == "resume-skills-2025-11-13.json"


@pytest.mark.unit
def test_export_data_reads_legacy_date_key():
    export = SectionExportData.from_dict({"section": "summary", "data": [], "exportDate": "2024-01-01T00:00:00"})
    assert export.exported_at == "2024-01-01T00:00:00"


# =============================================================================
# REPLACE
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("section", EXPORTABLE_SECTIONS)
def test_replace_round_trip(master, section):
    """Re-importing an export in replace mode leaves the section as it was."""
    updated = import_single_section(master, export_single_section(master, section), mode="replace")
    assert updated.get_section(section) == master.get_section(section)


@pytest.mark.unit
def test_replace_substitutes_section(master):
    document = {"section": "summary", "data": ["Only this."]}
    updated = import_single_section(master, document, mode="replace", expected_section="summary")

    assert updated.summary == ["Only this."]
    assert updated.experience == master.experience
    assert updated.updated_at != master.updated_at


# =============================================================================
# MERGE
# =============================================================================


@pytest.mark.unit
def test_merge_records_skips_existing_ids(master):
    document = {
        "section": "experience",
        "data": [
            {"id": "e1", "company": "Changed", "title": "Changed"},
            {"id": "e4", "company": "Initech", "title": "Intern"},
        ],
    }
    updated = import_single_section(master, document, mode="merge")

    assert updated.experience_ids == ["e1", "e2", "e3", "e4"]
    assert updated.get_experience("e1").company == "Northwind"


@pytest.mark.unit
def test_merge_strings_by_normalized_text(master):
    document = {
        "section": "summary",
        "data": ["  ten years BUILDING distributed   systems. ", "New line."],
    }
    updated = import_single_section(master, document)

    assert updated.summary == master.summary + ["New line."]


@pytest.mark.unit
def test_merge_skills_per_list(master):
    document = {"section": "skills", "data": {"primary": ["python", "Rust"], "secondary": ["Terraform", "Bash"]}}
    updated = import_single_section(master, document)

    assert updated.skills == Skills(
        primary=["Python", "Kubernetes", "PostgreSQL", "Rust"],
        secondary=["Go", "Terraform", "Bash"],
    )


@pytest.mark.unit
def test_merge_skills_without_secondary_keeps_existing(master):
    document = {"section": "skills", "data": {"primary": []}}
    assert import_single_section(master, document).skills == master.skills


@pytest.mark.unit
def test_merge_scalar_sections_replace(master):
    headline = import_single_section(master, {"section": "headline", "data": "New headline"})
    contacts = import_single_section(master, {"section": "contacts", "data": {"email": "new@example.com"}})

    assert headline.headline == "New headline"
    assert contacts.contacts == Contacts(email="new@example.com")


@pytest.mark.unit
def test_normalize_text():
    assert normalize_text("  Hello\n  WORLD ") == "hello world"


# =============================================================================
# REJECTION
# =============================================================================


@pytest.mark.unit
def test_section_mismatch_leaves_master_unchanged(master):
    """A skills export imported as experience fails before anything merges."""
    snapshot = master.copy()
    document = {"section": "skills", "data": {"primary": ["Go"]}}

    with pytest.raises(SectionMismatchError) as exc_info:
        import_single_section(master, document, mode="merge", expected_section="experience")

    assert exc_info.value.expected == "experience"
    assert exc_info.value.actual == "skills"
    assert master == snapshot


@pytest.mark.unit
def test_invalid_import_collects_errors(master):
    document = {"section": "experience", "data": [{"id": "e9"}, {"company": "X"}]}

    with pytest.raises(ImportValidationError) as exc_info:
        import_single_section(master, document)

    assert exc_info.value.errors == [
        "experience[0]: missing company",
        "experience[0]: missing title",
        "experience[1]: missing id",
        "experience[1]: missing title",
    ]


@pytest.mark.unit
def test_bundle_rejected_by_single_import(master):
    bundle = export_master_resume_sections(master, ["summary"])
    with pytest.raises(ImportValidationError):
        import_single_section(master, bundle)


@pytest.mark.unit
def test_unknown_mode_rejected(master):
    with pytest.raises(ValueError):
        import_single_section(master, {"section": "summary", "data": []}, mode="append")


# =============================================================================
# CLEAR
# =============================================================================


@pytest.mark.unit
def test_clear_section_empties_only_that_section(master):
    cleared = clear_section_data(master, "experience")

    assert cleared.experience == []
    assert cleared.summary == master.summary
    assert cleared.skills == master.skills
    assert cleared.updated_at != master.updated_at
    assert master.experience


@pytest.mark.unit
def test_clear_scalar_and_object_sections(master):
    assert clear_section_data(master, "headline").headline == ""
    assert clear_section_data(master, "skills").skills == Skills(primary=[], secondary=[])
    assert clear_section_data(master, "contacts").contacts == Contacts(email="", phone="", website="", linkedin="")


@pytest.mark.unit
def test_clear_sections_restores_defaults(master_dict):
    master_dict["sections"]["skills"] = {"enabled": False, "order": 1}
    cleared = clear_section_data(ResumeMaster.from_dict(master_dict), "sections")

    assert cleared.sections["skills"].enabled
    assert cleared.sections["skills"].order == 6


# =============================================================================
# BUNDLES
# =============================================================================


@pytest.mark.unit
def test_bundle_export_shape(master):
    bundle = export_master_resume_sections(master, ["summary", "skills"])

    assert bundle["sections"] == ["summary", "skills"]
    assert bundle["version"] == "1.0"
    assert bundle["data"]["id"] == "master-1"
    assert bundle["data"]["skills"]["primary"][0] == "Python"


@pytest.mark.unit
def test_bundle_import(master):
    bundle = {
        "sections": ["summary", "awards", "education"],
        "data": {"summary": ["Fresh."], "awards": [{"id": "a2", "title": "Speaker"}]},
        "version": "1.0",
    }

    replaced = import_master_resume_sections(master, bundle, mode="replace")
    merged = import_master_resume_sections(master, bundle, mode="merge")

    assert replaced.summary == ["Fresh."]
    assert [a.id for a in replaced.awards] == ["a2"]
    assert replaced.education == master.education
    assert merged.summary == master.summary + ["Fresh."]
    assert [a.id for a in merged.awards] == ["a1", "a2"]


@pytest.mark.unit
def test_bundle_validated_before_any_section_applies(master):
    bundle = {
        "sections": ["summary", "headline"],
        "data": {"summary": ["Fine."], "headline": ["not", "a", "string"]},
        "version": "1.0",
    }
    with pytest.raises(ImportValidationError):
        import_master_resume_sections(master, bundle)
