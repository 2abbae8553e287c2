"""Unit tests for the master resume dataclasses."""

import pytest

from vitae.contexts.documents.exceptions import InvalidDocumentError, UnknownSectionError
from vitae.contexts.documents.resume_data_structure import (
    Contacts,
    Experience,
    ResumeMaster,
    SectionState,
)


@pytest.mark.unit
def test_round_trip_preserves_stored_shape(master_dict):
    """from_dict followed by to_dict reproduces the stored document."""
    assert ResumeMaster.from_dict(master_dict).to_dict() == master_dict


@pytest.mark.unit
def test_from_dict_reads_nested_records(master):
    """Nested records become dataclasses with their fields intact."""
    assert master.experience_ids == ["e1", "e2", "e3"]
    assert master.experience[0].is_current
    assert not master.experience[1].is_current
    assert master.contacts.linkedin == "linkedin.com/in/alexmorgan"
    assert master.contacts.website is None
    assert master.skills.secondary == ["Go", "Terraform"]
    assert master.sections["experience"] == SectionState(enabled=True, order=3)


@pytest.mark.unit
def test_from_dict_defaults_missing_fields():
    """A minimal document gets empty content and no explicit section settings."""
    master = ResumeMaster.from_dict({"id": "m"})

    assert master.headline == ""
    assert master.experience == []
    assert master.skills.primary == []
    assert master.skills.secondary is None
    assert master.sections == {}
    assert master.ordered_master_sections() == [
        "summary",
        "key_achievements",
        "experience",
        "education",
        "awards",
        "skills",
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    "data",
    [
        [],
        {},
        {"id": ""},
        {"id": "m", "experience": [{"company": "No id"}]},
        {"id": "m", "experience": ["not an object"]},
        {"id": "m", "summary": "Hello"},
        {"id": "m", "experience": [{"id": "e1", "bullets": 5}]},
        {"id": "m", "experience": [{"id": "e1", "tags": "eng"}]},
        {"id": "m", "experience": 5},
        {"id": "m", "skills": {"primary": "Python"}},
        {"id": "m", "sections": {"skills": {"enabled": True, "order": "2"}}},
        {"id": "m", "sections": {"skills": {"enabled": "yes", "order": 2}}},
    ],
)
def test_from_dict_rejects_malformed(data):
    """Malformed documents raise InvalidDocumentError."""
    with pytest.raises(InvalidDocumentError):
        ResumeMaster.from_dict(data)


@pytest.mark.unit
def test_new_sets_timestamps():
    """new() creates an empty master with matching timestamps."""
    master = ResumeMaster.new("m", "Alex")
    assert master.created_at
    assert master.created_at == master.updated_at
    assert master.sections == {}


@pytest.mark.unit
def test_copy_shares_nothing(master):
    """Mutating a copy leaves the original untouched."""
    duplicate = master.copy()
    duplicate.experience[0].bullets.append("extra")
    duplicate.summary.clear()

    assert len(master.experience[0].bullets) == 4
    assert len(master.summary) == 2


@pytest.mark.unit
def test_touch_returns_new_document(master):
    """touch() refreshes updated_at on a copy only."""
    touched = master.touch()

    assert touched is not master
    assert touched.updated_at != master.updated_at
    assert master.updated_at == "2025-01-01T09:00:00"


@pytest.mark.unit
def test_with_section_is_copy_on_write(master):
    """with_section() replaces one section without touching the receiver."""
    updated = master.with_section("headline", "New headline")

    assert updated.headline == "New headline"
    assert master.headline == "Platform engineer who ships reliable systems"
    assert updated.experience == master.experience


@pytest.mark.unit
def test_section_access_rejects_unknown_key(master):
    """Unknown section keys raise UnknownSectionError."""
    with pytest.raises(UnknownSectionError):
        master.get_section("portfolio")
    with pytest.raises(UnknownSectionError):
        master.with_section("owner", "someone")


@pytest.mark.unit
def test_get_experience(master):
    assert master.get_experience("e2").company == "Contoso"
    assert master.get_experience("missing") is None


@pytest.mark.unit
def test_ordered_master_sections_follows_order(master_dict):
    """Sections sort by their master order value."""
    master_dict["sections"]["skills"]["order"] = 0
    master = ResumeMaster.from_dict(master_dict)
    assert master.ordered_master_sections()[0] == "skills"


@pytest.mark.unit
def test_experience_to_dict_keeps_null_end_date():
    """An ongoing experience serializes date_end as null."""
    data = Experience(id="e", date_start="2020").to_dict()
    assert "date_end" in data
    assert data["date_end"] is None


@pytest.mark.unit
def test_contacts_omit_unset_optional_fields():
    assert Contacts(email="a@b.c", phone="1").to_dict() == {"email": "a@b.c", "phone": "1"}
