"""Unit tests for the template catalog."""

import pytest

from vitae.contexts.documents.exceptions import InvalidDocumentError
from vitae.contexts.documents.template_catalog import (
    DEFAULT_STYLES,
    SectionConfig,
    Template,
    find_template,
    load_template_catalog,
    validate_template_styles,
)


@pytest.mark.unit
def test_load_builtin_catalog():
    """The packaged catalog loads with valid styles."""
    templates = load_template_catalog()

    assert [t.id for t in templates] == [
        "template-sleek-compact",
        "template-modern-wide",
        "template-classic",
    ]
    for template in templates:
        assert validate_template_styles(template.styles) == []


@pytest.mark.unit
def test_load_custom_catalog(tmp_path):
    """A catalog path can be passed explicitly; missing styles take defaults."""
    catalog = tmp_path / "templates.yaml"
    catalog.write_text(
        "templates:\n"
        "  - id: t-minimal\n"
        "    name: Minimal\n"
        "    styles:\n"
        "      colors: warm-orange\n"
    )

    templates = load_template_catalog(catalog)

    assert len(templates) == 1
    assert templates[0].styles == {**DEFAULT_STYLES, "colors": "warm-orange"}


@pytest.mark.unit
def test_load_catalog_rejects_invalid_style(tmp_path):
    catalog = tmp_path / "templates.yaml"
    catalog.write_text("templates:\n  - id: t-bad\n    styles:\n      layout: four-column\n")

    with pytest.raises(InvalidDocumentError):
        load_template_catalog(catalog)


@pytest.mark.unit
def test_validate_template_styles_keeps_unknown_keys():
    """Unrecognised style keys are not errors."""
    assert validate_template_styles({"fontSize": "large", "accent": "teal"}) == []
    assert len(validate_template_styles({"fontSize": "huge", "spacing": "airy"})) == 2


@pytest.mark.unit
def test_template_round_trip():
    data = {
        "id": "t1",
        "name": "Two Column",
        "description": "Sidebar layout",
        "styles": {**DEFAULT_STYLES, "layout": "two-column"},
        "sectionConfig": {"useVariantSections": False, "enabledSections": ["experience", "skills"]},
    }
    template = Template.from_dict(data)

    assert template.section_config == SectionConfig(False, ["experience", "skills"])
    assert template.to_dict() == data


@pytest.mark.unit
def test_shows_section():
    """Templates pinning a section set hide everything else; others show all."""
    pinned = Template(id="t", section_config=SectionConfig(False, ["experience"]))
    follows_variant = Template(id="t2", section_config=SectionConfig(True, []))

    assert pinned.shows_section("experience")
    assert not pinned.shows_section("skills")
    assert follows_variant.shows_section("skills")
    assert Template(id="t3").shows_section("awards")


@pytest.mark.unit
def test_find_template_is_weak():
    """Missing or dangling ids give None."""
    templates = [Template(id="t1")]
    assert find_template(templates, "t1") is templates[0]
    assert find_template(templates, "gone") is None
    assert find_template(templates, None) is None
