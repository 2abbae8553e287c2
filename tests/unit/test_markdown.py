"""Unit tests for markdown rendering of resolved resumes."""

import pytest

from vitae.contexts.documents.template_catalog import SectionConfig, Template
from vitae.contexts.documents.variant_data_structure import IncludeTagsRule, Variant
from vitae.contexts.resolution import resolve
from vitae.utils.markdown import render_markdown


@pytest.mark.unit
def test_render_master(master):
    text = render_markdown(resolve(master))

    assert text.startswith("# Alex Morgan\n")
    assert "alex@example.com | 555-0100 | linkedin.com/in/alexmorgan" in text
    assert "**Platform engineer who ships reliable systems**" in text
    assert "### Staff Engineer, Northwind" in text
    assert "Remote | 2021-07 - Present" in text
    assert "Chicago, IL | 2018-03 - 2021-06" in text
    assert "- **BS Computer Science**, State University, Austin, TX (2014)" in text
    assert "- **Engineer of the Year** (2022)" in text
    assert "**Primary:** Python, Kubernetes, PostgreSQL" in text
    assert "**Secondary:** Go, Terraform" in text


@pytest.mark.unit
def test_sections_follow_resolved_order(master):
    variant = Variant(id="v", section_order=["skills", "experience"])
    text = render_markdown(resolve(master, variant))

    assert text.index("## Skills") < text.index("## Experience") < text.index("## Summary")


@pytest.mark.unit
def test_disabled_sections_not_rendered(master):
    variant = Variant.new("v", "Engineering", rules=[IncludeTagsRule(("eng",))])
    text = render_markdown(resolve(master, variant))

    assert "## Summary" not in text
    assert "## Key Achievements" not in text
    assert "Contoso" not in text
    assert "Fabrikam" in text


@pytest.mark.unit
def test_template_pins_sections(master):
    """A template with a fixed section set hides everything else."""
    template = Template(id="t", section_config=SectionConfig(False, ["experience"]))
    text = render_markdown(resolve(master, Variant(id="v", template_id="t"), templates=[template]))

    assert "## Experience" in text
    assert "## Skills" not in text
    assert "## Education" not in text


@pytest.mark.unit
def test_output_is_tidy(master):
    text = render_markdown(resolve(master))

    assert text.endswith("\n")
    assert not text.endswith("\n\n")
    assert "\n\n\n" not in text
