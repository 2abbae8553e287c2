"""
Markdown Preview

Renders a ResolvedResume to markdown with a Jinja2 template. Sections appear
exactly as resolution emitted them: only enabled sections, in resolved order,
further narrowed by the variant's template when it pins a fixed section set.
"""

import re
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).parent / "templates"
RESUME_TEMPLATE = "resume.md.jinja"

SECTION_TITLES = {
    "summary": "Summary",
    "key_achievements": "Key Achievements",
    "experience": "Experience",
    "education": "Education",
    "awards": "Awards",
    "skills": "Skills",
}

_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class MarkdownRenderer:
    """Jinja2 environment bound to a template directory."""

    def __init__(self, templates_dir: Path = None):
        if templates_dir is None:
            templates_dir = TEMPLATES_DIR

        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            # Catches silent failures
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, resolved_resume) -> str:
        """
        Render a resolved resume.

        Args:
            resolved_resume: ResolvedResume from resolve()

        Returns:
            Markdown text ending in a single newline
        """
        resume = resolved_resume.resolved
        template = resolved_resume.template

        sections: List[str] = [
            section
            for section in resolved_resume.sections
            if template is None or template.shows_section(section)
        ]
        contacts = [
            value
            for value in (
                resume.contacts.email,
                resume.contacts.phone,
                resume.contacts.website,
                resume.contacts.linkedin,
            )
            if value
        ]

        text = self.env.get_template(RESUME_TEMPLATE).render(
            owner=resume.owner or "Resume",
            contacts=contacts,
            resume=resume,
            sections=sections,
            section_titles=SECTION_TITLES,
        )
        return _EXTRA_BLANK_LINES.sub("\n\n", text).strip() + "\n"


def render_markdown(resolved_resume, templates_dir: Path = None) -> str:
    """Render a ResolvedResume to markdown using the packaged template."""
    return MarkdownRenderer(templates_dir).render(resolved_resume)
