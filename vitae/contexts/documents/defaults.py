"""
Default values for resume structure.

Provides the section vocabulary shared by:
- resolution/section_composer.py (enablement fallback, ordering)
- portability/section_transfer.py (exportable sections, the table a cleared `sections` starts from)
- resume_data_structure.py (section keys and order)
"""

from typing import Dict, Tuple

# Sections tracked in ResumeMaster.sections, in default render order
MASTER_SECTION_KEYS: Tuple[str, ...] = (
    "summary",
    "key_achievements",
    "experience",
    "education",
    "awards",
    "skills",
)

# Sections a variant can toggle (headline lives outside master.sections)
VARIANT_SECTION_KEYS: Tuple[str, ...] = ("headline",) + MASTER_SECTION_KEYS

# Sections that can be exported/imported/cleared one at a time
EXPORTABLE_SECTIONS: Tuple[str, ...] = (
    "contacts",
    "headline",
    "summary",
    "key_achievements",
    "experience",
    "education",
    "awards",
    "skills",
    "sections",
)

# Fallback when neither variant nor master says anything about a section.
# Prose sections are opt-in.
DEFAULT_SECTION_ENABLED: Dict[str, bool] = {
    "headline": True,
    "summary": False,
    "key_achievements": False,
    "experience": True,
    "education": True,
    "awards": True,
    "skills": True,
}

CONTACT_FIELDS: Tuple[str, ...] = ("email", "phone", "website", "linkedin")

EXPERIENCE_SCALAR_FIELDS: Tuple[str, ...] = (
    "company",
    "title",
    "location",
    "date_start",
    "date_end",
)

EXPORT_FORMAT_VERSION = "1.0"


def get_default_master_sections() -> Dict[str, Dict[str, object]]:
    """
    Get the master section table a freshly cleared resume starts with.

    Every section enabled, ordered 1..n in MASTER_SECTION_KEYS order.

    Returns:
        Dict mapping section key to {"enabled": bool, "order": int}
    """
    return {
        key: {"enabled": True, "order": index}
        for index, key in enumerate(MASTER_SECTION_KEYS, start=1)
    }
