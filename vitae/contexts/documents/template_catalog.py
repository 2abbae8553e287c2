"""
Resume Templates

Templates are presentation-only: they choose layout, font size, spacing and
color scheme, and optionally which sections a renderer shows. They never
change which content a variant selects.

Built-in templates ship as a YAML catalog (templates.yaml next to this module)
and are loaded with OmegaConf. Point VITAE_TEMPLATES_PATH at another file to
use a different catalog.

Examples:
    >>> templates = load_template_catalog()
    >>> [t.id for t in templates]
    ['template-sleek-compact', 'template-modern-wide', 'template-classic']
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from vitae.contexts.documents.exceptions import InvalidDocumentError

load_dotenv()
DEFAULT_TEMPLATES_PATH = Path(__file__).parent / "templates.yaml"
TEMPLATES_PATH = Path(os.getenv("VITAE_TEMPLATES_PATH", str(DEFAULT_TEMPLATES_PATH)))

# Recognised values per style key. Keys outside this table are kept untouched.
STYLE_OPTIONS: Dict[str, tuple] = {
    "layout": ("single-column", "two-column", "three-column"),
    "fontSize": ("small", "medium", "large"),
    "spacing": ("compact", "comfortable", "traditional"),
    "colors": (
        "professional-blue",
        "modern-gray",
        "classic-black",
        "creative-purple",
        "elegant-green",
        "warm-orange",
    ),
}

DEFAULT_STYLES = {
    "layout": "single-column",
    "fontSize": "medium",
    "spacing": "comfortable",
    "colors": "professional-blue",
}


@dataclass
class SectionConfig:
    """Renderer hint: use the variant's sections, or a fixed set."""

    use_variant_sections: bool = True
    enabled_sections: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SectionConfig":
        return cls(
            use_variant_sections=bool(data.get("useVariantSections", True)),
            enabled_sections=[str(key) for key in data.get("enabledSections") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "useVariantSections": self.use_variant_sections,
            "enabledSections": list(self.enabled_sections),
        }


@dataclass
class Template:
    """Visual template a variant may point at via template_id."""

    id: str
    name: str = ""
    description: str = ""
    thumbnail: Optional[str] = None
    styles: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_STYLES))
    section_config: Optional[SectionConfig] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Template":
        if not isinstance(data, dict) or not data.get("id"):
            raise InvalidDocumentError("Template must be an object with an id", document_kind="Template")
        section_config = data.get("sectionConfig")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            description=data.get("description") or "",
            thumbnail=data.get("thumbnail") or None,
            styles={**DEFAULT_STYLES, **(data.get("styles") or {})},
            section_config=SectionConfig.from_dict(section_config) if section_config else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "styles": dict(self.styles),
        }
        if self.thumbnail is not None:
            result["thumbnail"] = self.thumbnail
        if self.section_config is not None:
            result["sectionConfig"] = self.section_config.to_dict()
        return result

    def shows_section(self, section: str) -> bool:
        """Whether a renderer using this template should draw an (already enabled) section."""
        if self.section_config is None or self.section_config.use_variant_sections:
            return True
        return section in self.section_config.enabled_sections


def validate_template_styles(styles: Dict[str, Any]) -> List[str]:
    """
    Check recognised style keys against their allowed values.

    Returns:
        List of human-readable problems (empty when valid)
    """
    errors = []
    for key, allowed in STYLE_OPTIONS.items():
        if key in styles and styles[key] not in allowed:
            errors.append(f"Invalid {key} '{styles[key]}'. Allowed: {', '.join(allowed)}")
    return errors


def load_template_catalog(config_path: Path = None) -> List[Template]:
    """
    Load built-in templates from the YAML catalog.

    Args:
        config_path: Optional path to a catalog file (defaults to TEMPLATES_PATH)

    Returns:
        Templates in catalog order

    Raises:
        InvalidDocumentError: If a catalog entry uses a style value outside STYLE_OPTIONS
    """
    if config_path is None:
        config_path = TEMPLATES_PATH

    catalog = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    templates = []
    for entry in catalog.get("templates", []):
        template = Template.from_dict(entry)
        problems = validate_template_styles(template.styles)
        if problems:
            raise InvalidDocumentError(
                f"Template '{template.id}' has invalid styles: {'; '.join(problems)}",
                document_kind="Template",
                field_name="styles",
            )
        templates.append(template)

    return templates


def find_template(templates: List[Template], template_id: Optional[str]) -> Optional[Template]:
    """Weak lookup: a missing or dangling template_id returns None."""
    if not template_id:
        return None
    return next((template for template in templates if template.id == template_id), None)
