"""
Job application and cover letter tracking.

Both entities are independent of the master resume. A JobApplication refers to
the variant and cover letter it used by id only; those references may dangle
after a delete and lookups then return None.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, TypeVar

from vitae.contexts.documents.exceptions import InvalidDocumentError
from vitae.contexts.documents.logger import log_dangling_reference
from vitae.utils.timestamp import now_exact, today

JOB_STATUSES = ("prospect", "applied", "interview", "offer", "rejected", "closed")

TEMPLATE_VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")

SAMPLE_VALUES = {
    "company": "Acme Corporation",
    "role": "Senior Software Engineer",
    "field": "software development",
    "your_name": "Alex Morgan",
    "reason_for_interest": (
        "I am excited about the opportunity to work on innovative projects "
        "that will have a meaningful impact on the company's growth."
    ),
    "key_achievement_1": "Led cross-functional teams to deliver high-impact solutions",
    "key_achievement_2": "Improved system performance by 40% through optimization",
    "key_achievement_3": "Mentored junior developers and established best practices",
    "company_reason": "of its commitment to innovation and excellence in the industry",
    "relevant_skills": "technical leadership, solution architecture, and team collaboration",
    "specific_goal": "continued innovation and market leadership",
}


@dataclass
class CoverLetter:
    """Cover letter body with {{variable}} placeholders."""

    id: str
    title: str = ""
    body: str = ""
    variables: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, letter_id: str, title: str, body: str) -> "CoverLetter":
        timestamp = now_exact()
        return cls(
            id=letter_id,
            title=title,
            body=body,
            variables=extract_variables(body),
            created_at=timestamp,
            updated_at=timestamp,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoverLetter":
        if not isinstance(data, dict) or not data.get("id"):
            raise InvalidDocumentError("Cover letter must be an object with an id", document_kind="CoverLetter")
        body = data.get("body") or ""
        variables = data.get("variables")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            body=body,
            variables=[str(v) for v in variables] if variables is not None else extract_variables(body),
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "variables": list(self.variables),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class JobApplication:
    """
    One tracked job application.

    Attributes:
        status: One of JOB_STATUSES
        variant_id: Weak reference to the Variant sent with the application
        cover_letter_id: Weak reference to the CoverLetter sent
        applied_on: Date applied (YYYY-MM-DD), used for chronological tracking
    """

    id: str
    company: str
    role: str
    status: str = "prospect"
    location: Optional[str] = None
    variant_id: Optional[str] = None
    cover_letter_id: Optional[str] = None
    applied_on: str = ""
    notes: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, job_id: str, company: str, role: str, **kwargs) -> "JobApplication":
        timestamp = now_exact()
        kwargs.setdefault("applied_on", today())
        return cls(id=job_id, company=company, role=role, created_at=timestamp, updated_at=timestamp, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobApplication":
        if not isinstance(data, dict) or not data.get("id"):
            raise InvalidDocumentError("Job application must be an object with an id", document_kind="JobApplication")
        status = data.get("status") or "prospect"
        if status not in JOB_STATUSES:
            raise InvalidDocumentError(
                f"Unknown status '{status}'", document_kind="JobApplication", field_name="status"
            )
        return cls(
            id=str(data["id"]),
            company=data.get("company") or "",
            role=data.get("role") or "",
            status=status,
            location=data.get("location") or None,
            variant_id=data.get("variantId") or None,
            cover_letter_id=data.get("coverLetterId") or None,
            applied_on=data.get("appliedOn") or "",
            notes=data.get("notes") or None,
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "company": self.company,
            "role": self.role,
            "status": self.status,
            "appliedOn": self.applied_on,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        optional = {
            "location": self.location,
            "variantId": self.variant_id,
            "coverLetterId": self.cover_letter_id,
            "notes": self.notes,
        }
        result.update({key: value for key, value in optional.items() if value is not None})
        return result

    def find_variant(self, variants: Iterable[Any]):
        """Variant this application used, or None if unset or deleted."""
        return _find_reference(self, variants, self.variant_id, "variant")

    def find_cover_letter(self, cover_letters: Iterable[CoverLetter]) -> Optional[CoverLetter]:
        """Cover letter this application used, or None if unset or deleted."""
        return _find_reference(self, cover_letters, self.cover_letter_id, "cover letter")


T = TypeVar("T")


def find_by_id(items: Iterable[T], item_id: Optional[str]) -> Optional[T]:
    """First item whose `id` matches, or None."""
    if not item_id:
        return None
    return next((item for item in items if getattr(item, "id", None) == item_id), None)


def _find_reference(job: JobApplication, items: Iterable[T], ref_id: Optional[str], ref_kind: str) -> Optional[T]:
    found = find_by_id(items, ref_id)
    if found is None and ref_id:
        log_dangling_reference("JobApplication", job.id, ref_kind, ref_id)
    return found


# =============================================================================
# COVER LETTER TEXT HELPERS
# =============================================================================


def extract_variables(body: str) -> List[str]:
    """
    List distinct {{variable}} names in order of first appearance.

    Examples:
        extract_variables("Dear {{ company }} team, ... {{role}} ... {{company}}")
        # ["company", "role"]
    """
    seen: List[str] = []
    for match in TEMPLATE_VARIABLE_PATTERN.findall(body or ""):
        name = match.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def get_sample_value(variable: str) -> str:
    """Sample text for a variable, or "[variable]" when none is known."""
    return SAMPLE_VALUES.get(variable, f"[{variable}]")


def fill_variables(body: str, values: Optional[Dict[str, str]] = None, use_samples: bool = False) -> str:
    """
    Substitute {{variable}} placeholders.

    Variables without a value are left in place unless use_samples is set, in
    which case they receive get_sample_value().
    """
    values = values or {}

    def substitute(match: re.Match) -> str:
        name = match.group(1).strip()
        if name in values:
            return str(values[name])
        if use_samples:
            return get_sample_value(name)
        return match.group(0)

    return TEMPLATE_VARIABLE_PATTERN.sub(substitute, body or "")


def get_preview_text(body: str, max_length: int = 150) -> str:
    """Body with placeholders masked as [variable], truncated with '...'."""
    cleaned = TEMPLATE_VARIABLE_PATTERN.sub("[variable]", body or "")
    return cleaned[:max_length] + "..." if len(cleaned) > max_length else cleaned
