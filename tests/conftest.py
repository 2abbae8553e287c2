"""Shared sample documents for unit and integration tests."""

import copy

import pytest

from vitae.contexts.documents.resume_data_structure import ResumeMaster
from vitae.contexts.portability.storage import DocumentStore

SAMPLE_MASTER = {
    "id": "master-1",
    "owner": "Alex Morgan",
    "contacts": {
        "email": "alex@example.com",
        "phone": "555-0100",
        "linkedin": "linkedin.com/in/alexmorgan",
    },
    "headline": "Platform engineer who ships reliable systems",
    "summary": [
        "Ten years building distributed systems.",
        "Comfortable owning services end to end.",
    ],
    "key_achievements": [
        "Cut deploy time from 40 to 6 minutes.",
    ],
    "experience": [
        {
            "id": "e1",
            "company": "Northwind",
            "title": "Staff Engineer",
            "location": "Remote",
            "date_start": "2021-07",
            "date_end": None,
            "bullets": ["Led platform team", "Built CI pipeline", "Ran on-call", "Hired four engineers"],
            "tags": ["eng", "leadership"],
        },
        {
            "id": "e2",
            "company": "Contoso",
            "title": "Account Executive",
            "location": "Chicago, IL",
            "date_start": "2018-03",
            "date_end": "2021-06",
            "bullets": ["Closed enterprise deals", "Grew territory 30%"],
            "tags": ["sales"],
        },
        {
            "id": "e3",
            "company": "Fabrikam",
            "title": "Software Engineer",
            "location": "Austin, TX",
            "date_start": "2014",
            "date_end": "2018-02",
            "bullets": ["Wrote billing service", "Migrated to Postgres", "Added tracing"],
            "tags": ["eng"],
        },
    ],
    "education": [
        {"id": "ed1", "degree": "BS Computer Science", "school": "State University", "location": "Austin, TX", "year": "2014"},
    ],
    "awards": [
        {"id": "a1", "title": "Engineer of the Year", "date": "2022"},
    ],
    "skills": {
        "primary": ["Python", "Kubernetes", "PostgreSQL"],
        "secondary": ["Go", "Terraform"],
    },
    "sections": {
        "summary": {"enabled": True, "order": 1},
        "key_achievements": {"enabled": True, "order": 2},
        "experience": {"enabled": True, "order": 3},
        "education": {"enabled": True, "order": 4},
        "awards": {"enabled": True, "order": 5},
        "skills": {"enabled": True, "order": 6},
    },
    "createdAt": "2025-01-01T09:00:00",
    "updatedAt": "2025-01-01T09:00:00",
}


@pytest.fixture
def master_dict():
    """Fresh copy of the sample master in its stored JSON shape."""
    return copy.deepcopy(SAMPLE_MASTER)


@pytest.fixture
def master(master_dict):
    return ResumeMaster.from_dict(master_dict)


@pytest.fixture
def two_job_master():
    """Master with e1 tagged eng and e2 tagged sales."""
    return ResumeMaster.from_dict(
        {
            "id": "m2",
            "owner": "Sam Lee",
            "summary": ["Generalist."],
            "experience": [
                {"id": "e1", "company": "A", "title": "Engineer", "date_start": "2020", "tags": ["eng"]},
                {"id": "e2", "company": "B", "title": "Seller", "date_start": "2018", "tags": ["sales"]},
            ],
        }
    )


@pytest.fixture
def store(tmp_path, master):
    """Document store in a temp directory holding the sample master."""
    document_store = DocumentStore(tmp_path / "store")
    document_store.save_master(master)
    return document_store
