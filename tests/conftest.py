"""Shared fixtures: loguru capture and an authored resume document."""

from datetime import date

import pytest
from loguru import logger

TODAY = date(2025, 6, 15)


@pytest.fixture
def log_messages():
    """Capture loguru messages (all levels) emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def today():
    return TODAY


def _bullets(prefix: str, count: int):
    return [
        f"{prefix} bullet {i + 1}: shipped a measurable improvement to a production system "
        f"used by several internal teams, cutting latency and on-call load"
        for i in range(count)
    ]


@pytest.fixture
def resume_document():
    """Authored resume with three real jobs (8 bullets each) and a gap-filler pool."""
    return {
        "name": "Jane Doe",
        "headline": "Backend Engineer",
        "contact": ["jane@example.com", "+1 555 0100", "github.com/janedoe"],
        "summary": "Backend engineer focused on data-heavy services, reliability and R&D tooling.",
        "education": [
            {
                "school": "State University",
                "degree": "B.Sc. Computer Science",
                "start_date": "2012-09",
                "end_date": "2016-06",
            }
        ],
        "work": [
            {
                "company": "Acme Corp",
                "title": "Senior Engineer",
                "start_date": "2021-03",
                "end_date": "present",
                "bullets": _bullets("Acme", 8),
            },
            {
                "company": "Globex",
                "title": "Engineer",
                "start_date": "2018-07",
                "end_date": "2021-02",
                "bullets": _bullets("Globex", 8),
            },
            {
                "company": "Initech",
                "title": "Junior Engineer",
                "start_date": "2016-07",
                "end_date": "2018-06",
                "bullets": _bullets("Initech", 8),
            },
        ],
        "synthesized_jobs": [
            {
                "company": "Freelance",
                "title": "Consultant",
                "bullets": _bullets("Freelance", 5),
            }
        ],
        "projects": [
            {"name": "quire", "description": "Page-budgeted resume typesetting."},
        ],
        "skills": [
            {"name": "Languages", "items": ["Python", "Go", "SQL", "Rust", "Bash"]},
            {"name": "Data", "items": ["PostgreSQL", "Kafka", "Redis", "Spark"]},
            {"name": "Cloud", "items": ["AWS", "Kubernetes", "Terraform"]},
            {"name": "Practices", "items": ["Code review", "Observability", "TDD"]},
        ],
        "certificates": [],
    }
