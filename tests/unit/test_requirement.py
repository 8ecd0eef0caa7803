"""Unit tests for experience requirement parsing."""

import math

import pytest

from quire.contexts.timeline.requirement import (
    ExperienceRequirement,
    parse_experience_requirement,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, minimum, maximum",
    [
        ("3-5 years", 3, 5),
        ("5-3 years", 3, 5),
        ("2 to 4 years", 2, 4),
        ("5+ years", 5, math.inf),
        ("5 years or more", 5, math.inf),
        ("3年以上", 3, math.inf),
        ("2 years", 2, 2),
        ("1.5 years", 1.5, 1.5),
        ("5+ years; nonetheless flexible", 5, math.inf),
        ("2-4 years, limited travel", 2, 4),
        ("3 years, none of it in management", 3, 3),
    ],
)
def test_parse_requirement_forms(text, minimum, maximum):
    """Test ranges, open-ended and single-value requirements."""
    requirement = parse_experience_requirement(text)
    assert requirement.minimum == minimum
    assert requirement.maximum == maximum


@pytest.mark.unit
@pytest.mark.parametrize("text", [None, "", "No limit", "without limit", "经验不限", "experience preferred"])
def test_parse_requirement_no_bar(text):
    """Test that empty, no-limit and unrecognized text mean no requirement."""
    requirement = parse_experience_requirement(text)
    assert requirement == ExperienceRequirement()
    assert requirement.minimum == 0
    assert requirement.is_open_ended


@pytest.mark.unit
def test_requirement_str():
    """Test human-readable rendering of parsed requirements."""
    assert str(ExperienceRequirement(5, math.inf)) == "5+ years"
    assert str(ExperienceRequirement(3, 5)) == "3-5 years"
    assert str(ExperienceRequirement(2, 2)) == "2 years"
    assert str(ExperienceRequirement()) == "no limit"
