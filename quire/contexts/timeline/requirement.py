"""Experience requirement parsing ("3-5 years", "5+ years", "3年以上", "no limit")."""

import math
import re
from dataclasses import dataclass
from typing import Optional

# Phrases meaning the posting sets no experience bar
NO_LIMIT_PATTERN = re.compile(r"\b(?:no|without)\s+limit\b|不限")

RANGE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:-|~|–|to|至)\s*(\d+(?:\.\d+)?)")
PLUS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:\+|年以上|years?\s+or\s+more|or\s+more)")
SINGLE_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class ExperienceRequirement:
    """Required years of experience. `maximum` is math.inf when open-ended."""

    minimum: float = 0.0
    maximum: float = math.inf

    @property
    def is_open_ended(self) -> bool:
        return math.isinf(self.maximum)

    def __str__(self) -> str:
        if self.is_open_ended:
            return f"{self.minimum:g}+ years" if self.minimum else "no limit"
        if self.minimum == self.maximum:
            return f"{self.minimum:g} years"
        return f"{self.minimum:g}-{self.maximum:g} years"


def _number(text: str) -> float:
    value = float(text)
    return int(value) if value.is_integer() else value


def parse_experience_requirement(requirement: Optional[str]) -> ExperienceRequirement:
    """
    Parse a free-text experience requirement into year bounds.

    Never raises: anything unrecognized means no requirement.

    Examples:
        parse_experience_requirement("3-5 years")  # (3, 5)
        parse_experience_requirement("5+ years")   # (5, inf)
        parse_experience_requirement("2 years")    # (2, 2)
        parse_experience_requirement("经验不限")    # (0, inf)
    """
    if not requirement:
        return ExperienceRequirement()

    text = str(requirement).strip().lower()
    if NO_LIMIT_PATTERN.search(text):
        return ExperienceRequirement()

    match = RANGE_PATTERN.search(text)
    if match:
        low, high = sorted((_number(match.group(1)), _number(match.group(2))))
        return ExperienceRequirement(low, high)

    match = PLUS_PATTERN.search(text)
    if match:
        return ExperienceRequirement(_number(match.group(1)), math.inf)

    match = SINGLE_PATTERN.search(text)
    if match:
        value = _number(match.group(1))
        return ExperienceRequirement(value, value)

    return ExperienceRequirement()
