"""Password strength scoring.

The score is the number of satisfied requirements; the category is looked up
from that count. Callers render one line per entry in ``StrengthReport.explanation``
so the requirement order below is also the display order.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Tuple

from pydantic import BaseModel


class StrengthCategory(IntEnum):
    WEAK = 0
    FAIR = 1
    GOOD = 2
    STRONG = 3

    def __str__(self) -> str:
        return self.name.capitalize()


MIN_LENGTH = 8

REQUIREMENTS: Dict[str, Callable[[str], bool]] = {
    "has_length": lambda s: len(s) >= MIN_LENGTH,
    "has_upper": lambda s: any(c.isupper() for c in s),
    "has_lower": lambda s: any(c.islower() for c in s),
    "has_number": lambda s: any(c.isdigit() for c in s),
    "has_special": lambda s: any(not c.isalnum() for c in s),
}

REQUIREMENT_LABELS = {
    "has_length": f"At least {MIN_LENGTH} characters",
    "has_upper": "Contains an uppercase letter",
    "has_lower": "Contains a lowercase letter",
    "has_number": "Contains a number",
    "has_special": "Contains a special character",
}


def category_for(satisfied: int) -> StrengthCategory:
    if satisfied >= 5:
        return StrengthCategory.STRONG
    if satisfied == 4:
        return StrengthCategory.GOOD
    if satisfied == 3:
        return StrengthCategory.FAIR
    return StrengthCategory.WEAK


class StrengthReport(BaseModel):
    category: StrengthCategory
    checks: Dict[str, bool]

    @property
    def explanation(self) -> List[Tuple[str, bool]]:
        """One (label, passed) line per requirement, in display order."""
        return [(REQUIREMENT_LABELS[name], passed) for name, passed in self.checks.items()]

    @property
    def failed(self) -> List[str]:
        return [name for name, passed in self.checks.items() if not passed]

    @property
    def is_strong(self) -> bool:
        return self.category is StrengthCategory.STRONG


def evaluate(candidate: str) -> StrengthReport:
    checks = {name: check(candidate) for name, check in REQUIREMENTS.items()}
    return StrengthReport(category=category_for(sum(checks.values())), checks=checks)
