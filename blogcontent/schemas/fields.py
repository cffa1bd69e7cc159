"""
Reusable constrained field types for input schemas.
"""

import re
import uuid
from typing import Annotated

from pydantic import AfterValidator, Field, StringConstraints

# Deliberately loose: one "@", no whitespace, a dot in the domain
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# DynamoDB number range: magnitudes up to 9.99...E+125, down to 1E-130
MAX_STORED_NUMBER = 9.999999999999999e125
MIN_STORED_MAGNITUDE = 1e-130


def normalize_uuid(value: str) -> str:
    """
    Validate and normalize a UUID string.

    Args:
        value: Candidate identifier

    Returns:
        Canonical lowercase hyphenated form

    Raises:
        ValueError: If value is empty or not a UUID
    """
    if not value or not value.strip():
        raise ValueError("identifier must not be empty")
    try:
        return str(uuid.UUID(value.strip()))
    except ValueError:
        raise ValueError(f"identifier must be a UUID, got {value!r}") from None


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError(f"invalid email address: {value!r}")
    return value


def check_score_magnitude(value: float) -> float:
    """Reject non-zero values too small to store (DynamoDB underflow)."""
    if value != 0 and abs(value) < MIN_STORED_MAGNITUDE:
        raise ValueError(
            f"score magnitude must be 0 or at least {MIN_STORED_MAGNITUDE}, got {value!r}"
        )
    return value


EntityId = Annotated[str, AfterValidator(normalize_uuid)]

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

Email = Annotated[str, StringConstraints(max_length=320), AfterValidator(normalize_email)]

Password = Annotated[str, StringConstraints(min_length=8, max_length=128)]

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=300)]

Score = Annotated[
    float,
    Field(allow_inf_nan=False, ge=-MAX_STORED_NUMBER, le=MAX_STORED_NUMBER),
    AfterValidator(check_score_magnitude),
]

Message = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)]
