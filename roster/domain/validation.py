"""
Submission validation.

Rules are checked in a fixed order and the first failure wins, so the user
always sees exactly one message describing the earliest problem.
"""
from __future__ import annotations

import re
from typing import Callable, Optional, Sequence

from roster.domain.models import Submission, ValidationResult, parse_number

NAME_MIN_LENGTH = 2
CONTACT_DIGITS = 11

NAME_TOO_SHORT = f"Name must be at least {NAME_MIN_LENGTH} characters."
NAME_INVALID = "Name may contain only letters and spaces."
CONTACT_INVALID = f"Contact must be exactly {CONTACT_DIGITS} digits."
SECTION_REQUIRED = "Section must not be empty."
SALARY_REQUIRED = "Salary is required."
SALARY_INVALID = "Salary must be a number greater than or equal to 0."
JOIN_DATE_REQUIRED = "Joining date is required."

_CONTACT_RE = re.compile(r"[0-9]{%d}" % CONTACT_DIGITS)

Rule = Callable[[Submission], Optional[str]]


def _check_name(candidate: Submission) -> Optional[str]:
    name = candidate.name.strip()
    if len(name) < NAME_MIN_LENGTH:
        return NAME_TOO_SHORT
    # str.isalpha covers every Unicode letter category, not just ASCII.
    if not all(ch.isalpha() or ch == " " for ch in name):
        return NAME_INVALID
    return None


def _check_contact(candidate: Submission) -> Optional[str]:
    if _CONTACT_RE.fullmatch(candidate.contact) is None:
        return CONTACT_INVALID
    return None


def _check_section(candidate: Submission) -> Optional[str]:
    if not candidate.section.strip():
        return SECTION_REQUIRED
    return None


def _check_salary(candidate: Submission) -> Optional[str]:
    if not candidate.salary.strip():
        return SALARY_REQUIRED
    value = parse_number(candidate.salary)
    if value is None or value < 0:
        return SALARY_INVALID
    return None


def _check_join_date(candidate: Submission) -> Optional[str]:
    if not candidate.join_date.strip():
        return JOIN_DATE_REQUIRED
    return None


RULES: Sequence[Rule] = (
    _check_name,
    _check_contact,
    _check_section,
    _check_salary,
    _check_join_date,
)


def validate(candidate: Submission) -> ValidationResult:
    """Return the first violated rule as an invalid result, or a valid one."""
    for rule in RULES:
        reason = rule(candidate)
        if reason is not None:
            return ValidationResult.invalid(reason)
    return ValidationResult.ok()


__all__ = [
    "CONTACT_INVALID",
    "JOIN_DATE_REQUIRED",
    "NAME_INVALID",
    "NAME_TOO_SHORT",
    "RULES",
    "SALARY_INVALID",
    "SALARY_REQUIRED",
    "SECTION_REQUIRED",
    "validate",
]
