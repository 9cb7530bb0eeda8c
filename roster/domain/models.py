"""
Domain models for the student roster.

`Record` is the persisted shape of one student (field names on the wire follow
the legacy storage layout, e.g. `joinDate`). `Submission` carries raw form
values before validation, and `ValidationResult` / `SubmitOutcome` report the
result of a submission as data instead of exceptions.
"""
from __future__ import annotations

import enum
import json
import math
from dataclasses import dataclass
from typing import Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator

Salary = Union[int, float, str, None]


class Record(BaseModel):
    """
    One student's persisted attribute set.

    Instances are frozen; the record store replaces them wholesale on edit.
    Stored data is not re-validated against the submission rules, so the
    field types stay permissive enough to carry legacy values.
    """

    id: str = Field(..., min_length=1, description="Unique, immutable identifier.")
    name: str = Field("", description="Student name.")
    contact: str = Field("", description="11 digit mobile number.")
    section: str = Field("", description="Category label.")
    salary: Salary = Field(None, description="Non-negative amount, stored as a number.")
    join_date: str = Field(
        "",
        alias="joinDate",
        validation_alias=AliasChoices("joinDate", "joiningDate", "join_date"),
        description="Calendar date string.",
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
        "coerce_numbers_to_str": True,
    }

    @field_validator("name", "contact", "section", "join_date", mode="before")
    @classmethod
    def _legacy_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return value
        return json.dumps(value, ensure_ascii=False)

    @field_validator("salary", mode="before")
    @classmethod
    def _legacy_salary(cls, value: object) -> object:
        # Unusable amounts are kept as absent; totals already count them as 0.
        if isinstance(value, (int, float, str)) or value is None:
            return value
        return None

    def form_values(self) -> Dict[str, str]:
        """Current values as form text, for pre-filling an edit form."""
        return {
            "name": self.name,
            "contact": self.contact,
            "section": self.section,
            "salary": "" if self.salary is None else str(self.salary),
            "join_date": self.join_date,
        }

    def to_storage(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True)


class Submission(BaseModel):
    """Raw values entered for a create or update, all as text."""

    name: str = ""
    contact: str = ""
    section: str = ""
    salary: str = ""
    join_date: str = ""

    model_config = {"coerce_numbers_to_str": True}

    def normalized(self) -> "Submission":
        """Copy with surrounding whitespace removed from every field."""
        return Submission(
            name=self.name.strip(),
            contact=self.contact.strip(),
            section=self.section.strip(),
            salary=self.salary.strip(),
            join_date=self.join_date.strip(),
        )


def parse_number(text: str) -> Optional[Union[int, float]]:
    """
    Parse salary text into a finite number, int when integral.

    Returns None for blank, non-numeric, NaN or infinite input.
    """
    text = text.strip()
    if not text or not text.isascii() or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


@dataclass(frozen=True)
class ValidationResult:
    """Either valid (no reason) or invalid with the first violated rule's message."""

    reason: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(reason=reason)


class SubmitStatus(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    REJECTED = "rejected"
    MISSING = "missing"


@dataclass(frozen=True)
class SubmitOutcome:
    """Result of `RecordStore.submit`."""

    status: SubmitStatus
    record: Optional[Record] = None
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status in (SubmitStatus.CREATED, SubmitStatus.UPDATED)


__all__ = [
    "Record",
    "Salary",
    "Submission",
    "SubmitOutcome",
    "SubmitStatus",
    "ValidationResult",
    "parse_number",
]
