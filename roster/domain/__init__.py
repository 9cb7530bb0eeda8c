"""
Domain package for the student roster.

Exports the record models, identifier generation and validation rules.
Keep this package free of storage and presentation concerns.
"""

from roster.domain.identifiers import IdentifierGenerator
from roster.domain.models import (
    Record,
    Submission,
    SubmitOutcome,
    SubmitStatus,
    ValidationResult,
)
from roster.domain.validation import validate

__all__ = [
    "IdentifierGenerator",
    "Record",
    "Submission",
    "SubmitOutcome",
    "SubmitStatus",
    "ValidationResult",
    "validate",
]
