"""
Student roster - a small record manager for student records.

This package keeps a collection of student records (name, contact, section,
salary, joining date) and provides:

- Sequential identifiers (`ST-001`, `ST-002`, ...)
- First-failure validation with user-facing messages
- Write-through persistence to a durable key-value store
- Filtered, summarised views for display

Presentation layers (the bundled CLI or anything else) drive it through the
`RecordStore` commands and the `project` function.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from roster.config import Settings, get_settings
from roster.domain import (
    IdentifierGenerator,
    Record,
    Submission,
    SubmitOutcome,
    SubmitStatus,
    ValidationResult,
    validate,
)
from roster.infrastructure import PersistenceAdapter, StorageError, open_key_value_store
from roster.projector import FilterState, Projection, Summary, project
from roster.store import RecordStore
from roster.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "IdentifierGenerator",
    "Record",
    "Submission",
    "SubmitOutcome",
    "SubmitStatus",
    "ValidationResult",
    "validate",
    # Storage
    "PersistenceAdapter",
    "StorageError",
    "open_key_value_store",
    # Store and views
    "RecordStore",
    "FilterState",
    "Projection",
    "Summary",
    "project",
    # Logging
    "configure_logging",
    "get_logger",
]
