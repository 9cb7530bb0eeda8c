"""
View projection: filtered rows, summary totals and the section list.

Projections are computed on demand from a snapshot of the store and the
current filter; nothing here is stored or mutates a record.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, Sequence, Tuple, Union

from roster.domain.models import Record, Salary, parse_number

Number = Union[int, float]


@dataclass(frozen=True)
class Summary:
    count: int = 0
    total_salary: Number = 0


@dataclass(frozen=True)
class FilterState:
    """Search text and section selection chosen by the user."""

    search_text: str = ""
    section: str = ""

    def reset(self) -> "FilterState":
        return FilterState()

    def reconcile(self, sections: Sequence[str]) -> "FilterState":
        """Keep the section selection only while it is still on offer."""
        if self.section and self.section not in sections:
            return replace(self, section="")
        return self


@dataclass(frozen=True)
class Projection:
    rows: Tuple[Record, ...]
    summary: Summary
    distinct_sections: Tuple[str, ...]
    filters: FilterState


def salary_amount(value: Salary) -> Number:
    """Salary as a number for totals; absent or unusable values count as 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    parsed = parse_number(value)
    return 0 if parsed is None else parsed


def matches(record: Record, search_text: str, section: str) -> bool:
    needle = search_text.strip().lower()
    text_ok = not needle or needle in record.name.lower() or needle in record.contact.lower()
    section_ok = not section or record.section == section
    return text_ok and section_ok


def distinct_sections(records: Iterable[Record]) -> Tuple[str, ...]:
    return tuple(sorted({r.section for r in records if r.section}))


def project(records: Sequence[Record], search_text: str = "", section_filter: str = "") -> Projection:
    """
    Derive the display view for `records` under the given filter.

    Rows keep the collection's insertion order. `distinct_sections` covers the
    whole collection, not just the matching rows, and the returned filter
    state drops a section selection that no longer exists.
    """
    rows = tuple(r for r in records if matches(r, search_text, section_filter))
    summary = Summary(count=len(rows), total_salary=sum(salary_amount(r.salary) for r in rows))
    sections = distinct_sections(records)
    filters = FilterState(search_text, section_filter).reconcile(sections)
    return Projection(rows=rows, summary=summary, distinct_sections=sections, filters=filters)


__all__ = [
    "FilterState",
    "Projection",
    "Summary",
    "distinct_sections",
    "matches",
    "project",
    "salary_amount",
]
