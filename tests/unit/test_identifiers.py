from __future__ import annotations

import pytest

from roster.domain.identifiers import IdentifierGenerator


def test_empty_collection_yields_first_identifier():
    assert IdentifierGenerator("P-").next([]) == "P-001"


def test_next_follows_highest_suffix():
    gen = IdentifierGenerator("P-")
    assert gen.next(["P-001", "P-002"]) == "P-003"
    assert gen.next(["P-007", "P-002"]) == "P-008"


def test_gaps_are_not_refilled():
    # P-002 was deleted; numbering continues from the maximum.
    assert IdentifierGenerator("P-").next(["P-001", "P-003"]) == "P-004"


def test_unrecognised_identifiers_are_ignored():
    gen = IdentifierGenerator("ST-")
    assert gen.next(["legacy", "1", "ST-abc", "XST-005"]) == "ST-001"
    assert gen.next(["legacy", "ST-004"]) == "ST-005"


def test_width_grows_past_padding():
    gen = IdentifierGenerator("ST-", width=3)
    assert gen.next(["ST-999"]) == "ST-1000"
    assert gen.next(["ST-1000", "ST-050"]) == "ST-1001"


def test_custom_width():
    assert IdentifierGenerator("S", width=5).next(["S00009"]) == "S00010"


def test_is_deterministic():
    gen = IdentifierGenerator()
    existing = ["ST-002", "ST-001"]
    assert gen.next(existing) == gen.next(existing) == "ST-003"


def test_parse():
    gen = IdentifierGenerator("ST-")
    assert gen.parse("ST-042") == 42
    assert gen.parse("ST-") is None
    assert gen.parse("st-001") is None


def test_invalid_width_rejected():
    with pytest.raises(ValueError):
        IdentifierGenerator(width=0)


def test_sequence_of_creations_is_pairwise_distinct():
    gen = IdentifierGenerator()
    ids: list[str] = []
    for _ in range(50):
        ids.append(gen.next(ids))
    assert len(set(ids)) == len(ids)
