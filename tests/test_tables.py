"""Code tables are append-only: issued Ids embed their integer codes."""

from __future__ import annotations

import pytest

from truestamp_id.tables import ENVIRONMENTS, HASH_FUNCTIONS, REGIONS, CodeTable

# Codes already present in issued Ids. Never edit an existing line.
_ISSUED = {
    REGIONS: [("us-east-1", 1)],
    ENVIRONMENTS: [("production", 1), ("staging", 2), ("development", 3)],
    HASH_FUNCTIONS: [
        ("sha1", 0x11),
        ("sha2-256", 0x12),
        ("sha2-512", 0x13),
        ("sha3-512", 0x14),
        ("sha3-384", 0x15),
        ("sha3-256", 0x16),
    ],
}


@pytest.mark.parametrize("table", list(_ISSUED), ids=lambda t: t.label)
def test_issued_codes_are_stable(table):
    for name, code in _ISSUED[table]:
        assert table.code(name) == code
        assert table.name(code) == name
    assert CodeTable(table.label, _ISSUED[table]).is_prefix_of(table)


def test_lookup_unknown():
    with pytest.raises(KeyError, match="us-nowhere-1"):
        REGIONS.code("us-nowhere-1")
    with pytest.raises(KeyError, match="code: 0"):
        ENVIRONMENTS.name(0)


def test_extend_appends():
    regions = REGIONS.extend_sequential("eu-west-1", "ap-south-1")
    assert regions.names == ("us-east-1", "eu-west-1", "ap-south-1")
    assert regions.code("eu-west-1") == 2
    assert REGIONS.is_prefix_of(regions)
    assert not regions.is_prefix_of(REGIONS)
    assert "eu-west-1" not in REGIONS


def test_extend_refuses_reassignment():
    with pytest.raises(ValueError, match="already has code"):
        REGIONS.extend(("us-east-1", 9))
    with pytest.raises(ValueError, match="already used"):
        ENVIRONMENTS.extend(("qa", 2))


def test_codes_must_be_positive():
    with pytest.raises(ValueError, match="positive"):
        CodeTable("thing", [("zero", 0)])


def test_reordered_table_is_not_a_prefix():
    swapped = CodeTable("environment", [("staging", 1), ("production", 2), ("development", 3)])
    assert not ENVIRONMENTS.is_prefix_of(swapped)


def test_container_protocol():
    assert "sha3-512" in HASH_FUNCTIONS
    assert 0x14 not in HASH_FUNCTIONS
    assert list(ENVIRONMENTS) == ["production", "staging", "development"]
    assert len(ENVIRONMENTS) == 3
