import pytest

from errors import ConfigurationError
from geometry import CacheGeometry
from indexing import (
    FixedLSBSelector,
    QualityGreedySelector,
    absolute_index_bits,
    bit_agreement,
    bit_matrix,
    bit_quality,
    index_positions,
    make_selector,
    quality_ratio,
)

# positions 0 and 1 always equal, position 2 independent of both, 3..5 constant
CORRELATED = ["000000", "001000", "110000", "111000"]


def test_fixed_lsb_mask(geometry):
    mask = FixedLSBSelector().select(geometry, CORRELATED)
    assert mask == (True, True, False, False, False, False)
    assert absolute_index_bits(mask, geometry) == [2, 3]


def test_fixed_lsb_ignores_trace(geometry):
    selector = FixedLSBSelector()
    assert selector.select(geometry, []) == selector.select(geometry, ["111111"] * 5)


def test_bit_quality_is_per_position():
    bits = bit_matrix(["100", "110"], 3)
    assert bit_quality(bits) == [(0, 2), (1, 1), (0, 2)]


def test_bit_agreement_symmetric():
    table = bit_agreement(bit_matrix(CORRELATED, 6))
    assert table[0, 1] == (0, 4)
    assert table[0, 2] == (2, 2)
    assert table[2, 0] == table[0, 2]
    assert (0, 0) not in table


def test_quality_ratio():
    assert quality_ratio((2, 2)) == 1.0
    assert quality_ratio((1, 4)) == 0.25
    assert quality_ratio((0, 0)) == 0.0


def test_quality_skips_correlated_bit(geometry):
    mask = QualityGreedySelector().select(geometry, CORRELATED)
    assert index_positions(mask) == [0, 2]


def test_quality_picks_balanced_bit():
    g = CacheGeometry(8, 4, 2, 1)
    mask = QualityGreedySelector().select(g, ["000100", "000000", "000100", "000000"])
    assert index_positions(mask) == [3]
    assert absolute_index_bits(mask, g) == [5]


def test_quality_is_deterministic(geometry):
    trace = ["101101", "011001", "110100", "000111", "101010", "010101"]
    first = QualityGreedySelector().select(geometry, trace)
    assert QualityGreedySelector().select(geometry, trace) == first
    assert sum(first) == geometry.index_bits


def test_quality_on_empty_trace(geometry):
    mask = QualityGreedySelector().select(geometry, [])
    assert len(mask) == geometry.addressable_bits
    assert index_positions(mask) == [0, 1]


def test_no_index_bits():
    g = CacheGeometry(8, 4, 1, 4)
    assert not any(QualityGreedySelector().select(g, CORRELATED))
    assert not any(FixedLSBSelector().select(g, CORRELATED))


def test_make_selector():
    assert isinstance(make_selector("lsb"), FixedLSBSelector)
    assert isinstance(make_selector("quality"), QualityGreedySelector)
    with pytest.raises(ConfigurationError):
        make_selector("random")
