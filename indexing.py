# indexing.py
import logging
import numpy as np

from errors import ConfigurationError


def bit_matrix(decoded, width):
    """Decoded trace as an (entries x width) 0/1 integer array."""
    rows = [[c == "1" for c in s] for s in decoded]
    return np.array(rows, dtype=np.int64).reshape(len(rows), width)


def bit_quality(bits):
    """
    (min, max) of the zero and one counts of every bit position.
    min/max close to 1 means the bit splits the trace evenly.
    """
    ones = bits.sum(axis=0)
    zeros = bits.shape[0] - ones
    return [(int(min(z, o)), int(max(z, o))) for z, o in zip(zeros, ones)]


def bit_agreement(bits):
    """
    Symmetric table {(i, j): (min(E, D), max(E, D))} where E counts entries whose
    bits i and j are equal and D counts entries where they differ.
    """
    n, width = bits.shape
    equal = bits.T @ bits + (1 - bits).T @ (1 - bits)
    table = {}
    for i in range(width):
        for j in range(i + 1, width):
            e = int(equal[i, j])
            d = n - e
            table[i, j] = table[j, i] = (min(e, d), max(e, d))
    return table


def quality_ratio(quality):
    low, high = quality
    return low / high if high else 0.0


def index_positions(mask):
    return [i for i, used in enumerate(mask) if used]


def absolute_index_bits(mask, geometry):
    """Index bit positions counted from the least significant bit of the full address."""
    return [geometry.offset_bits + i for i in index_positions(mask)]


class IndexSelector:
    """Chooses which addressable bit positions form the set index."""
    name = None

    def select(self, geometry, decoded):
        """Return a tuple of `geometry.addressable_bits` flags, `geometry.index_bits` of them true."""
        raise NotImplementedError


class FixedLSBSelector(IndexSelector):
    name = "lsb"

    def select(self, geometry, decoded=None):
        return tuple(i < geometry.index_bits for i in range(geometry.addressable_bits))


class QualityGreedySelector(IndexSelector):
    """
    Greedy pick of the most evenly splitting bits.
    After each pick the score of every remaining bit is multiplied, component by
    component, by its agreement with the picked bit, so bits that move together
    with an already chosen one fall behind.
    """
    name = "quality"

    def select(self, geometry, decoded):
        bits = bit_matrix(decoded, geometry.addressable_bits)
        quality = bit_quality(bits)
        agreement = bit_agreement(bits)
        remaining = list(range(geometry.addressable_bits))
        chosen = set()
        for _ in range(geometry.index_bits):
            # max() keeps the first of equal scores, i.e. the lowest position
            best = max(remaining, key=lambda k: quality_ratio(quality[k]))
            remaining.remove(best)
            chosen.add(best)
            logging.debug(f"index bit {best} chosen with quality {quality[best]}")
            for k in remaining:
                low, high = agreement[best, k]
                quality[k] = (quality[k][0] * low, quality[k][1] * high)
        return tuple(i in chosen for i in range(geometry.addressable_bits))


SELECTORS = {cls.name: cls for cls in (FixedLSBSelector, QualityGreedySelector)}


def make_selector(name):
    try:
        return SELECTORS[name]()
    except KeyError:
        raise ConfigurationError(
            f"unknown index strategy {name!r}, expected one of {sorted(SELECTORS)}"
        ) from None
