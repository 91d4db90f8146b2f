# geometry.py
import collections
import logging

from errors import ConfigurationError, GeometryError

GEOMETRY_FIELDS = ("address_bits", "block_size", "set_count", "associativity")


def _log2(value, name):
    if value <= 0 or value & (value - 1):
        raise GeometryError(f"{name} must be a power of two, got {value}")
    return value.bit_length() - 1


class CacheGeometry(collections.namedtuple("CacheGeometry", GEOMETRY_FIELDS)):
    """
    Immutable cache shape.
    The address is split (MSB -> LSB) into tag | index | offset bits; everything
    above the offset is "addressable" and is a candidate for index or tag use.
    """
    __slots__ = ()

    def __new__(cls, address_bits, block_size, set_count, associativity):
        self = super().__new__(cls, address_bits, block_size, set_count, associativity)
        if associativity < 1:
            raise GeometryError(f"associativity must be at least 1, got {associativity}")
        needed = self.offset_bits + self.index_bits
        if address_bits < needed:
            raise GeometryError(
                f"{address_bits} address bits cannot hold {self.offset_bits} offset "
                f"and {self.index_bits} index bits"
            )
        return self

    @property
    def offset_bits(self):
        return _log2(self.block_size, "block size")

    @property
    def index_bits(self):
        return _log2(self.set_count, "set count")

    @property
    def addressable_bits(self):
        return self.address_bits - self.offset_bits

    @property
    def tag_bits(self):
        return self.addressable_bits - self.index_bits


def parse_geometry(text):
    """
    Parse four whitespace separated label/value pairs, e.g.

        Address_bits: 8
        Block_size: 4
        Cache_sets: 4
        Associativity: 1

    Labels are not checked; the order of appearance gives each value its meaning.
    """
    tokens = text.split()
    if len(tokens) % 2:
        raise ConfigurationError("geometry must be label/value pairs")
    values = []
    for label, raw in zip(tokens[0::2], tokens[1::2]):
        try:
            value = int(raw)
        except ValueError:
            raise ConfigurationError(f"{label} {raw!r} is not an integer") from None
        if value < 0:
            raise ConfigurationError(f"{label} must be non-negative, got {value}")
        values.append(value)
    if len(values) != len(GEOMETRY_FIELDS):
        raise ConfigurationError(
            f"expected {len(GEOMETRY_FIELDS)} geometry values, got {len(values)}"
        )
    geometry = CacheGeometry(*values)
    logging.debug(
        f"offset bits: {geometry.offset_bits}, index bits: {geometry.index_bits}, "
        f"addressable bits: {geometry.addressable_bits}"
    )
    return geometry


def load_geometry(path):
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as e:
        raise ConfigurationError(f"cannot open cache file {path}: {e.strerror}") from e
    return parse_geometry(text)
