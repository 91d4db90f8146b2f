# reftrace.py
import logging

from errors import ConfigurationError, TraceFormatError

HEADER_MARKER = "benchmark"
TERMINATOR_MARKER = "end"


class TraceDocument:
    """Header, raw address lines and terminator of one reference file."""

    def __init__(self, header, entries, terminator):
        self.header = header
        self.entries = list(entries)
        self.terminator = terminator

    def __len__(self):
        return len(self.entries)


def parse_trace(lines, header_marker=HEADER_MARKER, terminator_marker=TERMINATOR_MARKER):
    header = None
    terminator = None
    entries = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if header is None:
            if header_marker in line:
                header = line
            elif line.strip():
                raise TraceFormatError("reference found before the header line", line=lineno)
            continue
        if terminator_marker in line:
            terminator = line
            break
        if line.strip():
            entries.append(line)
    if header is None:
        raise TraceFormatError(f"no header line containing {header_marker!r}")
    if terminator is None:
        raise TraceFormatError(f"no terminator line containing {terminator_marker!r}")
    return TraceDocument(header, entries, terminator)


def load_trace(path, header_marker=HEADER_MARKER, terminator_marker=TERMINATOR_MARKER):
    try:
        with open(path, "r") as f:
            return parse_trace(f, header_marker, terminator_marker)
    except OSError as e:
        raise ConfigurationError(f"cannot open reference file {path}: {e.strerror}") from e


def decode_entry(entry, geometry, index=None):
    """
    Drop the offset bits (the tail of the string) and reverse what is left,
    so position 0 of the result is the least significant addressable bit.
    Surrounding whitespace is ignored.
    """
    entry = entry.strip()
    if len(entry) != geometry.address_bits:
        raise TraceFormatError(
            f"expected {geometry.address_bits} bits, got {len(entry)} in {entry!r}", index=index
        )
    if entry.strip("01"):
        raise TraceFormatError(f"non-binary character in {entry!r}", index=index)
    return entry[:geometry.addressable_bits][::-1]


def decode_trace(entries, geometry):
    for i, entry in enumerate(entries):
        decoded = decode_entry(entry, geometry, index=i)
        logging.debug(f"{entry} -> {decoded}")
        yield decoded
