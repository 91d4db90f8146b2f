# report.py
from errors import ConfigurationError
from indexing import absolute_index_bits


def format_report(geometry, mask, trace, result):
    lines = [
        f"Address bits: {geometry.address_bits}",
        f"Block size: {geometry.block_size}",
        f"Cache sets: {geometry.set_count}",
        f"Associativity: {geometry.associativity}",
        "",
        f"Offset bit count: {geometry.offset_bits}",
        f"Indexing bit count: {geometry.index_bits}",
        "Indexing bits:" + "".join(f" {p}" for p in absolute_index_bits(mask, geometry)),
        "",
        trace.header,
    ]
    lines += [f"{entry} {label}" for entry, label in zip(trace.entries, result.labels())]
    lines += [
        trace.terminator,
        "",
        f"Total cache miss count: {result.miss_count}",
    ]
    return "\n".join(lines) + "\n"


def write_report(path, text):
    try:
        with open(path, "w") as f:
            f.write(text)
    except OSError as e:
        raise ConfigurationError(f"cannot create output file {path}: {e.strerror}") from e
    return path
