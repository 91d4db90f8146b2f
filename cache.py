# cache.py


class CacheLine:
    """One way of a set. `tag is None` means the line was never filled."""
    __slots__ = ("tag", "usage_bit")

    def __init__(self):
        self.tag = None
        # True -> eligible for eviction, False -> recently used
        self.usage_bit = True

    @property
    def occupied(self):
        return self.tag is not None

    def __repr__(self):
        return f"CacheLine(tag={self.tag}, usage_bit={self.usage_bit})"


class NRUCache:
    """
    Set-associative cache with a single usage bit per line.
    Lines live in a flat mapping keyed by (set index, way).
    """

    def __init__(self, set_count, associativity):
        self.set_count = set_count
        self.associativity = associativity
        self.lines = {
            (s, w): CacheLine() for s in range(set_count) for w in range(associativity)
        }

    def _ways(self, set_index):
        if not 0 <= set_index < self.set_count:
            raise IndexError(f"set index {set_index} out of range 0..{self.set_count - 1}")
        return [self.lines[set_index, w] for w in range(self.associativity)]

    def lookup(self, set_index, tag):
        """Return the first way holding `tag`, or None."""
        for way, line in enumerate(self._ways(set_index)):
            if line.tag == tag:
                return way
        return None

    def install(self, set_index, tag):
        """
        Place `tag` in the first way whose usage bit is set. When every way was
        recently used, set all usage bits again and take way 0.
        Return the way that received the tag.
        """
        ways = self._ways(set_index)
        for way, line in enumerate(ways):
            if line.usage_bit:
                break
        else:
            for line in ways:
                line.usage_bit = True
            way = 0
        ways[way].tag = tag
        ways[way].usage_bit = False
        return way

    def access(self, set_index, tag):
        """
        Access `tag` in set `set_index`. Return True if hit, False if miss.
        A hit leaves the usage bits untouched; a miss installs the tag.
        """
        if self.lookup(set_index, tag) is not None:
            return True
        self.install(set_index, tag)
        return False

    def tags(self, set_index):
        return [line.tag for line in self._ways(set_index)]

    def stats(self):
        used_lines = sum(line.occupied for line in self.lines.values())
        return {
            "num_sets": self.set_count,
            "associativity": self.associativity,
            "used_lines": used_lines,
        }
