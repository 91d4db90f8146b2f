# simulator.py
import os
import json
import logging
import numpy as np
from cache import NRUCache
from indexing import FixedLSBSelector, absolute_index_bits


def _bits_to_int(bits):
    return int(bits, 2) if bits else 0


def split_address(decoded, mask):
    """
    Split a decoded (LSB first) address into (set index, tag).
    Both fields are read from their most significant position down.
    """
    index_bits = []
    tag_bits = []
    for bit, used in zip(reversed(decoded), reversed(mask)):
        (index_bits if used else tag_bits).append(bit)
    return _bits_to_int("".join(index_bits)), _bits_to_int("".join(tag_bits))


class SimulationResult:
    def __init__(self, hits, set_indices):
        self.hits = list(hits)
        self.set_indices = list(set_indices)

    @property
    def miss_count(self):
        return self.hits.count(False)

    @property
    def hit_count(self):
        return self.hits.count(True)

    def __len__(self):
        return len(self.hits)

    def labels(self):
        return ["hit" if hit else "miss" for hit in self.hits]


class Simulator:
    def __init__(self, geometry, selector=None, mask=None):
        self.geometry = geometry
        self.selector = selector or FixedLSBSelector()
        # an explicit mask is used for every run; otherwise each run selects its own
        self.fixed_mask = tuple(mask) if mask is not None else None
        self.cache = None
        self.mask = None
        self.result = None

    def choose_index_bits(self, decoded):
        self.mask = self.selector.select(self.geometry, decoded)
        logging.info(
            f"{self.selector.name} index bits: {absolute_index_bits(self.mask, self.geometry)}"
        )
        return self.mask

    def run(self, decoded):
        """
        Simulate the decoded trace against a freshly initialized cache.
        Index bits are chosen from this trace unless a mask was given.
        """
        decoded = list(decoded)
        if self.fixed_mask is None:
            self.choose_index_bits(decoded)
        else:
            self.mask = self.fixed_mask
        self.cache = NRUCache(self.geometry.set_count, self.geometry.associativity)
        hits = []
        set_indices = []
        for addr in decoded:
            set_index, tag = split_address(addr, self.mask)
            hit = self.cache.access(set_index, tag)
            logging.debug(f"{addr}: set {set_index} tag {tag} {'hit' if hit else 'miss'}")
            hits.append(hit)
            set_indices.append(set_index)
        self.result = SimulationResult(hits, set_indices)
        return self.result

    def _require_result(self):
        if self.result is None:
            raise RuntimeError("no simulation has been run yet, call run() first")
        return self.result

    def misses_per_set(self):
        result = self._require_result()
        misses = [s for s, hit in zip(result.set_indices, result.hits) if not hit]
        return np.bincount(np.array(misses, dtype=np.int64), minlength=self.geometry.set_count)

    def summary(self):
        """Totals of the last run(). Raises RuntimeError before the first run."""
        result = self._require_result()
        total = len(result)
        return {
            "total_references": total,
            "hits": result.hit_count,
            "misses": result.miss_count,
            "miss_rate": result.miss_count / total if total else 0,
            "index_strategy": self.selector.name,
            "index_bits": absolute_index_bits(self.mask, self.geometry),
            "misses_per_set": self.misses_per_set().tolist(),
            "cache": self.cache.stats(),
        }

    def save_results(self, summary, out_cfg):
        results_dir = out_cfg.get("results_dir", "results")
        os.makedirs(results_dir, exist_ok=True)
        path = os.path.join(results_dir, out_cfg.get("summary_json", "summary.json"))
        with open(path, "w") as f:
            json.dump(summary, f, indent=2)
        return path
