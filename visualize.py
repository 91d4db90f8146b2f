# visualize.py
import os
import matplotlib.pyplot as plt


def _ensure_dir(outpath):
    dirname = os.path.dirname(outpath)
    if dirname:
        os.makedirs(dirname, exist_ok=True)


def plot_hit_miss_rate(hits, misses, outpath):
    _ensure_dir(outpath)
    plt.figure(figsize=(4,4))
    labels = ['Hit', 'Miss']
    sizes = [hits, misses]
    if hits + misses == 0:
        sizes = [1, 0]
    plt.pie(sizes, labels=labels, autopct='%1.1f%%')
    plt.title("Cache Hit/Miss Rate")
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def plot_misses_per_set(misses_per_set, outpath):
    _ensure_dir(outpath)
    # An even spread means the index bits separate the trace well
    plt.figure(figsize=(8,4))
    plt.bar(range(len(misses_per_set)), misses_per_set)
    plt.title(f"Misses per Set (total: {int(sum(misses_per_set))})")
    plt.xlabel("Set Index")
    plt.ylabel("Misses")
    plt.grid(True, axis='y')
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()


def plot_bit_quality(ratios, index_bits, offset_bits, outpath):
    """Bar per addressable bit (absolute position); chosen index bits in orange."""
    _ensure_dir(outpath)
    positions = [offset_bits + i for i in range(len(ratios))]
    colors = ['tab:orange' if p in index_bits else 'tab:blue' for p in positions]
    plt.figure(figsize=(8,4))
    plt.bar(positions, ratios, color=colors)
    plt.title("Bit Quality (min/max of 0 and 1 counts)")
    plt.xlabel("Address Bit")
    plt.ylabel("Quality")
    plt.ylim(0, 1)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
