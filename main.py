# main.py
import argparse
import json
import logging
import os
import sys

from errors import CacheSimError, ConfigurationError
from geometry import load_geometry
from indexing import bit_matrix, bit_quality, make_selector, quality_ratio
from reftrace import decode_trace, load_trace
from report import format_report, write_report
from simulator import Simulator
from visualize import plot_bit_quality, plot_hit_miss_rate, plot_misses_per_set

DEFAULT_CONFIG = {
    "simulation": {
        "index_strategy": "lsb",
        "header_marker": "benchmark",
        "terminator_marker": "end",
    },
    "output": {
        "results_dir": "results",
        "summary_json": "summary.json",
        "plots": False,
        "hitmiss_plot": "results/hit_miss_rate.png",
        "set_plot": "results/misses_per_set.png",
        "quality_plot": "results/bit_quality.png",
    },
    "logging": {
        "level": "WARNING",
    },
}


def load_config(path="config.json", required=False):
    """Read the JSON config on top of DEFAULT_CONFIG. A missing optional file gives the defaults."""
    cfg = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    if not os.path.exists(path) and not required:
        return cfg
    try:
        with open(path, "r") as f:
            user_cfg = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot open config file {path}: {e.strerror}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid config file {path}: {e}") from e
    if not isinstance(user_cfg, dict):
        raise ConfigurationError(f"config file {path} must hold a JSON object")
    for section, values in user_cfg.items():
        if not isinstance(values, dict):
            raise ConfigurationError(f"config section {section!r} in {path} must be a JSON object")
        cfg.setdefault(section, {}).update(values)
    level = cfg["logging"].get("level", "WARNING")
    if not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ConfigurationError(f"unknown logging level {level!r} in {path}")
    cfg["logging"]["level"] = str(level).upper()
    return cfg


def build_parser():
    parser = argparse.ArgumentParser(
        description='Set-associative cache simulator with 1-bit NRU replacement'
    )
    parser.add_argument('cache_file', type=str, help='Cache geometry description')
    parser.add_argument('ref_file', type=str, help='Reference trace (binary addresses)')
    parser.add_argument('out_file', type=str, help='Report to write')
    parser.add_argument('--config', type=str, default=None, help='JSON config (default: config.json if present)')
    parser.add_argument('--strategy', type=str, choices=['lsb', 'quality'], default=None,
                        help='Index bit selection (overrides the config)')
    parser.add_argument('--plots', action='store_true', help='Write result plots')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def run(cfg, cache_file, ref_file, out_file):
    sim_cfg = cfg["simulation"]
    geometry = load_geometry(cache_file)
    trace = load_trace(
        ref_file,
        header_marker=sim_cfg.get("header_marker", "benchmark"),
        terminator_marker=sim_cfg.get("terminator_marker", "end"),
    )
    decoded = list(decode_trace(trace.entries, geometry))

    simulator = Simulator(geometry, make_selector(sim_cfg.get("index_strategy", "lsb")))
    result = simulator.run(decoded)
    # report is rendered completely before the output file is touched
    write_report(out_file, format_report(geometry, simulator.mask, trace, result))
    return simulator, decoded


def save_plots(simulator, decoded, out_cfg):
    summary = simulator.summary()
    plot_hit_miss_rate(summary["hits"], summary["misses"],
                       out_cfg.get("hitmiss_plot", "results/hit_miss_rate.png"))
    plot_misses_per_set(summary["misses_per_set"],
                        out_cfg.get("set_plot", "results/misses_per_set.png"))
    bits = bit_matrix(decoded, simulator.geometry.addressable_bits)
    ratios = [quality_ratio(q) for q in bit_quality(bits)]
    plot_bit_quality(ratios, summary["index_bits"], simulator.geometry.offset_bits,
                     out_cfg.get("quality_plot", "results/bit_quality.png"))


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args.config or "config.json", required=args.config is not None)
    except ConfigurationError as e:
        logging.error(str(e))
        return 1
    level = "DEBUG" if args.verbose else cfg["logging"].get("level", "WARNING")
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')
    if args.strategy:
        cfg["simulation"]["index_strategy"] = args.strategy

    try:
        simulator, decoded = run(cfg, args.cache_file, args.ref_file, args.out_file)
        summary = simulator.summary()
        print("Simulation Summary:", {k: summary[k] for k in ("total_references", "misses", "miss_rate", "index_bits")})
        print("Report saved to:", args.out_file)
        out_cfg = cfg["output"]
        if args.plots or out_cfg.get("plots", False):
            results_path = simulator.save_results(summary, out_cfg)
            print("Results saved to:", results_path)
            save_plots(simulator, decoded, out_cfg)
            print("Plots saved in", out_cfg.get("results_dir", "results") + "/")
    except CacheSimError as e:
        logging.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
