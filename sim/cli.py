"""Unified CLI entrypoint.

Two subcommands:
  1) demo: static receiver run (headless, produces CSV, binary dump + plots)
  2) dump: inspect a binary PVT dump file
"""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from galileo_pvt.config import SimConfig


def _cmd_demo(args: argparse.Namespace) -> None:
    from sim.run_static_demo import run_static_demo

    cfg = SimConfig(
        rng_seed=args.rng_seed,
        duration=args.duration_s,
        pr_sigma_m=args.sigma_m,
        averaging=args.averaging,
        averaging_depth=args.averaging_depth,
        missing_ephemeris_prns=tuple(args.drop_prn or ()),
    )
    run_name = args.run_name or datetime.now().strftime("%Y%m%d_%H%M%S")
    epoch_log_path = run_static_demo(
        cfg,
        Path(args.run_root) / run_name,
        save_figs=not args.no_plots,
        verbose=args.verbose,
    )
    print(f"Saved outputs to {epoch_log_path.parent}")


def _cmd_dump(args: argparse.Namespace) -> None:
    from galileo_pvt.logger import DUMP_FIELDS, load_pvt_dump_frame, read_pvt_dump

    if args.csv:
        frame = load_pvt_dump_frame(args.file)
        frame.to_csv(args.csv, index=False)
        print(f"Wrote {len(frame)} records to {args.csv}")
        return
    records = read_pvt_dump(args.file)
    print(" ".join(f"{name:>16s}" for name in DUMP_FIELDS))
    for record in records:
        print(" ".join(f"{float(record[name]):16.6f}" for name in DUMP_FIELDS))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gal-pvt", description="Galileo least-squares PVT runner")
    sub = parser.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo", help="Run a static receiver demo (headless)")
    demo.add_argument("--run-root", type=str, default="runs", help="Root folder for run outputs")
    demo.add_argument("--run-name", type=str, default=None, help="Output subfolder name")
    demo.add_argument("--duration-s", type=float, default=30.0, help="Run length in seconds")
    demo.add_argument("--rng-seed", type=int, default=42, help="Constellation and noise seed")
    demo.add_argument("--sigma-m", type=float, default=0.0, help="Pseudorange noise sigma (m)")
    demo.add_argument("--averaging", action="store_true", help="Smooth the output position")
    demo.add_argument("--averaging-depth", type=int, default=10, help="Moving average depth")
    demo.add_argument("--drop-prn", type=int, action="append", help="PRN without ephemeris (repeatable)")
    demo.add_argument("--no-plots", action="store_true", help="Skip saving plot PNGs")
    demo.add_argument("--verbose", action="store_true", help="Print debug info")
    demo.set_defaults(func=_cmd_demo)

    dump = sub.add_parser("dump", help="Print or convert a binary PVT dump file")
    dump.add_argument("file", type=str, help="Path to the dump file")
    dump.add_argument("--csv", type=str, default=None, help="Write records to this CSV instead of printing")
    dump.set_defaults(func=_cmd_dump)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
