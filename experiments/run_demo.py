"""Pack one rectangle file into columns on fixed-size pages.

Produces (under OUT_ROOT/CASE_NAME):
- the layout text file
- pages_metrics.csv
- config_dump.json
- page layout plots (with --plot)

Usage (from repo root):
  python -m experiments.run_demo data/sample_rects.txt layout.txt 700 1000 10 5

Optional:
  python -m experiments.run_demo data/sample_rects.txt layout.txt 700 1000 10 5 --max_nodes 50000 --no_compress --plot
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running without "pip install -e ." by ensuring ./src is on sys.path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from colpack.cfg import CFG
from colpack.runner import run_case


def main() -> None:
    defaults = CFG()
    ap = argparse.ArgumentParser()
    ap.add_argument("input", nargs="?", default=defaults.INPUT_TXT,
                    help="rectangle file. If relative, resolved from repo root.")
    ap.add_argument("output", nargs="?", default=defaults.OUTPUT_TXT, help="layout file name")
    ap.add_argument("width", nargs="?", type=int, default=defaults.PAGE_W)
    ap.add_argument("height", nargs="?", type=int, default=defaults.PAGE_H)
    ap.add_argument("spacing", nargs="?", type=int, default=defaults.SPACING)
    ap.add_argument("padding", nargs="?", type=int, default=defaults.PADDING)
    ap.add_argument("--case", type=str, default=None, help="case name (default: input file stem)")
    ap.add_argument("--out_root", type=str, default=defaults.OUT_ROOT)
    ap.add_argument("--max_nodes", type=int, default=defaults.MAX_SEARCH_NODES,
                    help="placement-tree node budget per page; 0 = unbounded")
    ap.add_argument("--no_compress", action="store_true", help="skip column balancing")
    ap.add_argument("--plot", action="store_true", help="enable page plots")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")

    cfg = CFG()
    inp = Path(args.input)
    if not inp.is_absolute():
        inp = ROOT / inp
    cfg.INPUT_TXT = str(inp.resolve())
    cfg.CASE_NAME = args.case or inp.stem
    cfg.OUTPUT_TXT = args.output

    out_root = Path(args.out_root)
    if not out_root.is_absolute():
        out_root = ROOT / out_root
    cfg.OUT_ROOT = str(out_root.resolve())

    cfg.PAGE_W = args.width
    cfg.PAGE_H = args.height
    cfg.SPACING = args.spacing
    cfg.PADDING = args.padding
    cfg.MAX_SEARCH_NODES = args.max_nodes or None
    cfg.COMPRESS = not args.no_compress
    cfg.PLOT = args.plot

    run_case(cfg)


if __name__ == "__main__":
    main()
