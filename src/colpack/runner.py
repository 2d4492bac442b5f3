# src/colpack/runner.py
from __future__ import annotations

import csv
import os
import time
from pathlib import Path
from typing import Any, Dict, List

import logging
logger = logging.getLogger(__name__)

from .dataio import read_rectangles, write_pages
from .layout import PageSetting
from .metrics import aggregate_totals, compute_page_metrics
from .packer import pack_pages
from .repro import dump_config
from .validate import validate_solution
from .viz import plot_pages


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


PAGE_COLUMNS = [
    "page", "n_columns", "n_fragments", "n_split",
    "max_height", "min_height", "mean_height", "max_dev", "U",
]


def _write_pages_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    """One row per page; written to a tmp file first, then swapped in."""
    _ensure_dir(path.parent)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=PAGE_COLUMNS)
        w.writeheader()
        w.writerows(rows)
    os.replace(tmp, path)


def page_setting_from_cfg(cfg) -> PageSetting:
    return PageSetting(
        width=int(cfg.PAGE_W),
        height=int(cfg.PAGE_H),
        spacing=int(getattr(cfg, "SPACING", 0) or 0),
        padding=int(getattr(cfg, "PADDING", 0) or 0),
    )


def run_case(cfg) -> Dict[str, Any]:
    """
    Read -> pack -> validate -> write for one input file.
    Output (under OUT_ROOT/CASE_NAME):
      layout.txt, pages_metrics.csv, config_dump.json, area_*_layout.png
    Return totals row for this run.
    """
    out_case_dir = Path(cfg.OUT_ROOT) / cfg.CASE_NAME
    _ensure_dir(out_case_dir)

    setting = page_setting_from_cfg(cfg)
    logger.info(f"[CASE] {cfg.CASE_NAME}")
    logger.info(
        f"[CFG] page={setting.width}x{setting.height} spacing={setting.spacing} padding={setting.padding} "
        f"max_nodes={getattr(cfg, 'MAX_SEARCH_NODES', None)} compress={getattr(cfg, 'COMPRESS', True)}"
    )

    rects, cuts = read_rectangles(cfg.INPUT_TXT)

    if getattr(cfg, "DUMP_CONFIG", True):
        dump_config(cfg, setting, out_case_dir, extra={"script": "run_case"})

    t0 = time.perf_counter()
    pages = pack_pages(
        rects, cuts, setting,
        max_nodes=getattr(cfg, "MAX_SEARCH_NODES", None),
        do_compress=getattr(cfg, "COMPRESS", True),
    )
    runtime_s = time.perf_counter() - t0

    if getattr(cfg, "VALIDATE", True):
        validate_solution(rects, cuts, pages, setting)
        logger.info("[CHECK] layout ok")

    write_pages(pages, out_case_dir / getattr(cfg, "OUTPUT_TXT", "layout.txt"))

    pages_rows = [compute_page_metrics(p, setting, n) for n, p in enumerate(pages, start=1)]
    _write_pages_csv(out_case_dir / "pages_metrics.csv", pages_rows)

    if getattr(cfg, "PLOT", True):
        plot_pages(
            pages, setting, out_case_dir,
            title=cfg.CASE_NAME,
            max_pages=getattr(cfg, "PLOT_MAX_PAGES", 6),
            show_ids=getattr(cfg, "PLOT_SHOW_IDS", True),
        )

    totals_row = aggregate_totals(pages_rows)
    totals_row.update({
        "case": cfg.CASE_NAME,
        "N_input": len(rects),
        "runtime_s": runtime_s,
    })
    logger.info(
        f"[OK] {cfg.CASE_NAME} N_page={totals_row['N_page']} N_fragment={totals_row['N_fragment']} "
        f"U={totals_row['U_avg']:.4f} runtime={runtime_s:.3f}s"
    )
    logger.info(f"Output dir: {str(out_case_dir)}")
    return totals_row
