# viz.py
"""Page layout plots: one PNG per page, fragments outlined, split pieces shaded."""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import matplotlib

matplotlib.use("Agg")  # batch / headless runs
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .layout import Page, PageSetting, iter_fragments

import logging
logger = logging.getLogger(__name__)

STYLE = {
    "page": "black",
    "edge": "#333333",
    "split": "#D62728",   # pieces of a rectangle cut across columns/pages
    "whole": "#B0B0B0",
}


def plot_pages(pages: Sequence[Page], setting: PageSetting, out_dir: Path, title: str,
               max_pages: int = 6, show_ids: bool = True) -> List[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    counts = {}
    for page in pages:
        for f in iter_fragments(page):
            counts[f.uid] = counts.get(f.uid, 0) + 1

    written: List[Path] = []
    for n, page in enumerate(pages[:max_pages], start=1):
        fig = plt.figure()
        ax = fig.add_subplot(111)
        ax.set_title(f"{title} | area{n} | columns={len(page.columns)}")
        ax.set_aspect("equal", adjustable="box")
        ax.set_xlim(0, setting.width)
        # y grows downward on the page
        ax.set_ylim(setting.height, 0)
        ax.add_patch(Rectangle((0, 0), setting.width, setting.height, fill=False, edgecolor=STYLE["page"]))

        for f in iter_fragments(page):
            color = STYLE["split"] if counts[f.uid] > 1 else STYLE["whole"]
            ax.add_patch(Rectangle((f.x, f.y), f.w, f.h, facecolor=color, alpha=0.35,
                                   edgecolor=STYLE["edge"], linewidth=0.8))
            if show_ids:
                ax.text(f.x + f.w / 2.0, f.y + f.h / 2.0, str(f.uid), ha="center", va="center", fontsize=7)

        path = out_dir / f"area_{n:03d}_layout.png"
        fig.savefig(path, dpi=200, bbox_inches="tight")
        plt.close(fig)
        written.append(path)

    logger.info("[PLOT] %d page plot(s) -> %s", len(written), out_dir)
    return written
