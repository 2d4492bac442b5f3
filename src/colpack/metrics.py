# metrics.py
from __future__ import annotations

from typing import Any, Dict, List
import statistics

from .layout import Page, PageSetting, column_heights, iter_fragments


def compute_page_metrics(page: Page, setting: PageSetting, page_no: int) -> Dict[str, Any]:
    """Per-page balance / fill statistics.

    U uses fragment area only (padding and spacing count as empty).
    max_dev is the largest distance of a column bottom from the mean bottom.
    """
    heights = column_heights(page)
    frags = list(iter_fragments(page))
    used = sum(f.w * f.h for f in frags)
    area = setting.width * setting.height
    U = used / area if area > 0 else 0.0

    if heights:
        mean_h = statistics.mean(heights)
        max_dev = max(abs(h - mean_h) for h in heights)
    else:
        mean_h = 0.0
        max_dev = 0.0

    return dict(
        page=page_no,
        n_columns=len(page.columns),
        n_fragments=len(frags),
        n_split=len(frags) - len({f.uid for f in frags}),
        max_height=max(heights, default=0),
        min_height=min(heights, default=0),
        mean_height=mean_h,
        max_dev=max_dev,
        U=U,
    )


def aggregate_totals(pages_rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    if not pages_rows:
        return dict(
            N_page=0,
            N_fragment=0,
            U_avg=0.0,
            max_dev_avg=0.0,
            max_height_max=0,
        )

    return dict(
        N_page=len(pages_rows),
        N_fragment=int(sum(r.get("n_fragments", 0) for r in pages_rows)),
        U_avg=statistics.mean([r["U"] for r in pages_rows]),
        max_dev_avg=statistics.mean([r["max_dev"] for r in pages_rows]),
        max_height_max=max(r["max_height"] for r in pages_rows),
    )
