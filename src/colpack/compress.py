# compress.py
"""Column balancing for a single page.

compress_to_columns() sweeps the columns left to right and, for each one,
moves or splits the rectangle on its boundary with the next column until its
height is as close as it gets to the target average. compress() runs that
for 1, 2, 3, ... target columns and keeps the flattest result.

Boundary operations work on a clone and return None when the edit is not
possible or the repacked page leaves the page bounds.
"""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from .cuts import CutTable
from .layout import (
    Fragment,
    Page,
    PageSetting,
    clone_page,
    column_bottom,
    column_heights,
    column_right,
    consumed_offset,
)
from .repack import is_valid_page, update_x, update_y

import logging
logger = logging.getLogger(__name__)


def _finish(result: Page, setting: PageSetting, cuts: CutTable, column_index: int) -> Optional[Page]:
    update_y(result, setting, cuts, column_index)
    update_x(result, setting)
    return result if is_valid_page(result, setting) else None


def _closest_cut(cuts: CutTable, uid: int, consumed: int, total: int, page_h: int,
                 score: Callable[[int], float]) -> Optional[Tuple[float, int]]:
    """Best (score, upper piece height) for splitting a piece of `total` height."""
    best: Optional[Tuple[float, int]] = None
    for c in cuts.valid_cuts(uid):
        h1 = c - consumed
        h2 = total - h1
        if h1 <= 0 or h2 <= 0 or h1 > page_h or h2 > page_h:
            continue
        s = score(h1)
        if best is None or s < best[0]:
            best = (s, h1)
    return best


def split_bottom_rectangle(page: Page, setting: PageSetting, cuts: CutTable,
                           column_index: int, desired_height: float) -> Optional[Page]:
    """Cut the bottom rectangle of a column and push its lower piece to the top of the next column."""
    result = clone_page(page)
    cur = result.columns[column_index]
    if column_index == len(result.columns) - 1:
        result.columns.append([])
    nxt = result.columns[column_index + 1]

    bottom = cur[-1]
    top = nxt[0] if nxt else None
    was_split = top is not None and top.uid == bottom.uid
    total = bottom.h + (top.h if was_split else 0)

    cur_diff = abs(desired_height - bottom.bottom)
    consumed = consumed_offset(result, bottom.uid, column_index, setting)
    best = _closest_cut(cuts, bottom.uid, consumed, total, setting.height,
                        lambda h1: abs(desired_height - (bottom.y + h1)))
    if best is None or best[0] > cur_diff:
        return None

    h1 = best[1]
    cur[-1] = replace(bottom, h=h1)
    if was_split:
        nxt[0] = replace(top, h=total - h1)
    else:
        x = column_right(cur) + setting.spacing
        nxt.insert(0, Fragment(uid=bottom.uid, x=x, y=0, w=bottom.w, h=total - h1))

    return _finish(result, setting, cuts, column_index + 1)


def split_top_rectangle(page: Page, setting: PageSetting, cuts: CutTable,
                        column_index: int, desired_height: float) -> Optional[Page]:
    """Cut the top rectangle of the next column and pull its upper piece under this column."""
    if column_index + 1 >= len(page.columns):
        return None
    result = clone_page(page)
    cur = result.columns[column_index]
    nxt = result.columns[column_index + 1]

    bottom = cur[-1]
    top = nxt[0]
    if not cuts.is_splittable(top.uid):
        return None

    cur_diff = abs(desired_height - bottom.bottom)
    consumed = consumed_offset(result, top.uid, column_index, setting)

    if bottom.uid == top.uid:
        total = bottom.h + top.h
        best = _closest_cut(cuts, top.uid, consumed, total, setting.height,
                            lambda h1: abs(desired_height - (bottom.y + h1)))
        if best is None or best[0] > cur_diff:
            return None
        h1 = best[1]
        cur[-1] = replace(bottom, h=h1)
        nxt[0] = replace(top, h=total - h1)
        return _finish(result, setting, cuts, column_index + 1)

    y = bottom.bottom + setting.padding
    best = _closest_cut(cuts, top.uid, consumed, top.h, setting.height,
                        lambda h1: abs(desired_height - (y + h1)))
    if best is None or best[0] > cur_diff:
        return None
    h1 = best[1]
    cur.append(Fragment(uid=top.uid, x=bottom.x, y=y, w=top.w, h=h1))
    nxt[0] = replace(top, h=top.h - h1)
    return _finish(result, setting, cuts, column_index + 1)


def fully_move_bottom_rectangle(page: Page, setting: PageSetting, cuts: CutTable,
                                column_index: int) -> Optional[Page]:
    """Move the bottom rectangle of a column to the top of the next column."""
    result = clone_page(page)
    cur = result.columns[column_index]
    if column_index == len(result.columns) - 1:
        result.columns.append([])
    nxt = result.columns[column_index + 1]

    bottom = cur[-1]
    top = nxt[0] if nxt else None
    if top is not None and top.uid == bottom.uid:
        if bottom.h + top.h > setting.height:
            return None
        nxt[0] = replace(top, h=bottom.h + top.h)
    else:
        nxt.insert(0, replace(bottom, x=column_right(cur) + setting.spacing, y=0))
    cur.pop()

    return _finish(result, setting, cuts, column_index + 1)


def fully_move_top_rectangle(page: Page, setting: PageSetting, cuts: CutTable,
                             column_index: int) -> Optional[Page]:
    """Move the top rectangle of the next column under the bottom of this column."""
    if column_index + 1 >= len(page.columns):
        return None
    result = clone_page(page)
    cur = result.columns[column_index]
    nxt = result.columns[column_index + 1]

    bottom = cur[-1]
    top = nxt[0]
    if top.uid == bottom.uid:
        if bottom.h + top.h > setting.height:
            return None
        cur[-1] = replace(bottom, h=bottom.h + top.h)
    else:
        cur.append(replace(top, x=bottom.x, y=bottom.bottom + setting.padding))
    nxt.pop(0)

    return _finish(result, setting, cuts, column_index + 1)


def _column_diff(page: Optional[Page], column_index: int, target: float) -> float:
    if page is None or column_index >= len(page.columns):
        return math.inf
    return abs(target - column_bottom(page.columns[column_index]))


def compress_to_columns(page: Page, setting: PageSetting, cuts: CutTable, n_columns: int) -> Page:
    result = clone_page(page)
    if not result.columns:
        return result

    heights = column_heights(result)
    average = (sum(heights) + (n_columns - len(result.columns)) * setting.padding) / float(n_columns)

    idx = 0
    while idx < len(result.columns):
        while idx < len(result.columns):
            cur_h = column_bottom(result.columns[idx])
            cur_diff = abs(cur_h - average)
            if cur_h == average or (cur_h < average and idx + 1 == len(result.columns)):
                break

            if cur_h < average:
                split_page = split_top_rectangle(result, setting, cuts, idx, average)
                moved_page = fully_move_top_rectangle(result, setting, cuts, idx)
            else:
                split_page = split_bottom_rectangle(result, setting, cuts, idx, average)
                moved_page = fully_move_bottom_rectangle(result, setting, cuts, idx)

            split_diff = _column_diff(split_page, idx, average)
            moved_diff = _column_diff(moved_page, idx, average)
            if cur_diff <= split_diff and cur_diff <= moved_diff:
                break
            if split_diff <= moved_diff:
                result = split_page
                break
            result = moved_page
        idx += 1

    return result


def _max_deviation(heights: List[int]) -> float:
    mean = sum(heights) / float(len(heights))
    return max(abs(mean - h) for h in heights)


def compress(page: Page, setting: PageSetting, cuts: CutTable) -> Page:
    """Try 1, 2, 3, ... target columns until a target is no longer reached.

    Keeps the candidate with the lowest tallest column, then the smallest
    deviation from its own mean height. The input page competes last, so the
    tallest column never grows.
    """
    if not page.columns:
        return clone_page(page)

    candidates: List[Tuple[int, Page]] = []
    k = 1
    while True:
        cand = compress_to_columns(page, setting, cuts, k)
        if len(cand.columns) < k:
            break
        candidates.append((k, cand))
        k += 1
    candidates.append((0, clone_page(page)))

    best_k, best = candidates[0]
    best_key = (max(column_heights(best)), _max_deviation(column_heights(best)))
    for k, cand in candidates[1:]:
        heights = column_heights(cand)
        key = (max(heights), _max_deviation(heights))
        if key < best_key:
            best_k, best, best_key = k, cand, key

    logger.debug("[COMPRESS] tried=%d chose k=%s columns=%d max_h=%s",
                 len(candidates) - 1, best_k or "input", len(best.columns), best_key[0])
    return best
