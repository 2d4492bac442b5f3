# repack.py
"""Coordinate repacking after structural edits.

update_x re-derives column offsets from column widths + spacing.
update_y re-lays one column top to bottom and, when the column overflows the
page height, cuts the overflowing fragment at a permitted offset (or pushes it
and everything below it into the next column), then continues with that next
column until the page settles. Empty columns are dropped on the way.

Both functions mutate the page they are given; callers clone first.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from .cuts import CutTable
from .layout import (
    Column,
    Fragment,
    Page,
    PageSetting,
    column_bottom,
    column_right,
    column_width,
    consumed_offset,
)

import logging
logger = logging.getLogger(__name__)


def update_x(page: Page, setting: PageSetting) -> None:
    x = 0
    for i, col in enumerate(page.columns):
        if i > 0:
            x += column_width(page.columns[i - 1]) + setting.spacing
        page.columns[i] = [f if f.x == x else replace(f, x=x) for f in col]


def _drop_empty_columns(page: Page, column_index: int) -> Optional[int]:
    """Remove empty columns; return the shifted index, or None if that column itself was empty."""
    empties = [i for i, col in enumerate(page.columns) if not col]
    if not empties:
        return column_index
    page.columns = [col for col in page.columns if col]
    if column_index in empties:
        return None
    return column_index - sum(1 for i in empties if i < column_index)


def _merge_split_runs(col: Column) -> Column:
    # two pieces of one rectangle meeting in a column become one again;
    # the combined height may overflow, which the walk below resolves
    merged: Column = []
    for frag in col:
        if merged and merged[-1].uid == frag.uid:
            prev = merged[-1]
            merged[-1] = replace(prev, w=max(prev.w, frag.w), h=prev.h + frag.h)
        else:
            merged.append(frag)
    return merged


def _best_cut_height(page: Page, setting: PageSetting, cuts: CutTable,
                     column_index: int, frag: Fragment, y: int) -> Optional[int]:
    consumed = consumed_offset(page, frag.uid, column_index, setting)
    options = [
        c - consumed
        for c in cuts.valid_cuts(frag.uid)
        if 0 < c - consumed < frag.h and y + (c - consumed) <= setting.height
    ]
    return max(options) if options else None


def update_y(page: Page, setting: PageSetting, cuts: CutTable, column_index: int) -> None:
    while True:
        idx = _drop_empty_columns(page, column_index)
        if idx is None or idx >= len(page.columns):
            return

        col = _merge_split_runs(page.columns[idx])
        page.columns[idx] = col

        spill: List[Fragment] = []
        y = 0
        for i, frag in enumerate(col):
            if y + frag.h <= setting.height:
                col[i] = replace(frag, y=y) if frag.y != y else frag
                y += frag.h + setting.padding
                continue

            top_h = _best_cut_height(page, setting, cuts, idx, frag, y)
            if top_h is not None:
                col[i] = replace(frag, y=y, h=top_h)
                spill = [replace(frag, y=0, h=frag.h - top_h)] + col[i + 1:]
                del col[i + 1:]
            elif i > 0:
                spill = col[i:]
                del col[i:]
            else:
                # uncuttable and taller than an empty column: leave it for the validity check
                for j in range(i, len(col)):
                    col[j] = replace(col[j], y=y)
                    y += col[j].h + setting.padding
                return
            break

        if not spill:
            return

        if idx == len(page.columns) - 1:
            page.columns.append([])
        nxt = page.columns[idx + 1]
        x_next = nxt[0].x if nxt else column_right(col) + setting.spacing
        page.columns[idx + 1] = [replace(f, x=x_next) for f in spill] + nxt
        logger.debug("[REPACK] column %d overflow: %d fragment(s) pushed right", idx, len(spill))
        column_index = idx + 1


def repack_page(page: Page, setting: PageSetting, cuts: CutTable) -> None:
    idx = 0
    while idx < len(page.columns):
        update_y(page, setting, cuts, idx)
        idx += 1
    update_x(page, setting)


def is_valid_page(page: Page, setting: PageSetting) -> bool:
    for col in page.columns:
        if column_right(col) > setting.width:
            return False
        if column_bottom(col) > setting.height:
            return False
    return True
