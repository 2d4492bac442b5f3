# placer.py
from __future__ import annotations

from typing import List, Optional

from .cuts import CutTable
from .layout import (
    Fragment,
    Page,
    Placement,
    PageSetting,
    SourceRect,
    clone_page,
    column_bottom,
    column_right,
    consumed_offset,
)

import logging
logger = logging.getLogger(__name__)


def place(page: Page, rect: SourceRect, placement: Placement,
          setting: PageSetting, cuts: CutTable) -> Optional[List[Page]]:
    """Place `rect` on a copy of `page`.

    Returns the resulting pages (the updated page first, then any new pages the
    rectangle spilled onto), or None if the placement is infeasible:
      - UNDER: the rectangle would stick out past the page width from the
        last column's x, or it overflows the page height and no permitted
        cut leaves a piece that fits below the stack;
      - ADJACENT: a new column right of the last one would exceed the page
        width, or no permitted cut yields a top piece <= page height.

    `rect` may be the remaining tail of a rectangle; its consumed offset is
    taken from same-id fragments already on the page plus the carry in
    `setting`.
    """
    current = clone_page(page)
    last_col = current.columns[-1] if current.columns else None

    if placement is Placement.UNDER:
        x = last_col[0].x if last_col else 0
        y = column_bottom(last_col) + setting.padding if last_col else 0
        if x + rect.w > setting.width:
            return None
        new_column = last_col is None
    else:
        x = column_right(last_col) + setting.spacing if last_col else 0
        y = 0
        if x + rect.w > setting.width:
            return None
        new_column = True

    def _put(h: int) -> None:
        frag = Fragment(uid=rect.uid, x=x, y=y, w=rect.w, h=h)
        if new_column:
            current.columns.append([frag])
        else:
            current.columns[-1].append(frag)

    if y + rect.h <= setting.height:
        _put(rect.h)
        return [current]

    # overflow: keep the largest permitted top piece that fits below y
    consumed = consumed_offset(current, rect.uid, len(current.columns), setting)
    end = consumed + rect.h
    fitting = [c for c in cuts.valid_cuts(rect.uid)
               if consumed < c < end and y + (c - consumed) <= setting.height]
    if not fitting:
        return None

    max_cut = max(fitting)
    _put(max_cut - consumed)

    tail = SourceRect(uid=rect.uid, w=rect.w, h=end - max_cut)
    next_x = column_right(current.columns[-1]) + setting.spacing
    if next_x + rect.w <= setting.width:
        # room for another column on this page
        return place(current, tail, Placement.ADJACENT, setting, cuts)

    rest = place(Page(), tail, Placement.UNDER, setting.carrying(rect.uid, max_cut), cuts)
    if rest is None:
        return None
    return [current] + rest
