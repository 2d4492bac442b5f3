# packer.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .compress import compress
from .cuts import CutTable
from .layout import (
    LayoutError,
    Page,
    PageSetting,
    SourceRect,
    iter_fragments,
    last_fragment,
)
from .repack import is_valid_page
from .search import max_rectangles_on_page

import logging
logger = logging.getLogger(__name__)

__all__ = ["LayoutError", "check_preconditions", "pack_pages"]


def is_horizontally_valid(rects: Sequence[SourceRect], width: int) -> bool:
    return all(r.w <= width for r in rects)


def check_preconditions(rects: Sequence[SourceRect], cuts: CutTable, setting: PageSetting) -> None:
    """Raise LayoutError for any rectangle that can never be placed."""
    if not is_horizontally_valid(rects, setting.width):
        r = next(r for r in rects if r.w > setting.width)
        raise LayoutError(f"rectangle uid={r.uid} w={r.w} does not fit page width {setting.width}")
    for r in rects:
        if not cuts.is_vertically_valid(r.uid, r.h, setting.height, setting.carried_offset(r.uid)):
            raise LayoutError(
                f"rectangle uid={r.uid} h={r.h} cannot be cut to fit page height {setting.height} "
                f"(cuts={list(cuts.valid_cuts(r.uid))})"
            )


def _consumed_on_page(page: Page, uid: int, setting: PageSetting) -> int:
    return sum(f.h for f in iter_fragments(page) if f.uid == uid) + setting.carried_offset(uid)


def pack_pages(rects: Sequence[SourceRect], cuts: CutTable, setting: PageSetting,
               max_nodes: Optional[int] = None, do_compress: bool = True) -> List[Page]:
    """Lay out `rects` (in order) on as few balanced pages as the search finds.

    Each round picks the best first page for the pending rectangles, balances
    its columns, and carries the unplaced tail of a split rectangle to the next
    round as a single rectangle with the consumed offset recorded in the setting.
    """
    if not rects:
        return []

    setting = setting.fresh()
    check_preconditions(rects, cuts, setting)

    by_uid: Dict[int, SourceRect] = {r.uid: r for r in rects}
    order = [r.uid for r in rects]
    position = {uid: i for i, uid in enumerate(order)}

    result: List[Page] = []
    pending: List[SourceRect] = list(rects)
    page_setting = setting

    while pending:
        pages = max_rectangles_on_page(pending, page_setting, cuts, max_nodes=max_nodes)
        first = pages[0]
        page = compress(first, page_setting, cuts) if do_compress else first
        if not is_valid_page(page, page_setting):
            raise LayoutError(f"page {len(result) + 1} failed validation")
        result.append(page)

        last = last_fragment(first)
        src = by_uid[last.uid]
        consumed = _consumed_on_page(first, src.uid, page_setting)
        next_pending = [by_uid[uid] for uid in order[position[src.uid] + 1:]]
        next_setting = setting
        if len(pages) > 1 and consumed < src.h:
            next_pending.insert(0, SourceRect(uid=src.uid, w=src.w, h=src.h - consumed))
            next_setting = setting.carrying(src.uid, consumed)
            logger.debug("[PACK] uid=%s continues on next page from offset %d", src.uid, consumed)

        logger.info(
            f"[PACK] page={len(result)} columns={len(page.columns)} "
            f"fragments={sum(len(c) for c in page.columns)} last_uid={last.uid} pending={len(next_pending)}"
        )
        pending = next_pending
        page_setting = next_setting

    return result
