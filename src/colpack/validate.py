# validate.py
from __future__ import annotations

from typing import Dict, List, Sequence

from .cuts import CutTable
from .layout import Fragment, Page, PageSetting, SourceRect, iter_fragments

import logging

logger = logging.getLogger(__name__)


def _inside(f: Fragment, W: int, H: int) -> bool:
    return f.x >= 0 and f.y >= 0 and f.x + f.w <= W and f.y + f.h <= H


def _overlap(a: Fragment, b: Fragment) -> bool:
    # touching edges is allowed
    return a.x < b.x + b.w and a.x + a.w > b.x and a.y < b.y + b.h and a.y + a.h > b.y


def _fmt(f: Fragment) -> str:
    return f"uid={f.uid} rect=({f.x},{f.y},{f.w},{f.h})"


def validate_solution(rects: Sequence[SourceRect], cuts: CutTable, pages: Sequence[Page],
                      setting: PageSetting) -> None:
    """Validate:
    1) every input rectangle is placed, nothing extra
    2) split conservation: pieces of one rectangle add up to its height and
       every cumulative boundary between pieces is a permitted cut
    3) every fragment is inside the page
    4) fragments in a column keep at least `padding` between them
    5) no overlaps on a page
    """
    W, H = setting.width, setting.height
    src = {r.uid: r for r in rects}

    pieces: Dict[int, List[Fragment]] = {}
    for page in pages:
        for f in iter_fragments(page):
            pieces.setdefault(f.uid, []).append(f)

    miss = sorted(set(src) - set(pieces))
    extra = sorted(set(pieces) - set(src))
    if miss or extra:
        logger.warning("[CHECK] miss: %s%s", miss[:20], "..." if len(miss) > 20 else "")
        logger.warning("[CHECK] extra: %s%s", extra[:20], "..." if len(extra) > 20 else "")
        raise RuntimeError("placement check failed: missing or unknown rectangles")

    for uid, frags in pieces.items():
        total = sum(f.h for f in frags)
        if total != src[uid].h:
            raise RuntimeError(f"split conservation: uid={uid} pieces sum to {total}, expected {src[uid].h}")
        allowed = set(cuts.valid_cuts(uid))
        offset = 0
        for f in frags[:-1]:
            offset += f.h
            if offset not in allowed:
                raise RuntimeError(f"split conservation: uid={uid} boundary {offset} is not a permitted cut")

    for n, page in enumerate(pages, start=1):
        for col in page.columns:
            for a, b in zip(col, col[1:]):
                if b.y < a.y + a.h + setting.padding:
                    raise RuntimeError(f"padding: page={n}\n  A {_fmt(a)}\n  B {_fmt(b)}")

        frags = list(iter_fragments(page))
        for f in frags:
            if not _inside(f, W, H):
                raise RuntimeError(f"out of bounds: page={n} {_fmt(f)} W={W} H={H}")
        for i in range(len(frags)):
            for j in range(i + 1, len(frags)):
                if _overlap(frags[i], frags[j]):
                    raise RuntimeError(f"overlap: page={n}\n  A {_fmt(frags[i])}\n  B {_fmt(frags[j])}")
