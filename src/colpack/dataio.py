# dataio.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .cuts import CutTable
from .layout import Page, SourceRect

import logging
logger = logging.getLogger(__name__)


def _read_text_with_fallback(path: str) -> Tuple[str, str]:
    """
    Try a few encodings in turn:
      utf-8-sig -> utf-8 -> latin1 (always decodes)
    """
    encodings = ["utf-8-sig", "utf-8", "latin1"]
    last_err = None
    p = Path(path)

    for enc in encodings:
        try:
            return p.read_text(encoding=enc), enc
        except UnicodeDecodeError as e:
            last_err = e
        except OSError as e:
            raise RuntimeError(f"cannot open input: {path} ({e})") from e

    raise RuntimeError(f"cannot decode input: {path}. last error: {last_err}")


def _to_ints(field: str, lineno: int) -> List[int]:
    s = field.strip()
    if s == "":
        return []
    try:
        return [int(v) for v in s.split(",") if v.strip() != ""]
    except ValueError as e:
        raise RuntimeError(f"line {lineno}: bad integer list {field!r}") from e


def parse_rectangles(text: str) -> Tuple[List[SourceRect], Dict[int, List[int]]]:
    """
    One record per line:  x,y,width,height<TAB>cut1,cut2,...
      - x/y are ignored, ids are 1..N in line order
      - the cut field is optional; 0 is a placeholder the CutTable drops
      - blank lines are skipped
    """
    rects: List[SourceRect] = []
    raw_cuts: Dict[int, List[int]] = {}

    for lineno, line in enumerate(text.splitlines(), start=1):
        if line.strip() == "":
            continue
        fields = line.split("\t")
        dims = _to_ints(fields[0], lineno)
        if len(dims) < 4:
            raise RuntimeError(f"line {lineno}: expected x,y,width,height, got {fields[0]!r}")
        w, h = dims[2], dims[3]
        if w <= 0 or h <= 0:
            raise RuntimeError(f"line {lineno}: width/height must be positive, got {w}x{h}")

        uid = len(rects) + 1
        rects.append(SourceRect(uid=uid, w=w, h=h))
        raw_cuts[uid] = _to_ints(fields[1], lineno) if len(fields) > 1 else []

    return rects, raw_cuts


def read_rectangles(path: str) -> Tuple[List[SourceRect], CutTable]:
    text, enc = _read_text_with_fallback(path)
    rects, raw_cuts = parse_rectangles(text)
    cuts = CutTable(raw_cuts, heights={r.uid: r.h for r in rects})
    n_split = sum(1 for r in rects if cuts.is_splittable(r.uid))
    logger.info(f"[READ] open ok. encoding={enc} rects={len(rects)} splittable={n_split}")
    return rects, cuts


def format_pages(pages: Sequence[Page]) -> str:
    blocks = []
    for i, page in enumerate(pages, start=1):
        lines = [f"area{i}:"]
        for col in page.columns:
            for f in col:
                lines.append(f"{f.uid} {f.x},{f.y},{f.w},{f.h}")
        blocks.append("\n".join(lines) + "\n")
    return "\n".join(blocks)


def write_pages(pages: Sequence[Page], path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_pages(pages), encoding="utf-8")
    logger.info(f"[OUT] pages={len(pages)} -> {path}")
    return path
