# layout.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional


class LayoutError(RuntimeError):
    """Unrecoverable configuration error: the input can never be laid out on this page."""


class Placement(Enum):
    UNDER = "under"
    ADJACENT = "adjacent"


@dataclass(frozen=True)
class SourceRect:
    uid: int      # 1-based, input order
    w: int
    h: int


@dataclass(frozen=True)
class Fragment:
    """A placed piece of a (possibly split) source rectangle."""
    uid: int
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h


Column = List[Fragment]


@dataclass
class Page:
    columns: List[Column] = field(default_factory=list)


@dataclass(frozen=True)
class PageSetting:
    width: int
    height: int
    spacing: int = 0
    padding: int = 0
    # cumulative offset already consumed by a rectangle continued from a prior page
    previous_split_height: int = 0
    previous_split_id: Optional[int] = None

    def carried_offset(self, uid: int) -> int:
        if self.previous_split_id is not None and uid == self.previous_split_id:
            return self.previous_split_height
        return 0

    def carrying(self, uid: int, offset: int) -> "PageSetting":
        return replace(self, previous_split_height=offset, previous_split_id=uid)

    def fresh(self) -> "PageSetting":
        return replace(self, previous_split_height=0, previous_split_id=None)


def clone_page(page: Page) -> Page:
    """Copy the column lists; fragments are immutable and shared."""
    return Page(columns=[list(col) for col in page.columns])


def column_bottom(col: Column) -> int:
    return col[-1].bottom if col else 0


def column_right(col: Column) -> int:
    return max(f.right for f in col) if col else 0


def column_width(col: Column) -> int:
    return max(f.w for f in col) if col else 0


def column_heights(page: Page) -> List[int]:
    return [column_bottom(col) for col in page.columns]


def page_max_height(page: Page) -> int:
    return max(column_heights(page), default=0)


def iter_fragments(page: Page) -> Iterator[Fragment]:
    """Column-major: columns left to right, fragments top to bottom."""
    for col in page.columns:
        yield from col


def last_fragment(page: Page) -> Optional[Fragment]:
    if not page.columns or not page.columns[-1]:
        return None
    return page.columns[-1][-1]


def previous_split_height(page: Page, uid: int, column_index: int) -> int:
    """Total height of the run of `uid` fragments in the columns before `column_index`."""
    total = 0
    seen = False
    for col in page.columns[:column_index]:
        for frag in col:
            if frag.uid == uid:
                total += frag.h
                seen = True
            elif seen:
                return total
    return total


def consumed_offset(page: Page, uid: int, column_index: int, setting: PageSetting) -> int:
    """Cumulative cut offset of `uid` already used up before `column_index` (carry included)."""
    return previous_split_height(page, uid, column_index) + setting.carried_offset(uid)
