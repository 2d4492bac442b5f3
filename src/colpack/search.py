# search.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .cuts import CutTable
from .layout import (
    LayoutError,
    Page,
    PageSetting,
    Placement,
    SourceRect,
    column_width,
    last_fragment,
    page_max_height,
)
from .placer import place

import logging
logger = logging.getLogger(__name__)


@dataclass
class PlacementNode:
    """One decision in the placement tree.

    Each node owns its page snapshot; children are the UNDER / ADJACENT
    placements of the next rectangle (None when infeasible or not explored).
    """
    placements: Tuple[Placement, ...]
    pages: List[Page]
    under: Optional["PlacementNode"] = None
    adjacent: Optional["PlacementNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.under is None and self.adjacent is None


def build_placement_tree(rects: Sequence[SourceRect], setting: PageSetting, cuts: CutTable,
                         max_nodes: Optional[int] = None) -> Optional[PlacementNode]:
    """Expand UNDER/ADJACENT decisions for `rects` until the first page overflows.

    ADJACENT is only tried when UNDER is infeasible or leaves the last column
    narrower than the rectangle just placed. `max_nodes` caps the number of
    nodes; once reached, unexpanded nodes stay leaves.
    """
    first = rects[0]
    if not cuts.is_vertically_valid(first.uid, first.h, setting.height, setting.carried_offset(first.uid)):
        raise LayoutError(f"rectangle uid={first.uid} h={first.h} cannot be cut to fit page height {setting.height}")

    pages = place(Page(), first, Placement.UNDER, setting, cuts)
    if pages is None:
        return None

    root = PlacementNode(placements=(Placement.UNDER,), pages=pages)
    n_nodes = 1
    budget_hit = False
    stack: List[Tuple[PlacementNode, int, SourceRect]] = [(root, 1, first)]

    while stack:
        node, index, placed = stack.pop()
        if len(node.pages) != 1 or index >= len(rects):
            continue
        if max_nodes is not None and n_nodes >= max_nodes:
            budget_hit = True
            continue

        nxt = rects[index]
        under_pages = place(node.pages[0], nxt, Placement.UNDER, setting, cuts)
        if under_pages is not None:
            node.under = PlacementNode(node.placements + (Placement.UNDER,), under_pages)
            n_nodes += 1

        if node.under is None or column_width(node.under.pages[0].columns[-1]) < placed.w:
            adjacent_pages = place(node.pages[0], nxt, Placement.ADJACENT, setting, cuts)
            if adjacent_pages is not None:
                node.adjacent = PlacementNode(node.placements + (Placement.ADJACENT,), adjacent_pages)
                n_nodes += 1

        # UNDER subtree first
        if node.adjacent is not None:
            stack.append((node.adjacent, index + 1, nxt))
        if node.under is not None:
            stack.append((node.under, index + 1, nxt))

    if budget_hit:
        logger.warning("[SEARCH] node budget reached (max_nodes=%s); search truncated", max_nodes)
    logger.debug("[SEARCH] rects=%d nodes=%d", len(rects), n_nodes)
    return root


def placement_frontier(root: PlacementNode) -> List[List[Page]]:
    """Page lists of all leaves, UNDER branches before ADJACENT ones."""
    result: List[List[Page]] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            result.append(node.pages)
            continue
        if node.adjacent is not None:
            stack.append(node.adjacent)
        if node.under is not None:
            stack.append(node.under)
    return result


def _keep_best(cands: List[List[Page]], key: Callable[[List[Page]], int], largest: bool) -> List[List[Page]]:
    values = [key(c) for c in cands]
    target = max(values) if largest else min(values)
    return [c for c, v in zip(cands, values) if v == target]


def _last_uid(pages: List[Page]) -> int:
    frag = last_fragment(pages[0])
    return frag.uid if frag is not None else 0


def _spill_height(pages: List[Page]) -> int:
    if len(pages) == 1:
        return 0
    return pages[1].columns[0][0].h


def select_best(frontier: List[List[Page]]) -> List[Page]:
    """Tie-break order:
      1) max uid of the last rectangle on the first page
      2) min height of the first fragment spilled onto the second page
      3) min tallest column on the first page
      4) max number of columns on the first page
    then the first remaining candidate.
    """
    cands = _keep_best(frontier, _last_uid, largest=True)
    cands = _keep_best(cands, _spill_height, largest=False)
    cands = _keep_best(cands, lambda p: page_max_height(p[0]), largest=False)
    cands = _keep_best(cands, lambda p: len(p[0].columns), largest=True)
    return cands[0]


def max_rectangles_on_page(rects: Sequence[SourceRect], setting: PageSetting, cuts: CutTable,
                           max_nodes: Optional[int] = None) -> List[Page]:
    """Fit as much of `rects` on one page as possible.

    The returned list holds the chosen first page plus, if the last rectangle
    spilled, the pages its remainder would occupy.
    """
    root = build_placement_tree(rects, setting, cuts, max_nodes=max_nodes)
    if root is None:
        raise LayoutError(f"rectangle uid={rects[0].uid} cannot be placed on an empty page")

    frontier = placement_frontier(root)
    if not frontier:
        raise LayoutError("placement search produced no frontier")
    logger.debug("[SEARCH] frontier size=%d", len(frontier))
    return select_best(frontier)
