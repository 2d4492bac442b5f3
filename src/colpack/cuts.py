# cuts.py
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import logging
logger = logging.getLogger(__name__)


class CutTable:
    """Permitted cumulative split offsets per rectangle id.

    An offset c splits the *original* rectangle into a top piece of height c and
    a bottom piece of height (h - c), regardless of earlier splits.
    Raw lists may be unsorted and may carry the placeholder 0; both are cleaned
    lazily on first lookup and cached for the rest of the run.
    """

    def __init__(self, raw: Mapping[int, Iterable[int]],
                 heights: Optional[Mapping[int, int]] = None) -> None:
        self._raw: Dict[int, List[int]] = {int(k): list(v) for k, v in raw.items()}
        self._heights: Dict[int, int] = dict(heights or {})
        self._cache: Dict[int, Tuple[int, ...]] = {}

    def valid_cuts(self, uid: int) -> Tuple[int, ...]:
        cached = self._cache.get(uid)
        if cached is not None:
            return cached

        h = self._heights.get(uid)
        cuts = sorted({int(c) for c in self._raw.get(uid, ()) if int(c) > 0})
        if h is not None:
            dropped = [c for c in cuts if c >= h]
            if dropped:
                logger.debug("[CUTS] uid=%s drop cuts >= height %s: %s", uid, h, dropped)
            cuts = [c for c in cuts if c < h]

        result = tuple(cuts)
        self._cache[uid] = result
        return result

    def is_splittable(self, uid: int) -> bool:
        return len(self.valid_cuts(uid)) > 0

    def is_vertically_valid(self, uid: int, height: int, page_h: int, consumed: int = 0) -> bool:
        """Whether the piece [consumed, consumed + height) can be cut into parts <= page_h."""
        end = consumed + height
        bounds = [consumed] + [c for c in self.valid_cuts(uid) if consumed < c < end] + [end]
        return all(b - a <= page_h for a, b in zip(bounds, bounds[1:]))
