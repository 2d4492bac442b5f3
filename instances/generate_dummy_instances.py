"""Generate synthetic rectangle instances for reproducibility checks.

Each line is `x,y,width,height<TAB>cut1,cut2,...` and is readable by
`colpack.dataio.read_rectangles()`. Cuts are cumulative offsets from the top
edge; consecutive cuts are never further apart than --maxGap so every
rectangle stays placeable on a page of that height.

Usage:
  python instances/generate_dummy_instances.py --out data/dummy_rects.txt --n 40 --seed 1
"""

from __future__ import annotations

import argparse
import random
from pathlib import Path


def _cuts_for(h: int, max_gap: int, rng: random.Random) -> list:
    cuts = []
    c = 0
    while h - c > max_gap:
        c += rng.randint(max(1, max_gap // 3), max_gap)
        if c < h:
            cuts.append(c)
    # sprinkle a few optional cuts on rectangles that don't need any
    if not cuts and h > 40 and rng.random() < 0.4:
        cuts.append(rng.randint(20, h - 20))
    return cuts


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", type=str, required=True, help="output text path")
    ap.add_argument("--n", type=int, default=40, help="number of rectangles")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--maxW", type=int, default=300, help="max width")
    ap.add_argument("--maxH", type=int, default=1800, help="max height")
    ap.add_argument("--maxGap", type=int, default=900, help="max distance between cuts (<= page height)")
    args = ap.parse_args()

    rng = random.Random(args.seed)
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines = []
    for _ in range(args.n):
        w = rng.randint(40, args.maxW)
        h = rng.randint(30, args.maxH)
        cuts = _cuts_for(h, args.maxGap, rng)
        lines.append(f"0,0,{w},{h}\t{','.join(str(c) for c in cuts)}")

    out.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"[OK] wrote {len(lines)} rectangles -> {out}")


if __name__ == "__main__":
    main()
