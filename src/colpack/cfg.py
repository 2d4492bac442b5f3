# cfg.py
from dataclasses import dataclass
from typing import Optional


@dataclass
class CFG:
    # Case
    CASE_NAME: str = "demo_case"
    INPUT_TXT: str = "data/sample_rects.txt"

    # Output
    OUT_ROOT: str = "outputs"
    OUTPUT_TXT: str = "layout.txt"

    # Page (same integer units as the input)
    PAGE_W: int = 700
    PAGE_H: int = 1000
    SPACING: int = 10    # horizontal gap between columns
    PADDING: int = 5     # vertical gap between stacked fragments

    # Search
    # Upper bound on placement-tree nodes per page; None = unbounded.
    # The UNDER-first pruning keeps the tree small in practice; this only
    # guards degenerate inputs.
    MAX_SEARCH_NODES: Optional[int] = 200_000

    # Column balancing after each page is filled
    COMPRESS: bool = True

    # Post-run checks
    VALIDATE: bool = True

    # Reproducibility
    DUMP_CONFIG: bool = True

    # Plot
    PLOT: bool = True
    PLOT_MAX_PAGES: int = 6
    PLOT_SHOW_IDS: bool = True
