from __future__ import annotations

from colpack.cuts import CutTable
from colpack.layout import Fragment, Page, PageSetting, Placement, SourceRect
from colpack.placer import place


SETTING = PageSetting(width=200, height=100, spacing=10, padding=5)


def _one_column_page() -> Page:
    return Page(columns=[[Fragment(1, 0, 0, 50, 60)]])


def test_under_on_empty_page_starts_at_origin() -> None:
    pages = place(Page(), SourceRect(1, 50, 40), Placement.UNDER, SETTING, CutTable({}))
    assert pages is not None and len(pages) == 1
    assert pages[0].columns == [[Fragment(1, 0, 0, 50, 40)]]


def test_under_stacks_below_with_padding() -> None:
    page = _one_column_page()
    pages = place(page, SourceRect(2, 40, 30), Placement.UNDER, SETTING, CutTable({}))
    assert pages[0].columns == [[Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 40, 30)]]
    # input page untouched
    assert page.columns == [[Fragment(1, 0, 0, 50, 60)]]


def test_adjacent_opens_column_right_of_last() -> None:
    pages = place(_one_column_page(), SourceRect(2, 40, 30), Placement.ADJACENT, SETTING, CutTable({}))
    assert pages[0].columns[1] == [Fragment(2, 60, 0, 40, 30)]


def test_width_overflow_is_infeasible() -> None:
    narrow = PageSetting(width=100, height=100, spacing=10, padding=5)
    page = Page(columns=[[Fragment(1, 0, 0, 50, 10)], [Fragment(2, 60, 0, 30, 10)]])
    assert place(page, SourceRect(3, 50, 10), Placement.UNDER, narrow, CutTable({})) is None
    assert place(_one_column_page(), SourceRect(3, 50, 10), Placement.ADJACENT, narrow, CutTable({})) is None


def test_height_overflow_without_cut_is_infeasible() -> None:
    assert place(_one_column_page(), SourceRect(2, 50, 80), Placement.UNDER, SETTING, CutTable({})) is None


def test_under_overflow_splits_and_continues_adjacent() -> None:
    cuts = CutTable({2: [30]}, heights={2: 80})
    pages = place(_one_column_page(), SourceRect(2, 50, 80), Placement.UNDER, SETTING, cuts)
    assert len(pages) == 1
    assert pages[0].columns == [
        [Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 50, 30)],
        [Fragment(2, 60, 0, 50, 50)],
    ]


def test_under_overflow_spills_onto_new_page_when_width_is_used_up() -> None:
    narrow = PageSetting(width=100, height=100, spacing=10, padding=5)
    cuts = CutTable({2: [30]}, heights={2: 80})
    pages = place(_one_column_page(), SourceRect(2, 50, 80), Placement.UNDER, narrow, cuts)
    assert len(pages) == 2
    assert pages[0].columns[0][-1] == Fragment(2, 0, 65, 50, 30)
    assert pages[1].columns == [[Fragment(2, 0, 0, 50, 50)]]


def test_tall_rect_uses_cumulative_offsets_across_columns() -> None:
    cuts = CutTable({1: [100, 200]}, heights={1: 250})
    pages = place(Page(), SourceRect(1, 50, 250), Placement.ADJACENT, SETTING, cuts)
    assert len(pages) == 1
    assert [[(f.x, f.h) for f in col] for col in pages[0].columns] == [[(0, 100)], [(60, 100)], [(120, 50)]]


def test_carried_offset_applies_to_continuing_rect_only() -> None:
    cuts = CutTable({1: [100, 200]}, heights={1: 250})
    carried = SETTING.carrying(1, 100)
    # remainder [100, 250) only has the cut at 200 left
    pages = place(Page(), SourceRect(1, 50, 150), Placement.UNDER, carried, cuts)
    assert [[f.h for f in col] for col in pages[0].columns] == [[100], [50]]
    assert carried.carried_offset(2) == 0
