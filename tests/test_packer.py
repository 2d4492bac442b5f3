from __future__ import annotations

import pytest

from colpack import layout, packer
from colpack.cuts import CutTable
from colpack.layout import Fragment, LayoutError, PageSetting, SourceRect, iter_fragments
from colpack.packer import check_preconditions, is_horizontally_valid, pack_pages
from colpack.validate import validate_solution


def test_single_rect_single_page() -> None:
    setting = PageSetting(width=700, height=1000, spacing=10, padding=5)
    pages = pack_pages([SourceRect(1, 100, 300)], CutTable({}), setting)
    assert len(pages) == 1
    assert pages[0].columns == [[Fragment(1, 0, 0, 100, 300)]]


def test_tall_rect_with_one_cut_fills_two_columns() -> None:
    setting = PageSetting(width=700, height=1000, spacing=10, padding=5)
    rects = [SourceRect(1, 100, 1500)]
    cuts = CutTable({1: [600]}, heights={1: 1500})
    pages = pack_pages(rects, cuts, setting)

    assert len(pages) == 1
    assert [[f.h for f in col] for col in pages[0].columns] == [[600], [900]]
    validate_solution(rects, cuts, pages, setting)


def test_tall_rect_continues_on_next_page_when_width_is_used_up() -> None:
    setting = PageSetting(width=150, height=1000, spacing=10, padding=5)
    rects = [SourceRect(1, 100, 1500)]
    cuts = CutTable({1: [600]}, heights={1: 1500})
    pages = pack_pages(rects, cuts, setting)

    assert len(pages) == 2
    assert pages[0].columns == [[Fragment(1, 0, 0, 100, 600)]]
    assert pages[1].columns == [[Fragment(1, 0, 0, 100, 900)]]
    validate_solution(rects, cuts, pages, setting)


def test_two_equal_rects_share_one_column_on_narrow_page() -> None:
    setting = PageSetting(width=50, height=85, spacing=10, padding=5)
    rects = [SourceRect(1, 50, 40), SourceRect(2, 50, 40)]
    pages = pack_pages(rects, CutTable({}), setting)
    assert len(pages) == 1
    assert pages[0].columns == [[Fragment(1, 0, 0, 50, 40), Fragment(2, 0, 45, 50, 40)]]


def test_many_rects_are_conserved_and_inside_pages() -> None:
    setting = PageSetting(width=300, height=200, spacing=10, padding=5)
    sizes = [(60, 80), (90, 150), (40, 320), (120, 60), (70, 90), (50, 210), (100, 40), (80, 180)]
    rects = [SourceRect(i, w, h) for i, (w, h) in enumerate(sizes, start=1)]
    cuts = CutTable({2: [50, 100], 3: [100, 200, 280], 6: [70, 140], 8: [90]},
                    heights={r.uid: r.h for r in rects})

    for do_compress in (True, False):
        pages = pack_pages(rects, cuts, setting, do_compress=do_compress)
        validate_solution(rects, cuts, pages, setting)
        placed = {f.uid for p in pages for f in iter_fragments(p)}
        assert placed == {r.uid for r in rects}
        for p in pages:
            for f in iter_fragments(p):
                assert f.right <= setting.width and f.bottom <= setting.height


def test_pack_with_node_budget_still_places_everything() -> None:
    setting = PageSetting(width=300, height=200, spacing=10, padding=5)
    rects = [SourceRect(i, 40 + 10 * (i % 3), 30 + 20 * (i % 4)) for i in range(1, 13)]
    cuts = CutTable({}, heights={r.uid: r.h for r in rects})
    pages = pack_pages(rects, cuts, setting, max_nodes=3)
    validate_solution(rects, cuts, pages, setting)


def test_empty_input_gives_no_pages() -> None:
    assert pack_pages([], CutTable({}), PageSetting(width=100, height=100)) == []


def test_rect_wider_than_page_is_fatal() -> None:
    setting = PageSetting(width=100, height=100)
    rects = [SourceRect(1, 50, 50), SourceRect(2, 101, 50)]
    assert not is_horizontally_valid(rects, setting.width)
    with pytest.raises(LayoutError):
        pack_pages(rects, CutTable({}), setting)


def test_rect_taller_than_page_without_cut_is_fatal() -> None:
    setting = PageSetting(width=700, height=1000)
    with pytest.raises(LayoutError):
        pack_pages([SourceRect(1, 100, 1200)], CutTable({}), setting)


def test_every_rect_checked_up_front() -> None:
    setting = PageSetting(width=700, height=100)
    rects = [SourceRect(1, 50, 50), SourceRect(2, 50, 250)]
    # gap 130..250 is still taller than the page
    cuts = CutTable({2: [100, 130]}, heights={2: 250})
    with pytest.raises(LayoutError, match="uid=2"):
        check_preconditions(rects, cuts, setting)


def test_layout_error_is_runtime_error() -> None:
    assert packer.LayoutError is layout.LayoutError
    assert issubclass(LayoutError, RuntimeError)
