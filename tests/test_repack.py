from __future__ import annotations

from colpack.cuts import CutTable
from colpack.layout import Fragment, Page, PageSetting, clone_page, column_heights
from colpack.repack import is_valid_page, repack_page, update_x, update_y


SETTING = PageSetting(width=400, height=100, spacing=10, padding=5)


def _three_column_page() -> Page:
    return Page(columns=[
        [Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 50, 30)],
        [Fragment(3, 60, 0, 50, 80)],
        [Fragment(4, 120, 0, 50, 60)],
    ])


def test_repack_valid_page_is_idempotent() -> None:
    page = _three_column_page()
    before = clone_page(page)
    repack_page(page, SETTING, CutTable({}))
    assert page == before


def test_update_x_from_widths_and_spacing() -> None:
    page = Page(columns=[
        [Fragment(1, 5, 0, 50, 10), Fragment(2, 5, 15, 70, 10)],
        [Fragment(3, 0, 0, 40, 10)],
        [Fragment(4, 0, 0, 30, 10)],
    ])
    update_x(page, SETTING)
    assert [c[0].x for c in page.columns] == [0, 80, 130]
    assert page.columns[0][1].x == 0


def test_overflow_is_cut_at_permitted_offset() -> None:
    page = Page(columns=[[Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 50, 50)]])
    cuts = CutTable({2: [30]}, heights={2: 50})
    update_y(page, SETTING, cuts, 0)

    assert page.columns[0] == [Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 50, 30)]
    assert page.columns[1] == [Fragment(2, 60, 0, 50, 20)]
    assert is_valid_page(page, SETTING)


def test_overflow_without_cut_moves_to_next_column() -> None:
    page = Page(columns=[
        [Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 50, 50)],
        [Fragment(3, 60, 0, 50, 20)],
    ])
    update_y(page, SETTING, CutTable({}), 0)

    assert page.columns[0] == [Fragment(1, 0, 0, 50, 60)]
    assert page.columns[1] == [Fragment(2, 60, 0, 50, 50), Fragment(3, 60, 55, 50, 20)]


def test_overflow_cascades_through_columns() -> None:
    page = Page(columns=[
        [Fragment(1, 0, 0, 50, 60), Fragment(2, 0, 65, 50, 50)],
        [Fragment(3, 60, 0, 50, 60)],
    ])
    update_y(page, SETTING, CutTable({}), 0)
    update_x(page, SETTING)

    assert column_heights(page) == [60, 50, 60]
    assert [c[0].uid for c in page.columns] == [1, 2, 3]
    assert [c[0].x for c in page.columns] == [0, 60, 120]


def test_pieces_of_one_rect_merge_when_they_meet() -> None:
    page = Page(columns=[[Fragment(7, 0, 0, 50, 30), Fragment(7, 0, 35, 50, 20)]])
    update_y(page, SETTING, CutTable({7: [30]}), 0)
    assert page.columns == [[Fragment(7, 0, 0, 50, 50)]]


def test_empty_columns_are_removed() -> None:
    page = Page(columns=[[Fragment(1, 0, 0, 50, 10)], [], [Fragment(2, 120, 0, 40, 10)]])
    update_y(page, SETTING, CutTable({}), 1)
    update_x(page, SETTING)
    assert len(page.columns) == 2
    assert page.columns[1] == [Fragment(2, 60, 0, 40, 10)]


def test_uncuttable_top_fragment_is_left_for_validity_check() -> None:
    page = Page(columns=[[Fragment(1, 0, 0, 50, 120)]])
    update_y(page, SETTING, CutTable({}), 0)
    assert len(page.columns) == 1
    assert not is_valid_page(page, SETTING)


def test_page_wider_than_setting_is_invalid() -> None:
    page = Page(columns=[[Fragment(1, 0, 0, 50, 10)], [Fragment(2, 360, 0, 50, 10)]])
    assert not is_valid_page(page, SETTING)
