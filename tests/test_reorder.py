# tests/test_reorder.py
import pytest

from utils.reorder import reorder_siblings, sort_order_delta


def group(*ids):
    return [{"id": i, "sort_order": n} for n, i in enumerate(ids)]


def test_move_index_two_to_front():
    result = reorder_siblings(group("a", "b", "c", "d"), "c", 0)
    assert result == [{"id": "c", "sort_order": 0}, {"id": "a", "sort_order": 1},
                      {"id": "b", "sort_order": 2}, {"id": "d", "sort_order": 3}]


def test_move_down():
    result = reorder_siblings(group(1, 2, 3, 4), 1, 2)
    assert [r["id"] for r in result] == [2, 3, 1, 4]
    assert [r["sort_order"] for r in result] == [0, 1, 2, 3]


@pytest.mark.parametrize("new_index,expected", [(-3, 0), (0, 0), (3, 3), (10, 3)])
def test_moved_item_lands_at_clamped_index(new_index, expected):
    result = reorder_siblings(group(1, 2, 3, 4), 2, new_index)
    assert [r["id"] for r in result].index(2) == expected


def test_sparse_sort_orders_become_dense():
    siblings = [{"id": 1, "sort_order": 10}, {"id": 2, "sort_order": 40}, {"id": 3, "sort_order": 20}]
    result = reorder_siblings(siblings, 2, 0)
    assert result == [{"id": 2, "sort_order": 0}, {"id": 1, "sort_order": 1}, {"id": 3, "sort_order": 2}]


def test_unknown_id_is_a_no_op():
    before = group(1, 2, 3)
    after = reorder_siblings(before, 99, 0)
    assert after == before
    assert sort_order_delta(before, after) == []


def test_delta_only_has_changed_rows():
    before = group(1, 2, 3, 4)
    after = reorder_siblings(before, 2, 1)
    assert sort_order_delta(before, after) == []
    after = reorder_siblings(before, 4, 2)
    assert sort_order_delta(before, after) == [{"id": 4, "sort_order": 2}, {"id": 3, "sort_order": 3}]
