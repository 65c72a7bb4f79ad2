from __future__ import annotations

from sesh.workout.estimator import estimate_total_sec, format_clock
from sesh.workout.model import TimedItem


def _item(work: int, rest: int, reps: int, sets: int, rest_set: int = 0) -> TimedItem:
    return TimedItem(
        label="Half-Crimp",
        work_sec=work,
        rest_rep_sec=rest,
        reps=reps,
        sets=sets,
        rest_set_sec=rest_set,
    )


def test_empty_list_is_zero_for_any_prep() -> None:
    assert estimate_total_sec([], 0) == 0
    assert estimate_total_sec([], 5) == 0
    assert estimate_total_sec([], -3) == 0


def test_single_item_with_prep() -> None:
    assert estimate_total_sec([_item(7, 180, 2, 1)], 5) == 199


def test_rest_between_sets_and_prep_between_items() -> None:
    items = [_item(7, 3, 6, 3, rest_set=120), _item(10, 180, 2, 1)]
    first = 3 * (6 * 7 + 5 * 3) + 2 * 120
    second = 2 * 10 + 180
    assert estimate_total_sec(items, 5) == 5 + first + 5 + second


def test_invalid_items_are_ignored_without_extra_prep() -> None:
    valid = _item(7, 180, 2, 1)
    items = [_item(0, 10, 2, 1), valid, _item(7, 10, 0, 1), _item(7, 10, 2, 0)]
    assert estimate_total_sec(items, 5) == estimate_total_sec([valid], 5) == 199
    assert estimate_total_sec([_item(0, 10, 2, 1)], 5) == 0


def test_negative_prep_counts_as_zero() -> None:
    items = [_item(7, 180, 2, 1), _item(7, 180, 2, 1)]
    assert estimate_total_sec(items, -1) == 2 * 194
    assert estimate_total_sec(items, 0) == 2 * 194


def test_format_clock() -> None:
    assert format_clock(0) == "00:00"
    assert format_clock(199) == "03:19"
    assert format_clock(3600) == "60:00"
    assert format_clock(-4) == "00:00"
