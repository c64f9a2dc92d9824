# tests/test_intervals.py

from autolineweight.core.intervals import Interval, difference, merge, total_length


def test_interval_normalises_decreasing():
    iv = Interval(6, 3)
    assert not iv.is_increasing
    assert iv.increasing() == Interval(3, 6)
    assert iv.min == 3.0 and iv.max == 6.0
    assert iv.length == 3.0


def test_overlaps_excludes_touching_endpoints():
    assert Interval(0, 3).overlaps(Interval(2, 5))
    assert not Interval(0, 3).overlaps(Interval(3, 5))


def test_difference_splits_straddling_interval():
    assert difference([Interval(0, 10)], Interval(3, 6)) == [Interval(0, 3), Interval(6, 10)]


def test_difference_keeps_touching_interval_whole():
    assert difference([Interval(0, 3)], Interval(3, 6)) == [Interval(0, 3)]
    assert difference([Interval(6, 10)], Interval(3, 6)) == [Interval(6, 10)]


def test_difference_removes_covered_interval():
    assert difference([Interval(4, 5)], Interval(3, 6)) == []


def test_difference_accepts_decreasing_inputs():
    assert difference([Interval(10, 0)], Interval(6, 3)) == [Interval(0, 3), Interval(6, 10)]


def test_difference_is_idempotent():
    once = difference([Interval(0, 10), Interval(12, 20)], Interval(5, 14))
    twice = difference(once, Interval(5, 14))
    assert once == twice
    assert once == [Interval(0, 5), Interval(14, 20)]


def test_merge_coalesces_overlapping_and_touching():
    assert merge([Interval(4, 7), Interval(2, 5)]) == [Interval(2, 7)]
    assert merge([Interval(0, 1), Interval(1, 2), Interval(5, 6)]) == [Interval(0, 2), Interval(5, 6)]


def test_merge_result_is_sorted_and_disjoint():
    out = merge([Interval(9, 8), Interval(0, 2), Interval(1, 3), Interval(5, 6)])
    assert out == [Interval(0, 3), Interval(5, 6), Interval(8, 9)]
    for a, b in zip(out, out[1:]):
        assert a.max < b.min


def test_merge_does_not_modify_input():
    src = [Interval(4, 7), Interval(2, 5)]
    merge(src)
    assert src == [Interval(4, 7), Interval(2, 5)]


def test_merge_empty():
    assert merge([]) == []


def test_total_length():
    assert total_length([Interval(0, 3), Interval(6, 10)]) == 7.0
