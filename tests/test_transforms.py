"""Tests for shift, buffer and convolve."""

from datetime import date, datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

from intervalset import Interval, IntervalSet, interval_set


def ivl(start, end) -> Interval:
    return Interval(start=start, end=end)


class TestShift:

    def test_shift(self):
        assert list(interval_set((0, 1)).shift(1)) == [ivl(1, 2)]

    def test_shift_keeps_gaps(self):
        s = interval_set((0, 1), (3, 5))
        assert list(s.shift(-10)) == [ivl(-10, -9), ivl(-7, -5)]

    def test_shift_updates_bounds(self):
        s = interval_set((0, 1), (3, 5)).shift(2)
        assert s.bounds == ivl(2, 7)

    def test_shift_leaves_original(self):
        s = interval_set((0, 1))
        s.shift(5)
        assert list(s) == [ivl(0, 1)]

    def test_shift_update_in_place(self):
        s = interval_set((0, 1))
        assert s.shift_update(3) is s
        assert list(s) == [ivl(3, 4)]
        assert s.min == 3

    def test_shift_empty(self):
        assert IntervalSet().shift(3).is_empty

    def test_shift_datetimes(self):
        start = datetime(2025, 1, 1, 9, tzinfo=timezone.utc)
        s = interval_set((start, start + timedelta(hours=1)))
        shifted = s.shift(timedelta(days=1))
        assert list(shifted) == [
            ivl(start + timedelta(days=1), start + timedelta(days=1, hours=1))
        ]

    def test_shift_dates_by_months(self):
        """Calendar offsets work as long as element + offset is defined."""
        s = interval_set((date(2025, 1, 1), date(2025, 1, 8)))
        assert list(s.shift(relativedelta(months=2))) == [
            ivl(date(2025, 3, 1), date(2025, 3, 8))
        ]

    def test_shift_drops_intervals_collapsed_by_month_clamping(self):
        """Jan 30 and Jan 31 both land on Feb 28, leaving nothing."""
        s = interval_set((date(2025, 1, 30), date(2025, 1, 31)))
        shifted = s.shift(relativedelta(months=1))
        assert shifted.is_empty
        assert len(shifted) == 0
        assert shifted.bounds is None

    def test_shift_merges_intervals_joined_by_month_clamping(self):
        """The gap between Jan 29 and Jan 30 closes once both map to Feb 28."""
        s = interval_set(
            (date(2025, 1, 1), date(2025, 1, 29)),
            (date(2025, 1, 30), date(2025, 2, 2)),
        )
        shifted = s.shift(relativedelta(months=1))
        assert list(shifted) == [ivl(date(2025, 2, 1), date(2025, 3, 2))]
        assert shifted.count == 1
        assert s.count == 2


class TestBuffer:

    def test_buffer_grows(self):
        assert list(interval_set((1, 2)).buffer(1, 2)) == [ivl(0, 4)]

    def test_buffer_shrinks_with_negative_margins(self):
        assert list(interval_set((0, 4)).buffer(-1, -2)) == [ivl(1, 2)]

    def test_buffer_drops_emptied_intervals(self):
        assert interval_set((1, 2)).buffer(-0.5, -0.5).is_empty

    def test_buffer_drops_only_short_intervals(self):
        s = interval_set((0, 1), (5, 10))
        assert list(s.buffer(-1, -1)) == [ivl(6, 9)]

    def test_buffer_merges_neighbors(self):
        s = interval_set((0, 1), (3, 4), (10, 11))
        assert list(s.buffer(1, 1)) == [ivl(-1, 5), ivl(9, 12)]

    def test_buffer_leaves_original(self):
        s = interval_set((1, 2))
        s.buffer(1, 1)
        assert list(s) == [ivl(1, 2)]

    def test_buffer_update_in_place(self):
        s = interval_set((1, 2))
        assert s.buffer_update(1, 0) is s
        assert list(s) == [ivl(0, 2)]

    def test_buffer_datetimes(self):
        start = datetime(2025, 1, 1, 9, tzinfo=timezone.utc)
        end = datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
        s = interval_set((start, end), (end + timedelta(minutes=20), end + timedelta(hours=1)))

        buffered = s.buffer(timedelta(minutes=15), timedelta(minutes=15))

        assert list(buffered) == [
            ivl(start - timedelta(minutes=15), end + timedelta(hours=1, minutes=15))
        ]


class TestConvolve:

    def test_convolve_with_element_is_shift(self):
        s = interval_set((0, 1), (3, 5))
        assert s.convolve(4) == s.shift(4)
        assert s * 4 == s.shift(4)

    def test_convolve_with_interval_buffers(self):
        assert list(interval_set((0, 4)) * ivl(-1, 2)) == [ivl(-1, 6)]

    def test_convolve_with_interval_matches_buffer(self):
        s = interval_set((0, 1), (3, 5), (9, 10))
        assert s.convolve(ivl(-2, 3)) == s.buffer(2, 3)

    def test_convolve_with_empty_interval(self):
        assert (interval_set((0, 4)) * ivl(0, 0)).is_empty

    def test_convolve_with_reversed_interval(self):
        """A reversed offset interval gives the empty set, unlike buffer's shrinking."""
        assert (interval_set((0, 4)) * ivl(1, 0)).is_empty
        assert not interval_set((0, 4)).buffer(-1, 0).is_empty

    def test_convolve_with_interval_set(self):
        a = interval_set((0, 1), (10, 12))
        b = interval_set((-2, 1), (1, 2))
        assert list(a * b) == [ivl(-2, 3), ivl(8, 14)]

    def test_convolve_with_empty_set(self):
        assert (interval_set((0, 1), (5, 6)) * IntervalSet()).is_empty

    def test_convolve_with_single_point_set_is_shift(self):
        a = interval_set((0, 1), (10, 12))
        assert a * interval_set((3, 4)) == a.buffer(-3, 4)

    def test_convolve_with_self(self):
        a = interval_set((0, 1), (3, 4))
        assert list(a * a) == [ivl(0, 2), ivl(3, 5), ivl(6, 8)]
        assert list(a) == [ivl(0, 1), ivl(3, 4)]

    def test_convolve_update_with_self(self):
        a = interval_set((0, 1), (3, 4))
        assert a.convolve_update(a) is a
        assert list(a) == [ivl(0, 2), ivl(3, 5), ivl(6, 8)]

    def test_convolve_leaves_operands_alone(self):
        a = interval_set((0, 1))
        b = interval_set((1, 2))
        a.convolve(b)
        assert list(a) == [ivl(0, 1)]
        assert list(b) == [ivl(1, 2)]

    def test_convolve_datetimes_with_timedelta_offsets(self):
        start = datetime(2025, 1, 1, 9, tzinfo=timezone.utc)
        s = interval_set((start, start + timedelta(hours=1)))
        offsets = ivl(timedelta(minutes=-10), timedelta(minutes=5))

        assert list(s * offsets) == [
            ivl(start - timedelta(minutes=10), start + timedelta(hours=1, minutes=5))
        ]
