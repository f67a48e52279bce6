"""
Tests for the efficiency aggregator reductions.
"""

from datetime import date, datetime

import pytest

from linedash.domain.efficiency import (
    ReportWindow,
    TimeGrouping,
    aggregate_box_efficiency,
    aggregate_throughput,
    aggregate_time_plan,
    percentage_change,
    round_to,
)
from linedash.tests.utils.factories import make_snapshot

WINDOW = ReportWindow.for_days(date(2024, 3, 4), date(2024, 3, 10))


class TestThroughput:
    """Average boxes per hour per (product, line) against planned speed."""

    def test_single_group_on_plan(self):
        """Entries averaging exactly the planned speed give efficiency 1."""
        order = make_snapshot(planned_speed=10.0, hourly_boxes=[12, 8, 10])

        report = aggregate_throughput([order], WINDOW)

        assert len(report.data) == 1
        row = report.data[0]
        assert row.average_boxes_per_hour == 10.0
        assert row.planned_speed == 10.0
        assert row.efficiency == 1.0
        assert row.deviation == 0.0
        assert row.total_records == 3
        assert report.average_efficiency == 1.0
        assert report.total_groups == 1

    def test_orders_of_same_pair_are_pooled(self):
        """Buckets of every order of a pair are averaged together."""
        first = make_snapshot(order_id=1, hourly_boxes=[10, 10])
        second = make_snapshot(order_id=2, hourly_boxes=[16])

        report = aggregate_throughput([first, second], WINDOW)

        row = report.data[0]
        assert row.total_records == 3
        assert row.average_boxes_per_hour == 12.0
        assert row.efficiency == 1.2
        assert row.deviation == 20.0

    def test_zero_box_entries_are_not_buckets(self):
        order = make_snapshot(hourly_boxes=[0, 12, 0])

        row = aggregate_throughput([order], WINDOW).data[0]

        assert row.total_records == 1
        assert row.average_boxes_per_hour == 12.0

    def test_entries_outside_window_are_ignored(self):
        """Only buckets timestamped inside the window count."""
        order = make_snapshot(
            hourly_boxes=[10, 20, 30], start=datetime(2024, 3, 10, 22, 0)
        )

        row = aggregate_throughput([order], WINDOW).data[0]

        # 22:00 and 23:00 fall inside, 00:00 on the 11th does not
        assert row.total_records == 2
        assert row.average_boxes_per_hour == 15.0

    def test_zero_planned_speed_is_absent(self):
        """A pair without planned speed is left out of data and summaries."""
        skipped = []
        order = make_snapshot(planned_speed=0.0, hourly_boxes=[12, 12])

        report = aggregate_throughput(
            [order], WINDOW, on_skip=lambda o, reason: skipped.append((o.order_id, reason))
        )

        assert report.data == []
        assert report.total_groups == 0
        assert report.average_efficiency == 0.0
        assert skipped == [(1, "no_planned_speed")]

    def test_missing_planned_speed_is_absent(self):
        order = make_snapshot(planned_speed=None, hourly_boxes=[12])

        assert aggregate_throughput([order], WINDOW).data == []

    def test_summary_and_sorting(self):
        """Rows sort by absolute deviation; deviation averages split by sign."""
        above = make_snapshot(order_id=1, product_id=1, hourly_boxes=[12])
        below = make_snapshot(order_id=2, product_id=2, hourly_boxes=[8])
        close = make_snapshot(order_id=3, product_id=3, hourly_boxes=[9, 10])

        report = aggregate_throughput([close, below, above], WINDOW)

        assert [row.product_id for row in report.data] == [1, 2, 3]
        assert [row.deviation for row in report.data] == [20.0, -20.0, -5.0]
        assert report.positive_deviation_average == 20.0
        assert report.negative_deviation_average == -12.5
        assert report.average_efficiency == 0.98
        assert report.total_groups == 3

    def test_deviation_averages_weigh_groups_equally(self):
        """Two orders pooled into one group count once in the summary."""
        orders = [
            make_snapshot(order_id=1, product_id=1, hourly_boxes=[14]),
            make_snapshot(order_id=2, product_id=1, hourly_boxes=[14, 14, 14]),
            make_snapshot(order_id=3, product_id=2, hourly_boxes=[12]),
        ]

        report = aggregate_throughput(orders, WINDOW)

        assert [row.deviation for row in report.data] == [40.0, 20.0]
        assert report.positive_deviation_average == 30.0

    def test_limit_truncates_after_summary(self):
        orders = [
            make_snapshot(order_id=1, product_id=1, hourly_boxes=[12]),
            make_snapshot(order_id=2, product_id=2, hourly_boxes=[8]),
            make_snapshot(order_id=3, product_id=3, hourly_boxes=[9, 10]),
        ]

        full = aggregate_throughput(orders, WINDOW)
        limited = aggregate_throughput(orders, WINDOW, limit=1)

        assert len(limited.data) == 1
        assert limited.data[0] == full.data[0]
        assert limited.average_efficiency == full.average_efficiency
        assert limited.positive_deviation_average == full.positive_deviation_average
        assert limited.negative_deviation_average == full.negative_deviation_average
        assert limited.total_groups == 3

    def test_limit_zero_means_unlimited(self):
        orders = [
            make_snapshot(order_id=i, product_id=i, hourly_boxes=[i + 5])
            for i in range(1, 5)
        ]

        assert len(aggregate_throughput(orders, WINDOW, limit=0).data) == 4

    def test_empty_input(self):
        report = aggregate_throughput([], WINDOW)

        assert report.data == []
        assert report.average_efficiency == 0.0
        assert report.positive_deviation_average == 0.0
        assert report.negative_deviation_average == 0.0
        assert report.total_groups == 0


class TestTimePlan:
    """Planned vs. actual hours per shift, operator proxy or line."""

    def _worked_example(self):
        # 9 hourly entries (120 boxes) against 100 planned boxes over 8h
        order_a = make_snapshot(
            order_id=1,
            planned_boxes=100,
            planned_hours=8.0,
            hourly_boxes=[14, 14, 14, 14, 14, 14, 14, 14, 8],
        )
        # 4 hourly entries (48 boxes) against 50 planned boxes over 5h
        order_b = make_snapshot(
            order_id=2,
            planned_boxes=50,
            planned_hours=5.0,
            hourly_boxes=[12, 12, 12, 12],
        )
        return [order_a, order_b]

    def test_worked_example_by_operator(self):
        """Two qualifying orders on one line+shift land exactly on plan."""
        report = aggregate_time_plan(self._worked_example(), TimeGrouping.OPERATOR)

        assert len(report.data) == 1
        row = report.data[0]
        assert row.group_id == "1-turno-1"
        assert row.planned_hours == 13.0
        assert row.actual_hours == 13.0
        assert row.difference == 0.0
        assert row.deviation_percentage == 0.0
        assert row.total_orders == 2
        assert row.average_completion == 108.0
        assert report.completed_only is True

    def test_worked_example_by_shift(self):
        row = aggregate_time_plan(self._worked_example(), TimeGrouping.SHIFT).data[0]

        assert row.group_id == "1"
        assert row.name == "Turno 1"
        assert row.planned_hours == 13.0
        assert row.actual_hours == 13.0

    def test_finalization_hours_add_to_actual(self):
        """Residual hours plus one hour per entry, rounded half away from zero."""
        order = make_snapshot(
            planned_hours=8.0,
            planned_boxes=70,
            hourly_boxes=[10] * 7,
            finalization_hours=(0.5,),
        )

        row = aggregate_time_plan([order], TimeGrouping.LINE).data[0]

        assert row.group_id == "1"
        assert row.name == "Linea 1"
        assert row.actual_hours == 7.5
        assert row.difference == -0.5
        assert row.deviation_percentage == -6.3

    def test_incomplete_orders_excluded_by_default(self):
        complete = make_snapshot(order_id=1, planned_boxes=100, produced_boxes=95)
        incomplete = make_snapshot(order_id=2, planned_boxes=100, produced_boxes=94)

        default = aggregate_time_plan([complete, incomplete], TimeGrouping.SHIFT)
        included = aggregate_time_plan(
            [complete, incomplete], TimeGrouping.SHIFT, include_incomplete=True
        )

        assert default.data[0].total_orders == 1
        assert included.data[0].total_orders == 2
        assert included.completed_only is False

    def test_threshold_is_configurable(self):
        order = make_snapshot(planned_boxes=100, produced_boxes=80)

        assert aggregate_time_plan([order], TimeGrouping.SHIFT).data == []
        assert (
            len(
                aggregate_time_plan(
                    [order], TimeGrouping.SHIFT, completion_threshold=80.0
                ).data
            )
            == 1
        )

    @pytest.mark.parametrize("planned_hours", [None, 0.0])
    def test_orders_without_planned_time_are_skipped(self, planned_hours):
        skipped = []
        order = make_snapshot(planned_hours=planned_hours, hourly_boxes=[100])

        report = aggregate_time_plan(
            [order],
            TimeGrouping.SHIFT,
            on_skip=lambda o, reason: skipped.append(reason),
        )

        assert report.data == []
        assert skipped == ["no_planned_time"]

    def test_orders_without_shift_are_skipped(self):
        skipped = []
        order = make_snapshot(shift=None, hourly_boxes=[100])

        report = aggregate_time_plan(
            [order],
            TimeGrouping.SHIFT,
            on_skip=lambda o, reason: skipped.append(reason),
        )

        assert report.data == []
        assert skipped == ["no_shift"]

    def test_groups_sorted_and_summarised(self):
        """Shift 1 runs 50% over plan, shift 2 25% under, shift 3 on plan."""
        orders = [
            make_snapshot(
                order_id=1, shift=2, planned_hours=4.0, planned_boxes=75,
                hourly_boxes=[25] * 3,
            ),
            make_snapshot(
                order_id=2, shift=1, planned_hours=2.0, planned_boxes=75,
                hourly_boxes=[25] * 3,
            ),
            make_snapshot(
                order_id=3, shift=3, planned_hours=2.0, planned_boxes=50,
                hourly_boxes=[25] * 2,
            ),
        ]

        report = aggregate_time_plan(orders, TimeGrouping.SHIFT, limit=2)

        assert [row.group_id for row in report.data] == ["1", "2"]
        assert [row.deviation_percentage for row in report.data] == [50.0, -25.0]
        assert report.positive_deviation_average == 50.0
        assert report.negative_deviation_average == -25.0
        assert report.total_groups == 3

    def test_empty_input(self):
        report = aggregate_time_plan([], TimeGrouping.LINE)

        assert report.data == []
        assert report.positive_deviation_average == 0.0
        assert report.negative_deviation_average == 0.0
        assert report.total_groups == 0


class TestBoxEfficiency:
    """Produced vs. planned boxes per line and per shift."""

    def test_by_line_averages_ratios(self):
        orders = [
            make_snapshot(order_id=1, line_id=1, planned_boxes=100, produced_boxes=90),
            make_snapshot(order_id=2, line_id=2, planned_boxes=100, produced_boxes=110),
            make_snapshot(order_id=3, line_id=2, planned_boxes=100, produced_boxes=110),
        ]

        report = aggregate_box_efficiency(orders, TimeGrouping.LINE)

        assert [row.group_id for row in report.data] == ["2", "1"]
        assert [row.efficiency for row in report.data] == [1.1, 0.9]
        assert report.average_efficiency == 1.0
        assert report.total_produced == 310
        assert report.total_planned == 300

    def test_by_shift_pools_totals(self):
        orders = [
            make_snapshot(order_id=1, shift=1, planned_boxes=100, produced_boxes=100),
            make_snapshot(order_id=2, shift=2, planned_boxes=300, produced_boxes=150),
        ]

        report = aggregate_box_efficiency(orders, TimeGrouping.SHIFT, pooled_average=True)

        assert [row.name for row in report.data] == ["Turno 1", "Turno 2"]
        # 250 / 400 rather than the mean of 1.0 and 0.5
        assert report.average_efficiency == 0.63

    def test_orders_without_planned_boxes_are_ignored(self):
        order = make_snapshot(planned_boxes=0, produced_boxes=50)

        report = aggregate_box_efficiency([order], TimeGrouping.LINE)

        assert report.data == []
        assert report.average_efficiency == 0.0


class TestHelpers:
    @pytest.mark.parametrize(
        "current,previous,expected",
        [
            (110.0, 100.0, 10.0),
            (50.0, 100.0, -50.0),
            (5.0, 0.0, 100.0),
            (0.0, 0.0, 0.0),
            (-1.0, -2.0, 50.0),
        ],
    )
    def test_percentage_change(self, current, previous, expected):
        assert percentage_change(current, previous) == expected

    @pytest.mark.parametrize(
        "value,digits,expected",
        [(0.125, 2, 0.13), (-6.25, 1, -6.3), (2.5, 0, 3.0), (1.0049, 2, 1.0)],
    )
    def test_round_to_half_away_from_zero(self, value, digits, expected):
        assert round_to(value, digits) == expected
