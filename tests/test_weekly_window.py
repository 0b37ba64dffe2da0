"""Tests for the four-week status window."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import date

import pytest

from models.member import MemberRecord
from engine.weekly_window import build_weekly_window, window_to_frame


def make_member(member_id, start=None, end=None):
    return MemberRecord(id=member_id, status="working", last_work_start_date=start, last_work_end_date=end)


class TestBuildWeeklyWindow:
    def test_weeks_around_first_week_of_august(self):
        rows = build_weekly_window([], 2025, 8, 1)
        assert [r.week.start_date for r in rows] == [
            date(2025, 7, 19), date(2025, 7, 26), date(2025, 8, 2), date(2025, 8, 9),
        ]
        assert [r.label for r in rows] == ["7/W4", "7/W5", "8/W1", "8/W2 (projected)"]
        assert [r.position for r in rows] == [1, 2, 3, 4]
        assert [r.is_projection for r in rows] == [False, False, False, True]

    def test_out_of_range_week_is_clamped(self):
        rows = build_weekly_window([], 2025, 8, 5)
        assert rows[2].week.start_date == date(2025, 8, 23)
        assert rows[2].label == "8/W4"

    def test_counts_per_week(self):
        members = [
            make_member("A", start=date(2025, 8, 4)),
            make_member("B", start=date(2025, 1, 6), end=date(2025, 7, 28)),
            make_member("C", start=date(2025, 1, 6)),
        ]
        rows = build_weekly_window(members, 2025, 8, 1)
        assert rows[2].report.summary.new_started == 1
        assert rows[1].report.summary.project_ended == 1
        assert [r.report.total_active_members for r in rows] == [2, 1, 2, 2]

    def test_custom_offsets(self):
        rows = build_weekly_window([], 2025, 8, 2, rule_config={"window_week_offsets": [0, 1, 2]})
        assert [r.week.start_date for r in rows] == [date(2025, 8, 9), date(2025, 8, 16), date(2025, 8, 23)]
        assert [r.is_projection for r in rows] == [False, False, True]


class TestWindowToFrame:
    def test_one_row_per_week(self):
        members = [make_member("A", start=date(2025, 8, 4))]
        df = window_to_frame(build_weekly_window(members, 2025, 8, 1))
        assert len(df) == 4
        assert list(df["Week"]) == ["7/W4", "7/W5", "8/W1", "8/W2 (projected)"]
        assert df.loc[2, "New Started"] == 1
        assert df.loc[2, "Total Workers"] == 1
        assert df.loc[3, "Projected"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
