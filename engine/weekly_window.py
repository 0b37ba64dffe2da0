"""Four-week status table around a selected week, labelled by the majority-vote rule."""

from datetime import timedelta
from typing import Iterable, List, Optional

import pandas as pd

from models.member import MemberRecord
from models.report import WeeklyWindowRow
from engine.fiscal_calendar import weeks_assigned_to_month, majority_week_of
from engine.status_aggregator import classify
from config.defaults import WINDOW_WEEK_OFFSETS, DAYS_PER_WEEK


def build_weekly_window(
    members: Iterable[MemberRecord],
    year: int,
    month: int,
    week_in_month: int,
    rule_config: Optional[dict] = None,
) -> List[WeeklyWindowRow]:
    """Classify the weeks around ``(year, month, week_in_month)``.

    The selected week is looked up among the month's majority-assigned weeks, with
    out-of-range numbers clamped to the first or last week. The final offset is
    flagged as a projection.
    """
    cfg = rule_config or {}
    offsets = cfg.get("window_week_offsets", WINDOW_WEEK_OFFSETS)
    roster = list(members)

    weeks = weeks_assigned_to_month(year, month)
    index = max(0, min(week_in_month - 1, len(weeks) - 1))
    selected_start = weeks[index].start_date
    last_offset = max(offsets)

    rows = []
    for position, offset in enumerate(offsets, start=1):
        week = majority_week_of(selected_start + timedelta(days=offset * DAYS_PER_WEEK))
        rows.append(WeeklyWindowRow(
            position=position,
            week=week,
            report=classify(roster, week, rule_config),
            is_projection=offset > 0 and offset == last_offset,
        ))
    return rows


def window_to_frame(rows: List[WeeklyWindowRow]) -> pd.DataFrame:
    """Flatten window rows into one DataFrame row per week."""
    records = []
    for row in rows:
        summary = row.report.summary
        records.append({
            "Week": row.label,
            "Week Key": row.week.week_key,
            "Start Date": row.week.start_date,
            "End Date": row.week.end_date,
            "Projected": row.is_projection,
            "Total Workers": summary.total_active_members,
            "Total Started": summary.total_started,
            "New Started": summary.new_started,
            "Switching": summary.switching,
            "Total Ended": summary.total_ended,
            "Project Ended": summary.project_ended,
            "Contract Ended": summary.contract_ended,
            "Counseling Started": summary.counseling_started,
            "Net Change": summary.net_change,
            "Diagnostics": len(row.report.diagnostics),
        })
    return pd.DataFrame(records)
