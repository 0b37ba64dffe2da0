"""Generates human-readable explanations for weekly status reports."""

from typing import List

from models.report import MemberStatusDetail, WeeklyStatusReport, ContinuationProfile


def _ids(details) -> str:
    if not details:
        return "none"
    return ", ".join(d.member_id for d in details)


def _switch_line(detail: MemberStatusDetail) -> str:
    previous = detail.previous_project_name or "previous assignment"
    current = detail.project_name or "new assignment"
    return f"{detail.member_id}: {previous} -> {current} on {detail.status_change_date.isoformat()}"


def explain_report(report: WeeklyStatusReport) -> List[str]:
    """Produce a step-by-step explanation of how the week's counts were reached."""
    week = report.week
    summary = report.summary
    steps = []

    steps.append(
        f"Step 1 - Week: {week.year}/{week.month} week {week.week_in_month} "
        f"covers {week.start_date.isoformat()} (Sat) to {week.end_date.isoformat()} (Fri)"
    )

    steps.append(
        f"Step 2 - Contract ended: {summary.contract_ended} member(s) "
        f"with a contract end date in the week [{_ids(report.contract_ended)}]"
    )

    steps.append(
        f"Step 3 - Project ended: {summary.project_ended} member(s) whose last work "
        f"ended in the week and were not already counted [{_ids(report.project_ended)}]"
    )

    steps.append(
        f"Step 4 - Switching: {summary.switching} member(s) started a new assignment "
        f"after a previous one ended [{_ids(report.switching)}]"
    )
    for detail in report.switching:
        steps.append(f"    {_switch_line(detail)}")

    steps.append(
        f"Step 5 - New started: {summary.new_started} member(s) "
        f"started work in the week [{_ids(report.new_started)}]"
    )

    steps.append(
        f"Step 6 - Counseling started (counted independently): "
        f"{summary.counseling_started} [{_ids(report.counseling_started)}]"
    )

    steps.append(
        f"Step 7 - Headcount: {summary.opening_active_members} active going in, "
        f"{summary.total_active_members} active at week end "
        f"(net {summary.net_change:+d}, turnover {summary.turnover_rate}%, growth {summary.growth_rate}%)"
    )

    if report.diagnostics:
        steps.append(f"Note: {len(report.diagnostics)} data-quality warning(s) recorded:")
        steps.extend(f"    {message}" for message in report.diagnostics)

    return steps


def explain_continuation(profile: ContinuationProfile) -> List[str]:
    """One line per lookback window."""
    lines = []
    for name, detail in profile.rates.items():
        lines.append(
            f"{name} ({detail.window_days} days to {profile.reference_date.isoformat()}): "
            f"{detail.continued_count} of {detail.target_count} still working => {detail.rate}%"
        )
    return lines
