"""Continuation rates: share of recently started members still working at a reference date."""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from loguru import logger

from models.member import MemberRecord
from models.report import ContinuationRateDetail, ContinuationProfile
from engine.fiscal_calendar import as_date
from engine.status_aggregator import dedupe_members, is_active_at, rounded_rate
from config.defaults import CONTINUATION_WINDOWS, JOB_CATEGORIES, RATE_DECIMALS, UNCATEGORIZED


def first_start_date(member: MemberRecord) -> Optional[date]:
    """First day the member ever worked.

    Prefers the synced first-start field, then the latest start, then the earliest
    work history row that is not inverted.
    """
    if member.first_work_start_date is not None:
        return member.first_work_start_date
    if member.last_work_start_date is not None:
        return member.last_work_start_date
    starts = [h.start_date for h in member.work_history if not h.is_inverted]
    return min(starts) if starts else None


def _rate_detail(
    targets: List[MemberRecord],
    reference_date: date,
    window_days: int,
    decimals: int,
) -> ContinuationRateDetail:
    continued = sum(1 for m in targets if is_active_at(m, reference_date))
    return ContinuationRateDetail(
        window_days=window_days,
        target_count=len(targets),
        continued_count=continued,
        rate=rounded_rate(continued, len(targets), decimals),
    )


def _continuation_rate(
    roster: List[MemberRecord],
    reference_date: date,
    window_days: int,
    cfg: dict,
) -> ContinuationRateDetail:
    if not isinstance(window_days, int) or isinstance(window_days, bool) or window_days < 0:
        raise ValueError(f"window_days must be a non-negative int, got {window_days!r}")
    decimals = cfg.get("rate_decimals", RATE_DECIMALS)
    categories = list(cfg.get("job_categories", JOB_CATEGORIES))

    window_start = reference_date - timedelta(days=window_days)
    targets = []
    for member in roster:
        started = first_start_date(member)
        if started is not None and window_start <= started <= reference_date:
            targets.append(member)

    for member in targets:
        category = member.job_category or UNCATEGORIZED
        if category not in categories:
            categories.append(category)

    by_category = {
        category: _rate_detail(
            [m for m in targets if (m.job_category or UNCATEGORIZED) == category],
            reference_date, window_days, decimals,
        )
        for category in categories
    }
    overall = _rate_detail(targets, reference_date, window_days, decimals)
    return ContinuationRateDetail(
        window_days=window_days,
        target_count=overall.target_count,
        continued_count=overall.continued_count,
        rate=overall.rate,
        by_category=by_category,
    )


def _unique_roster(members: Iterable[MemberRecord]) -> List[MemberRecord]:
    roster, diagnostics = dedupe_members(members)
    for message in diagnostics:
        logger.warning(message)
    return roster


def continuation_rate(
    members: Iterable[MemberRecord],
    reference_date: date,
    window_days: int,
    rule_config: Optional[dict] = None,
) -> ContinuationRateDetail:
    """Continuation rate for members whose first start lies in the trailing window.

    The window is ``[reference_date - window_days, reference_date]``, both ends
    inclusive. An empty target population yields a zero rate rather than an error.
    Repeated member ids count once (first record kept), as in ``classify``.
    """
    reference_date = as_date(reference_date)
    return _continuation_rate(_unique_roster(members), reference_date, window_days, rule_config or {})


def continuation_profile(
    members: Iterable[MemberRecord],
    reference_date: date,
    rule_config: Optional[dict] = None,
) -> ContinuationProfile:
    """Continuation rates for every configured lookback window (1 month .. 1 year)."""
    cfg = rule_config or {}
    windows = cfg.get("continuation_windows", CONTINUATION_WINDOWS)
    reference_date = as_date(reference_date)
    roster = _unique_roster(members)

    rates = {
        name: _continuation_rate(roster, reference_date, days, cfg)
        for name, days in windows.items()
    }
    logger.debug(
        f"Continuation rates at {reference_date}: "
        + ", ".join(f"{name}={detail.rate}% ({detail.continued_count}/{detail.target_count})"
                    for name, detail in rates.items())
    )
    return ContinuationProfile(reference_date=reference_date, rates=rates)
