"""Weekly lifecycle classification: buckets members into start/switch/end events per week."""

from collections import Counter
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from models.member import MemberRecord, WorkHistoryEntry
from models.week import WeekDescriptor
from models.report import (
    ClassificationBucket, MemberStatusDetail, WeeklySummary, WeeklyStatusReport,
)
from engine.fiscal_calendar import as_date, week_range
from config.defaults import (
    RATE_DECIMALS, JOB_CATEGORIES, UNCATEGORIZED,
    REASON_PROJECT_ENDED, REASON_CONTRACT_ENDED,
)


def _in_week(day: Optional[date], week: WeekDescriptor) -> bool:
    return day is not None and week.start_date <= day <= week.end_date


def _contract_ended(member: MemberRecord, week: WeekDescriptor) -> bool:
    return _in_week(member.contract_end_date, week)


def _project_ended(member: MemberRecord, week: WeekDescriptor) -> bool:
    return _in_week(member.last_work_end_date, week)


def _switching(member: MemberRecord, week: WeekDescriptor) -> bool:
    return member.has_switched and _in_week(member.last_work_start_date, week)


def _new_started(member: MemberRecord, week: WeekDescriptor) -> bool:
    return _in_week(member.last_work_start_date, week) and not member.has_switched


# Evaluated top-down; the first match wins so one event is never counted twice.
CLASSIFICATION_RULES: List[Tuple[ClassificationBucket, Callable[[MemberRecord, WeekDescriptor], bool]]] = [
    (ClassificationBucket.CONTRACT_ENDED, _contract_ended),
    (ClassificationBucket.PROJECT_ENDED, _project_ended),
    (ClassificationBucket.SWITCHING, _switching),
    (ClassificationBucket.NEW_STARTED, _new_started),
]


def primary_bucket(member: MemberRecord, week: WeekDescriptor) -> Optional[ClassificationBucket]:
    """Highest-priority lifecycle bucket the member falls into this week, if any."""
    for bucket, predicate in CLASSIFICATION_RULES:
        if predicate(member, week):
            return bucket
    return None


def is_active_at(member: MemberRecord, on_date: date) -> bool:
    """Whether the member is working on ``on_date``.

    Started on or before the date, and the latest end (work end, else contract end)
    is missing, on or after the date, or older than the latest start (restarted).
    """
    on_date = as_date(on_date)
    start = member.last_work_start_date
    if start is None or start > on_date:
        return False
    end = member.effective_end_date
    if end is None or end < start:
        return True
    return end >= on_date


def rounded_rate(numerator: int, denominator: int, decimals: int = RATE_DECIMALS) -> float:
    """numerator / denominator as a percentage, half-up rounded; 0.0 for an empty base."""
    if denominator <= 0:
        return 0.0
    value = Decimal(numerator) * 100 / Decimal(denominator)
    return float(value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP))


def _clean_history(member: MemberRecord) -> List[WorkHistoryEntry]:
    return sorted(
        (h for h in member.work_history if not h.is_inverted),
        key=lambda h: h.start_date,
    )


def _project_started_on(member: MemberRecord, on_date: date) -> Optional[WorkHistoryEntry]:
    """Latest clean history entry that had started by ``on_date``."""
    started = [h for h in _clean_history(member) if h.start_date <= on_date]
    return started[-1] if started else None


def _project_ended_on(member: MemberRecord, on_date: date) -> Optional[WorkHistoryEntry]:
    for h in reversed(_clean_history(member)):
        if h.end_date == on_date:
            return h
    return _project_started_on(member, on_date)


def _previous_project(member: MemberRecord, before: date) -> Optional[WorkHistoryEntry]:
    earlier = [h for h in _clean_history(member) if h.start_date < before]
    return earlier[-1] if earlier else None


def _build_detail(member: MemberRecord, bucket: ClassificationBucket) -> MemberStatusDetail:
    base = dict(
        member_id=member.id,
        member_name=member.name,
        bucket=bucket,
        job_category=member.job_category,
    )
    if bucket == ClassificationBucket.CONTRACT_ENDED:
        entry = _project_ended_on(member, member.contract_end_date)
        return MemberStatusDetail(
            status_change_date=member.contract_end_date,
            project_name=entry.project_name if entry else None,
            reason=REASON_CONTRACT_ENDED,
            **base,
        )
    if bucket == ClassificationBucket.PROJECT_ENDED:
        entry = _project_ended_on(member, member.last_work_end_date)
        reason = entry.end_reason if entry and entry.end_reason else REASON_PROJECT_ENDED
        return MemberStatusDetail(
            status_change_date=member.last_work_end_date,
            project_name=entry.project_name if entry else None,
            reason=reason,
            **base,
        )
    if bucket == ClassificationBucket.COUNSELING_STARTED:
        return MemberStatusDetail(status_change_date=member.first_counseling_date, **base)

    started = member.last_work_start_date
    entry = _project_started_on(member, started)
    previous = None
    if bucket == ClassificationBucket.SWITCHING:
        previous = _previous_project(member, entry.start_date if entry else started)
    return MemberStatusDetail(
        status_change_date=started,
        project_name=entry.project_name if entry else None,
        previous_project_name=previous.project_name if previous else None,
        **base,
    )


def dedupe_members(members: Iterable[MemberRecord]) -> Tuple[List[MemberRecord], List[str]]:
    """First record per member id wins; later ones become diagnostics."""
    roster, seen, diagnostics = [], set(), []
    for member in members:
        if member.id in seen:
            diagnostics.append(f"Duplicate member id '{member.id}' skipped; first record kept.")
            continue
        seen.add(member.id)
        roster.append(member)
    return roster, diagnostics


def check_work_history(member: MemberRecord) -> List[str]:
    """Data-quality warnings for history rows that end before they start."""
    return [
        f"Member '{member.id}': work history '{h.project_name}' ends {h.end_date.isoformat()} "
        f"before it starts {h.start_date.isoformat()}; row ignored."
        for h in member.work_history
        if h.is_inverted
    ]


def _summarize(
    details: Dict[ClassificationBucket, List[MemberStatusDetail]],
    active_end: int,
    active_open: int,
    decimals: int,
) -> WeeklySummary:
    counts = {bucket: len(items) for bucket, items in details.items()}
    ended = counts[ClassificationBucket.PROJECT_ENDED] + counts[ClassificationBucket.CONTRACT_ENDED]
    started = counts[ClassificationBucket.NEW_STARTED] + counts[ClassificationBucket.SWITCHING]
    net = started - ended
    return WeeklySummary(
        new_started=counts[ClassificationBucket.NEW_STARTED],
        switching=counts[ClassificationBucket.SWITCHING],
        project_ended=counts[ClassificationBucket.PROJECT_ENDED],
        contract_ended=counts[ClassificationBucket.CONTRACT_ENDED],
        counseling_started=counts[ClassificationBucket.COUNSELING_STARTED],
        total_active_members=active_end,
        opening_active_members=active_open,
        turnover_rate=rounded_rate(ended, active_open, decimals),
        growth_rate=rounded_rate(net, active_open, decimals),
    )


def _sort_key(detail: MemberStatusDetail):
    return (detail.status_change_date, detail.member_id)


def classify(
    members: Iterable[MemberRecord],
    week: WeekDescriptor,
    rule_config: Optional[dict] = None,
) -> WeeklyStatusReport:
    """Classify every member against the inclusive ``week`` bounds."""
    cfg = rule_config or {}
    decimals = cfg.get("rate_decimals", RATE_DECIMALS)
    categories = list(cfg.get("job_categories", JOB_CATEGORIES))

    roster, diagnostics = dedupe_members(members)
    details: Dict[ClassificationBucket, List[MemberStatusDetail]] = {b: [] for b in ClassificationBucket}
    active_end: Counter = Counter()
    active_open: Counter = Counter()
    day_before = week.start_date - timedelta(days=1)

    for member in roster:
        diagnostics.extend(check_work_history(member))
        category = member.job_category or UNCATEGORIZED
        if category not in categories:
            categories.append(category)

        bucket = primary_bucket(member, week)
        if bucket is not None:
            details[bucket].append(_build_detail(member, bucket))
        # Counseling is tracked independently of the four primary buckets.
        if _in_week(member.first_counseling_date, week):
            details[ClassificationBucket.COUNSELING_STARTED].append(
                _build_detail(member, ClassificationBucket.COUNSELING_STARTED)
            )

        if is_active_at(member, week.end_date):
            active_end[category] += 1
        if is_active_at(member, day_before):
            active_open[category] += 1

    for message in diagnostics:
        logger.warning(message)

    for items in details.values():
        items.sort(key=_sort_key)

    summary = _summarize(details, sum(active_end.values()), sum(active_open.values()), decimals)
    by_category = {}
    for category in categories:
        subset = {
            bucket: [d for d in items if (d.job_category or UNCATEGORIZED) == category]
            for bucket, items in details.items()
        }
        by_category[category] = _summarize(subset, active_end[category], active_open[category], decimals)

    logger.debug(
        f"{week.week_key} ({week.start_date} - {week.end_date}): active={summary.total_active_members}, "
        f"new={summary.new_started}, switching={summary.switching}, "
        f"project_ended={summary.project_ended}, contract_ended={summary.contract_ended}, "
        f"counseling={summary.counseling_started}, diagnostics={len(diagnostics)}"
    )

    return WeeklyStatusReport(
        week=week,
        summary=summary,
        new_started=tuple(details[ClassificationBucket.NEW_STARTED]),
        switching=tuple(details[ClassificationBucket.SWITCHING]),
        project_ended=tuple(details[ClassificationBucket.PROJECT_ENDED]),
        contract_ended=tuple(details[ClassificationBucket.CONTRACT_ENDED]),
        counseling_started=tuple(details[ClassificationBucket.COUNSELING_STARTED]),
        summary_by_category=by_category,
        diagnostics=tuple(diagnostics),
    )


def classify_week(
    members: Iterable[MemberRecord],
    year: int,
    month: int,
    week_in_month: int,
    rule_config: Optional[dict] = None,
) -> WeeklyStatusReport:
    """Resolve the anchor-rule week and classify the roster against it."""
    return classify(members, week_range(year, month, week_in_month), rule_config)
