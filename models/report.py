from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from models.week import WeekDescriptor


class ClassificationBucket(str, Enum):
    NEW_STARTED = "new_started"
    SWITCHING = "switching"
    PROJECT_ENDED = "project_ended"
    CONTRACT_ENDED = "contract_ended"
    COUNSELING_STARTED = "counseling_started"


PRIMARY_BUCKETS = (
    ClassificationBucket.CONTRACT_ENDED,
    ClassificationBucket.PROJECT_ENDED,
    ClassificationBucket.SWITCHING,
    ClassificationBucket.NEW_STARTED,
)


def _freeze_mapping(obj, name: str) -> None:
    # Reports are frozen dataclasses; their mapping fields are read-only views too.
    object.__setattr__(obj, name, MappingProxyType(dict(getattr(obj, name))))


@dataclass(frozen=True)
class MemberStatusDetail:
    member_id: str
    member_name: str
    bucket: ClassificationBucket
    status_change_date: date
    job_category: Optional[str] = None
    project_name: Optional[str] = None
    previous_project_name: Optional[str] = None  # switches only
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "memberId": self.member_id,
            "memberName": self.member_name,
            "bucket": self.bucket.value,
            "statusChangeDate": self.status_change_date.isoformat(),
            "jobCategory": self.job_category,
            "projectName": self.project_name,
            "previousProjectName": self.previous_project_name,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class WeeklySummary:
    new_started: int = 0
    switching: int = 0
    project_ended: int = 0
    contract_ended: int = 0
    counseling_started: int = 0
    total_active_members: int = 0      # still active at week end
    opening_active_members: int = 0    # active on the day before the week starts
    turnover_rate: float = 0.0         # ended this week as % of opening_active_members
    growth_rate: float = 0.0           # net change as % of opening_active_members

    @property
    def total_started(self) -> int:
        return self.new_started + self.switching

    @property
    def total_ended(self) -> int:
        return self.project_ended + self.contract_ended

    @property
    def net_change(self) -> int:
        return self.total_started - self.total_ended

    def to_dict(self) -> dict:
        return {
            "newStarted": self.new_started,
            "switching": self.switching,
            "projectEnded": self.project_ended,
            "contractEnded": self.contract_ended,
            "counselingStarted": self.counseling_started,
            "totalActiveMembers": self.total_active_members,
            "openingActiveMembers": self.opening_active_members,
            "totalStarted": self.total_started,
            "totalEnded": self.total_ended,
            "netChange": self.net_change,
            "turnoverRate": self.turnover_rate,
            "growthRate": self.growth_rate,
        }


@dataclass(frozen=True)
class WeeklyStatusReport:
    """Classification of a member roster against one Saturday-Friday week."""
    week: WeekDescriptor
    summary: WeeklySummary
    new_started: Tuple[MemberStatusDetail, ...] = ()
    switching: Tuple[MemberStatusDetail, ...] = ()
    project_ended: Tuple[MemberStatusDetail, ...] = ()
    contract_ended: Tuple[MemberStatusDetail, ...] = ()
    counseling_started: Tuple[MemberStatusDetail, ...] = ()
    summary_by_category: Mapping[str, WeeklySummary] = field(default_factory=dict)
    diagnostics: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze_mapping(self, "summary_by_category")

    @property
    def total_active_members(self) -> int:
        return self.summary.total_active_members

    def members_in(self, bucket: ClassificationBucket) -> Tuple[MemberStatusDetail, ...]:
        return getattr(self, bucket.value)

    def to_dict(self) -> dict:
        return {
            **self.week.to_dict(),
            "summary": self.summary.to_dict(),
            "summaryByCategory": {k: v.to_dict() for k, v in self.summary_by_category.items()},
            "newStartedMembers": [d.to_dict() for d in self.new_started],
            "switchingMembers": [d.to_dict() for d in self.switching],
            "projectEndedMembers": [d.to_dict() for d in self.project_ended],
            "contractEndedMembers": [d.to_dict() for d in self.contract_ended],
            "counselingStartedMembers": [d.to_dict() for d in self.counseling_started],
            "diagnostics": list(self.diagnostics),
        }


@dataclass(frozen=True)
class ContinuationRateDetail:
    window_days: int
    target_count: int = 0
    continued_count: int = 0
    rate: float = 0.0             # percentage, one decimal
    by_category: Mapping[str, "ContinuationRateDetail"] = field(default_factory=dict)

    def __post_init__(self):
        _freeze_mapping(self, "by_category")

    def to_dict(self) -> dict:
        return {
            "windowDays": self.window_days,
            "targetCount": self.target_count,
            "continuedCount": self.continued_count,
            "rate": self.rate,
            "byCategory": {k: v.to_dict() for k, v in self.by_category.items()},
        }


@dataclass(frozen=True)
class ContinuationProfile:
    reference_date: date
    rates: Mapping[str, ContinuationRateDetail] = field(default_factory=dict)  # keyed by window name

    def __post_init__(self):
        _freeze_mapping(self, "rates")

    def to_dict(self) -> dict:
        return {
            "referenceDate": self.reference_date.isoformat(),
            "rates": {k: v.to_dict() for k, v in self.rates.items()},
        }


@dataclass(frozen=True)
class WeeklyWindowRow:
    """One column of the four-week status table."""
    position: int                 # 1-based position in the window
    week: WeekDescriptor          # labelled by the majority-vote rule
    report: WeeklyStatusReport
    is_projection: bool = False

    @property
    def label(self) -> str:
        suffix = " (projected)" if self.is_projection else ""
        return f"{self.week.label}{suffix}"
