from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True)
class WorkHistoryEntry:
    project_name: str
    start_date: date
    end_date: Optional[date] = None
    end_reason: str = ""

    @property
    def is_inverted(self) -> bool:
        """End date recorded before the start date (bad upstream row)."""
        return self.end_date is not None and self.end_date < self.start_date


@dataclass(frozen=True)
class MemberRecord:
    id: str
    status: str                       # see config.defaults.MEMBER_STATUSES
    name: str = ""
    job_category: Optional[str] = None
    first_work_start_date: Optional[date] = None
    last_work_start_date: Optional[date] = None
    last_work_end_date: Optional[date] = None
    contract_end_date: Optional[date] = None
    first_counseling_date: Optional[date] = None
    work_history: Tuple[WorkHistoryEntry, ...] = ()

    @property
    def effective_end_date(self) -> Optional[date]:
        if self.last_work_end_date is not None:
            return self.last_work_end_date
        return self.contract_end_date

    @property
    def has_switched(self) -> bool:
        """Latest start is newer than the latest end: one assignment ended, another began."""
        return (
            self.last_work_start_date is not None
            and self.last_work_end_date is not None
            and self.last_work_end_date < self.last_work_start_date
        )
