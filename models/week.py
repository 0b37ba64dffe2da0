from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class WeekDescriptor:
    year: int
    month: int            # 1-12, the month the week is labelled with
    week_in_month: int    # 1-5
    start_date: date      # always a Saturday, may sit in another month
    end_date: date        # start_date + 6 days (Friday)

    @property
    def week_key(self) -> str:
        """Document id for the week, e.g. '2024-07-W02'."""
        return f"{self.year}-{self.month:02d}-W{self.week_in_month:02d}"

    @property
    def label(self) -> str:
        return f"{self.month}/W{self.week_in_month}"

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "id": self.week_key,
            "year": self.year,
            "month": self.month,
            "weekInMonth": self.week_in_month,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
        }
