from models.week import WeekDescriptor
from models.member import MemberRecord, WorkHistoryEntry
from models.report import (
    ClassificationBucket, MemberStatusDetail, WeeklySummary, WeeklyStatusReport,
    ContinuationRateDetail, ContinuationProfile, WeeklyWindowRow,
)
