"""Default configuration constants for the weekly workforce status engine."""

# Calendar rules
# Python weekday numbering: Monday=0 ... Saturday=5, Sunday=6
WEEK_START_WEEKDAY = 5
DAYS_PER_WEEK = 7
NOMINAL_DAY_OFFSET = 3          # Tuesday decides which month a Saturday-start week belongs to
MAX_WEEKS_PER_MONTH = 5         # Upper bound for week_in_month labels
MAX_CANDIDATE_WEEKS = 6         # Raw weeks scanned when assigning weeks by majority vote

# Continuation-rate lookback windows (days)
CONTINUATION_WINDOWS = {
    "1_month": 30,
    "3_months": 90,
    "6_months": 180,
    "1_year": 365,
}

# Rates are percentages rounded to this many decimals
RATE_DECIMALS = 1

# Weekly window: offsets (in weeks) around the selected week, last one is a projection
WINDOW_WEEK_OFFSETS = [-2, -1, 0, 1]

# Member statuses as synced from the member database
MEMBER_STATUSES = [
    "recruiting",
    "training",
    "learning_started",
    "working",
    "project_released",
    "contract_ended",
    "work_ended",
    "inactive",
    "job_matching",
    "interview_prep",
    "interview",
    "result_waiting",
    "hired",
]

# Job categories used for per-category breakdowns
JOB_CATEGORIES = [
    "sns_operation",
    "video_creator",
    "ai_writer",
    "photography_staff",
]
UNCATEGORIZED = "uncategorized"

# Reasons attached to end-of-work details
REASON_PROJECT_ENDED = "Project ended"
REASON_CONTRACT_ENDED = "Contract ended"

# Column names expected in member / work history exports
MEMBER_COLUMNS = {
    "id": "Member ID",
    "name": "Name",
    "status": "Status",
    "job_category": "Job Category",
    "first_work_start_date": "First Work Start Date",
    "last_work_start_date": "Last Work Start Date",
    "last_work_end_date": "Last Work End Date",
    "contract_end_date": "Contract End Date",
    "first_counseling_date": "First Counseling Date",
}

WORK_HISTORY_COLUMNS = {
    "member_id": "Member ID",
    "project_name": "Project Name",
    "start_date": "Start Date",
    "end_date": "End Date",
    "end_reason": "End Reason",
}

# Day zero for numeric date cells in spreadsheet exports
SPREADSHEET_EPOCH = "1899-12-30"

MEMBER_DATE_FIELDS = [
    "first_work_start_date",
    "last_work_start_date",
    "last_work_end_date",
    "contract_end_date",
    "first_counseling_date",
]
