"""Generate synthetic member exports for the weekly status engine."""

import os
import random
from datetime import date, timedelta

import pandas as pd

from config.defaults import MEMBER_COLUMNS, WORK_HISTORY_COLUMNS, JOB_CATEGORIES

PROJECTS = ["Retail SNS", "Cafe Reels", "Clinic Blog", "Hotel Shoots", "Salon Ads", "Event Coverage"]
FIRST_NAMES = ["Aoi", "Haruto", "Yui", "Sota", "Mei", "Ren", "Hina", "Yuto", "Rin", "Kaito"]
LAST_NAMES = ["Sato", "Suzuki", "Takahashi", "Tanaka", "Ito", "Watanabe", "Yamamoto", "Nakamura"]


def _iso(d):
    return d.isoformat() if d else ""


def _generate_roster(count: int, today: date, seed: int):
    """Build member rows and their work history with a fixed seed."""
    rng = random.Random(seed)
    members, history = [], []
    for i in range(1, count + 1):
        member_id = f"M{i:03d}"
        name = f"{rng.choice(LAST_NAMES)} {rng.choice(FIRST_NAMES)}"
        category = rng.choice(JOB_CATEGORIES)
        counseling = today - timedelta(days=rng.randint(0, 400))

        first_start = counseling + timedelta(days=rng.randint(7, 45))
        if first_start > today + timedelta(days=14):
            # Still in the pipeline
            members.append({
                MEMBER_COLUMNS["id"]: member_id,
                MEMBER_COLUMNS["name"]: name,
                MEMBER_COLUMNS["status"]: rng.choice(["learning_started", "training", "job_matching"]),
                MEMBER_COLUMNS["job_category"]: category,
                MEMBER_COLUMNS["first_counseling_date"]: _iso(counseling),
            })
            continue

        rows = []
        start = first_start
        for _ in range(rng.randint(1, 3)):
            length = rng.randint(20, 160)
            end = start + timedelta(days=length)
            rows.append((rng.choice(PROJECTS), start, end if end <= today else None))
            if end > today:
                break
            start = end + timedelta(days=rng.randint(1, 10))
            if start > today:
                break

        last_project, last_start, last_end = rows[-1]
        previous_end = rows[-2][2] if len(rows) > 1 else None
        contract_end = None
        status = "working"
        if last_end is not None:
            status = "project_released"
            if rng.random() < 0.4:
                contract_end = last_end
                status = "contract_ended"
        elif previous_end is not None:
            # Restarted after an earlier project: the synced end date lags behind.
            last_end = previous_end

        members.append({
            MEMBER_COLUMNS["id"]: member_id,
            MEMBER_COLUMNS["name"]: name,
            MEMBER_COLUMNS["status"]: status,
            MEMBER_COLUMNS["job_category"]: category,
            MEMBER_COLUMNS["first_work_start_date"]: _iso(first_start),
            MEMBER_COLUMNS["last_work_start_date"]: _iso(last_start),
            MEMBER_COLUMNS["last_work_end_date"]: _iso(last_end),
            MEMBER_COLUMNS["contract_end_date"]: _iso(contract_end),
            MEMBER_COLUMNS["first_counseling_date"]: _iso(counseling),
        })
        for project, start, end in rows:
            history.append({
                WORK_HISTORY_COLUMNS["member_id"]: member_id,
                WORK_HISTORY_COLUMNS["project_name"]: project,
                WORK_HISTORY_COLUMNS["start_date"]: _iso(start),
                WORK_HISTORY_COLUMNS["end_date"]: _iso(end),
                WORK_HISTORY_COLUMNS["end_reason"]: "Project ended" if end else "",
            })
    return members, history


def generate_members_df(count: int = 60, today: date = None, seed: int = 42) -> pd.DataFrame:
    """Generate member master data: counseling, start, end and contract dates."""
    members, _ = _generate_roster(count, today or date.today(), seed)
    return pd.DataFrame(members, columns=list(MEMBER_COLUMNS.values()))


def generate_work_history_df(count: int = 60, today: date = None, seed: int = 42) -> pd.DataFrame:
    """Generate work history rows matching ``generate_members_df`` for the same arguments."""
    _, history = _generate_roster(count, today or date.today(), seed)
    return pd.DataFrame(history, columns=list(WORK_HISTORY_COLUMNS.values()))


def generate_sample_csvs(output_dir: str):
    """Write sample CSV files to the given directory."""
    os.makedirs(output_dir, exist_ok=True)
    today = date.today()
    generate_members_df(today=today).to_csv(os.path.join(output_dir, "members.csv"), index=False)
    generate_work_history_df(today=today).to_csv(os.path.join(output_dir, "work_history.csv"), index=False)


def generate_sample_excel(output_dir: str):
    """Write a single multi-tab Excel file with members and work history."""
    os.makedirs(output_dir, exist_ok=True)
    today = date.today()
    path = os.path.join(output_dir, "sample_members.xlsx")
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        generate_members_df(today=today).to_excel(writer, sheet_name="Members", index=False)
        generate_work_history_df(today=today).to_excel(writer, sheet_name="Work History", index=False)


if __name__ == "__main__":
    out = os.path.join(os.path.dirname(__file__), "..", "sample_files")
    generate_sample_csvs(out)
    generate_sample_excel(out)
    print("Sample CSV and Excel files generated in sample_files/")
