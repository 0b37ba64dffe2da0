"""Schema and data-quality validation for uploaded member exports."""

from dataclasses import dataclass, field
from typing import List

import pandas as pd

from data.loader import to_date
from config.defaults import MEMBER_COLUMNS, WORK_HISTORY_COLUMNS, MEMBER_DATE_FIELDS, MEMBER_STATUSES


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


MEMBER_REQUIRED_COLUMNS = [
    MEMBER_COLUMNS["id"],
    MEMBER_COLUMNS["status"],
    MEMBER_COLUMNS["last_work_start_date"],
]

WORK_HISTORY_REQUIRED_COLUMNS = [
    WORK_HISTORY_COLUMNS["member_id"],
    WORK_HISTORY_COLUMNS["project_name"],
    WORK_HISTORY_COLUMNS["start_date"],
]


def _check_required_columns(df: pd.DataFrame, required: List[str], file_label: str) -> ValidationResult:
    result = ValidationResult()
    missing = [col for col in required if col not in df.columns]
    if missing:
        result.is_valid = False
        result.errors.append(f"{file_label}: Missing required columns: {', '.join(missing)}")
    if df.empty:
        result.is_valid = False
        result.errors.append(f"{file_label}: File contains no data rows.")
    return result


def _parse_dates(series: pd.Series) -> pd.Series:
    # Parsed exactly as the loader parses them, serials included.
    return pd.to_datetime(series.map(to_date), errors="coerce")


def _unparseable_count(series: pd.Series) -> int:
    parsed = _parse_dates(series)
    present = series.notna() & (series.astype(str).str.strip() != "")
    return int((present & parsed.isna()).sum())


def validate_members(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, MEMBER_REQUIRED_COLUMNS, "Members")
    if not result.is_valid:
        return result

    id_col = MEMBER_COLUMNS["id"]
    ids = df[id_col].astype(str).str.strip()
    if (df[id_col].isna() | (ids == "")).any():
        result.is_valid = False
        result.errors.append("Members: Member ID cannot be blank.")

    dupes = df[id_col].notna() & ids.duplicated(keep=False)
    if dupes.any():
        result.is_valid = False
        result.errors.append(f"Members: Duplicate member ids: {sorted(ids[dupes].unique().tolist())}")

    statuses = df[MEMBER_COLUMNS["status"]].dropna().astype(str).str.strip().str.lower()
    unknown = sorted(set(statuses) - set(MEMBER_STATUSES) - {""})
    if unknown:
        result.warnings.append(f"Members: Unknown status value(s): {unknown}.")

    for field_name in MEMBER_DATE_FIELDS:
        column = MEMBER_COLUMNS[field_name]
        if column not in df.columns:
            continue
        bad = _unparseable_count(df[column])
        if bad:
            result.warnings.append(f"Members: {bad} unparseable value(s) in '{column}' will be treated as blank.")

    first_col = MEMBER_COLUMNS["first_work_start_date"]
    last_col = MEMBER_COLUMNS["last_work_start_date"]
    if first_col in df.columns:
        first = _parse_dates(df[first_col])
        last = _parse_dates(df[last_col])
        inverted = first.notna() & last.notna() & (first > last)
        if inverted.any():
            result.warnings.append(
                f"Members: First Work Start Date is after Last Work Start Date for "
                f"{sorted(ids[inverted].unique().tolist())}."
            )

    return result


def validate_work_history(df: pd.DataFrame) -> ValidationResult:
    result = _check_required_columns(df, WORK_HISTORY_REQUIRED_COLUMNS, "Work History")
    if not result.is_valid:
        return result

    start = _parse_dates(df[WORK_HISTORY_COLUMNS["start_date"]])
    if start.isna().any():
        result.warnings.append(
            f"Work History: {int(start.isna().sum())} row(s) without a valid Start Date will be skipped."
        )

    end_col = WORK_HISTORY_COLUMNS["end_date"]
    if end_col in df.columns:
        end = _parse_dates(df[end_col])
        inverted = start.notna() & end.notna() & (end < start)
        if inverted.any():
            ids = df.loc[inverted, WORK_HISTORY_COLUMNS["member_id"]].astype(str).str.strip()
            result.warnings.append(
                f"Work History: End Date before Start Date for members {sorted(ids.unique().tolist())}. "
                "These rows are ignored when resolving projects."
            )

    return result


def validate_cross_file(members_df: pd.DataFrame, history_df: pd.DataFrame) -> ValidationResult:
    """Check that member ids match across files."""
    result = ValidationResult()
    member_ids = set(members_df[MEMBER_COLUMNS["id"]].dropna().astype(str).str.strip())
    history_ids = set(history_df[WORK_HISTORY_COLUMNS["member_id"]].dropna().astype(str).str.strip())

    unknown = history_ids - member_ids
    if unknown:
        result.warnings.append(
            f"Work history for unknown members: {', '.join(sorted(unknown))}. "
            "These rows will be ignored."
        )
    return result
