"""File upload parsing: CSV/XLSX member exports into MemberRecord lists.

Dates arrive as strings, spreadsheet serials or timestamps depending on the
export; they are normalised to ``datetime.date`` here so the engine only ever
sees one date type.
"""

import numbers
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple

import pandas as pd
from loguru import logger

from models.member import MemberRecord, WorkHistoryEntry
from config.defaults import (
    MEMBER_COLUMNS, WORK_HISTORY_COLUMNS, MEMBER_DATE_FIELDS, SPREADSHEET_EPOCH,
)


def to_date(value) -> Optional[date]:
    """Normalise any date-like cell to a date; blanks and unparseable values become None.

    Bare numbers are spreadsheet day serials counted from 1899-12-30.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        ts = pd.to_datetime(value, unit="D", origin=SPREADSHEET_EPOCH, errors="coerce")
    else:
        ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def _text(row: pd.Series, column: str) -> str:
    if column not in row.index or pd.isna(row[column]):
        return ""
    return str(row[column]).strip()


def parse_work_history(df: pd.DataFrame) -> Dict[str, Tuple[WorkHistoryEntry, ...]]:
    """Group work history rows by member id."""
    cols = WORK_HISTORY_COLUMNS
    grouped = defaultdict(list)
    skipped = 0
    for _, row in df.iterrows():
        member_id = _text(row, cols["member_id"])
        start = to_date(row.get(cols["start_date"]))
        if not member_id or start is None:
            skipped += 1
            continue
        grouped[member_id].append(WorkHistoryEntry(
            project_name=_text(row, cols["project_name"]),
            start_date=start,
            end_date=to_date(row.get(cols["end_date"])),
            end_reason=_text(row, cols["end_reason"]),
        ))
    if skipped:
        logger.warning(f"Skipped {skipped} work history row(s) without a member id or start date")
    return {
        member_id: tuple(sorted(entries, key=lambda h: h.start_date))
        for member_id, entries in grouped.items()
    }


def parse_members(members_df: pd.DataFrame, history_df: Optional[pd.DataFrame] = None) -> List[MemberRecord]:
    """Convert a members DataFrame (plus optional work history) into MemberRecord objects."""
    cols = MEMBER_COLUMNS
    history = parse_work_history(history_df) if history_df is not None else {}

    members = []
    for _, row in members_df.iterrows():
        member_id = _text(row, cols["id"])
        if not member_id:
            logger.warning("Skipping member row without an id")
            continue
        dates = {field: to_date(row.get(cols[field])) for field in MEMBER_DATE_FIELDS}
        members.append(MemberRecord(
            id=member_id,
            name=_text(row, cols["name"]),
            status=_text(row, cols["status"]).lower(),
            job_category=_text(row, cols["job_category"]).lower() or None,
            work_history=history.get(member_id, ()),
            **dates,
        ))
    logger.info(f"Parsed {len(members)} member(s), {sum(len(h) for h in history.values())} history row(s)")
    return members


def load_file(uploaded_file) -> pd.DataFrame:
    """Load an uploaded file (CSV or XLSX) into a DataFrame."""
    name = uploaded_file.name.lower()
    if name.endswith(".csv"):
        return pd.read_csv(uploaded_file)
    elif name.endswith(".xlsx") or name.endswith(".xls"):
        return pd.read_excel(uploaded_file, engine="openpyxl")
    else:
        raise ValueError(f"Unsupported file format: {name}. Use CSV or XLSX.")


# Expected sheet names for multi-tab Excel (case-insensitive matching)
SHEET_ALIASES = {
    "members": ["members", "member", "member db", "roster", "staff"],
    "work_history": ["work history", "work_history", "history", "assignments", "projects"],
}


def _match_sheet(sheet_names: List[str], category: str) -> Optional[str]:
    aliases = SHEET_ALIASES[category]
    lower_map = {s.lower().strip(): s for s in sheet_names}
    for alias in aliases:
        if alias in lower_map:
            return lower_map[alias]
    return None


def load_multi_sheet_excel(uploaded_file) -> Tuple[pd.DataFrame, Optional[pd.DataFrame]]:
    """Load an Excel file with a Members tab and an optional Work History tab.

    Sheet names are matched case-insensitively. Accepted names include:
    - Members: 'Members', 'Member DB', 'Roster', etc.
    - Work History: 'Work History', 'History', 'Assignments', etc.

    Returns (members_df, history_df); history_df is None when the tab is absent.
    """
    xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
    sheet_names = xl.sheet_names

    members_sheet = _match_sheet(sheet_names, "members")
    if members_sheet is None:
        raise ValueError(
            f"Could not find a sheet for 'members'. "
            f"Expected one of: {SHEET_ALIASES['members']}. "
            f"Found sheets: {sheet_names}"
        )
    history_sheet = _match_sheet(sheet_names, "work_history")

    members_df = pd.read_excel(xl, sheet_name=members_sheet)
    history_df = pd.read_excel(xl, sheet_name=history_sheet) if history_sheet else None
    return members_df, history_df


def load_csv_path(path: str) -> pd.DataFrame:
    """Load a CSV file from a local path."""
    return pd.read_csv(path)
