"""
Row Normalizer
Turns loosely-typed spreadsheet rows into QuestionRecord objects.

Coercion is best-effort: anything that cannot be read as a unit in 1–5 or a
positive BTL level drops the row. Dropped rows are counted in the log and
otherwise forgotten.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from bank.schemas import QuestionRecord

log = logging.getLogger(__name__)


# ─── Spreadsheet columns ───────────────────────────────────────────────────────

COL_UNIT = "Unit"
COL_QUESTION = "Question"
COL_BT_LEVEL = "B.T Level"
COL_SUBJECT_CODE = "Subject Code"
COL_SUBJECT = "Subject"
COL_BRANCH = "Branch"
COL_REGULATION = "Regulation"
COL_YEAR = "Year"
COL_SEMESTER = "Sem"
COL_MONTH = "Month"
COL_IMAGE_URL = "Image Url"

MIN_UNIT = 1
MAX_UNIT = 5
NO_LEVEL = "0"

# Google Drive "view" share link → direct content link
DRIVE_VIEW_RE = re.compile(r"https://drive\.google\.com/file/d/([^/]+)/view")
DRIVE_DIRECT_URL = "https://drive.google.com/uc?export=view&id={file_id}"


def get_direct_image_url(url: str) -> str:
    """Rewrite a Drive share link to its direct form; other URLs pass through."""
    match = DRIVE_VIEW_RE.search(url)
    if match:
        return DRIVE_DIRECT_URL.format(file_id=match.group(1))
    return url


# ─── Field coercion ────────────────────────────────────────────────────────────

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _as_int(value: Any) -> Optional[int]:
    """Integer value of a cell, accepting 3, 3.0, '3' and ' 3.0 '; None otherwise."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else None


def _as_text(value: Any) -> str:
    if _is_blank(value):
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat(sep=" ")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_unit(value: Any) -> int:
    """Unit number, or 0 when the cell is not an integer."""
    unit = _as_int(value)
    return unit if unit is not None else 0


def parse_bt_level(value: Any) -> str:
    """
    Canonical BTL label: 'L2', 'l02', '2' and 2.0 all become '2'.
    Blank, zero, negative or unparseable values become '0'.
    """
    if _is_blank(value):
        return NO_LEVEL
    raw = value if isinstance(value, (int, float)) else re.sub(r"^[Ll]", "", str(value).strip())
    level = _as_int(raw)
    if level is None or level <= 0:
        return NO_LEVEL
    return str(level)


# ─── Row → record ─────────────────────────────────────────────────────────────

def normalize_row(row: Dict[str, Any], question_id: int) -> Optional[QuestionRecord]:
    """
    Build a QuestionRecord from one spreadsheet row.

    Returns None when the row falls outside the bank's domain
    (unit not in 1–5, or no usable BTL level).
    """
    unit = parse_unit(row.get(COL_UNIT))
    bt_level = parse_bt_level(row.get(COL_BT_LEVEL))
    if not (MIN_UNIT <= unit <= MAX_UNIT) or bt_level == NO_LEVEL:
        return None

    image_url = _as_text(row.get(COL_IMAGE_URL))
    return QuestionRecord(
        id=question_id,
        unit=unit,
        question=_as_text(row.get(COL_QUESTION)),
        bt_level=bt_level,
        subject_code=_as_text(row.get(COL_SUBJECT_CODE)),
        subject=_as_text(row.get(COL_SUBJECT)),
        branch=_as_text(row.get(COL_BRANCH)),
        regulation=_as_text(row.get(COL_REGULATION)),
        year=_as_text(row.get(COL_YEAR)),
        semester=_as_text(row.get(COL_SEMESTER)),
        month=_as_text(row.get(COL_MONTH)),
        image_url=get_direct_image_url(image_url) if image_url else "",
    )


def normalize_rows(rows: Iterable[Dict[str, Any]]) -> List[QuestionRecord]:
    """
    Normalize all rows in spreadsheet order.

    Ids follow the row position (1-based), so ids of kept records increase
    but skip dropped rows.
    """
    records: List[QuestionRecord] = []
    total = 0
    for index, row in enumerate(rows, start=1):
        total = index
        record = normalize_row(row, question_id=index)
        if record is not None:
            records.append(record)
    dropped = total - len(records)
    log.info("[NORMALIZE] rows=%s kept=%s dropped=%s", total, len(records), dropped)
    return records
