"""
Spreadsheet reader
Loads the first worksheet of an Excel file into plain row dicts.

Empty cells come back as None so the normalizer never sees pandas NaN.
"""

import logging
from typing import Any, Dict, List

import pandas as pd

log = logging.getLogger(__name__)


def read_question_rows(path: str) -> List[Dict[str, Any]]:
    """
    Read the first sheet of an .xlsx/.xls file.

    Header names are stripped of surrounding whitespace. Raises ValueError
    when the file cannot be read as a spreadsheet.
    """
    try:
        df = pd.read_excel(path, sheet_name=0, dtype=object)
    except Exception as e:
        raise ValueError(f"Unable to read spreadsheet: {e}") from e

    df.columns = [str(col).strip() for col in df.columns]
    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)

    rows = df.to_dict(orient="records")
    log.info("[SPREADSHEET] %s: %s rows, columns=%s", path, len(rows), list(df.columns))
    return rows
