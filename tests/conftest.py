import io
from typing import Iterable, List, Tuple

import pandas as pd
import pytest

from bank.schemas import QuestionRecord
from bank.store import QuestionBankStore

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class FirstIndexSource:
    """RandomSource that always takes the first candidate."""

    def pick_index(self, n: int) -> int:
        return 0


class LastIndexSource:
    def pick_index(self, n: int) -> int:
        return n - 1


def make_question(qid: int, unit: int, level: str, subject: str = "Data Structures", **extra) -> QuestionRecord:
    """Helper to create a normalized question."""
    return QuestionRecord(
        id=qid,
        unit=unit,
        question=extra.pop("question", f"Q{qid} unit {unit} BTL {level}"),
        bt_level=level,
        subject_code=extra.pop("subject_code", "CS201"),
        subject=subject,
        branch=extra.pop("branch", "CSE"),
        regulation=extra.pop("regulation", "R22"),
        year=extra.pop("year", "2"),
        semester=extra.pop("semester", "1"),
        month=extra.pop("month", "March"),
        **extra,
    )


def make_bank(layout: Iterable[Tuple[int, str, int]], start_id: int = 1, **kwargs) -> List[QuestionRecord]:
    """Build questions from (unit, level, how_many) triples, ids in order."""
    questions = []
    qid = start_id
    for unit, level, count in layout:
        for _ in range(count):
            questions.append(make_question(qid, unit, level, **kwargs))
            qid += 1
    return questions


def rich_layout(levels: Iterable[str], units: Iterable[int] = (1, 2, 3, 4, 5), per_cell: int = 3):
    return [(u, lvl, per_cell) for u in units for lvl in levels]


def make_xlsx(rows: List[dict]) -> bytes:
    """Serialize spreadsheet rows to .xlsx bytes."""
    buffer = io.BytesIO()
    pd.DataFrame(rows).to_excel(buffer, index=False)
    return buffer.getvalue()


def sheet_row(unit, level, question, subject="Data Structures", image_url=None) -> dict:
    return {
        "Unit": unit,
        "Question": question,
        "B.T Level": level,
        "Subject Code": "CS201",
        "Subject": subject,
        "Branch": "CSE",
        "Regulation": "R22",
        "Year": 2,
        "Sem": 1,
        "Month": "March",
        "Image Url": image_url,
    }


@pytest.fixture
def scheme_a_bank() -> List[QuestionRecord]:
    """Every unit has three questions at each BTL 1–6."""
    return make_bank(rich_layout(["1", "2", "3", "4", "5", "6"]))


@pytest.fixture
def scheme_b_bank() -> List[QuestionRecord]:
    return make_bank(rich_layout(["1", "2", "3", "4"]))


@pytest.fixture
def single_level_bank() -> List[QuestionRecord]:
    return make_bank(rich_layout(["3"]))


@pytest.fixture
def store() -> QuestionBankStore:
    return QuestionBankStore()
