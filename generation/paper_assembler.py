"""
Step 4 — Paper Assembler

Shapes the selected questions into the API payload. Paper metadata is read
from the first selected question; a bank mixing subjects is reported in the
log but does not change the payload.
"""

import logging
from typing import List

from bank.schemas import QuestionRecord
from generation.schemas import GeneratedQuestion, PaperDetails, PaperOutput, SelectionResult

log = logging.getLogger("generation.pipeline")

METADATA_FIELDS = ("subject", "subject_code", "branch", "regulation", "year", "semester")


def _mixed_metadata(questions: List[QuestionRecord]) -> List[str]:
    return [
        name for name in METADATA_FIELDS
        if len({getattr(q, name) for q in questions}) > 1
    ]


def assemble_paper(selection: SelectionResult) -> PaperOutput:
    questions = selection.questions
    if not questions:
        raise ValueError("Cannot assemble a paper without questions")

    mixed = _mixed_metadata(questions)
    if mixed:
        log.warning(f"[STEP 4] Selected questions disagree on {mixed}; using question {questions[0].id}")

    first = questions[0]
    return PaperOutput(
        questions=[
            GeneratedQuestion(
                question=q.question,
                image_url=q.image_url,
                bt_level=q.bt_level,
                unit=q.unit,
            )
            for q in questions
        ],
        paper_details=PaperDetails(
            subject=first.subject,
            subject_code=first.subject_code,
            branch=first.branch,
            regulation=first.regulation,
            year=first.year,
            semester=first.semester,
        ),
    )
