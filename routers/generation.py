"""
Generation Router — /api/generate

Draws a six-question paper from the current question bank.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from bank.store import QuestionBankStore, get_question_store
from generation.exceptions import GenerationError, InvalidPaperTypeError
from generation.paper_assembler import assemble_paper
from generation.schemas import GenerateRequest, PaperOutput
from generation.selector import PyRandomSource, RandomSource, select_questions

router = APIRouter(prefix="/api", tags=["generation"])

log = logging.getLogger("generation.pipeline")


def get_random_source() -> RandomSource:
    """A fresh unseeded source per request."""
    return PyRandomSource()


@router.post("/generate", response_model=PaperOutput)
def generate_paper(
    request: GenerateRequest,
    store: QuestionBankStore = Depends(get_question_store),
    rng: RandomSource = Depends(get_random_source),
):
    """
    Generate a paper for `paperType` (mid1 | mid2 | special).

    - 400 when no bank has been uploaded or the paper type is unknown
    - 500 with the failing constraint when the bank cannot satisfy the paper
    """
    bank = store.current()
    if bank is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No questions available. Please upload an Excel file first.",
        )

    log.info("=" * 60)
    log.info(f"[GENERATE START] paper_type={request.paper_type}, bank generation={bank.generation}, "
             f"questions={len(bank)}")

    try:
        selection = select_questions(bank.questions, request.paper_type, rng=rng)
    except InvalidPaperTypeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except GenerationError as e:
        log.error(f"[GENERATE] Error generating questions: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generating questions: {e}",
        )

    paper = assemble_paper(selection)
    log.info(f"[GENERATE DONE] scheme={selection.scheme_id}")
    return paper
