"""
Upload Router — /api/upload

Accepts an Excel question bank, normalizes its rows and publishes them as the
new current bank. The previous bank is replaced wholesale, never merged.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from bank.normalizer import normalize_rows
from bank.schemas import QuestionRecord
from bank.spreadsheet import read_question_rows
from bank.store import QuestionBankStore, get_question_store

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["question-bank"])


# Configuration
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "uploads"))
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", 10485760))  # 10MB default
EXCEL_MIME_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-excel": "xls",
}


def validate_file(file: Optional[UploadFile]) -> str:
    """
    Check that an Excel file was sent.

    Returns:
        Extension to save the file with ("xlsx" or "xls")

    Raises:
        HTTPException: 400 if the file is missing or not an Excel MIME type
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    extension = EXCEL_MIME_TYPES.get(file.content_type or "")
    if extension is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only Excel files are allowed!",
        )
    return extension


def _describe_size(size: int) -> str:
    megabytes = size // 1048576
    return f"{size} bytes ({megabytes}MB)" if megabytes else f"{size} bytes"


def load_questions(path: str) -> List[QuestionRecord]:
    """Read and normalize a saved spreadsheet (blocking; run in the threadpool)."""
    return normalize_rows(read_question_rows(path))


async def save_upload_file_tmp(upload_file: UploadFile, extension: str) -> tuple[str, int]:
    """
    Stream the upload into UPLOAD_DIR, enforcing MAX_UPLOAD_SIZE.

    Returns:
        Tuple of (temp_file_path, file_size_bytes)
    """
    os.makedirs(UPLOAD_DIR, exist_ok=True)
    tmp = tempfile.NamedTemporaryFile(delete=False, dir=UPLOAD_DIR, prefix="upload_", suffix=f".{extension}")
    file_size = 0
    try:
        chunk_size = 1024 * 1024  # 1MB chunks
        while True:
            chunk = await upload_file.read(chunk_size)
            if not chunk:
                break
            file_size += len(chunk)
            if file_size > MAX_UPLOAD_SIZE:
                raise HTTPException(
                    status_code=status.HTTP_413_CONTENT_TOO_LARGE,
                    detail=f"File too large: more than {_describe_size(MAX_UPLOAD_SIZE)}",
                )
            tmp.write(chunk)
    except Exception:
        tmp.close()
        os.unlink(tmp.name)
        raise
    tmp.close()
    return tmp.name, file_size


@router.post("/upload")
async def upload_question_bank(
    excel_file: Optional[UploadFile] = File(None, alias="excelFile", description="Question bank (.xlsx / .xls)"),
    store: QuestionBankStore = Depends(get_question_store),
):
    """
    Replace the question bank with the rows of an uploaded spreadsheet.

    Rows whose unit is outside 1–5 or whose B.T Level is blank/zero are dropped.
    The uploaded file is deleted once processed, whatever the outcome.
    """
    extension = validate_file(excel_file)
    temp_file_path, file_size = await save_upload_file_tmp(excel_file, extension)
    log.info(f"[UPLOAD] {excel_file.filename} ({extension}, {file_size} bytes) → {temp_file_path}")

    try:
        questions = await run_in_threadpool(load_questions, temp_file_path)
    except Exception as e:
        log.exception(f"[UPLOAD] Error processing {excel_file.filename}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error processing file: {e}",
        )
    finally:
        Path(temp_file_path).unlink(missing_ok=True)

    bank = store.replace(questions)
    return {
        "message": "File processed successfully",
        "questionCount": len(bank),
    }
