"""
Question bank types.

QuestionRecord  — one normalized spreadsheet row
QuestionBank    — immutable snapshot of all records from one upload
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class QuestionRecord(BaseModel):
    """A question that passed normalization (unit 1–5, non-zero BTL)."""
    model_config = ConfigDict(frozen=True)

    id: int
    unit: int = Field(..., ge=1, le=5)
    question: str = ""
    bt_level: str = Field(..., description="Canonical BTL label, e.g. '2'")
    subject_code: str = ""
    subject: str = ""
    branch: str = ""
    regulation: str = ""
    year: str = ""
    semester: str = ""
    month: str = ""
    image_url: str = ""


@dataclass(frozen=True)
class QuestionBank:
    """One generation of the question bank. Never mutated after publication."""
    questions: Tuple[QuestionRecord, ...]
    generation: int
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)
