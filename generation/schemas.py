"""
Schemas for the paper generation pipeline.

Config records  — UnitRequirement, LevelQuota (declarative constraint tables)
Internal        — AvailabilityIndex, SelectionResult
API             — GenerateRequest, GeneratedQuestion, PaperDetails, PaperOutput
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from bank.schemas import QuestionRecord


# ─── Constraint tables ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class UnitRequirement:
    """How many questions a participating unit contributes to a paper."""
    unit: int
    min_count: int
    max_count: int


@dataclass(frozen=True)
class LevelQuota:
    """
    One BTL quota item.

    Fixed:            level="2", count=2
    Choose-from-set:  level=None, options=("1", "5", "6"), count=1
    """
    count: int
    level: Optional[str] = None
    options: Tuple[str, ...] = ()

    @property
    def is_choice(self) -> bool:
        return self.level is None


@dataclass(frozen=True)
class BTLScheme:
    scheme_id: str
    quotas: Tuple[LevelQuota, ...]

    @property
    def total(self) -> int:
        return sum(q.count for q in self.quotas)


# ─── Internal pipeline types ──────────────────────────────────────────────────

@dataclass
class AvailabilityIndex:
    """unit → level label → questions, plus every level label seen in the bank."""
    by_unit: Dict[int, Dict[str, List[QuestionRecord]]]
    levels: FrozenSet[str]

    def count(self, units, level: str) -> int:
        return sum(len(self.by_unit.get(u, {}).get(level, [])) for u in units)


@dataclass
class SelectionResult:
    questions: List[QuestionRecord]
    scheme_id: str
    unit_counts: Dict[int, int] = field(default_factory=dict)
    level_counts: Dict[str, int] = field(default_factory=dict)


# ─── API request/response ─────────────────────────────────────────────────────

class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    paper_type: Optional[str] = Field(None, alias="paperType", description="mid1 | mid2 | special")


class GeneratedQuestion(BaseModel):
    """Public projection of a selected question."""
    model_config = ConfigDict(populate_by_name=True)

    question: str
    image_url: str = Field("", alias="imageUrl")
    bt_level: str = Field(..., alias="btLevel")
    unit: int


class PaperDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    subject: str = ""
    subject_code: str = Field("", alias="subjectCode")
    branch: str = ""
    regulation: str = ""
    year: str = ""
    semester: str = ""


class PaperOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    questions: List[GeneratedQuestion]
    paper_details: PaperDetails = Field(..., alias="paperDetails")
