"""
Step 3 — Constrained Question Selector

Draws exactly six questions that satisfy the paper type's unit ranges and the
bank's BTL scheme at the same time.

Quota items are filled in the order the scheme lists them. Each individual
pick is restricted to units still below their maximum, then to the units
furthest below their minimum, and only then made at random. Favouring
under-filled units is what lets the final unit-minimum check pass for
random draws.

Randomness comes from a RandomSource so tests can make it deterministic.
"""

import logging
import random
from typing import Dict, List, Optional, Protocol, Sequence

from bank.schemas import QuestionRecord
from generation.availability import build_availability_index
from generation.blueprint_builder import PAPER_SIZE, get_unit_requirements, resolve_btl_scheme
from generation.exceptions import (
    InsufficientQuestionsError,
    SelectionConsistencyError,
    UnitMinimumError,
)
from generation.schemas import (
    AvailabilityIndex,
    BTLScheme,
    LevelQuota,
    SelectionResult,
    UnitRequirement,
)

log = logging.getLogger("generation.pipeline")


# ─── Random source ────────────────────────────────────────────────────────────

class RandomSource(Protocol):
    def pick_index(self, n: int) -> int:
        """Return an index in [0, n)."""
        ...


class PyRandomSource:
    """RandomSource backed by random.Random (unseeded unless `seed` is given)."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def pick_index(self, n: int) -> int:
        return self._rng.randrange(n)


# ─── Running selection state ──────────────────────────────────────────────────

class _SelectionState:
    def __init__(
        self,
        questions: Sequence[QuestionRecord],
        requirements: Sequence[UnitRequirement],
        index: AvailabilityIndex,
        rng: RandomSource,
    ):
        self.requirements: Dict[int, UnitRequirement] = {r.unit: r for r in requirements}
        self.units = list(self.requirements)
        self.index = index
        self.rng = rng
        self.remaining: List[QuestionRecord] = [q for q in questions if q.unit in self.requirements]
        self.selected: List[QuestionRecord] = []
        self.unit_counts: Dict[int, int] = {u: 0 for u in self.units}
        self.level_counts: Dict[str, int] = {}

    def obtainable(self, level: str) -> int:
        """Questions of `level` in participating units not yet consumed."""
        return self.index.count(self.units, level) - self.level_counts.get(level, 0)

    def _deficit(self, unit: int) -> int:
        return self.requirements[unit].min_count - self.unit_counts[unit]

    def pick(self, level: str) -> Optional[QuestionRecord]:
        candidates = [
            q for q in self.remaining
            if q.bt_level == level and self.unit_counts[q.unit] < self.requirements[q.unit].max_count
        ]
        if not candidates:
            return None

        neediest = max(self._deficit(q.unit) for q in candidates)
        candidates = [q for q in candidates if self._deficit(q.unit) == neediest]
        chosen = candidates[self.rng.pick_index(len(candidates))]

        self.remaining.remove(chosen)
        self.selected.append(chosen)
        self.unit_counts[chosen.unit] += 1
        self.level_counts[chosen.bt_level] = self.level_counts.get(chosen.bt_level, 0) + 1
        return chosen


# ─── Quota filling ────────────────────────────────────────────────────────────

def _fill_fixed_quota(state: _SelectionState, quota: LevelQuota) -> None:
    found = state.obtainable(quota.level)
    if found < quota.count:
        raise InsufficientQuestionsError(
            f"Insufficient questions for BTL {quota.level} "
            f"(need {quota.count}, found {found}) in required units"
        )
    for _ in range(quota.count):
        if state.pick(quota.level) is None:
            raise InsufficientQuestionsError(f"Failed to pick BTL {quota.level} despite availability")


def _fill_choice_quota(state: _SelectionState, quota: LevelQuota) -> None:
    feasible = [lvl for lvl in quota.options if state.obtainable(lvl) > 0]
    if not feasible:
        allowed = ", ".join(f"L{lvl}" for lvl in quota.options)
        raise InsufficientQuestionsError(f"No questions available for BTL [{allowed}] in required units")
    for _ in range(quota.count):
        level = feasible[state.rng.pick_index(len(feasible))]
        if state.pick(level) is None:
            raise InsufficientQuestionsError(f"Insufficient questions for BTL {level} in required units")


def select_for_constraints(
    questions: Sequence[QuestionRecord],
    index: AvailabilityIndex,
    scheme: BTLScheme,
    requirements: Sequence[UnitRequirement],
    rng: RandomSource,
) -> SelectionResult:
    """
    Fill every quota of `scheme` from `questions` within `requirements`.

    The input sequence is never modified.
    """
    state = _SelectionState(questions, requirements, index, rng)

    for quota in scheme.quotas:
        if quota.is_choice:
            _fill_choice_quota(state, quota)
        else:
            _fill_fixed_quota(state, quota)

    for req in requirements:
        if state.unit_counts[req.unit] < req.min_count:
            raise UnitMinimumError(req.unit, state.unit_counts[req.unit], req.min_count)

    if len(state.selected) != PAPER_SIZE:
        raise SelectionConsistencyError(
            f"Failed to select exactly {PAPER_SIZE} questions with required BTL and unit constraints "
            f"(selected {len(state.selected)})"
        )

    log.info(f"[STEP 3] Selected: {[f'Unit {q.unit}, BTL {q.bt_level}' for q in state.selected]}")
    log.info(f"[STEP 3] Unit count: {state.unit_counts}  BTL count: {state.level_counts}")
    return SelectionResult(
        questions=list(state.selected),
        scheme_id=scheme.scheme_id,
        unit_counts=dict(state.unit_counts),
        level_counts=dict(state.level_counts),
    )


# ─── Main entry ───────────────────────────────────────────────────────────────

def select_questions(
    questions: Sequence[QuestionRecord],
    paper_type: Optional[str],
    rng: Optional[RandomSource] = None,
) -> SelectionResult:
    """
    Select six questions for a paper type from one bank snapshot.

    Args:
        questions: Records of the current bank
        paper_type: "mid1" | "mid2" | "special"
        rng: Random source; a fresh unseeded PyRandomSource when omitted

    Raises:
        InvalidPaperTypeError: unknown paper type token
        GenerationError: any constraint the bank cannot satisfy
    """
    requirements = get_unit_requirements(paper_type)

    if len(questions) < PAPER_SIZE:
        raise InsufficientQuestionsError(
            f"Insufficient questions in question bank. At least {PAPER_SIZE} questions are required."
        )

    index = build_availability_index(questions)
    scheme = resolve_btl_scheme(index.levels)
    return select_for_constraints(questions, index, scheme, requirements, rng or PyRandomSource())
