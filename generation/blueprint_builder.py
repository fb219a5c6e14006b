"""
Step 2 — Blueprint Builder

Resolves the two constraint sets a paper is generated against:
- unit requirements, looked up by paper type token
- BTL quotas, chosen from the bank's observed level distribution

Both tables are plain data. Scheme precedence is fixed:
  A  max level = 6   →  2×L2, 2×L3, 1×L4, 1 of {L1, L5, L6}
  B  max level = 4   →  2×L2, 2×L3, 2×L4
  C  one level only  →  6× that level
Any other distribution is rejected rather than approximated.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from generation.exceptions import InsufficientQuestionsError, InvalidPaperTypeError, UnsupportedSchemeError
from generation.schemas import BTLScheme, LevelQuota, UnitRequirement

log = logging.getLogger("generation.pipeline")

PAPER_SIZE = 6


# ─── Unit requirements (by paper type) ────────────────────────────────────────

UNIT_REQUIREMENTS: Dict[str, Tuple[UnitRequirement, ...]] = {
    "mid1": (
        UnitRequirement(unit=1, min_count=2, max_count=3),
        UnitRequirement(unit=2, min_count=2, max_count=3),
        UnitRequirement(unit=3, min_count=1, max_count=1),
    ),
    "mid2": (
        UnitRequirement(unit=4, min_count=2, max_count=3),
        UnitRequirement(unit=5, min_count=2, max_count=3),
        UnitRequirement(unit=3, min_count=1, max_count=1),
    ),
    "special": tuple(
        UnitRequirement(unit=u, min_count=1, max_count=2) for u in range(1, 6)
    ),
}


# ─── BTL schemes (by max level) ───────────────────────────────────────────────

BTL_SCHEMES: Dict[str, BTLScheme] = {
    "A": BTLScheme("A", (
        LevelQuota(level="2", count=2),
        LevelQuota(level="3", count=2),
        LevelQuota(level="4", count=1),
        LevelQuota(options=("1", "5", "6"), count=1),
    )),
    "B": BTLScheme("B", (
        LevelQuota(level="2", count=2),
        LevelQuota(level="3", count=2),
        LevelQuota(level="4", count=2),
    )),
}

SCHEME_BY_MAX_LEVEL: Dict[int, str] = {6: "A", 4: "B"}
SINGLE_LEVEL_SCHEME = "C"


def get_unit_requirements(paper_type: Optional[str]) -> Tuple[UnitRequirement, ...]:
    """Unit min/max table for a paper type token."""
    try:
        requirements = UNIT_REQUIREMENTS[paper_type]
    except (KeyError, TypeError):
        raise InvalidPaperTypeError(paper_type)
    log.info(f"[STEP 2] Unit requirements for {paper_type}: "
             f"{[(r.unit, r.min_count, r.max_count) for r in requirements]}")
    return requirements


def _level_values(levels: Iterable[str]) -> Tuple[int, ...]:
    values = []
    for label in levels:
        try:
            value = int(label)
        except (TypeError, ValueError):
            continue
        if value > 0:
            values.append(value)
    return tuple(sorted(set(values)))


def resolve_btl_scheme(levels: Iterable[str]) -> BTLScheme:
    """
    Pick the BTL quota scheme for the set of level labels present in the bank.

    Raises:
        InsufficientQuestionsError: no positive level is present
        UnsupportedSchemeError: the distribution matches no scheme
    """
    labels = sorted(set(levels), key=lambda s: (len(s), s))
    values = _level_values(labels)
    if not values:
        raise InsufficientQuestionsError("No valid BTL levels found in question bank")

    max_level = max(values)
    scheme_id = SCHEME_BY_MAX_LEVEL.get(max_level)
    if scheme_id is not None:
        scheme = BTL_SCHEMES[scheme_id]
    elif len(labels) == 1:
        scheme = BTLScheme(SINGLE_LEVEL_SCHEME, (LevelQuota(level=labels[0], count=PAPER_SIZE),))
    else:
        raise UnsupportedSchemeError(
            f"Unsupported case: Max BTL = {max_level} with multiple BTLs ({', '.join(labels)}). "
            f"Only Case i (max BTL = 6), Case ii (max BTL = 4), or Case iii (single BTL) are supported."
        )

    log.info(f"[STEP 2] BTL scheme {scheme.scheme_id} (max BTL={max_level}, levels={labels}): "
             f"{[(q.level or list(q.options), q.count) for q in scheme.quotas]}")
    return scheme
