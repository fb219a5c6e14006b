"""
Step 1 — Availability Index

Groups the bank by unit and BTL level. Rebuilt for every generation request
from whichever bank snapshot the request is working on.
"""

import logging
from typing import Dict, Iterable, List

from bank.schemas import QuestionRecord
from generation.schemas import AvailabilityIndex

log = logging.getLogger("generation.pipeline")

UNITS = (1, 2, 3, 4, 5)


def build_availability_index(questions: Iterable[QuestionRecord]) -> AvailabilityIndex:
    by_unit: Dict[int, Dict[str, List[QuestionRecord]]] = {unit: {} for unit in UNITS}
    levels = set()
    for q in questions:
        if q.unit not in by_unit:
            continue
        by_unit[q.unit].setdefault(q.bt_level, []).append(q)
        levels.add(q.bt_level)

    log.debug("[STEP 1] Available by unit/BTL: %s",
              {u: {lvl: len(qs) for lvl, qs in groups.items()} for u, groups in by_unit.items()})
    log.info(f"[STEP 1] Unique BTLs: {sorted(levels)}")
    return AvailabilityIndex(by_unit=by_unit, levels=frozenset(levels))
