"""
Question Bank Store
Process-wide holder of the current QuestionBank.

A new bank is built completely and only then published, so a request that
calls current() once always works on a single, consistent generation.
"""

import logging
import threading
from typing import Iterable, Optional

from bank.schemas import QuestionBank, QuestionRecord

log = logging.getLogger(__name__)


class QuestionBankStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._bank: Optional[QuestionBank] = None
        self._generation = 0

    def replace(self, questions: Iterable[QuestionRecord]) -> QuestionBank:
        """Publish a new bank built from `questions`, superseding the old one."""
        records = tuple(questions)
        with self._lock:
            self._generation += 1
            bank = QuestionBank(questions=records, generation=self._generation)
            self._bank = bank
        log.info("[STORE] published bank generation=%s questions=%s", bank.generation, len(bank))
        return bank

    def current(self) -> Optional[QuestionBank]:
        """The latest published bank, or None before the first upload."""
        return self._bank


# ─── Process-wide instance ─────────────────────────────────────────────────────

_store = QuestionBankStore()


def get_question_store() -> QuestionBankStore:
    """Shared store (FastAPI dependency)."""
    return _store
