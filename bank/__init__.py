"""
Question bank: spreadsheet rows → normalized records → published snapshot.
"""

from bank.schemas import QuestionRecord, QuestionBank
from bank.store import QuestionBankStore, get_question_store

__all__ = ["QuestionRecord", "QuestionBank", "QuestionBankStore", "get_question_store"]
