"""
Errors raised while generating a paper.

InvalidPaperTypeError is an input rejection (HTTP 400); every other
GenerationError means the bank cannot satisfy the paper's constraints
(HTTP 500) and carries a message naming the failing unit, level or token.
"""


class GenerationError(RuntimeError):
    """Base class for paper generation failures."""


class InvalidPaperTypeError(GenerationError, ValueError):
    def __init__(self, paper_type):
        self.paper_type = paper_type
        super().__init__(f"Invalid paper type: {paper_type!r}. Expected one of mid1, mid2, special")


class InsufficientQuestionsError(GenerationError):
    """Not enough questions in the bank, or for a BTL level in the paper's units."""


class UnsupportedSchemeError(GenerationError):
    """The bank's BTL distribution matches none of the supported schemes."""


class UnitMinimumError(GenerationError):
    def __init__(self, unit: int, actual: int, required: int):
        self.unit = unit
        self.actual = actual
        self.required = required
        super().__init__(f"Unit {unit} has {actual} questions, needs at least {required}")


class SelectionConsistencyError(GenerationError):
    """The sampler finished without exactly the expected number of questions."""
