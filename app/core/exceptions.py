from typing import Optional


class QualificationEngineError(Exception):
    """Base class for all lead-qualification domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except QualificationEngineError`` clause can catch any
    domain error.  Repository and driver errors are *not* wrapped.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class InvalidAnswerError(QualificationEngineError):
    """Raised when an answer selection is not a key of its rule's answer table.

    Also raised when no selection was supplied for a rule.  Aborts the
    qualification of the lead; no partial score is returned.
    """

    def __init__(
        self,
        detail: str = "Invalid answer selection",
        rule_index: Optional[int] = None,
        answer: Optional[str] = None,
    ):
        self.rule_index = rule_index
        self.answer = answer
        super().__init__(detail)


class InvalidScoringRuleError(QualificationEngineError):
    """Raised when a scoring rule has a malformed weight or answer table."""

    def __init__(self, detail: str = "Invalid scoring rule"):
        super().__init__(detail)


class InvalidRoutingRuleError(QualificationEngineError):
    """Raised when a routing rule names an unknown category or method."""

    def __init__(self, detail: str = "Invalid routing rule"):
        super().__init__(detail)


class LeadNotFoundError(QualificationEngineError):
    """Raised when a requested lead does not exist."""

    def __init__(self, detail: str = "Lead not found"):
        super().__init__(detail)

