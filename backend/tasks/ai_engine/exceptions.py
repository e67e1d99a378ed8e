# tasks/ai_engine/exceptions.py


class DecisionEngineError(Exception):
    """Base class for errors raised by the decision engine."""

    pass


class InvalidInputError(DecisionEngineError):
    """Raised when a request is malformed (too few candidates, unknown choice)."""

    pass


class NotFoundError(DecisionEngineError):
    """Raised when a referenced decision log does not exist or is not the caller's."""

    pass
