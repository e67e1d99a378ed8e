# tasks/ai_engine/__init__.py
"""
AI Engine Package
=================

Decision logic for the "what should I do next" feature, plus the
natural-language task parser.

Modules:
--------
- types: Typed records shared by the engine (snapshots, scores, decisions)
- scoring: Per-factor scoring and candidate ranking
- decision: DecisionEngine, recommendation reasons and confidence
- feedback: Recording the user's actual choice against a decision
- store: Storage interface the engine depends on
- nl_parser: OpenAI integration for natural-language task input
- cache: Django-cache layer for parse results

Architecture:
-------------
The engine is pure: it never touches the ORM and never logs. Everything
it reads or writes goes through a DecisionStore (see tasks.services for
the Django implementation). A recommendation returns a Decision whose
``to_dict()`` is the API contract:

    {
        "recommended_id": int,
        "scores": [{"task_id", "score", "breakdown"}, ...],
        "reasons": [{"type", "description"}, ...],
        "confidence": float,
        "decision_log_id": int | None
    }

Usage:
------
    from tasks.services import get_decision_engine

    decision = get_decision_engine().recommend_next([12, 15, 19], user_id=request.user.id)
"""

from .cache import ParseCache
from .decision import DecisionEngine, build_reasons
from .exceptions import DecisionEngineError, InvalidInputError, NotFoundError
from .feedback import FeedbackRecorder
from .nl_parser import ExternalTaskParser
from .scoring import CandidateScorer, ScoringContext
from .store import DecisionStore
from .types import Decision, Reason, Score, ScoringWeights, TaskSnapshot

__all__ = [
    # Core classes
    "DecisionEngine",
    "FeedbackRecorder",
    "CandidateScorer",
    "ScoringContext",
    "DecisionStore",
    "ExternalTaskParser",
    "ParseCache",
    # Records
    "Decision",
    "Reason",
    "Score",
    "ScoringWeights",
    "TaskSnapshot",
    # Functions
    "build_reasons",
    # Errors
    "DecisionEngineError",
    "InvalidInputError",
    "NotFoundError",
]
