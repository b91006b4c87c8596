"""Quiz Engines - Máquina de estados da sessão, pontuação, analytics e revisão."""

from .analytics import DEFAULT_SCORE_BANDS, QuizAnalyticsAggregator, ScoreBand
from .answer_matching import build_comparator, contains_match, exact_match, normalized_match
from .review import build_review
from .scoring_engine import QuizScoringEngine
from .session_engine import SessionEngine, Submission, ensure_attempt_allowed
from .session_runner import SessionRunner

__all__ = [
    "SessionEngine",
    "SessionRunner",
    "Submission",
    "ensure_attempt_allowed",
    "QuizScoringEngine",
    "QuizAnalyticsAggregator",
    "ScoreBand",
    "DEFAULT_SCORE_BANDS",
    "build_review",
    "build_comparator",
    "exact_match",
    "normalized_match",
    "contains_match",
]
