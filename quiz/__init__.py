"""Quiz Module - Modelo de autoria, session engine, pontuação e analytics.

Arquitetura:
- core/: Config, logging estruturado, erros, clock
- models/: Enums, schemas de definição, respostas, estado de sessão, resultados
- engine/: SessionEngine, SessionRunner, QuizScoringEngine, QuizAnalyticsAggregator
- storage/: Portas de colaboradores (definition source, result sink) e adapters
"""

from .core import (
    AttemptLimitReached,
    InvalidDefinition,
    InvalidResponseShape,
    InvalidTransition,
    QuizError,
    RequiredQuestionUnanswered,
    ReviewNotAllowed,
    UnknownQuestion,
)
from .engine import (
    QuizAnalyticsAggregator,
    QuizScoringEngine,
    SessionEngine,
    SessionRunner,
    Submission,
    build_review,
)
from .models import (
    AnalyticsReport,
    AnswerOption,
    AnswerStatus,
    NavigationDirection,
    Question,
    QuestionType,
    QuizConfiguration,
    QuizDefinition,
    QuizResult,
    QuizSession,
    SessionStatus,
)

__all__ = [
    # Models
    "AnswerOption",
    "Question",
    "QuestionType",
    "QuizConfiguration",
    "QuizDefinition",
    "QuizSession",
    "SessionStatus",
    "NavigationDirection",
    "AnswerStatus",
    "QuizResult",
    "AnalyticsReport",
    # Engines
    "SessionEngine",
    "SessionRunner",
    "Submission",
    "QuizScoringEngine",
    "QuizAnalyticsAggregator",
    "build_review",
    # Errors
    "QuizError",
    "InvalidDefinition",
    "InvalidResponseShape",
    "UnknownQuestion",
    "InvalidTransition",
    "RequiredQuestionUnanswered",
    "AttemptLimitReached",
    "ReviewNotAllowed",
]
