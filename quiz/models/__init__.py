"""Quiz Models - Enums, schemas de definição, respostas, estado de sessão e resultados."""

from .enums import AnswerStatus, NavigationDirection, QuestionType, SessionStatus
from .responses import (
    OptionResponse,
    OptionSetResponse,
    Response,
    TextResponse,
    coerce_response,
    is_blank_response,
    response_from_dict,
)
from .results import (
    AnalyticsReport,
    QuestionAnalytics,
    QuestionOutcome,
    QuizResult,
    ReviewItem,
    ReviewSheet,
    ScoreBucket,
)
from .schemas import AnswerOption, Question, QuizConfiguration, QuizDefinition
from .state import QuizSession

__all__ = [
    # Enums
    "AnswerStatus",
    "NavigationDirection",
    "QuestionType",
    "SessionStatus",
    # Definition
    "AnswerOption",
    "Question",
    "QuizConfiguration",
    "QuizDefinition",
    # Responses
    "OptionResponse",
    "OptionSetResponse",
    "TextResponse",
    "Response",
    "coerce_response",
    "is_blank_response",
    "response_from_dict",
    # State
    "QuizSession",
    # Results
    "QuestionOutcome",
    "QuizResult",
    "QuestionAnalytics",
    "ScoreBucket",
    "AnalyticsReport",
    "ReviewItem",
    "ReviewSheet",
]
