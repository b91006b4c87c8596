"""Quiz Enums - Tipos de questão, estados de sessão e resultados de resposta."""

from enum import Enum


class QuestionType(str, Enum):
    """Tipos de questão suportados."""

    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    TRUE_FALSE = "true_false"
    FILL_IN_BLANK = "fill_in_blank"
    SCENARIO = "scenario"

    @property
    def uses_options(self) -> bool:
        """Tipos de escolha têm opções; tipos de texto não."""
        return self in (
            QuestionType.SINGLE_CHOICE,
            QuestionType.MULTI_CHOICE,
            QuestionType.TRUE_FALSE,
        )

    @property
    def single_correct(self) -> bool:
        return self in (QuestionType.SINGLE_CHOICE, QuestionType.TRUE_FALSE)


class SessionStatus(str, Enum):
    """Ciclo de vida de uma sessão de quiz."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"  # Conclusão voluntária
    EXPIRED = "expired"  # Tempo limite atingido

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.SUBMITTED, SessionStatus.EXPIRED)


class NavigationDirection(str, Enum):
    """Direção de navegação entre questões."""

    NEXT = "next"
    PREVIOUS = "previous"


class AnswerStatus(str, Enum):
    """Resultado da avaliação de uma questão."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNANSWERED = "unanswered"
    MANUAL_REVIEW = "manual_review"  # Resposta de texto respondida, sem comparador
