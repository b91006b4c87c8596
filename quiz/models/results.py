"""Quiz Results - Resultado pontuado de uma sessão e analytics derivados."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .enums import AnswerStatus, SessionStatus
from .responses import Response


class QuestionOutcome(BaseModel):
    """Avaliação de uma questão dentro de um resultado."""

    model_config = ConfigDict(frozen=True)

    question_id: str = Field(..., description="Question id")
    response: Response | None = Field(default=None, description="Resposta registrada (None = sem resposta)")
    status: AnswerStatus = Field(..., description="Status da avaliação")
    is_correct: bool | None = Field(..., description="None enquanto aguarda revisão manual")
    points_possible: int = Field(..., description="Pontos da questão")
    points_earned: int = Field(default=0, description="Pontos obtidos")
    feedback: str | None = Field(default=None, description="Texto de feedback (acerto/erro)")
    time_spent_seconds: float | None = Field(default=None, description="Tempo gasto nesta questão")


class QuizResult(BaseModel):
    """Resultado imutável e pontuado de uma sessão terminal."""

    model_config = ConfigDict(frozen=True)

    quiz_id: str = Field(..., description="Id do quiz")
    session_id: str = Field(..., description="Id da sessão")
    attempt_number: int = Field(..., description="Número da tentativa (1-N)")
    status: SessionStatus = Field(..., description="submitted ou expired")
    score_percent: int = Field(..., description="Score arredondado para percentual inteiro (0-100)")
    passed: bool = Field(..., description="score_percent >= passing_score")
    total_points: int = Field(..., description="Soma dos pontos das questões apresentadas")
    earned_points: int = Field(..., description="Soma dos pontos das questões corretas")
    time_spent_seconds: float = Field(..., description="end_time - start_time")
    started_at: datetime | None = Field(default=None, description="Timestamp UTC de início")
    completed_at: datetime | None = Field(default=None, description="Timestamp UTC de conclusão")
    outcomes: tuple[QuestionOutcome, ...] = Field(..., description="Resultados por questão, na ordem da definição")
    category_breakdown: dict[str, dict[str, int]] = Field(
        default_factory=dict, description="Corretas/total por categoria"
    )

    @property
    def manual_review_question_ids(self) -> tuple[str, ...]:
        return tuple(o.question_id for o in self.outcomes if o.status == AnswerStatus.MANUAL_REVIEW)

    @property
    def requires_manual_review(self) -> bool:
        return bool(self.manual_review_question_ids)

    @property
    def misconfigured(self) -> bool:
        """Quiz que vale zero pontos não produz score significativo."""
        return self.total_points == 0

    @property
    def timed_out(self) -> bool:
        return self.status == SessionStatus.EXPIRED

    @property
    def correct_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_correct)

    def outcome(self, question_id: str) -> QuestionOutcome | None:
        return next((o for o in self.outcomes if o.question_id == question_id), None)


# =============================================================================
# ANALYTICS
# =============================================================================


class QuestionAnalytics(BaseModel):
    """Estatísticas por questão ao longo de vários resultados."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    category: str | None = None
    total_attempts: int = 0
    correct_attempts: int = 0
    manual_review_count: int = 0
    difficulty_index: int | None = Field(
        default=None, description="Percentual de acertos (maior = mais fácil)"
    )
    average_time_seconds: float | None = None


class ScoreBucket(BaseModel):
    """Quantidade de resultados com score em [min_score, max_score]."""

    model_config = ConfigDict(frozen=True)

    label: str
    min_score: int
    max_score: int
    count: int = 0


class AnalyticsReport(BaseModel):
    """Estatísticas do conjunto de participantes de um quiz."""

    model_config = ConfigDict(frozen=True)

    quiz_id: str
    completed_count: int = 0
    passed_count: int = 0
    expired_count: int = 0
    average_score: float = 0.0
    pass_rate: float = 0.0
    average_time_seconds: float | None = None
    score_distribution: tuple[ScoreBucket, ...] = ()
    questions: tuple[QuestionAnalytics, ...] = ()
    category_breakdown: dict[str, dict[str, int]] = Field(default_factory=dict)

    def question(self, question_id: str) -> QuestionAnalytics | None:
        return next((q for q in self.questions if q.question_id == question_id), None)


# =============================================================================
# REVIEW
# =============================================================================


class ReviewItem(BaseModel):
    """Uma questão como exibida ao participante após a conclusão."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    text: str
    status: AnswerStatus
    response: Response | None = None
    feedback: str | None = None
    correct_option_ids: frozenset[str] | None = Field(
        default=None, description="Presente só quando o quiz revela as respostas corretas"
    )
    explanation: str | None = None


class ReviewSheet(BaseModel):
    """Revisão de uma tentativa concluída."""

    model_config = ConfigDict(frozen=True)

    quiz_id: str
    session_id: str
    score_percent: int
    passed: bool
    items: tuple[ReviewItem, ...]
