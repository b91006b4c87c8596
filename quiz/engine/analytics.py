"""Quiz Analytics - Estatísticas por questão e por turma sobre resultados."""

from collections.abc import Iterable
from typing import NamedTuple

from ..core.logger import get_logger
from ..models.enums import AnswerStatus
from ..models.results import AnalyticsReport, QuestionAnalytics, QuizResult, ScoreBucket
from ..models.schemas import QuizDefinition
from .scoring_engine import percent

logger = get_logger("analytics")


class ScoreBand(NamedTuple):
    """Limite de faixa da distribuição de scores (mínimo inclusivo)."""

    min_score: int
    label: str


# Política de relatório; o chamador pode passar suas próprias faixas
DEFAULT_SCORE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(90, "90-100"),
    ScoreBand(80, "80-89"),
    ScoreBand(70, "70-79"),
    ScoreBand(0, "0-69"),
)


def _average(values: list[float], digits: int = 1) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), digits)


class QuizAnalyticsAggregator:
    """Agrega resultados históricos de um quiz.

    Somente leitura sobre os resultados: nada é alterado.

    Por questão:
        - difficulty_index = round(corretas / tentativas * 100), maior = mais fácil
        - average_time_seconds a partir do tempo por questão, quando rastreado
    Turma:
        - average_score, pass_rate (percentual), expired_count
        - distribuição de scores sobre ``score_bands``

    Example:
        >>> report = QuizAnalyticsAggregator().aggregate(definition, results)
        >>> report.question("q1").difficulty_index
        60
    """

    def __init__(self, score_bands: Iterable[ScoreBand] = DEFAULT_SCORE_BANDS):
        bands = sorted(score_bands, key=lambda b: b.min_score, reverse=True)
        if not bands or bands[-1].min_score > 0:
            raise ValueError("Score bands must cover scores down to 0")
        self.score_bands = tuple(bands)

    def _distribution(self, scores: list[int]) -> tuple[ScoreBucket, ...]:
        buckets = []
        upper = 100
        for band in self.score_bands:
            count = sum(1 for s in scores if band.min_score <= s <= upper)
            buckets.append(
                ScoreBucket(label=band.label, min_score=band.min_score, max_score=upper, count=count)
            )
            upper = band.min_score - 1
        return tuple(buckets)

    def aggregate(self, definition: QuizDefinition, results: Iterable[QuizResult]) -> AnalyticsReport:
        """Monta o relatório de analytics de ``definition``.

        Resultados de outros quizzes são ignorados com um warning.

        Args:
            definition: Definição do quiz
            results: Resultados concluídos

        Returns:
            AnalyticsReport
        """
        relevant: list[QuizResult] = []
        for result in results:
            if result.quiz_id != definition.id:
                logger.warning(
                    "Ignorando resultado de outro quiz",
                    quiz_id=definition.id,
                    result_quiz_id=result.quiz_id,
                    session_id=result.session_id,
                )
                continue
            relevant.append(result)

        questions = []
        for question in definition.questions:
            attempts = 0
            correct = 0
            manual = 0
            times: list[float] = []

            for result in relevant:
                outcome = result.outcome(question.id)
                if outcome is None:
                    continue  # Não apresentada naquela tentativa (pool aleatório)
                if outcome.status == AnswerStatus.MANUAL_REVIEW:
                    manual += 1
                    continue
                attempts += 1
                if outcome.is_correct:
                    correct += 1
                if outcome.time_spent_seconds is not None:
                    times.append(outcome.time_spent_seconds)

            questions.append(
                QuestionAnalytics(
                    question_id=question.id,
                    category=question.category,
                    total_attempts=attempts,
                    correct_attempts=correct,
                    manual_review_count=manual,
                    difficulty_index=percent(correct, attempts) if attempts else None,
                    average_time_seconds=_average(times),
                )
            )

        breakdown: dict[str, dict[str, int]] = {}
        for result in relevant:
            for category, counts in result.category_breakdown.items():
                bucket = breakdown.setdefault(category, {"correct": 0, "total": 0})
                bucket["correct"] += counts.get("correct", 0)
                bucket["total"] += counts.get("total", 0)

        completed = len(relevant)
        passed = sum(1 for r in relevant if r.passed)
        scores = [r.score_percent for r in relevant]

        report = AnalyticsReport(
            quiz_id=definition.id,
            completed_count=completed,
            passed_count=passed,
            expired_count=sum(1 for r in relevant if r.timed_out),
            average_score=_average([float(s) for s in scores]) or 0.0,
            pass_rate=round(passed / completed * 100, 1) if completed else 0.0,
            average_time_seconds=_average([r.time_spent_seconds for r in relevant]),
            score_distribution=self._distribution(scores),
            questions=tuple(questions),
            category_breakdown=breakdown,
        )

        logger.debug(
            "Analytics agregados",
            quiz_id=definition.id,
            completed=completed,
            pass_rate=report.pass_rate,
        )
        return report
