"""Quiz Scoring Engine - Avalia respostas e pontua tentativas."""

from collections.abc import Mapping

from ..core.config import MatchMode, get_config
from ..core.logger import get_logger
from ..models.enums import AnswerStatus, QuestionType
from ..models.responses import (
    OptionResponse,
    OptionSetResponse,
    Response,
    TextResponse,
    is_blank_response,
)
from ..models.results import QuestionOutcome, QuizResult
from ..models.schemas import Question, QuizDefinition
from ..models.state import QuizSession
from .answer_matching import Comparator, build_comparator

logger = get_logger("scoring")


def percent(numerator: int, denominator: int) -> int:
    """Percentual inteiro arredondado half-up, calculado em inteiros.

    Retorna 0 quando ``denominator`` é 0.
    """
    if denominator <= 0:
        return 0
    return (numerator * 200 + denominator) // (2 * denominator)


class QuizScoringEngine:
    """Engine de pontuação de tentativas de quiz.

    Avalia cada questão pelo tipo:
        - single_choice / true_false: resposta deve ser a opção correta
        - multi_choice: conjunto respondido igual ao correto (sem crédito parcial)
        - fill_in_blank / scenario: delegado a um comparador; sem comparador a
          questão respondida vai para revisão manual em vez de ser marcada errada

    Questão sem resposta (ou com texto em branco) é sempre incorreta e vale 0.

    Comparadores vêm de ``accepted_answers`` da questão ou do mapping
    ``comparators`` (question id -> callable), que tem precedência.

    Example:
        >>> engine = QuizScoringEngine()
        >>> result = engine.score(definition, session)
        >>> result.score_percent, result.passed
        (80, True)
    """

    def __init__(
        self,
        comparators: Mapping[str, Comparator] | None = None,
        default_match_mode: MatchMode | None = None,
    ):
        self._comparators = dict(comparators or {})
        self.default_match_mode = default_match_mode or get_config().default_match_mode

    def comparator_for(self, question: Question) -> Comparator | None:
        """Retorna o comparador de uma questão de texto (None = revisão manual)."""
        if question.id in self._comparators:
            return self._comparators[question.id]
        return build_comparator(question, self.default_match_mode)

    def _feedback(
        self, question: Question, status: AnswerStatus, response: Response | None
    ) -> str | None:
        if status == AnswerStatus.CORRECT:
            return question.correct_feedback or question.explanation
        if status == AnswerStatus.MANUAL_REVIEW:
            return None
        if question.incorrect_feedback:
            return question.incorrect_feedback
        # Explicação da opção errada escolhida
        if isinstance(response, OptionResponse):
            option = question.option(response.option_id)
            if option is not None and option.explanation:
                return option.explanation
        return question.explanation

    def _status(self, question: Question, response: Response | None) -> AnswerStatus:
        if is_blank_response(response):
            return AnswerStatus.UNANSWERED

        if question.type in (QuestionType.FILL_IN_BLANK, QuestionType.SCENARIO):
            comparator = self.comparator_for(question)
            if comparator is None:
                return AnswerStatus.MANUAL_REVIEW
            if not isinstance(response, TextResponse):
                return AnswerStatus.INCORRECT
            return AnswerStatus.CORRECT if comparator(response.text) else AnswerStatus.INCORRECT

        if question.type == QuestionType.MULTI_CHOICE:
            is_correct = (
                isinstance(response, OptionSetResponse)
                and response.option_ids == question.correct_option_ids
            )
        else:
            is_correct = (
                isinstance(response, OptionResponse)
                and response.option_id in question.correct_option_ids
            )
        return AnswerStatus.CORRECT if is_correct else AnswerStatus.INCORRECT

    def evaluate_response(
        self,
        question: Question,
        response: Response | None,
        time_spent_seconds: float | None = None,
    ) -> QuestionOutcome:
        """Avalia uma única resposta.

        Usado por ``score`` e para feedback instantâneo quando o quiz mostra
        resultados imediatamente.

        Args:
            question: Questão respondida
            response: Resposta registrada (None = sem resposta)
            time_spent_seconds: Tempo gasto na questão, se rastreado

        Returns:
            QuestionOutcome com status, pontos e feedback
        """
        status = self._status(question, response)

        if status == AnswerStatus.MANUAL_REVIEW:
            is_correct = None
        else:
            is_correct = status == AnswerStatus.CORRECT

        return QuestionOutcome(
            question_id=question.id,
            response=response,
            status=status,
            is_correct=is_correct,
            points_possible=question.points,
            points_earned=question.points if is_correct else 0,
            feedback=self._feedback(question, status, response),
            time_spent_seconds=time_spent_seconds,
        )

    def score(self, definition: QuizDefinition, session: QuizSession) -> QuizResult:
        """Pontua uma sessão contra sua definição.

        Pura: pontuar o mesmo (definition, session) duas vezes gera resultados
        iguais. Só as questões apresentadas na sessão são pontuadas, na ordem
        da definição.

        Args:
            definition: Definição do quiz
            session: Sessão a pontuar (normalmente terminal)

        Returns:
            QuizResult

        Raises:
            ValueError: Se a sessão pertence a outro quiz
        """
        if session.quiz_id != definition.id:
            raise ValueError(
                f"Session {session.session_id} belongs to quiz {session.quiz_id}, not {definition.id}"
            )

        presented = set(session.question_ids) if session.question_ids else set(definition.question_ids)

        outcomes: list[QuestionOutcome] = []
        breakdown: dict[str, dict[str, int]] = {}

        for question in definition.questions:
            if question.id not in presented:
                continue

            outcome = self.evaluate_response(
                question,
                session.responses.get(question.id),
                session.question_time_seconds.get(question.id),
            )
            outcomes.append(outcome)

            if question.category:
                bucket = breakdown.setdefault(question.category, {"correct": 0, "total": 0})
                bucket["total"] += 1
                if outcome.is_correct:
                    bucket["correct"] += 1

        total_points = sum(o.points_possible for o in outcomes)
        earned_points = sum(o.points_earned for o in outcomes)
        score_percent = percent(earned_points, total_points)
        passed = score_percent >= definition.configuration.passing_score

        result = QuizResult(
            quiz_id=definition.id,
            session_id=session.session_id,
            attempt_number=session.attempt_number,
            status=session.status,
            score_percent=score_percent,
            passed=passed,
            total_points=total_points,
            earned_points=earned_points,
            time_spent_seconds=session.time_spent_seconds or 0.0,
            started_at=session.started_at,
            completed_at=session.ended_at,
            outcomes=tuple(outcomes),
            category_breakdown=breakdown,
        )

        if result.misconfigured:
            logger.warning("Quiz sem pontos para pontuar", quiz_id=definition.id)

        if result.requires_manual_review:
            logger.warning(
                "Questões marcadas para revisão manual",
                quiz_id=definition.id,
                session_id=session.session_id,
                question_ids=list(result.manual_review_question_ids),
            )

        logger.debug(
            "Quiz pontuado",
            quiz_id=definition.id,
            session_id=session.session_id,
            score_percent=score_percent,
            passed=passed,
        )
        return result
