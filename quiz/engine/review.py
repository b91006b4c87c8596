"""Quiz Review - Folha de revisão pós-conclusão."""

from ..core.exceptions import ReviewNotAllowed
from ..models.results import QuizResult, ReviewItem, ReviewSheet
from ..models.schemas import QuizDefinition


def build_review(definition: QuizDefinition, result: QuizResult) -> ReviewSheet:
    """Monta o que o participante pode ver após concluir uma tentativa.

    Opções corretas e explicações só são reveladas quando o quiz está
    configurado com ``show_correct_answers``.

    Raises:
        ReviewNotAllowed: Se o quiz não permite revisão
        ValueError: Se o resultado pertence a outro quiz
    """
    config = definition.configuration
    if not config.allow_review:
        raise ReviewNotAllowed(f"Quiz {definition.id} does not allow review", quiz_id=definition.id)
    if result.quiz_id != definition.id:
        raise ValueError(f"Result {result.session_id} belongs to quiz {result.quiz_id}")

    items = []
    for outcome in result.outcomes:
        question = definition.question(outcome.question_id)
        reveal = config.show_correct_answers
        items.append(
            ReviewItem(
                question_id=question.id,
                text=question.text,
                status=outcome.status,
                response=outcome.response,
                feedback=outcome.feedback,
                correct_option_ids=question.correct_option_ids if reveal and question.options else None,
                explanation=question.explanation if reveal else None,
            )
        )

    return ReviewSheet(
        quiz_id=definition.id,
        session_id=result.session_id,
        score_percent=result.score_percent,
        passed=result.passed,
        items=tuple(items),
    )
