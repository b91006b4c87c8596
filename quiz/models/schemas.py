"""Quiz Schemas - Modelos Pydantic para definições de quiz.

Uma definição é validada na construção e congelada depois (publish-once).
Qualquer alteração, inclusive pelos helpers de autoria, produz uma nova
definição validada; a original nunca muda.
"""

from collections import Counter
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    model_validator,
)

from ..core.config import MatchMode
from ..core.exceptions import InvalidDefinition, UnknownQuestion
from .enums import QuestionType


def _duplicates(values: list[str]) -> list[str]:
    return sorted(value for value, count in Counter(values).items() if count > 1)


class _DefinitionModel(BaseModel):
    """Base congelada; erros de tipo do pydantic viram ``InvalidDefinition``."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="wrap")
    @classmethod
    def _as_invalid_definition(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(data)
        except ValidationError as e:
            raise InvalidDefinition(
                f"{cls.__name__} is invalid: {e.error_count()} error(s)",
                errors=e.errors(include_url=False),
            ) from e


class AnswerOption(_DefinitionModel):
    """Opção de resposta de uma questão de escolha."""

    id: str = Field(..., description="Id da opção (único na questão)")
    text: str = Field(..., description="Texto da opção")
    is_correct: bool = Field(default=False, description="Se a opção é correta")
    explanation: str | None = Field(default=None, description="Por que a opção está certa/errada")


class Question(_DefinitionModel):
    """Questão do quiz com opções de resposta e feedback."""

    id: str = Field(..., description="Id da questão (único no quiz)")
    type: QuestionType = Field(..., description="Tipo da questão")
    text: str = Field(..., description="Enunciado")
    image_url: str | None = Field(default=None, description="Referência opcional de imagem")
    points: int = Field(default=1, description="Pontos quando correta (> 0)")
    explanation: str | None = Field(default=None, description="Explicação da resposta")
    correct_feedback: str | None = Field(default=None, description="Exibido quando acerta")
    incorrect_feedback: str | None = Field(default=None, description="Exibido quando erra")
    category: str | None = Field(default=None, description="Categoria para relatórios")
    options: tuple[AnswerOption, ...] = Field(default=(), description="Opções em ordem")
    is_required: bool = Field(default=False, description="Obrigatória antes do submit voluntário")
    accepted_answers: tuple[str, ...] = Field(
        default=(), description="Respostas aceitas para fill-in-blank/scenario"
    )
    match_mode: MatchMode | None = Field(
        default=None, description="Comparação das respostas aceitas (None = default do engine)"
    )

    @model_validator(mode="after")
    def _validate_question(self) -> "Question":
        if not self.id:
            raise InvalidDefinition("Question id must not be empty")

        if self.points <= 0:
            raise InvalidDefinition(
                f"Question {self.id} must award a positive number of points",
                question_id=self.id,
                points=self.points,
            )

        option_ids = [option.id for option in self.options]
        duplicated = _duplicates(option_ids)
        if duplicated:
            raise InvalidDefinition(
                f"Question {self.id} has duplicate option ids: {duplicated}",
                question_id=self.id,
                option_ids=duplicated,
            )

        correct_count = sum(1 for option in self.options if option.is_correct)

        if self.type.uses_options:
            if not self.options:
                raise InvalidDefinition(
                    f"Question {self.id} ({self.type.value}) requires answer options",
                    question_id=self.id,
                )
            if self.type.single_correct and correct_count != 1:
                raise InvalidDefinition(
                    f"Question {self.id} ({self.type.value}) must have exactly one correct "
                    f"option, found {correct_count}",
                    question_id=self.id,
                    correct_count=correct_count,
                )
            if self.type == QuestionType.MULTI_CHOICE and correct_count < 1:
                raise InvalidDefinition(
                    f"Question {self.id} (multi_choice) must have at least one correct option",
                    question_id=self.id,
                )
        elif self.options:
            raise InvalidDefinition(
                f"Question {self.id} ({self.type.value}) must not carry answer options",
                question_id=self.id,
            )

        return self

    @property
    def option_ids(self) -> tuple[str, ...]:
        return tuple(option.id for option in self.options)

    @property
    def correct_option_ids(self) -> frozenset[str]:
        return frozenset(option.id for option in self.options if option.is_correct)

    def option(self, option_id: str) -> AnswerOption | None:
        return next((o for o in self.options if o.id == option_id), None)

    # =========================================================================
    # AUTORIA
    # =========================================================================

    def revise(self, **changes: Any) -> "Question":
        """Retorna uma nova questão, re-validada, com ``changes`` aplicadas."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)

    def _require_option(self, option_id: str) -> AnswerOption:
        option = self.option(option_id)
        if option is None:
            raise InvalidDefinition(
                f"Question {self.id} has no option {option_id}",
                question_id=self.id,
                option_id=option_id,
            )
        return option

    def add_option(self, option: AnswerOption) -> "Question":
        """Anexa ``option`` ao final da lista de opções."""
        return self.revise(options=self.options + (option,))

    def update_option(self, option_id: str, **changes: Any) -> "Question":
        """Substitui campos de uma opção existente (texto, explicação, ...)."""
        current = self._require_option(option_id)
        updated = AnswerOption.model_validate({**current.model_dump(), **changes})
        return self.revise(
            options=tuple(updated if o.id == option_id else o for o in self.options)
        )

    def remove_option(self, option_id: str) -> "Question":
        self._require_option(option_id)
        return self.revise(options=tuple(o for o in self.options if o.id != option_id))

    def set_correct_options(self, *option_ids: str) -> "Question":
        """Marca exatamente ``option_ids`` como corretas e as demais como erradas.

        Questões single-choice/true-false continuam exigindo uma única correta.
        """
        for option_id in option_ids:
            self._require_option(option_id)
        wanted = set(option_ids)
        return self.revise(
            options=tuple(
                o.model_copy(update={"is_correct": o.id in wanted}) for o in self.options
            )
        )


class QuizConfiguration(_DefinitionModel):
    """Configurações do quiz. Imutáveis depois que o quiz é ativado."""

    title: str = Field(..., description="Título do quiz")
    description: str | None = Field(default=None, description="Descrição do quiz")
    passing_score: int = Field(default=80, description="Percentual mínimo para aprovação (0-100)")
    max_attempts: int = Field(default=1, description="Máximo de tentativas por participante (>= 1)")
    allow_retries: bool = Field(default=False, description="Permite tentativas após a primeira")
    shuffle_questions: bool = Field(default=False, description="Embaralha questões por sessão")
    shuffle_answers: bool = Field(default=False, description="Embaralha opções por sessão")
    show_results_immediately: bool = Field(default=True, description="Mostra feedback por questão")
    show_correct_answers: bool = Field(default=False, description="Revela opções corretas na revisão")
    allow_review: bool = Field(default=True, description="Permite revisar tentativa concluída")
    time_limit_minutes: int | None = Field(default=None, description="Tempo limite (None = ilimitado)")
    random_pool_size: int | None = Field(
        default=None, description="Apresenta um subconjunto aleatório com este tamanho"
    )
    is_required: bool = Field(default=False, description="Quiz obrigatório para o participante")

    @model_validator(mode="after")
    def _validate_configuration(self) -> "QuizConfiguration":
        if not self.title or not self.title.strip():
            raise InvalidDefinition("Quiz title must not be empty")
        if not 0 <= self.passing_score <= 100:
            raise InvalidDefinition(
                f"passing_score must be between 0 and 100, got {self.passing_score}",
                passing_score=self.passing_score,
            )
        if self.max_attempts < 1:
            raise InvalidDefinition(
                f"max_attempts must be at least 1, got {self.max_attempts}",
                max_attempts=self.max_attempts,
            )
        if self.time_limit_minutes is not None and self.time_limit_minutes <= 0:
            raise InvalidDefinition(
                f"time_limit_minutes must be positive, got {self.time_limit_minutes}",
                time_limit_minutes=self.time_limit_minutes,
            )
        if self.random_pool_size is not None and self.random_pool_size < 1:
            raise InvalidDefinition(
                f"random_pool_size must be at least 1, got {self.random_pool_size}",
                random_pool_size=self.random_pool_size,
            )
        return self

    @property
    def time_limit_seconds(self) -> int | None:
        if self.time_limit_minutes is None:
            return None
        return self.time_limit_minutes * 60


class QuizDefinition(_DefinitionModel):
    """Quiz publicado: configuração mais questões em ordem.

    Example:
        >>> definition = QuizDefinition(
        ...     id="safety-101",
        ...     configuration=QuizConfiguration(title="Safety", passing_score=70),
        ...     questions=(question_a, question_b),
        ... )
        >>> definition.total_points
        3
    """

    id: str = Field(..., description="Id do quiz")
    configuration: QuizConfiguration = Field(..., description="Configuração do quiz")
    questions: tuple[Question, ...] = Field(..., description="Questões em ordem (>= 1)")

    @model_validator(mode="after")
    def _validate_definition(self) -> "QuizDefinition":
        if not self.questions:
            raise InvalidDefinition(f"Quiz {self.id} must have at least one question", quiz_id=self.id)

        duplicated = _duplicates([q.id for q in self.questions])
        if duplicated:
            raise InvalidDefinition(
                f"Quiz {self.id} has duplicate question ids: {duplicated}",
                quiz_id=self.id,
                question_ids=duplicated,
            )
        return self

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuizDefinition":
        """Cria uma definição a partir de dados de autoria."""
        return cls.model_validate(data)

    def revise(self, **changes: Any) -> "QuizDefinition":
        """Retorna uma nova definição, re-validada, com ``changes`` aplicadas."""
        data = self.model_dump()
        data.update(changes)
        return type(self).from_dict(data)

    @property
    def question_ids(self) -> tuple[str, ...]:
        return tuple(q.id for q in self.questions)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)

    def question(self, question_id: str) -> Question:
        """Retorna a questão com ``question_id``.

        Raises:
            UnknownQuestion: Se o quiz não tem essa questão
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        raise UnknownQuestion(
            f"Question {question_id} is not part of quiz {self.id}",
            quiz_id=self.id,
            question_id=question_id,
        )

    # =========================================================================
    # AUTORIA
    # =========================================================================

    def add_question(self, question: Question, index: int | None = None) -> "QuizDefinition":
        """Insere ``question`` na posição ``index`` (default: no final)."""
        questions = list(self.questions)
        if index is None:
            questions.append(question)
        else:
            questions.insert(index, question)
        return self.revise(questions=tuple(questions))

    def replace_question(self, question: Question) -> "QuizDefinition":
        """Troca a questão de mesmo id, mantendo a posição."""
        self.question(question.id)
        return self.revise(
            questions=tuple(question if q.id == question.id else q for q in self.questions)
        )

    def remove_question(self, question_id: str) -> "QuizDefinition":
        """Remove uma questão. Remover a última restante é ``InvalidDefinition``."""
        self.question(question_id)
        return self.revise(questions=tuple(q for q in self.questions if q.id != question_id))

    def move_question(self, question_id: str, new_index: int) -> "QuizDefinition":
        """Move uma questão para ``new_index`` (limitado aos extremos da lista)."""
        question = self.question(question_id)
        questions = [q for q in self.questions if q.id != question_id]
        new_index = max(0, min(new_index, len(questions)))
        questions.insert(new_index, question)
        return self.revise(questions=tuple(questions))
