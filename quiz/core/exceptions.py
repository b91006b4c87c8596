"""Quiz Exceptions - Hierarquia de erros do quiz engine.

Toda falha levantada pelo engine é um ``QuizError``. São todas síncronas e
reportadas ao chamador imediato; nada é re-tentado. Questões de texto sem
comparador *não* são erro: aparecem no resultado como
``AnswerStatus.MANUAL_REVIEW``.
"""

from typing import Any


class QuizError(Exception):
    """Erro base do quiz engine.

    Attributes:
        code: Código estável, legível por máquina
        message: Descrição legível
        details: Contexto extra (question id, status, ...)
    """

    code = "quiz_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serializa o erro para colaboradores (camadas de API, auditoria)."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidDefinition(QuizError):
    """Definição de quiz falhou na validação e não pode ser publicada."""

    code = "invalid_definition"


class InvalidResponseShape(QuizError):
    """Formato da resposta não corresponde ao tipo da questão."""

    code = "invalid_response_shape"


class UnknownQuestion(QuizError):
    """Question id não faz parte da sessão (ou do quiz)."""

    code = "unknown_question"


class InvalidTransition(QuizError):
    """Ação não permitida no estado atual da sessão."""

    code = "invalid_transition"


class RequiredQuestionUnanswered(InvalidTransition):
    """Submit voluntário com questões obrigatórias sem resposta."""

    code = "required_question_unanswered"


class AttemptLimitReached(QuizError):
    """Número da tentativa excede o permitido pela configuração."""

    code = "attempt_limit_reached"


class ReviewNotAllowed(QuizError):
    """Configuração do quiz não permite revisar uma tentativa concluída."""

    code = "review_not_allowed"
