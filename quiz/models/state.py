"""Quiz State - Estado de runtime de uma tentativa."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from .enums import SessionStatus
from .responses import Response, response_from_dict


@dataclass(frozen=True)
class QuizSession:
    """Estado da tentativa de um participante num quiz.

    Sessões são valores imutáveis: cada ação do engine retorna uma nova
    sessão, então quem detém o valor mais recente é o único escritor.

    Attributes:
        session_id: Id único desta tentativa
        quiz_id: Id da definição do quiz
        attempt_number: Número da tentativa (1-N)
        status: Status no ciclo de vida
        question_ids: Ordem de apresentação das questões nesta tentativa
        option_order: Ordem de apresentação das opções por questão
        current_question_index: Índice em ``question_ids``
        responses: Respostas registradas (question id -> resposta)
        start_time: Segundos monotônicos no início
        end_time: Segundos monotônicos no submit/expiração
        started_at: Timestamp UTC no início
        ended_at: Timestamp UTC no submit/expiração
        remaining_seconds: Tempo restante quando o quiz tem limite
        question_time_seconds: Segundos acumulados por questão
        question_entered_at: Segundos monotônicos quando a questão atual foi exibida
    """

    session_id: str
    quiz_id: str
    attempt_number: int
    status: SessionStatus = SessionStatus.NOT_STARTED
    question_ids: tuple[str, ...] = ()
    option_order: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    current_question_index: int = 0
    responses: Mapping[str, Response] = field(default_factory=dict)
    start_time: float | None = None
    end_time: float | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    remaining_seconds: int | None = None
    question_time_seconds: Mapping[str, float] = field(default_factory=dict)
    question_entered_at: float | None = None

    def __post_init__(self) -> None:
        # Views somente leitura: uma sessão nunca é alterada no lugar
        for name in ("option_order", "responses", "question_time_seconds"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def question_count(self) -> int:
        return len(self.question_ids)

    @property
    def current_question_id(self) -> str | None:
        if not self.question_ids:
            return None
        return self.question_ids[self.current_question_index]

    @property
    def on_last_question(self) -> bool:
        return self.current_question_index >= self.question_count - 1

    @property
    def answered_count(self) -> int:
        return len(self.responses)

    @property
    def time_spent_seconds(self) -> float | None:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    def evolve(self, **changes: Any) -> "QuizSession":
        """Retorna uma cópia com ``changes`` aplicadas."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Converte para dict (para entrega à persistência)."""
        return {
            "session_id": self.session_id,
            "quiz_id": self.quiz_id,
            "attempt_number": self.attempt_number,
            "status": self.status.value,
            "question_ids": list(self.question_ids),
            "option_order": {k: list(v) for k, v in self.option_order.items()},
            "current_question_index": self.current_question_index,
            "responses": {k: v.model_dump(mode="json") for k, v in self.responses.items()},
            "start_time": self.start_time,
            "end_time": self.end_time,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "remaining_seconds": self.remaining_seconds,
            "question_time_seconds": dict(self.question_time_seconds),
            "question_entered_at": self.question_entered_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuizSession":
        """Cria uma sessão a partir da saída de ``to_dict``."""
        started_at = data.get("started_at")
        ended_at = data.get("ended_at")

        return cls(
            session_id=data["session_id"],
            quiz_id=data["quiz_id"],
            attempt_number=data["attempt_number"],
            status=SessionStatus(data.get("status", SessionStatus.NOT_STARTED.value)),
            question_ids=tuple(data.get("question_ids", [])),
            option_order={k: tuple(v) for k, v in data.get("option_order", {}).items()},
            current_question_index=data.get("current_question_index", 0),
            responses={k: response_from_dict(v) for k, v in data.get("responses", {}).items()},
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
            started_at=datetime.fromisoformat(started_at) if started_at else None,
            ended_at=datetime.fromisoformat(ended_at) if ended_at else None,
            remaining_seconds=data.get("remaining_seconds"),
            question_time_seconds=dict(data.get("question_time_seconds", {})),
            question_entered_at=data.get("question_entered_at"),
        )
