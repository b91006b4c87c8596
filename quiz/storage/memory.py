"""Colaboradores em memória para hosts sem store (e para testes)."""

from collections.abc import Iterable

from ..core.exceptions import QuizError
from ..core.logger import get_logger
from ..models.results import QuizResult
from ..models.schemas import QuizDefinition

logger = get_logger("storage.memory")


class DefinitionNotFound(QuizError):
    """Nenhuma definição registrada com o id pedido."""

    code = "definition_not_found"


class InMemoryDefinitionSource:
    """Definition source sobre um dict (quiz_id -> QuizDefinition)."""

    def __init__(self, definitions: Iterable[QuizDefinition] = ()):
        self._definitions: dict[str, QuizDefinition] = {d.id: d for d in definitions}

    def publish(self, definition: QuizDefinition) -> None:
        """Registra uma definição. Republicar um id substitui a anterior."""
        self._definitions[definition.id] = definition
        logger.debug("Definição publicada", quiz_id=definition.id)

    def get_definition(self, quiz_id: str) -> QuizDefinition:
        try:
            return self._definitions[quiz_id]
        except KeyError:
            raise DefinitionNotFound(f"Quiz {quiz_id} not found", quiz_id=quiz_id) from None


class InMemoryResultLog:
    """Result sink que guarda os resultados em ordem de chegada."""

    def __init__(self):
        self._results: list[QuizResult] = []

    async def save_result(self, result: QuizResult) -> None:
        self._results.append(result)

    def results_for(self, quiz_id: str) -> list[QuizResult]:
        return [r for r in self._results if r.quiz_id == quiz_id]

    def __len__(self) -> int:
        return len(self._results)
