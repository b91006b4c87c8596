"""Storage Ports - Interfaces que o engine consome dos colaboradores."""

from typing import Any, Protocol, runtime_checkable

from ..models.results import QuizResult
from ..models.schemas import QuizDefinition


@runtime_checkable
class DefinitionSource(Protocol):
    """Fornece definições de quiz validadas por id."""

    def get_definition(self, quiz_id: str) -> QuizDefinition: ...


@runtime_checkable
class ResultSink(Protocol):
    """Recebe cada resultado concluído exatamente uma vez."""

    async def save_result(self, result: QuizResult) -> None: ...


class KeyValueStore(Protocol):
    """Key-value store async fornecido pela aplicação hospedeira."""

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> Any: ...

    async def delete(self, key: str) -> Any: ...

    async def list(self, prefix: str = "") -> list[Any]: ...
