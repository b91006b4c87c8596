"""Result Store - Persistência key-value de resultados e sessões em andamento."""

from __future__ import annotations

from typing import Any

from ..core.logger import get_logger
from ..models.results import QuizResult
from ..models.state import QuizSession
from .base import KeyValueStore

logger = get_logger("storage.results")


class ResultStore:
    """Result sink sobre o key-value store async do host.

    Layout das chaves:
        - quiz:{quiz_id}:results:{session_id} -> QuizResult (JSON dict)
        - quiz:{quiz_id}:sessions:{session_id} -> QuizSession (passagem entre requests)

    Example:
        >>> store = ResultStore(kv)
        >>> await store.save_result(result)
        >>> results = await store.list_results("safety-101")
    """

    KEY_PREFIX = "quiz"

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _result_key(self, quiz_id: str, session_id: str) -> str:
        return f"{self.KEY_PREFIX}:{quiz_id}:results:{session_id}"

    def _session_key(self, quiz_id: str, session_id: str) -> str:
        return f"{self.KEY_PREFIX}:{quiz_id}:sessions:{session_id}"

    async def save_result(self, result: QuizResult) -> None:
        """Persiste um resultado; a sessão concluída sai do store."""
        key = self._result_key(result.quiz_id, result.session_id)
        await self.kv.set(key, result.model_dump(mode="json"))
        await self.kv.delete(self._session_key(result.quiz_id, result.session_id))
        logger.debug("Resultado salvo", quiz_id=result.quiz_id, session_id=result.session_id)

    async def load_result(self, quiz_id: str, session_id: str) -> QuizResult | None:
        data = await self.kv.get(self._result_key(quiz_id, session_id))
        if not data:
            return None
        return QuizResult.model_validate(data)

    async def list_results(self, quiz_id: str) -> list[QuizResult]:
        """Carrega todos os resultados de um quiz (entrada para analytics)."""
        prefix = f"{self.KEY_PREFIX}:{quiz_id}:results:"
        entries = await self.kv.list(prefix=prefix)

        results = []
        for entry in entries:
            key = entry.get("key", "") if isinstance(entry, dict) else str(entry)
            data = await self.kv.get(key)
            if data:
                results.append(QuizResult.model_validate(data))
        return results

    async def save_session(self, session: QuizSession) -> None:
        """Guarda uma sessão em andamento para outro request retomar."""
        await self.kv.set(self._session_key(session.quiz_id, session.session_id), session.to_dict())

    async def load_session(self, quiz_id: str, session_id: str) -> QuizSession | None:
        data: Any = await self.kv.get(self._session_key(quiz_id, session_id))
        if not data:
            return None
        return QuizSession.from_dict(data)
