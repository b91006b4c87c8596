"""Session Runner - Dono único de uma sessão em andamento.

O runner serializa as duas fontes de eventos que alteram a sessão (ações do
usuário e o timer) atrás de um único ``asyncio.Lock``. O primeiro evento
terminal processado, expiração ou submit, conclui a sessão; o outro vira
no-op que retorna o resultado guardado.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.exceptions import InvalidTransition
from ..core.logger import get_logger
from ..models.enums import NavigationDirection, SessionStatus
from ..models.results import QuizResult
from ..models.state import QuizSession
from ..storage.base import ResultSink
from .session_engine import SessionEngine

logger = get_logger("runner")

# Cada tick do engine desconta exatamente 1 segundo
TICK_SECONDS = 1.0

Sleep = Callable[[float], Awaitable[Any]]


class SessionRunner:
    """Executa uma tentativa: aplica ações, roda o timer e entrega o resultado.

    Args:
        engine: Engine da definição do quiz
        session: Sessão a conduzir (not_started ou in_progress)
        sink: Destino do resultado final (opcional)
        sleep: Corrotina de espera entre ticks (default ``asyncio.sleep``);
            sempre chamada com ``TICK_SECONDS``

    Example:
        >>> async with SessionRunner(engine, engine.new_session(1), sink=store) as runner:
        ...     await runner.start()
        ...     await runner.record_response("q1", "opt-a")
        ...     result = await runner.submit(early=True)
    """

    def __init__(
        self,
        engine: SessionEngine,
        session: QuizSession,
        *,
        sink: ResultSink | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.engine = engine
        self.sink = sink
        self._sleep = sleep

        self._session = session
        self._result: QuizResult | None = None
        self._closed = False
        self._lock = asyncio.Lock()
        self._finished = asyncio.Event()
        self._timer: asyncio.Task | None = None

    @property
    def session(self) -> QuizSession:
        return self._session

    @property
    def result(self) -> QuizResult | None:
        return self._result

    @property
    def is_finished(self) -> bool:
        return self._result is not None

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    # -------------------------------------------------------------------------
    # Ciclo de vida
    # -------------------------------------------------------------------------

    async def start(self, seed: int | None = None) -> QuizSession:
        """Inicia a sessão (se preciso) e o timer de quizzes com tempo limite."""
        async with self._lock:
            if self._session.status == SessionStatus.NOT_STARTED:
                self._session = self.engine.begin(self._session, seed=seed)

            if self._session.remaining_seconds is not None and not self._session.is_terminal:
                self._start_timer()
            return self._session

    def _start_timer(self) -> None:
        if self.timer_running:
            return
        self._timer = asyncio.create_task(
            self._run_timer(), name=f"quiz-timer-{self._session.session_id}"
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None and self._timer is not asyncio.current_task():
            self._timer.cancel()

    async def _run_timer(self) -> None:
        try:
            while True:
                await self._sleep(TICK_SECONDS)
                session = await self.tick()
                if session.is_terminal:
                    break
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Timer interrompido por erro", session_id=self._session.session_id)

    async def close(self) -> None:
        """Para o timer. Uma sessão não concluída continua em andamento.

        Quem estiver em ``wait()`` é acordado e recebe ``InvalidTransition``.
        """
        self._closed = True
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()
            try:
                await timer
            except asyncio.CancelledError:
                pass
        self._finished.set()

    async def wait(self) -> QuizResult:
        """Espera a sessão ser submetida ou expirar.

        Raises:
            InvalidTransition: Se o runner foi fechado antes da conclusão
        """
        await self._finished.wait()
        if self._result is None:
            raise InvalidTransition(
                "Runner was closed before the session finished",
                session_id=self._session.session_id,
                status=self._session.status.value,
            )
        return self._result

    async def __aenter__(self) -> "SessionRunner":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Ações
    # -------------------------------------------------------------------------

    async def navigate(self, direction: NavigationDirection) -> QuizSession:
        async with self._lock:
            self._session = self.engine.navigate(self._session, direction)
            return self._session

    async def go_to(self, index: int) -> QuizSession:
        async with self._lock:
            self._session = self.engine.go_to(self._session, index)
            return self._session

    async def record_response(self, question_id: str, value: Any) -> QuizSession:
        async with self._lock:
            self._session = self.engine.record_response(self._session, question_id, value)
            return self._session

    async def tick(self) -> QuizSession:
        """Aplica um tick do timer; expira e conclui a sessão ao chegar a zero."""
        async with self._lock:
            if self._session.is_terminal:
                return self._session

            session = self.engine.tick(self._session)
            if session.is_terminal:
                try:
                    await self._finish(session, self.engine.score(session))
                except Exception:
                    logger.exception(
                        "Falha ao entregar resultado após expiração",
                        session_id=session.session_id,
                    )
            else:
                self._session = session
            return self._session

    async def submit(self, *, early: bool = False) -> QuizResult:
        """Submete a sessão. Depois de concluída, retorna o resultado guardado.

        Raises:
            InvalidTransition: Ver ``SessionEngine.submit``
        """
        async with self._lock:
            if self._result is not None:
                return self._result

            submission = self.engine.submit(self._session, early=early)
            await self._finish(submission.session, submission.result)
            return submission.result

    async def _finish(self, session: QuizSession, result: QuizResult) -> None:
        self._session = session
        self._result = result
        self._cancel_timer()
        self._finished.set()

        logger.info(
            "Sessão concluída",
            session_id=session.session_id,
            status=session.status.value,
            score_percent=result.score_percent,
        )

        if self.sink is not None:
            try:
                await self.sink.save_result(result)
            except Exception:
                logger.error("Falha no result sink", session_id=session.session_id)
                raise
