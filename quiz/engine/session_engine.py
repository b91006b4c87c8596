"""Quiz Session Engine - Máquina de estados de uma tentativa.

    not_started --start--> in_progress --submit--> submitted
                               |  ^
               navigate/record |  | tick (time left)
                               v  |
                           in_progress --tick (time up)--> expired

Cada ação recebe uma ``QuizSession`` e retorna uma nova, ou levanta erro
sem tocar na entrada. ``submitted`` e ``expired`` são terminais.
"""

import random
import uuid
from typing import TYPE_CHECKING, Any, NamedTuple

from ..core.clock import Clock, SystemClock
from ..core.config import EngineConfig, get_config
from ..core.exceptions import (
    AttemptLimitReached,
    InvalidTransition,
    RequiredQuestionUnanswered,
    UnknownQuestion,
)
from ..core.logger import get_logger
from ..models.enums import NavigationDirection, SessionStatus
from ..models.responses import coerce_response, is_blank_response
from ..models.results import QuestionOutcome, QuizResult
from ..models.schemas import AnswerOption, Question, QuizConfiguration, QuizDefinition
from ..models.state import QuizSession
from .scoring_engine import QuizScoringEngine

if TYPE_CHECKING:
    from ..storage.base import DefinitionSource

logger = get_logger("session")


class Submission(NamedTuple):
    """Sessão terminal junto com o resultado pontuado."""

    session: QuizSession
    result: QuizResult


def ensure_attempt_allowed(configuration: QuizConfiguration, attempt_number: int) -> None:
    """Verifica o número da tentativa contra a política de retries do quiz.

    O número vem do colaborador de identidade; aqui só é comparado com
    ``max_attempts`` e ``allow_retries``. Tentativas expiradas contam igual
    às submetidas.

    Raises:
        AttemptLimitReached: Se a tentativa não é permitida
    """
    if attempt_number < 1:
        raise AttemptLimitReached(
            f"Attempt number must be at least 1, got {attempt_number}",
            attempt_number=attempt_number,
        )
    if attempt_number > 1 and not configuration.allow_retries:
        raise AttemptLimitReached(
            "Quiz does not allow retries",
            attempt_number=attempt_number,
        )
    if attempt_number > configuration.max_attempts:
        raise AttemptLimitReached(
            f"Maximum attempts exceeded ({configuration.max_attempts})",
            attempt_number=attempt_number,
            max_attempts=configuration.max_attempts,
        )


class SessionEngine:
    """Conduz sessões de uma definição de quiz.

    O engine não guarda estado de sessão; o chamador passa a sessão mais
    recente para cada ação e fica com a retornada.

    Example:
        >>> engine = SessionEngine(definition)
        >>> session = engine.start_session(attempt_number=1)
        >>> session = engine.record_response(session, "q1", "opt-b")
        >>> session = engine.navigate(session, NavigationDirection.NEXT)
        >>> submission = engine.submit(session, early=True)
        >>> submission.result.score_percent
        50
    """

    def __init__(
        self,
        definition: QuizDefinition,
        clock: Clock | None = None,
        scoring_engine: QuizScoringEngine | None = None,
        config: EngineConfig | None = None,
    ):
        self.definition = definition
        self.clock = clock or SystemClock()
        self.config = config or get_config()
        self.scoring_engine = scoring_engine or QuizScoringEngine(
            default_match_mode=self.config.default_match_mode
        )

    @classmethod
    def from_source(
        cls, source: "DefinitionSource", quiz_id: str, **kwargs: Any
    ) -> "SessionEngine":
        """Cria um engine para uma definição fornecida por um colaborador."""
        return cls(source.get_definition(quiz_id), **kwargs)

    @property
    def configuration(self) -> QuizConfiguration:
        return self.definition.configuration

    # -------------------------------------------------------------------------
    # Início
    # -------------------------------------------------------------------------

    def new_session(self, attempt_number: int, session_id: str | None = None) -> QuizSession:
        """Cria uma sessão not_started para uma tentativa permitida.

        Raises:
            AttemptLimitReached: Se o número da tentativa não é permitido
        """
        ensure_attempt_allowed(self.configuration, attempt_number)
        return QuizSession(
            session_id=session_id or uuid.uuid4().hex,
            quiz_id=self.definition.id,
            attempt_number=attempt_number,
        )

    def _presentation_order(
        self, seed: int | None
    ) -> tuple[tuple[str, ...], dict[str, tuple[str, ...]]]:
        config = self.configuration
        rng = random.Random(seed if seed is not None else self.config.shuffle_seed)

        question_ids = list(self.definition.question_ids)

        pool_size = config.random_pool_size
        if pool_size is not None and pool_size < len(question_ids):
            chosen = set(rng.sample(question_ids, pool_size))
            question_ids = [qid for qid in question_ids if qid in chosen]

        if config.shuffle_questions:
            rng.shuffle(question_ids)

        option_order: dict[str, tuple[str, ...]] = {}
        for qid in question_ids:
            option_ids = list(self.definition.question(qid).option_ids)
            if config.shuffle_answers:
                rng.shuffle(option_ids)
            option_order[qid] = tuple(option_ids)

        return tuple(question_ids), option_order

    def begin(self, session: QuizSession, seed: int | None = None) -> QuizSession:
        """Leva uma sessão not_started para in_progress.

        Args:
            session: Sessão em ``not_started``
            seed: Seed para sorteio do pool e embaralhamento (ordem reproduzível)

        Raises:
            InvalidTransition: Se a sessão já foi iniciada
        """
        if session.status != SessionStatus.NOT_STARTED:
            raise InvalidTransition(
                f"Cannot start session in status {session.status.value}",
                session_id=session.session_id,
                status=session.status.value,
            )

        question_ids, option_order = self._presentation_order(seed)
        now = self.clock.monotonic()

        started = session.evolve(
            status=SessionStatus.IN_PROGRESS,
            question_ids=question_ids,
            option_order=option_order,
            current_question_index=0,
            start_time=now,
            started_at=self.clock.utcnow(),
            remaining_seconds=self.configuration.time_limit_seconds,
            question_entered_at=now,
        )

        logger.info(
            "Sessão iniciada",
            session_id=started.session_id,
            quiz_id=started.quiz_id,
            attempt_number=started.attempt_number,
            question_count=started.question_count,
            time_limit_seconds=started.remaining_seconds,
        )
        return started

    def start_session(
        self,
        attempt_number: int,
        *,
        seed: int | None = None,
        session_id: str | None = None,
    ) -> QuizSession:
        """Cria e inicia uma sessão para ``attempt_number``."""
        return self.begin(self.new_session(attempt_number, session_id), seed=seed)

    # -------------------------------------------------------------------------
    # Ações em andamento
    # -------------------------------------------------------------------------

    def _require_in_progress(self, session: QuizSession, action: str) -> None:
        if session.quiz_id != self.definition.id:
            raise InvalidTransition(
                f"Session {session.session_id} belongs to quiz {session.quiz_id}",
                session_id=session.session_id,
                quiz_id=session.quiz_id,
            )
        if session.status != SessionStatus.IN_PROGRESS:
            raise InvalidTransition(
                f"Cannot {action} a session in status {session.status.value}",
                session_id=session.session_id,
                status=session.status.value,
                action=action,
            )

    def _question_times(self, session: QuizSession, now: float) -> dict[str, float]:
        """Soma o tempo gasto na questão atual aos totais."""
        times = dict(session.question_time_seconds)
        qid = session.current_question_id
        if qid is not None and session.question_entered_at is not None:
            times[qid] = times.get(qid, 0.0) + max(now - session.question_entered_at, 0.0)
        return times

    def go_to(self, session: QuizSession, index: int) -> QuizSession:
        """Vai para ``index``, limitado ao intervalo de questões."""
        self._require_in_progress(session, "navigate")

        target = min(max(index, 0), session.question_count - 1)
        if target == session.current_question_index:
            return session

        now = self.clock.monotonic()
        moved = session.evolve(
            current_question_index=target,
            question_time_seconds=self._question_times(session, now),
            question_entered_at=now,
        )
        logger.debug(
            "Navegação",
            session_id=session.session_id,
            from_index=session.current_question_index,
            to_index=target,
        )
        return moved

    def navigate(self, session: QuizSession, direction: NavigationDirection) -> QuizSession:
        """Avança ou volta uma questão; sem efeito nas extremidades."""
        direction = NavigationDirection(direction)
        step = 1 if direction == NavigationDirection.NEXT else -1
        return self.go_to(session, session.current_question_index + step)

    def record_response(self, session: QuizSession, question_id: str, value: Any) -> QuizSession:
        """Registra (ou sobrescreve) a resposta de uma questão.

        Args:
            session: Sessão em andamento
            question_id: Questão respondida
            value: Variante de resposta ou valor cru (ver ``coerce_response``)

        Raises:
            InvalidTransition: Se a sessão não está em andamento
            UnknownQuestion: Se a questão não faz parte da sessão
            InvalidResponseShape: Se o valor não serve para o tipo da questão
        """
        self._require_in_progress(session, "record a response in")

        if question_id not in session.question_ids:
            raise UnknownQuestion(
                f"Question {question_id} is not part of session {session.session_id}",
                session_id=session.session_id,
                question_id=question_id,
            )

        question = self.definition.question(question_id)
        response = coerce_response(question, value)

        responses = dict(session.responses)
        responses[question_id] = response

        logger.debug(
            "Resposta registrada",
            session_id=session.session_id,
            question_id=question_id,
            kind=response.kind,
        )
        return session.evolve(responses=responses)

    def tick(self, session: QuizSession) -> QuizSession:
        """Avança a contagem regressiva em um segundo.

        Expira a sessão quando a contagem chega a zero. Sem efeito em sessões
        sem limite de tempo, não iniciadas ou terminais.
        """
        if session.status != SessionStatus.IN_PROGRESS or session.remaining_seconds is None:
            return session

        remaining = max(session.remaining_seconds - 1, 0)
        ticked = session.evolve(remaining_seconds=remaining)
        if remaining == 0:
            return self.expire(ticked)
        return ticked

    # -------------------------------------------------------------------------
    # Conclusão
    # -------------------------------------------------------------------------

    def _close(self, session: QuizSession, status: SessionStatus) -> QuizSession:
        now = self.clock.monotonic()
        return session.evolve(
            status=status,
            end_time=now,
            ended_at=self.clock.utcnow(),
            question_time_seconds=self._question_times(session, now),
            question_entered_at=None,
        )

    def expire(self, session: QuizSession) -> QuizSession:
        """Encerra a sessão por fim do tempo. Sem efeito se já terminal."""
        if session.is_terminal:
            return session
        self._require_in_progress(session, "expire")

        expired = self._close(session, SessionStatus.EXPIRED)
        logger.info(
            "Sessão expirada",
            session_id=expired.session_id,
            quiz_id=expired.quiz_id,
            answered=expired.answered_count,
            question_count=expired.question_count,
        )
        return expired

    def unanswered_required(self, session: QuizSession) -> tuple[str, ...]:
        """Ids das questões obrigatórias da sessão ainda sem resposta.

        Texto só com espaços não conta como resposta.
        """
        return tuple(
            qid
            for qid in session.question_ids
            if self.definition.question(qid).is_required
            and is_blank_response(session.responses.get(qid))
        )

    def submit(self, session: QuizSession, *, early: bool = False) -> Submission:
        """Submete a sessão e pontua.

        Args:
            session: Sessão em andamento (sessões terminais não mudam)
            early: Permite submeter antes de chegar à última questão

        Returns:
            Submission com a sessão terminal e seu resultado

        Raises:
            InvalidTransition: Se não iniciada, ou fora da última questão
                sem ``early``
            RequiredQuestionUnanswered: Se há obrigatórias sem resposta
        """
        if session.is_terminal:
            # Quem chegou primeiro (expiração ou submit) vence
            return Submission(session, self.score(session))

        self._require_in_progress(session, "submit")

        if not early and not session.on_last_question:
            raise InvalidTransition(
                "Submit is only allowed on the last question unless submitting early",
                session_id=session.session_id,
                current_question_index=session.current_question_index,
                question_count=session.question_count,
            )

        missing = self.unanswered_required(session)
        if missing:
            raise RequiredQuestionUnanswered(
                f"Required questions unanswered: {list(missing)}",
                session_id=session.session_id,
                question_ids=list(missing),
            )

        submitted = self._close(session, SessionStatus.SUBMITTED)
        result = self.score(submitted)

        logger.info(
            "Sessão submetida",
            session_id=submitted.session_id,
            quiz_id=submitted.quiz_id,
            score_percent=result.score_percent,
            passed=result.passed,
            time_spent_seconds=round(result.time_spent_seconds, 2),
        )
        return Submission(submitted, result)

    def score(self, session: QuizSession) -> QuizResult:
        return self.scoring_engine.score(self.definition, session)

    # -------------------------------------------------------------------------
    # Leitura
    # -------------------------------------------------------------------------

    def current_question(self, session: QuizSession) -> Question | None:
        qid = session.current_question_id
        return self.definition.question(qid) if qid is not None else None

    def presented_options(self, session: QuizSession, question_id: str) -> tuple[AnswerOption, ...]:
        """Opções de uma questão na ordem desta sessão (possivelmente embaralhada)."""
        question = self.definition.question(question_id)
        order = session.option_order.get(question_id)
        if not order:
            return question.options
        return tuple(question.option(oid) for oid in order)

    def check_answer(self, session: QuizSession, question_id: str) -> QuestionOutcome | None:
        """Feedback instantâneo de uma questão.

        Retorna None a menos que o quiz mostre resultados imediatamente.
        """
        if not self.configuration.show_results_immediately:
            return None
        if question_id not in session.question_ids:
            raise UnknownQuestion(
                f"Question {question_id} is not part of session {session.session_id}",
                session_id=session.session_id,
                question_id=question_id,
            )
        return self.scoring_engine.evaluate_response(
            self.definition.question(question_id),
            session.responses.get(question_id),
        )
