# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Definições de exemplo, clock manual e configuração de ambiente
# =============================================================================

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Configura ambiente de testes globalmente."""
    env_vars = {
        "QUIZ_LOG_LEVEL": "ERROR",  # Reduzir logs em testes
    }
    with patch.dict(os.environ, env_vars):
        yield


@pytest.fixture(autouse=True)
def reset_config():
    """Recarrega o singleton de config para patches de env não vazarem entre testes."""
    from quiz.core.config import reload_config

    reload_config()
    yield
    reload_config()


# =============================================================================
# FIXTURES DE CLOCK
# =============================================================================


class ManualClock:
    """Clock avançado explicitamente pelos testes."""

    def __init__(self, start: float = 1000.0):
        self._now = start
        self._wall = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def monotonic(self) -> float:
        return self._now

    def utcnow(self) -> datetime:
        return self._wall

    def advance(self, seconds: float) -> None:
        self._now += seconds
        self._wall += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Clock manual começando em t=1000s."""
    return ManualClock()


# =============================================================================
# FIXTURES DE QUESTÕES
# =============================================================================


@pytest.fixture
def single_choice_question():
    """Questão single-choice, opção B correta."""
    from quiz.models.enums import QuestionType
    from quiz.models.schemas import AnswerOption, Question

    return Question(
        id="q-single",
        type=QuestionType.SINGLE_CHOICE,
        text="What is the minimum age to operate a forklift?",
        points=1,
        explanation="The minimum age is 18.",
        correct_feedback="Correct!",
        incorrect_feedback="Review the age requirements.",
        category="Safety",
        options=(
            AnswerOption(id="A", text="16", explanation="Too young."),
            AnswerOption(id="B", text="18", is_correct=True),
            AnswerOption(id="C", text="21"),
        ),
    )


@pytest.fixture
def multi_choice_question():
    """Questão multi-choice, opções A e C corretas."""
    from quiz.models.enums import QuestionType
    from quiz.models.schemas import AnswerOption, Question

    return Question(
        id="q-multi",
        type=QuestionType.MULTI_CHOICE,
        text="Which items are personal protective equipment?",
        points=2,
        category="Safety",
        options=(
            AnswerOption(id="A", text="Hard hat", is_correct=True),
            AnswerOption(id="B", text="Coffee mug"),
            AnswerOption(id="C", text="Safety glasses", is_correct=True),
        ),
    )


@pytest.fixture
def true_false_question():
    """Questão true/false, 'true' correta."""
    from quiz.models.enums import QuestionType
    from quiz.models.schemas import AnswerOption, Question

    return Question(
        id="q-tf",
        type=QuestionType.TRUE_FALSE,
        text="Incidents must be reported within 24 hours.",
        points=1,
        category="Compliance",
        options=(
            AnswerOption(id="true", text="True", is_correct=True),
            AnswerOption(id="false", text="False"),
        ),
    )


@pytest.fixture
def fill_in_question():
    """Questão fill-in-blank com respostas aceitas."""
    from quiz.models.enums import QuestionType
    from quiz.models.schemas import Question

    return Question(
        id="q-fill",
        type=QuestionType.FILL_IN_BLANK,
        text="The form used to report an injury is the ____ form.",
        points=1,
        category="Compliance",
        accepted_answers=("OSHA 301",),
    )


@pytest.fixture
def scenario_question():
    """Questão scenario sem comparador (revisão manual)."""
    from quiz.models.enums import QuestionType
    from quiz.models.schemas import Question

    return Question(
        id="q-scenario",
        type=QuestionType.SCENARIO,
        text="An employee slips on a wet floor. Describe your next steps.",
        points=5,
    )


# =============================================================================
# FIXTURES DE DEFINIÇÃO
# =============================================================================


@pytest.fixture
def sample_configuration():
    """Configuração sem tempo limite, aprovação com 80%."""
    from quiz.models.schemas import QuizConfiguration

    return QuizConfiguration(
        title="Workplace Safety Basics",
        description="Annual safety refresher",
        passing_score=80,
        max_attempts=3,
        allow_retries=True,
    )


@pytest.fixture
def sample_definition(
    sample_configuration,
    single_choice_question,
    multi_choice_question,
    true_false_question,
    fill_in_question,
):
    """Quatro questões pontuáveis automaticamente, 5 pontos no total."""
    from quiz.models.schemas import QuizDefinition

    return QuizDefinition(
        id="safety-101",
        configuration=sample_configuration,
        questions=(
            single_choice_question,
            multi_choice_question,
            true_false_question,
            fill_in_question,
        ),
    )


@pytest.fixture
def timed_definition(single_choice_question, true_false_question):
    """Quiz de um minuto com duas questões."""
    from quiz.models.schemas import QuizConfiguration, QuizDefinition

    return QuizDefinition(
        id="timed-quiz",
        configuration=QuizConfiguration(
            title="Timed Quiz",
            passing_score=50,
            time_limit_minutes=1,
        ),
        questions=(single_choice_question, true_false_question),
    )


@pytest.fixture
def correct_answers():
    """Respostas corretas para ``sample_definition``."""
    return {
        "q-single": "B",
        "q-multi": {"A", "C"},
        "q-tf": "true",
        "q-fill": "osha 301",
    }


@pytest.fixture
def engine(sample_definition, clock):
    """SessionEngine sobre ``sample_definition`` com o clock manual."""
    from quiz.engine.session_engine import SessionEngine

    return SessionEngine(sample_definition, clock=clock)


@pytest.fixture
def timed_engine(timed_definition, clock):
    """SessionEngine sobre ``timed_definition`` com o clock manual."""
    from quiz.engine.session_engine import SessionEngine

    return SessionEngine(timed_definition, clock=clock)


# =============================================================================
# FIXTURES DE KEY-VALUE STORE
# =============================================================================


@pytest.fixture
def mock_kv():
    """Mock do key-value store async do host."""
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock()
    mock.delete = AsyncMock()
    mock.list = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_kv_with_data():
    """Key-value store sobre um dict."""
    mock = MagicMock()
    _storage = {}

    async def mock_get(key):
        return _storage.get(key)

    async def mock_set(key, value):
        _storage[key] = value

    async def mock_delete(key):
        _storage.pop(key, None)

    async def mock_list(prefix=""):
        return [{"key": k} for k in _storage if k.startswith(prefix)]

    mock.get = mock_get
    mock.set = mock_set
    mock.delete = mock_delete
    mock.list = mock_list
    mock._storage = _storage
    return mock


# =============================================================================
# FIXTURES DE LOGGING
# =============================================================================


@pytest.fixture
def capture_logs(caplog):
    """Captura logs para asserções."""
    import logging

    caplog.set_level(logging.DEBUG, logger="quiz")
    return caplog
