"""Answer Matching - Comparadores para respostas em texto livre."""

import re
from collections.abc import Callable, Iterable

from ..core.config import MatchMode
from ..models.schemas import Question

Comparator = Callable[[str], bool]

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Normaliza caixa e colapsa espaços internos."""
    return _WHITESPACE.sub(" ", text).strip().casefold()


def exact_match(accepted: Iterable[str]) -> Comparator:
    accepted_set = frozenset(accepted)

    def compare(answer: str) -> bool:
        return answer in accepted_set

    return compare


def normalized_match(accepted: Iterable[str]) -> Comparator:
    accepted_set = frozenset(normalize_text(a) for a in accepted)

    def compare(answer: str) -> bool:
        return normalize_text(answer) in accepted_set

    return compare


def contains_match(accepted: Iterable[str]) -> Comparator:
    """Casa quando uma string contém a outra (após normalizar).

    Resposta em branco nunca casa; string vazia estaria "contida" em
    qualquer resposta aceita.
    """
    accepted_norm = tuple(normalize_text(a) for a in accepted if normalize_text(a))

    def compare(answer: str) -> bool:
        candidate = normalize_text(answer)
        if not candidate:
            return False
        return any(a == candidate or a in candidate or candidate in a for a in accepted_norm)

    return compare


MATCHERS: dict[MatchMode, Callable[[Iterable[str]], Comparator]] = {
    MatchMode.EXACT: exact_match,
    MatchMode.NORMALIZED: normalized_match,
    MatchMode.CONTAINS: contains_match,
}


def build_comparator(
    question: Question, default_mode: MatchMode = MatchMode.NORMALIZED
) -> Comparator | None:
    """Monta o comparador declarado nos dados de autoria da questão.

    Args:
        question: Questão fill-in-blank ou scenario
        default_mode: Modo usado quando a questão não define ``match_mode``

    Returns:
        Comparador, ou None quando a questão não tem respostas aceitas
    """
    if not question.accepted_answers:
        return None
    mode = question.match_mode or default_mode
    return MATCHERS[mode](question.accepted_answers)
