"""Quiz Responses - União discriminada dos formatos de resposta.

Cada tipo de questão aceita exatamente um formato:

    single_choice / true_false  -> OptionResponse(option_id)
    multi_choice                -> OptionSetResponse(option_ids)
    fill_in_blank / scenario    -> TextResponse(text)

``coerce_response`` converte valores crus do chamador na variante certa e
rejeita formatos incompatíveis na borda.
"""

from collections.abc import Iterable
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..core.exceptions import InvalidResponseShape
from .enums import QuestionType
from .schemas import Question


class OptionResponse(BaseModel):
    """Uma opção selecionada."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["option"] = "option"
    option_id: str


class OptionSetResponse(BaseModel):
    """Conjunto de opções selecionadas (ordem irrelevante)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["option_set"] = "option_set"
    option_ids: frozenset[str]


class TextResponse(BaseModel):
    """Resposta em texto livre."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


Response = Annotated[
    Union[OptionResponse, OptionSetResponse, TextResponse],
    Field(discriminator="kind"),
]

_response_adapter: TypeAdapter[Response] = TypeAdapter(Response)

EXPECTED_KIND = {
    QuestionType.SINGLE_CHOICE: "option",
    QuestionType.TRUE_FALSE: "option",
    QuestionType.MULTI_CHOICE: "option_set",
    QuestionType.FILL_IN_BLANK: "text",
    QuestionType.SCENARIO: "text",
}


def response_from_dict(data: dict[str, Any]) -> Response:
    """Reconstrói uma resposta serializada (discriminada por ``kind``)."""
    return _response_adapter.validate_python(data)


def _shape_error(question: Question, value: Any, reason: str) -> InvalidResponseShape:
    return InvalidResponseShape(
        f"Invalid response for question {question.id} ({question.type.value}): {reason}",
        question_id=question.id,
        question_type=question.type.value,
        value_type=type(value).__name__,
    )


def _check_option(question: Question, value: Any, option_id: str) -> None:
    if option_id not in question.option_ids:
        raise _shape_error(question, value, f"unknown option {option_id!r}")


def coerce_response(question: Question, value: Any) -> Response:
    """Valida ``value`` contra o tipo da questão.

    Args:
        question: Questão sendo respondida
        value: Variante de resposta, ou ``str`` / coleção de ``str`` crus

    Returns:
        Variante de resposta compatível com o tipo da questão

    Raises:
        InvalidResponseShape: Se o formato não bate com o tipo, ou se uma
            opção referenciada não pertence à questão
    """
    expected = EXPECTED_KIND[question.type]

    if isinstance(value, (OptionResponse, OptionSetResponse, TextResponse)):
        if value.kind != expected:
            raise _shape_error(question, value, f"expected {expected}, got {value.kind}")
        response = value
    elif expected == "option":
        if not isinstance(value, str):
            raise _shape_error(question, value, "expected a single option id")
        response = OptionResponse(option_id=value)
    elif expected == "option_set":
        if isinstance(value, (str, bytes, dict)) or not isinstance(value, Iterable):
            raise _shape_error(question, value, "expected a collection of option ids")
        items = list(value)
        if not all(isinstance(item, str) for item in items):
            raise _shape_error(question, value, "option ids must be strings")
        response = OptionSetResponse(option_ids=frozenset(items))
    else:
        if not isinstance(value, str):
            raise _shape_error(question, value, "expected free text")
        response = TextResponse(text=value)

    if isinstance(response, OptionResponse):
        _check_option(question, value, response.option_id)
    elif isinstance(response, OptionSetResponse):
        for option_id in response.option_ids:
            _check_option(question, value, option_id)

    return response


def is_blank_response(response: Response | None) -> bool:
    """Verifica se a resposta conta como não respondida (ex: texto em branco)."""
    if response is None:
        return True
    if isinstance(response, TextResponse):
        return not response.text.strip()
    if isinstance(response, OptionSetResponse):
        return not response.option_ids
    return False
