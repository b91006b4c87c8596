"""Quiz Core - Config, logging, erros e clock."""

from .clock import Clock, SystemClock
from .config import EngineConfig, MatchMode, get_config, reload_config
from .exceptions import (
    AttemptLimitReached,
    InvalidDefinition,
    InvalidResponseShape,
    InvalidTransition,
    QuizError,
    RequiredQuestionUnanswered,
    ReviewNotAllowed,
    UnknownQuestion,
)
from .logger import configure_logging, get_logger

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    # Config
    "EngineConfig",
    "MatchMode",
    "get_config",
    "reload_config",
    # Errors
    "QuizError",
    "InvalidDefinition",
    "InvalidResponseShape",
    "UnknownQuestion",
    "InvalidTransition",
    "RequiredQuestionUnanswered",
    "AttemptLimitReached",
    "ReviewNotAllowed",
    # Logging
    "configure_logging",
    "get_logger",
]
