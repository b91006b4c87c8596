"""Quiz Logger - Logging estruturado sobre o ``logging`` da stdlib.

Uso:
    >>> logger = get_logger("session")
    >>> logger.info("Sessão iniciada", session_id="abc", quiz_id="q1")

Campos passados como keyword arguments viram pares ``key=value`` (formato
text) ou são mesclados num objeto JSON (formato json).
"""

import json
import logging
from typing import Any

from .config import EngineConfig, LogFormat, get_config

ROOT_LOGGER_NAME = "quiz"

_configured = False


class StructuredFormatter(logging.Formatter):
    """Formata registros anexando os campos estruturados."""

    def __init__(self, log_format: LogFormat = LogFormat.TEXT):
        super().__init__(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        self.log_format = log_format

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = getattr(record, "fields", {}) or {}

        if self.log_format == LogFormat.JSON:
            payload = {
                "timestamp": self.formatTime(record),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                **fields,
            }
            return json.dumps(payload, default=str, ensure_ascii=False)

        line = super().format(record)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


class StructuredLogger:
    """Wrapper fino que aceita campos estruturados como kwargs."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, exc_info=exc_info, extra={"fields": fields})

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, exc_info=True, **fields)


def configure_logging(config: EngineConfig | None = None, force: bool = False) -> logging.Logger:
    """Instala o handler estruturado no logger ``quiz``.

    Args:
        config: Config do engine (default: ``get_config()``)
        force: Substitui os handlers mesmo se já configurado

    Returns:
        Logger raiz ``quiz``
    """
    global _configured

    config = config or get_config()
    root = logging.getLogger(ROOT_LOGGER_NAME)

    if _configured and not force:
        return root

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(config.log_format))
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.log_level, logging.INFO))

    _configured = True
    return root


def get_logger(name: str) -> StructuredLogger:
    """Retorna um logger estruturado sob o namespace ``quiz``."""
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return StructuredLogger(logging.getLogger(name))
