# =============================================================================
# CONFIGURACAO DO QUIZ ENGINE
# =============================================================================
# Configuração centralizada do engine, lida de variáveis de ambiente
# =============================================================================

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MatchMode(str, Enum):
    """Estratégias de comparação para respostas de texto."""

    EXACT = "exact"  # Igualdade byte a byte
    NORMALIZED = "normalized"  # Sem diferença de caixa, espaços colapsados
    CONTAINS = "contains"  # Contido em qualquer direção (normalizado)


class LogFormat(str, Enum):
    """Formato das linhas de log."""

    TEXT = "text"
    JSON = "json"


def _env_enum(name: str, enum_cls: type[Enum], default: Enum) -> Any:
    value = os.getenv(name, default.value).strip().lower()
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class EngineConfig:
    """Configuração de runtime do quiz engine.

    O timer não é configurável: cada tick vale exatamente 1 segundo.

    Attributes:
        log_level: Nível do namespace de logger ``quiz``
        log_format: Linhas ``text`` (key=value) ou ``json``
        default_match_mode: Comparação usada quando a questão não define ``match_mode``
        shuffle_seed: Seed fixa para ordem de apresentação (None = aleatória)
    """

    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.TEXT
    default_match_mode: MatchMode = MatchMode.NORMALIZED
    shuffle_seed: int | None = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Cria config a partir das variáveis ``QUIZ_*``.

        Valores inválidos caem no default em vez de falhar.
        """
        return cls(
            log_level=os.getenv("QUIZ_LOG_LEVEL", "INFO").upper(),
            log_format=_env_enum("QUIZ_LOG_FORMAT", LogFormat, LogFormat.TEXT),
            default_match_mode=_env_enum(
                "QUIZ_DEFAULT_MATCH_MODE", MatchMode, MatchMode.NORMALIZED
            ),
            shuffle_seed=_env_optional_int("QUIZ_SHUFFLE_SEED"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "logging": {
                "level": self.log_level,
                "format": self.log_format.value,
            },
            "scoring": {
                "default_match_mode": self.default_match_mode.value,
            },
            "session": {
                "shuffle_seed": self.shuffle_seed,
            },
        }


# =============================================================================
# SINGLETON
# =============================================================================

_config: EngineConfig | None = None


def get_config() -> EngineConfig:
    """Retorna a config singleton, carregando do ambiente uma vez."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def reload_config() -> EngineConfig:
    """Relê o ambiente e substitui o singleton."""
    global _config
    _config = EngineConfig.from_env()
    return _config
