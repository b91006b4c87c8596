"""Quiz Storage - Portas de colaboradores e adapters."""

from .base import DefinitionSource, KeyValueStore, ResultSink
from .memory import InMemoryDefinitionSource, InMemoryResultLog
from .result_store import ResultStore

__all__ = [
    "DefinitionSource",
    "KeyValueStore",
    "ResultSink",
    "InMemoryDefinitionSource",
    "InMemoryResultLog",
    "ResultStore",
]
