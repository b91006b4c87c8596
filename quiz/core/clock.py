"""Quiz Clock - Fonte de tempo consumida pelo session engine."""

import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Fonte de tempo para os timestamps da sessão.

    ``monotonic()`` alimenta a aritmética de tempo decorrido (início/fim,
    tempo por questão); ``utcnow()`` só é usado nos timestamps de auditoria.
    """

    def monotonic(self) -> float: ...

    def utcnow(self) -> datetime: ...


class SystemClock:
    """Clock baseado em ``time.monotonic`` e no relógio do sistema."""

    def monotonic(self) -> float:
        return time.monotonic()

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)
