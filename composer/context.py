"""
Explicit editing context.

Every model operation takes an ``EditContext`` instead of reaching for a
global "current document": ids, timestamps and the diagnostics sink all
come from here, so independent sessions and tests never share state.
"""

from dataclasses import dataclass, field
from typing import Callable, List
import itertools
import uuid

from composer.contracts.base import utc_now_iso
from composer.errors import Diagnostic


def _uuid4() -> str:
    return str(uuid.uuid4())


@dataclass
class EditContext:
    """Source of ids and time for model operations, plus a warning sink"""
    id_factory: Callable[[], str] = _uuid4
    clock: Callable[[], str] = utc_now_iso
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def new_id(self) -> str:
        return self.id_factory()

    def now(self) -> str:
        return self.clock()

    def drain_diagnostics(self) -> List[Diagnostic]:
        """Return and clear the collected diagnostics"""
        drained, self.diagnostics = self.diagnostics, []
        return drained


class SequentialIds:
    """Deterministic id factory: ``prefix-1``, ``prefix-2``, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


class FixedClock:
    """Clock returning the same timestamp, for reproducible documents"""

    def __init__(self, timestamp: str = "2024-01-01T00:00:00+00:00"):
        self.timestamp = timestamp

    def __call__(self) -> str:
        return self.timestamp
