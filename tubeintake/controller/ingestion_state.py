from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from ..core.batch import ImportBatch
from ..core.models import ImportSummary, RawSource


class IngestionPhase(StrEnum):
    IDLE = "idle"
    ACQUIRED = "acquired"
    ANALYZING = "analyzing"
    READY = "ready"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    STRUCTURAL_FAILURE = "structural_failure"


TERMINAL_PHASES = frozenset({IngestionPhase.COMPLETED, IngestionPhase.STRUCTURAL_FAILURE})


@dataclass(frozen=True, slots=True)
class Idle:
    phase: ClassVar[IngestionPhase] = IngestionPhase.IDLE


@dataclass(frozen=True, slots=True)
class Acquired:
    source: RawSource
    phase: ClassVar[IngestionPhase] = IngestionPhase.ACQUIRED


@dataclass(frozen=True, slots=True)
class Analyzing:
    source: RawSource
    phase: ClassVar[IngestionPhase] = IngestionPhase.ANALYZING


@dataclass(frozen=True, slots=True)
class Ready:
    batch: ImportBatch = field(compare=False)
    message: str = ""
    phase: ClassVar[IngestionPhase] = IngestionPhase.READY

    @property
    def count(self) -> int:
        return len(self.batch)

    @property
    def can_submit(self) -> bool:
        return len(self.batch) > 0


@dataclass(frozen=True, slots=True)
class Submitting:
    batch: ImportBatch = field(compare=False)
    progress: float = 0.0
    phase: ClassVar[IngestionPhase] = IngestionPhase.SUBMITTING


@dataclass(frozen=True, slots=True)
class Completed:
    summary: ImportSummary
    message: str = ""
    phase: ClassVar[IngestionPhase] = IngestionPhase.COMPLETED


@dataclass(frozen=True, slots=True)
class StructuralFailure:
    message: str
    phase: ClassVar[IngestionPhase] = IngestionPhase.STRUCTURAL_FAILURE


IngestionState = Idle | Acquired | Analyzing | Ready | Submitting | Completed | StructuralFailure


def is_terminal(state: IngestionState) -> bool:
    return state.phase in TERMINAL_PHASES
