"""
Domain Entities - Retrain Progress

Observable state machine of a single retrain invocation:

    idle -> uploading -> validating -> training -> saving -> completed

Any phase before ``completed`` may end in ``error``.

``uploading`` covers loading the stored file, ``validating`` the
re-normalization, telemetry export and consolidation of the dataset.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID


class RetrainPhase(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    VALIDATING = "validating"
    TRAINING = "training"
    SAVING = "saving"
    COMPLETED = "completed"
    ERROR = "error"


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_PHASE_PROGRESS: Dict[RetrainPhase, int] = {
    RetrainPhase.IDLE: 0,
    RetrainPhase.UPLOADING: 10,
    RetrainPhase.VALIDATING: 30,
    RetrainPhase.TRAINING: 50,
    RetrainPhase.SAVING: 90,
    RetrainPhase.COMPLETED: 100,
}

_ALLOWED_TRANSITIONS: Dict[RetrainPhase, set] = {
    RetrainPhase.IDLE: {RetrainPhase.UPLOADING, RetrainPhase.ERROR},
    RetrainPhase.UPLOADING: {RetrainPhase.VALIDATING, RetrainPhase.ERROR},
    RetrainPhase.VALIDATING: {RetrainPhase.TRAINING, RetrainPhase.ERROR},
    RetrainPhase.TRAINING: {RetrainPhase.SAVING, RetrainPhase.ERROR},
    RetrainPhase.SAVING: {RetrainPhase.COMPLETED, RetrainPhase.ERROR},
    RetrainPhase.COMPLETED: set(),
    RetrainPhase.ERROR: set(),
}


@dataclass(frozen=True, slots=True)
class ProgressLogEntry:
    timestamp: datetime
    level: LogLevel
    message: str


@dataclass
class RetrainProgress:
    """Phase, percentage and step log of one retrain."""

    upload_id: UUID
    phase: RetrainPhase = RetrainPhase.IDLE
    progress: int = 0
    current_step: str = "Waiting to start"
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    log: List[ProgressLogEntry] = field(default_factory=list)

    def advance(self, phase: RetrainPhase, step: str) -> None:
        """Move to ``phase``; invalid transitions raise ``ValueError``."""
        if phase not in _ALLOWED_TRANSITIONS[self.phase]:
            raise ValueError(
                f"Invalid retrain transition {self.phase.value} -> {phase.value}"
            )
        self.phase = phase
        self.progress = _PHASE_PROGRESS.get(phase, self.progress)
        self.current_step = step
        if phase == RetrainPhase.COMPLETED:
            self.finished_at = datetime.now(timezone.utc)
        self.record(step)

    def fail(self, message: str) -> None:
        """Terminate in ``error`` from any non-terminal phase."""
        if self.is_finished:
            return
        self.phase = RetrainPhase.ERROR
        self.current_step = message
        self.finished_at = datetime.now(timezone.utc)
        self.record(message, LogLevel.ERROR)

    def record(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        self.log.append(
            ProgressLogEntry(
                timestamp=datetime.now(timezone.utc), level=level, message=message
            )
        )

    @property
    def is_finished(self) -> bool:
        return self.phase in (RetrainPhase.COMPLETED, RetrainPhase.ERROR)
