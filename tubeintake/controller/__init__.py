from .batch_logic import (
    BatchStats,
    build_completion_message,
    build_ready_message,
    compute_batch_stats,
    failed_outcome_lines,
)
from .error_policy import classify_resolution_error, failure_hint, format_classified_error
from .ingestion_flow import IngestionController
from .ingestion_state import (
    Acquired,
    Analyzing,
    Completed,
    Idle,
    IngestionPhase,
    IngestionState,
    Ready,
    StructuralFailure,
    Submitting,
    is_terminal,
)

__all__ = [
    "Acquired",
    "Analyzing",
    "BatchStats",
    "Completed",
    "Idle",
    "IngestionController",
    "IngestionPhase",
    "IngestionState",
    "Ready",
    "StructuralFailure",
    "Submitting",
    "build_completion_message",
    "build_ready_message",
    "classify_resolution_error",
    "compute_batch_stats",
    "failed_outcome_lines",
    "failure_hint",
    "format_classified_error",
    "is_terminal",
]
