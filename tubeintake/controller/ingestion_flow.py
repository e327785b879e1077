from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QObject, QThread, Qt, Signal

from ..core.acquisition import read_source_file
from ..core.analysis import analyze_source, coerce_import_mode
from ..core.batch import export_batch_tokens
from ..core.config import default_config
from ..core.errors import StructuralError
from ..core.models import ImportMode, ImportSummary, IngestConfig, OutcomeStatus, RawSource
from ..core.resolver import ResolutionService
from ..core.submission_service import SubmissionService
from ..workers.submit_worker import SubmitWorker
from .batch_logic import build_completion_message, build_ready_message, failed_outcome_lines
from .error_policy import classify_resolution_error, failure_hint
from .ingestion_state import (
    Acquired,
    Analyzing,
    Completed,
    Idle,
    IngestionState,
    Ready,
    StructuralFailure,
    Submitting,
)


class IngestionController(QObject):
    """Single coordinating owner of one ingestion cycle at a time.

    ``acquire``, ``confirm_submit``, ``cancel`` and ``reset`` are the only
    mutating entry points and must be called from the thread that owns this
    object. Every cycle gets a fresh id; worker results tagged with any other
    id are dropped, so a cancelled or replaced submission can never touch the
    current state.
    """

    stateChanged = Signal(object)
    logChanged = Signal(str)
    itemStatusChanged = Signal(str, str)

    def __init__(
        self,
        resolver: ResolutionService,
        *,
        config: IngestConfig | None = None,
        mode: ImportMode | str | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._resolver = resolver
        self._config = config or default_config()
        self._mode = coerce_import_mode(mode or self._config.default_import_mode)
        self._state: IngestionState = Idle()
        self._cycle_id = 0
        self._threads_by_cycle: dict[int, QThread] = {}
        self._workers_by_cycle: dict[int, SubmitWorker] = {}

    @property
    def state(self) -> IngestionState:
        return self._state

    @property
    def cycle_id(self) -> int:
        return self._cycle_id

    @property
    def import_mode(self) -> ImportMode:
        return self._mode

    @property
    def config(self) -> IngestConfig:
        return self._config

    def set_import_mode(self, mode: ImportMode | str) -> None:
        self._mode = coerce_import_mode(mode, default=self._mode)

    def running_threads(self) -> list[QThread]:
        return list(self._threads_by_cycle.values())

    def is_submitting(self) -> bool:
        return isinstance(self._state, Submitting)

    def _set_state(self, state: IngestionState) -> None:
        self._state = state
        self.stateChanged.emit(state)

    def _log(self, line: str) -> None:
        text = str(line or "").strip()
        if text:
            self.logChanged.emit(text)

    def _begin_cycle(self) -> int:
        self._stop_active_worker()
        self._cycle_id += 1
        return self._cycle_id

    def _stop_active_worker(self) -> None:
        worker = self._workers_by_cycle.get(self._cycle_id)
        if worker is not None:
            worker.stop()

    def acquire(self, source: RawSource) -> IngestionState:
        self._begin_cycle()
        self._set_state(Acquired(source))
        self._set_state(Analyzing(source))
        try:
            report = analyze_source(source, mode=self._mode, config=self._config)
        except StructuralError as exc:
            self._log(f"Could not read input: {exc.message}")
            self._set_state(StructuralFailure(exc.message))
            return self._state
        message = build_ready_message(report.batch)
        self._log(message)
        self._set_state(Ready(report.batch, message))
        return self._state

    def acquire_text(self, text: str) -> IngestionState:
        return self.acquire(RawSource.manual(text))

    def acquire_file(self, path: str | Path) -> IngestionState:
        try:
            source = read_source_file(path)
        except StructuralError as exc:
            self._begin_cycle()
            self._log(f"Could not read input: {exc.message}")
            self._set_state(StructuralFailure(exc.message))
            return self._state
        return self.acquire(source)

    def export_ready_batch(self, output_path: str | Path) -> Path:
        state = self._state
        if not isinstance(state, Ready) or not state.can_submit:
            raise ValueError("There is no analysed batch to export.")
        target = export_batch_tokens(state.batch, output_path)
        self._log(f"Exported {state.count} item(s) to {target}")
        return target

    def confirm_submit(self) -> bool:
        state = self._state
        if not isinstance(state, Ready):
            self._log("Nothing is ready to submit.")
            return False
        if not state.can_submit:
            return False
        cycle_id = self._cycle_id
        thread = QThread(self)
        worker = SubmitWorker(
            SubmissionService(self._resolver),
            state.batch.tokens(),
            self._config.submit_concurrency,
            cycle_id=cycle_id,
            resolve_timeout_seconds=self._config.resolve_timeout_seconds,
            settle_timeout_seconds=self._config.settle_timeout_seconds,
            source_label=state.batch.source_label,
        )
        worker.moveToThread(thread)
        thread.setProperty("cycle_id", cycle_id)
        thread.started.connect(worker.run)
        worker.progressChanged.connect(self._on_worker_progress, Qt.ConnectionType.QueuedConnection)
        worker.logChanged.connect(self._on_worker_log, Qt.ConnectionType.QueuedConnection)
        worker.statusChanged.connect(self._on_worker_status, Qt.ConnectionType.QueuedConnection)
        worker.errorRaised.connect(self._on_worker_error, Qt.ConnectionType.QueuedConnection)
        worker.finishedSummary.connect(self._on_worker_summary, Qt.ConnectionType.QueuedConnection)
        worker.finished.connect(thread.quit)
        thread.finished.connect(self._on_thread_finished, Qt.ConnectionType.QueuedConnection)
        self._threads_by_cycle[cycle_id] = thread
        self._workers_by_cycle[cycle_id] = worker
        self._set_state(Submitting(state.batch, 0.0))
        thread.start()
        return True

    def cancel(self) -> None:
        state = self._state
        if isinstance(state, Idle):
            return
        was_submitting = isinstance(state, Submitting)
        self._begin_cycle()
        if was_submitting:
            self._log("Submission cancelled; pending results will be ignored.")
        self._set_state(Idle())

    def reset(self) -> None:
        self._begin_cycle()
        if not isinstance(self._state, Idle):
            self._set_state(Idle())

    def stop_all(self) -> None:
        for worker in list(self._workers_by_cycle.values()):
            worker.stop()

    def wait_for_threads(self, timeout_ms: int = 5000) -> bool:
        finished = True
        for thread in self.running_threads():
            if thread.isRunning() and not thread.wait(max(0, int(timeout_ms))):
                finished = False
        return finished

    def _is_current(self, cycle_id: object) -> bool:
        try:
            return int(cycle_id) == self._cycle_id
        except (TypeError, ValueError):
            return False

    def _sender_cycle(self) -> int | None:
        sender = self.sender()
        if isinstance(sender, SubmitWorker):
            return sender.cycle_id
        return None

    def _on_worker_progress(self, cycle_key: str, fraction: float, _text: str) -> None:
        if not self._is_current(cycle_key):
            return
        state = self._state
        if not isinstance(state, Submitting):
            return
        value = max(0.0, min(1.0, float(fraction)))
        if value <= state.progress:
            return
        self._set_state(Submitting(state.batch, value))

    def _on_worker_log(self, line: str) -> None:
        if not self._is_current(self._sender_cycle()):
            return
        self._log(line)

    def _on_worker_status(self, token: str, status: str) -> None:
        if not self._is_current(self._sender_cycle()):
            return
        self.itemStatusChanged.emit(str(token or ""), str(status or ""))

    def _on_worker_error(self, _job_id: str, error: str) -> None:
        if not self._is_current(self._sender_cycle()):
            return
        self._log(f"Submission failed: {error}")

    def _on_worker_summary(self, payload: object) -> None:
        if (not isinstance(payload, tuple)) or len(payload) != 2:
            return
        cycle_id, summary = payload
        if not self._is_current(cycle_id) or not isinstance(summary, ImportSummary):
            return
        if not isinstance(self._state, Submitting):
            return
        message = build_completion_message(summary)
        self._log(message)
        for line in failed_outcome_lines(summary):
            self._log(f"  {line}")
        for hint in self._failure_hints(summary):
            self._log(f"Hint: {hint}")
        self._set_state(Completed(summary, message))

    @staticmethod
    def _failure_hints(summary: ImportSummary) -> list[str]:
        categories: list[str] = []
        for outcome in summary.outcomes:
            if outcome.status != OutcomeStatus.FAILED.value:
                continue
            category, _retryable = classify_resolution_error(outcome.reason)
            if category not in categories:
                categories.append(category)
        return [failure_hint(category) for category in categories]

    def _on_thread_finished(self) -> None:
        sender = self.sender()
        if not isinstance(sender, QThread):
            return
        try:
            cycle_id = int(sender.property("cycle_id"))
        except (TypeError, ValueError):
            return
        thread = self._threads_by_cycle.pop(cycle_id, None)
        worker = self._workers_by_cycle.pop(cycle_id, None)
        if worker is not None:
            worker.deleteLater()
        if thread is not None:
            thread.deleteLater()
