from __future__ import annotations

from .base_worker import BaseWorker
from ..core.models import ClassifiedToken, ImportOutcome, ImportSummary, OutcomeStatus
from ..core.submission_service import SubmissionService, sanitize_error_text, summarize_outcomes


class SubmitWorker(BaseWorker):
    def __init__(
        self,
        service: SubmissionService,
        tokens: list[ClassifiedToken],
        concurrency: int,
        *,
        cycle_id: int = 0,
        resolve_timeout_seconds: float | None = None,
        settle_timeout_seconds: float = 0.0,
        source_label: str = "",
    ) -> None:
        super().__init__(cycle_id=cycle_id)
        self._service = service
        self._tokens = list(tokens)
        self._concurrency = max(1, int(concurrency))
        self._resolve_timeout_seconds = resolve_timeout_seconds
        self._settle_timeout_seconds = max(0.0, float(settle_timeout_seconds or 0.0))
        self._source_label = str(source_label or "").strip()

    def run(self) -> None:
        def execute() -> ImportSummary:
            return self._service.run_submission(
                self._tokens,
                self._concurrency,
                self._stop_event,
                progress_cb=self._on_progress,
                status_cb=self._on_status,
                log_cb=self._on_log,
                resolve_timeout_seconds=self._resolve_timeout_seconds,
                settle_timeout_seconds=self._settle_timeout_seconds,
                source_label=self._source_label,
            )

        def on_result(summary: ImportSummary) -> None:
            self.finishedSummary.emit((self.cycle_id, summary))

        def on_error(exc: Exception) -> None:
            reason = sanitize_error_text(exc)
            self.errorRaised.emit("global", reason)
            failed = [
                ImportOutcome(
                    token=token.value,
                    kind=token.kind.value,
                    status=OutcomeStatus.FAILED.value,
                    reason=reason,
                )
                for token in self._tokens
            ]
            self.finishedSummary.emit((self.cycle_id, summarize_outcomes(failed)))

        self.run_guarded(
            execute=execute,
            on_result=on_result,
            on_error=on_error,
        )

    def _on_progress(self, fraction: float, text: str) -> None:
        self.progressChanged.emit(str(self.cycle_id), float(fraction), str(text or ""))

    def _on_status(self, token: str, state: str) -> None:
        self.statusChanged.emit(str(token or ""), str(state or ""))

    def _on_log(self, line: str) -> None:
        self.logChanged.emit(str(line or ""))
