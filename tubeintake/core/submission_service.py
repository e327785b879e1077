from __future__ import annotations

import concurrent.futures
import queue
import re
import threading
from collections.abc import Callable, Iterable

from .models import ClassifiedToken, ImportOutcome, ImportSummary, OutcomeStatus
from .resolver import ResolutionService

ProgressCallback = Callable[[float, str], None]
OutcomeCallback = Callable[[ImportOutcome], None]
StatusCallback = Callable[[str, str], None]
LogCallback = Callable[[str], None]

_ANSI_ESCAPE_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_MAX_ERROR_CHARS = 280

NOT_FOUND_REASON = "No record found"
NOT_SETTLED_REASON = "Resolution did not settle within {seconds:.1f}s"


def sanitize_error_text(value: object) -> str:
    text = str(value or "")
    text = _ANSI_ESCAPE_RE.sub("", text)
    text = _CONTROL_CHAR_RE.sub("", text)
    text = " ".join(text.replace("\r", " ").replace("\n", " ").split())
    if len(text) > _MAX_ERROR_CHARS:
        text = f"{text[:_MAX_ERROR_CHARS - 1]}..."
    return text or "Unknown error"


def summarize_outcomes(outcomes: list[ImportOutcome]) -> ImportSummary:
    return ImportSummary(
        total=len(outcomes),
        resolved=sum(1 for item in outcomes if item.status == OutcomeStatus.RESOLVED.value),
        failed=sum(1 for item in outcomes if item.status == OutcomeStatus.FAILED.value),
        skipped=sum(1 for item in outcomes if item.status == OutcomeStatus.SKIPPED.value),
        outcomes=outcomes,
    )


class SubmissionService:
    """Drive a batch through a ResolutionService with bounded concurrency.

    Progress is the fraction of items dispatched (handed to a resolver call),
    not completed, and never decreases. The submission settles when every
    dispatched item has reported back, or when the optional settle timeout
    expires; whatever is still in flight at that point is recorded as failed
    and its late result is discarded.
    """

    def __init__(self, resolver: ResolutionService) -> None:
        self._resolver = resolver

    def _resolve_one(
        self,
        token: ClassifiedToken,
        *,
        timeout_seconds: float | None,
        source_label: str = "",
    ) -> ImportOutcome:
        try:
            record = self._resolver.resolve(token, timeout_seconds=timeout_seconds, source_label=source_label)
        except Exception as exc:
            return ImportOutcome(
                token=token.value,
                kind=token.kind.value,
                status=OutcomeStatus.FAILED.value,
                reason=sanitize_error_text(exc),
            )
        if record is None:
            return ImportOutcome(
                token=token.value,
                kind=token.kind.value,
                status=OutcomeStatus.FAILED.value,
                reason=NOT_FOUND_REASON,
            )
        return ImportOutcome(
            token=token.value,
            kind=token.kind.value,
            status=OutcomeStatus.RESOLVED.value,
            record=record,
        )

    def run_submission(
        self,
        batch: Iterable[ClassifiedToken],
        concurrency: int,
        cancel_token: threading.Event,
        *,
        progress_cb: ProgressCallback | None = None,
        outcome_cb: OutcomeCallback | None = None,
        status_cb: StatusCallback | None = None,
        log_cb: LogCallback | None = None,
        resolve_timeout_seconds: float | None = None,
        settle_timeout_seconds: float = 0.0,
        source_label: str = "",
    ) -> ImportSummary:
        tokens: list[ClassifiedToken] = []
        seen: set[str] = set()
        for token in batch:
            if token.value in seen:
                continue
            seen.add(token.value)
            tokens.append(token)
        if not tokens:
            if progress_cb:
                progress_cb(1.0, "Nothing to submit")
            return summarize_outcomes([])

        total = len(tokens)
        max_workers = max(1, min(int(concurrency), total))
        pending: queue.Queue[ClassifiedToken] = queue.Queue()
        for token in tokens:
            pending.put(token)

        state_lock = threading.Lock()
        settled: dict[str, ImportOutcome] = {}
        in_flight: set[str] = set()
        dispatched_counter = [0]
        closed = threading.Event()

        def dispatch(token: ClassifiedToken) -> bool:
            with state_lock:
                if closed.is_set():
                    return False
                in_flight.add(token.value)
                dispatched_counter[0] += 1
                fraction = dispatched_counter[0] / total
                if progress_cb:
                    progress_cb(fraction, f"Submitting {dispatched_counter[0]}/{total}")
            if status_cb:
                status_cb(token.value, "running")
            return True

        def settle(outcome: ImportOutcome) -> None:
            with state_lock:
                if closed.is_set():
                    return
                in_flight.discard(outcome.token)
                settled[outcome.token] = outcome
                if outcome_cb:
                    outcome_cb(outcome)
            if status_cb:
                status_cb(outcome.token, outcome.status)
            if log_cb and outcome.status == OutcomeStatus.FAILED.value:
                log_cb(f"[{outcome.token}] ERROR: {outcome.reason}")

        def worker_loop() -> None:
            while not closed.is_set():
                if cancel_token.is_set():
                    return
                try:
                    current = pending.get_nowait()
                except queue.Empty:
                    return
                if not dispatch(current):
                    return
                settle(
                    self._resolve_one(
                        current,
                        timeout_seconds=resolve_timeout_seconds,
                        source_label=source_label,
                    )
                )

        if log_cb:
            log_cb(f"Submitting {total} item(s) with concurrency {max_workers}.")
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)
        workers = [executor.submit(worker_loop) for _ in range(max_workers)]
        timeout = float(settle_timeout_seconds) if settle_timeout_seconds and settle_timeout_seconds > 0 else None
        _done, not_done = concurrent.futures.wait(workers, timeout=timeout)
        with state_lock:
            closed.set()
            unsettled = set(in_flight)
        executor.shutdown(wait=not not_done, cancel_futures=True)
        if not_done and log_cb:
            log_cb(f"{len(unsettled)} item(s) did not settle in time; their results will be discarded.")

        outcomes: list[ImportOutcome] = []
        for token in tokens:
            outcome = settled.get(token.value)
            if outcome is None and token.value in unsettled:
                outcome = ImportOutcome(
                    token=token.value,
                    kind=token.kind.value,
                    status=OutcomeStatus.FAILED.value,
                    reason=NOT_SETTLED_REASON.format(seconds=float(settle_timeout_seconds)),
                )
            elif outcome is None:
                outcome = ImportOutcome(
                    token=token.value,
                    kind=token.kind.value,
                    status=OutcomeStatus.SKIPPED.value,
                )
            outcomes.append(outcome)
        summary = summarize_outcomes(outcomes)
        if log_cb:
            log_cb(
                f"Submission finished: {summary.resolved} resolved, "
                f"{summary.failed} failed, {summary.skipped} skipped."
            )
        return summary
