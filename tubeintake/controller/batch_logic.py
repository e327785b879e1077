from __future__ import annotations

from dataclasses import dataclass

from ..core.batch import ImportBatch
from ..core.formatting import format_batch_stats_line, format_summary_line
from ..core.models import ImportSummary, OutcomeStatus, TokenKind
from .error_policy import format_classified_error


@dataclass(frozen=True, slots=True)
class BatchStats:
    references: int
    playlists: int
    videos: int
    misses: int
    truncated: int

    @property
    def total(self) -> int:
        return self.references + self.playlists + self.videos


def compute_batch_stats(batch: ImportBatch) -> BatchStats:
    kinds = [token.kind for token in batch]
    return BatchStats(
        references=sum(1 for kind in kinds if kind == TokenKind.REFERENCE),
        playlists=sum(1 for kind in kinds if kind == TokenKind.PLAYLIST_ID),
        videos=sum(1 for kind in kinds if kind == TokenKind.VIDEO_ID),
        misses=int(batch.misses),
        truncated=int(batch.truncated),
    )


def build_ready_message(batch: ImportBatch) -> str:
    stats = compute_batch_stats(batch)
    if stats.total <= 0:
        return "No importable references found."
    label = f" from {batch.source_label}" if batch.source_label else ""
    return (
        f"{stats.total} item(s) ready{label}. "
        + format_batch_stats_line(
            references=stats.references,
            playlists=stats.playlists,
            videos=stats.videos,
            misses=stats.misses,
            truncated=stats.truncated,
        )
    )


def failed_outcome_lines(summary: ImportSummary, *, limit: int = 10) -> list[str]:
    lines: list[str] = []
    for outcome in summary.outcomes:
        if outcome.status != OutcomeStatus.FAILED.value:
            continue
        lines.append(f"{outcome.token}: {format_classified_error(outcome.reason or 'Unknown error')}")
    if limit > 0 and len(lines) > limit:
        hidden = len(lines) - limit
        lines = lines[:limit] + [f"... and {hidden} more"]
    return lines


def build_completion_message(summary: ImportSummary) -> str:
    line = format_summary_line(
        total=summary.total,
        resolved=summary.resolved,
        failed=summary.failed,
        skipped=summary.skipped,
    )
    if summary.total <= 0:
        return "Nothing was submitted."
    if not summary.is_partial_failure:
        return f"Import complete. {line}"
    return f"Import finished with problems. {line}"
