from __future__ import annotations

from tubeintake.controller.batch_logic import BatchStats, build_ready_message, compute_batch_stats
from tubeintake.core.batch import ImportBatch, build_batch, export_batch_tokens
from tubeintake.core.formatting import format_batch_stats_line
from tubeintake.core.models import ClassifiedToken, TokenKind


def _token(value: str, kind: TokenKind) -> ClassifiedToken:
    return ClassifiedToken(value=value, kind=kind)


def test_add_is_idempotent_by_value():
    batch = ImportBatch()
    assert batch.add(_token("https://youtube.com/@a", TokenKind.REFERENCE)) is True
    assert batch.add(_token("https://youtube.com/@a", TokenKind.REFERENCE)) is False
    assert len(batch) == 1
    assert "https://youtube.com/@a" in batch


def test_unrecognized_tokens_only_count_as_misses():
    batch = build_batch(
        [
            _token("nope", TokenKind.UNRECOGNIZED),
            _token("WL", TokenKind.PLAYLIST_ID),
            _token("nope", TokenKind.UNRECOGNIZED),
        ]
    )
    assert batch.values() == {"WL"}
    assert batch.misses == 2
    assert "nope" not in batch


def test_max_items_counts_truncated_distinct_values():
    tokens = [_token(f"PL{index}", TokenKind.PLAYLIST_ID) for index in range(5)]
    batch = build_batch(tokens + tokens[:2], max_items=3)
    assert len(batch) == 3
    assert batch.truncated == 2


def test_empty_batch_is_falsy():
    batch = ImportBatch(source_label="  subs  ")
    assert not batch
    assert batch.source_label == "subs"
    assert build_ready_message(batch) == "No importable references found."


def test_compute_batch_stats_counts_per_kind():
    batch = build_batch(
        [
            _token("https://youtube.com/@a", TokenKind.REFERENCE),
            _token("PLabc", TokenKind.PLAYLIST_ID),
            _token("dQw4w9WgXcQ", TokenKind.VIDEO_ID),
            _token("x", TokenKind.UNRECOGNIZED),
        ]
    )
    stats = compute_batch_stats(batch)
    assert stats == BatchStats(references=1, playlists=1, videos=1, misses=1, truncated=0)
    assert stats.total == 3


def test_format_batch_stats_line_mentions_truncation_only_when_present():
    line = format_batch_stats_line(references=1, playlists=2, videos=3, misses=4, truncated=0)
    assert "Videos: 3" in line
    assert "Over limit" not in line
    assert "Over limit: 5" in format_batch_stats_line(references=0, playlists=0, videos=0, misses=0, truncated=5)


def test_export_batch_tokens_adds_txt_suffix(tmp_path):
    batch = build_batch([_token("WL", TokenKind.PLAYLIST_ID), _token("dQw4w9WgXcQ", TokenKind.VIDEO_ID)])
    target = export_batch_tokens(batch, tmp_path / "out" / "tokens")
    assert target.name == "tokens.txt"
    assert target.read_text(encoding="utf-8").splitlines() == ["WL", "dQw4w9WgXcQ"]


def test_completion_message_reflects_failures():
    from tubeintake.controller.batch_logic import build_completion_message, failed_outcome_lines
    from tubeintake.core.models import ImportOutcome, ImportSummary

    failed = ImportOutcome(token="PLa", kind="playlist_id", status="failed", reason="HTTP 404: not found")
    summary = ImportSummary(total=2, resolved=1, failed=1, skipped=0, outcomes=[failed])
    assert build_completion_message(summary).startswith("Import finished with problems.")
    assert failed_outcome_lines(summary) == ["PLa: NOT_FOUND: HTTP 404: not found"]
    clean = ImportSummary(total=1, resolved=1, failed=0, skipped=0)
    assert build_completion_message(clean) == "Import complete. Imported: 1/1  |  Failed: 0  |  Skipped: 0"
