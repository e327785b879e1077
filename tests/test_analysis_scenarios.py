from __future__ import annotations

import pytest

from tubeintake.core.analysis import analyze_source, analyze_text, coerce_import_mode
from tubeintake.core.config import default_config
from tubeintake.core.errors import StructuralError
from tubeintake.core.models import ImportMode, RawSource, TokenKind


def _kinds(batch) -> dict[str, TokenKind]:
    return {token.value: token.kind for token in batch}


def test_keyword_header_rows_become_references():
    report = analyze_text("Channel URL\nhttps://youtube.com/@alpha\nhttps://youtube.com/@beta\n")
    assert _kinds(report.batch) == {
        "https://youtube.com/@alpha": TokenKind.REFERENCE,
        "https://youtube.com/@beta": TokenKind.REFERENCE,
    }
    assert report.layout is not None
    assert report.layout.reference_column_index == 0


def test_header_without_keyword_falls_back_to_second_column():
    report = analyze_text("Name,Link\nAlpha,https://youtube.com/@alpha\n")
    assert _kinds(report.batch) == {"https://youtube.com/@alpha": TokenKind.REFERENCE}


def test_free_scan_keeps_playlist_and_video_ids():
    report = analyze_source(RawSource.manual("PLxyz123, dQw4w9WgXcQ; not-a-token"))
    assert _kinds(report.batch) == {
        "PLxyz123": TokenKind.PLAYLIST_ID,
        "dQw4w9WgXcQ": TokenKind.VIDEO_ID,
    }
    assert report.batch.misses == 1
    assert report.layout is None


def test_single_line_file_is_structural_failure():
    with pytest.raises(StructuralError):
        analyze_source(RawSource.from_text("subscriptions.csv", "https://youtube.com/@alpha\n"))


def test_duplicate_rows_collapse_to_one_entry():
    report = analyze_text("Channel URL\nhttps://youtube.com/@alpha\nhttps://youtube.com/@alpha\n")
    assert report.batch.values() == {"https://youtube.com/@alpha"}
    assert report.token_count == 2


def test_batch_never_holds_unrecognized_or_duplicates():
    text = "dQw4w9WgXcQ,dQw4w9WgXcQ;garbage\tWL,WL,,https://youtu.be/x\n" * 3
    report = analyze_source(RawSource.manual(text))
    values = [token.value for token in report.batch]
    assert len(values) == len(set(values))
    assert all(token.kind != TokenKind.UNRECOGNIZED for token in report.batch)
    assert set(values) == {"dQw4w9WgXcQ", "WL", "https://youtu.be/x"}


def test_playlist_mode_free_scans_files_without_header():
    source = RawSource.from_bytes("Watch later.csv", b"PLabc\nPLdef;dQw4w9WgXcQ\n")
    report = analyze_source(source, mode=ImportMode.PLAYLISTS)
    assert report.batch.values() == {"PLabc", "PLdef", "dQw4w9WgXcQ"}
    assert report.batch.source_label == "Watch later"


def test_row_mode_rejects_short_references_in_reference_column():
    report = analyze_text("Id,Channel URL\n1,dQw4w9WgXcQ\n2,https://youtube.com/@a\n")
    assert report.batch.values() == {"https://youtube.com/@a"}
    assert report.batch.misses == 1


def test_max_batch_items_from_config():
    config = default_config()
    config.max_batch_items = 2
    report = analyze_source(RawSource.manual("PLa,PLb,PLc,PLd"), config=config)
    assert len(report.batch) == 2
    assert report.batch.truncated == 2


def test_coerce_import_mode_falls_back():
    assert coerce_import_mode("PLAYLISTS") == ImportMode.PLAYLISTS
    assert coerce_import_mode("bogus") == ImportMode.CHANNELS
