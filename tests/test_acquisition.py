from __future__ import annotations

import pytest

from tubeintake.core.acquisition import decode_source, read_source_file, source_label
from tubeintake.core.errors import StructuralError
from tubeintake.core.models import RawSource, SourceKind


def test_read_source_file_returns_bytes_source(tmp_path):
    path = tmp_path / "subscriptions.csv"
    path.write_bytes(b"\xef\xbb\xbfChannel URL\nhttps://youtube.com/@a\n")
    source = read_source_file(path)
    assert source.kind == SourceKind.FILE
    assert source.display_name == "subscriptions.csv"
    assert decode_source(source).startswith("Channel URL")
    assert source_label(source) == "subscriptions"


def test_read_source_file_rejects_missing_and_folders(tmp_path):
    with pytest.raises(StructuralError):
        read_source_file(tmp_path / "missing.csv")
    with pytest.raises(StructuralError):
        read_source_file(tmp_path)
    with pytest.raises(StructuralError):
        read_source_file("   ")


def test_non_utf8_bytes_are_structural_error():
    with pytest.raises(StructuralError) as excinfo:
        decode_source(RawSource.from_bytes("legacy.csv", b"Channel URL\n\xff\xfe\n"))
    assert "legacy.csv" in excinfo.value.message


def test_blank_manual_entry_is_structural_error():
    with pytest.raises(StructuralError):
        decode_source(RawSource.manual("  \n \t"))


def test_manual_source_has_no_label():
    assert source_label(RawSource.manual("WL")) == ""
