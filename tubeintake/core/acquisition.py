"""Turn pasted text, dropped bytes or a file on disk into decoded text."""

from __future__ import annotations

from pathlib import Path

from .errors import StructuralError
from .models import RawSource, SourceKind
from .text_input import first_non_empty_line

_UTF8_BOM = "\ufeff"


def read_source_file(path: str | Path) -> RawSource:
    target = Path(str(path or "").strip()).expanduser()
    if not str(path or "").strip():
        raise StructuralError("No file selected")
    if target.is_dir():
        raise StructuralError(f"{target.name or target} is a folder, not a file")
    try:
        data = target.read_bytes()
    except OSError as exc:
        raise StructuralError(f"Could not read {target.name}: {exc.strerror or exc}") from exc
    return RawSource.from_bytes(target.name, data)


def decode_source(source: RawSource) -> str:
    content = source.content
    if isinstance(content, (bytes, bytearray)):
        try:
            text = bytes(content).decode("utf-8")
        except UnicodeDecodeError as exc:
            label = source.display_name or "file"
            raise StructuralError(f"{label} is not UTF-8 text") from exc
    else:
        text = str(content or "")
    if text.startswith(_UTF8_BOM):
        text = text[len(_UTF8_BOM):]
    if source.kind == SourceKind.MANUAL and not first_non_empty_line(text):
        raise StructuralError("No reference entered")
    return text


def source_label(source: RawSource) -> str:
    name = str(source.display_name or "").strip()
    if not name:
        return ""
    return Path(name).stem.strip()
