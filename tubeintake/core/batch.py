from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from .models import ClassifiedToken, TokenKind


class ImportBatch:
    """Deduplicated working set of classified tokens for one ingestion cycle.

    Keyed by exact token value; inserting a value that is already present is
    a no-op. Unrecognized tokens never enter the set, they only bump
    ``misses``. When ``max_items`` is positive, new distinct values beyond
    the limit are counted in ``truncated`` instead of being stored.
    """

    __slots__ = ("_items", "source_label", "misses", "truncated", "max_items")

    def __init__(self, *, source_label: str = "", max_items: int = 0) -> None:
        self._items: dict[str, ClassifiedToken] = {}
        self.source_label = str(source_label or "").strip()
        self.misses = 0
        self.truncated = 0
        self.max_items = max(0, int(max_items))

    def add(self, token: ClassifiedToken) -> bool:
        if token.kind == TokenKind.UNRECOGNIZED:
            self.misses += 1
            return False
        if token.value in self._items:
            return False
        if self.max_items and len(self._items) >= self.max_items:
            self.truncated += 1
            return False
        self._items[token.value] = token
        return True

    def extend(self, tokens: Iterable[ClassifiedToken]) -> int:
        return sum(1 for token in tokens if self.add(token))

    def __contains__(self, value: object) -> bool:
        if isinstance(value, ClassifiedToken):
            value = value.value
        return value in self._items

    def __iter__(self) -> Iterator[ClassifiedToken]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def get(self, value: str) -> ClassifiedToken | None:
        return self._items.get(str(value or ""))

    def values(self) -> set[str]:
        return set(self._items)

    def tokens(self) -> list[ClassifiedToken]:
        return list(self._items.values())

    def __repr__(self) -> str:
        return f"ImportBatch(size={len(self._items)}, misses={self.misses}, truncated={self.truncated})"


def build_batch(
    tokens: Iterable[ClassifiedToken],
    *,
    source_label: str = "",
    max_items: int = 0,
) -> ImportBatch:
    batch = ImportBatch(source_label=source_label, max_items=max_items)
    batch.extend(tokens)
    return batch


def export_batch_tokens(batch: ImportBatch, output_path: str | Path) -> Path:
    target = Path(str(output_path or "").strip()).expanduser()
    if not target.name:
        raise ValueError("Please choose a valid output file path.")
    if target.suffix == "":
        target = target.with_suffix(".txt")
    values = [token.value for token in batch]
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text("\n".join(values) + ("\n" if values else ""), encoding="utf-8")
    return target
