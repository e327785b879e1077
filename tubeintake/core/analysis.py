"""Synchronous Analyzing phase: decoded text in, deduplicated ImportBatch out.

The steps run in a fixed order: structure detection, tokenizing,
classification and deduplication. A StructuralError raised by any step
halts the cycle before a batch exists.
"""

from __future__ import annotations

from dataclasses import dataclass

from .acquisition import decode_source, source_label
from .batch import ImportBatch, build_batch
from .classifier import ClassificationRules, classify_tokens
from .config import default_config
from .models import ImportMode, IngestConfig, RawSource, SourceKind, TabularLayout
from .structure import build_header_rules, non_empty_lines, require_layout
from .text_input import split_lines
from .tokenizer import tokenize


@dataclass(slots=True)
class AnalysisReport:
    batch: ImportBatch
    layout: TabularLayout | None
    line_count: int
    token_count: int


def coerce_import_mode(value: object, *, default: ImportMode = ImportMode.CHANNELS) -> ImportMode:
    normalized = str(value or "").strip().lower()
    for mode in ImportMode:
        if mode.value == normalized:
            return mode
    return default


def analyze_text(
    text: str,
    *,
    mode: ImportMode = ImportMode.CHANNELS,
    tabular: bool = True,
    config: IngestConfig | None = None,
    label: str = "",
) -> AnalysisReport:
    cfg = config or default_config()
    lines = split_lines(text)
    layout: TabularLayout | None = None
    if tabular and mode == ImportMode.CHANNELS:
        layout = require_layout(lines, build_header_rules(cfg.header_keywords))
    tokens = tokenize(lines, layout, delimiters=cfg.free_scan_delimiters)
    rules = ClassificationRules.from_config(cfg)
    batch = build_batch(
        classify_tokens(tokens, rules, row_mode=layout is not None),
        source_label=label,
        max_items=cfg.max_batch_items,
    )
    return AnalysisReport(
        batch=batch,
        layout=layout,
        line_count=len(non_empty_lines(lines)),
        token_count=len(tokens),
    )


def analyze_source(
    source: RawSource,
    *,
    mode: ImportMode = ImportMode.CHANNELS,
    config: IngestConfig | None = None,
) -> AnalysisReport:
    text = decode_source(source)
    return analyze_text(
        text,
        mode=mode,
        tabular=source.kind == SourceKind.FILE,
        config=config,
        label=source_label(source),
    )
