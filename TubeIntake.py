"""
TubeIntake - Bulk YouTube reference ingestion

Reads a pasted list or an exported channel/playlist file, classifies every
entry as a link, playlist ID or video ID, and resolves the deduplicated batch.

SPDX-License-Identifier: GPL-3.0-or-later
"""
from __future__ import annotations

import argparse
import sys

from PySide6.QtCore import QCoreApplication, QTimer

from tubeintake.core.config import APP_NAME, APP_VERSION, load_config
from tubeintake.core.models import ImportMode


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Bulk-import YouTube channels, playlists and videos.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Exported CSV or text list to import.")
    source.add_argument("--text", help="A single pasted reference or list.")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in ImportMode],
        default=None,
        help="How file sources are read (default from config).",
    )
    parser.add_argument("--export", default="", help="Write the analysed tokens to this .txt file.")
    parser.add_argument("--dry-run", action="store_true", help="Analyse only, do not resolve anything.")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setOrganizationName(APP_NAME)

    from tubeintake.controller import Completed, IngestionController, Ready, StructuralFailure
    from tubeintake.core.resolver import OEmbedResolutionService

    controller = IngestionController(OEmbedResolutionService(), config=load_config(), mode=args.mode)
    controller.logChanged.connect(print)
    exit_code = [0]

    def on_state(state: object) -> None:
        if isinstance(state, Completed):
            exit_code[0] = 2 if state.summary.failed else 0
            app.quit()
        elif isinstance(state, StructuralFailure):
            exit_code[0] = 1

    controller.stateChanged.connect(on_state)
    if args.file:
        state = controller.acquire_file(args.file)
    else:
        state = controller.acquire_text(args.text)
    if not isinstance(state, Ready):
        return exit_code[0]
    if args.export and state.can_submit:
        try:
            controller.export_ready_batch(args.export)
        except (OSError, ValueError) as exc:
            print(f"Export failed: {exc}")
            return 1
    if args.dry_run or not state.can_submit:
        return 0
    QTimer.singleShot(0, controller.confirm_submit)
    try:
        app.exec()
    finally:
        controller.stop_all()
        controller.wait_for_threads()
    return exit_code[0]


if __name__ == "__main__":
    raise SystemExit(main())
