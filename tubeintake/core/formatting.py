from __future__ import annotations


def format_batch_stats_line(
    *,
    references: int,
    playlists: int,
    videos: int,
    misses: int,
    truncated: int,
) -> str:
    line = (
        f"References: {int(references)}  |  Playlists: {int(playlists)}"
        f"  |  Videos: {int(videos)}  |  Unrecognized: {int(misses)}"
    )
    if truncated > 0:
        line += f"  |  Over limit: {int(truncated)}"
    return line


def format_summary_line(*, total: int, resolved: int, failed: int, skipped: int) -> str:
    return (
        f"Imported: {int(resolved)}/{int(total)}  |  Failed: {int(failed)}"
        f"  |  Skipped: {int(skipped)}"
    )
