"""Human-readable and JSON rendering of scan results."""

from __future__ import annotations

from typing import TYPE_CHECKING

import json

if TYPE_CHECKING:
    from dupescan.finder import ScanReport


def format_size(size_bytes: int) -> str:
    """Format bytes as human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 ** 2:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 ** 3:
        return f"{size_bytes / (1024 ** 2):.1f} MB"
    else:
        return f"{size_bytes / (1024 ** 3):.1f} GB"


def render_text(report: ScanReport) -> list[str]:
    """Render each duplicate group as a header line followed by its paths."""
    lines: list[str] = []
    for group in report.groups:
        lines.append(
            f"Files with hash {group.digest.hex()} "
            f"({len(group.paths)} files, {format_size(group.file_size)} each):"
        )
        lines.extend(f"\t{p}" for p in group.paths)
    return lines


def render_json(report: ScanReport) -> str:
    return json.dumps(report.to_dict(), indent=2)
