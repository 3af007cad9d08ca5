"""Walk a directory tree into a DuplicateIndex and collect the result."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from tqdm import tqdm
from dupescan.errors import FileHashError
from dupescan.hasher import DEFAULT_CHUNK_SIZE, Digest
from dupescan.index import DuplicateIndex, IndexStats
from dupescan.report import format_size
from dupescan.scanner import validate_root, walk

import logging
import pathlib
import time

logger = logging.getLogger(__name__)


@dataclass
class DuplicateGroup:
    """A group of files with identical content."""

    digest: Digest
    file_size: int
    paths: list[pathlib.Path]

    @property
    def wasted_bytes(self) -> int:
        return self.file_size * (len(self.paths) - 1)


@dataclass
class ScanFailure:
    """A file that was left out of the index."""

    path: pathlib.Path
    reason: str


@dataclass
class ScanReport:
    """Result of scanning a directory tree for duplicates."""

    root: pathlib.Path
    groups: list[DuplicateGroup] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    files_scanned: int = 0
    stats: IndexStats = field(default_factory=IndexStats)
    elapsed: float = 0.0

    @property
    def wasted_bytes(self) -> int:
        return sum(g.wasted_bytes for g in self.groups)

    def to_dict(self) -> dict:
        return {
            "root": str(self.root),
            "files_scanned": self.files_scanned,
            "files_hashed": self.stats.files_hashed,
            "bytes_hashed": self.stats.bytes_hashed,
            "wasted_bytes": self.wasted_bytes,
            "groups": [
                {
                    "digest": g.digest.hex(),
                    "file_size": g.file_size,
                    "paths": [str(p) for p in g.paths],
                }
                for g in self.groups
            ],
            "failures": [{"path": str(f.path), "reason": f.reason} for f in self.failures],
        }


def _build_groups(duplicates: dict[Digest, list]) -> list[DuplicateGroup]:
    """Turn index output into groups, largest files first, then by digest."""
    groups = [
        DuplicateGroup(
            digest=digest,
            file_size=records[0].size,
            paths=sorted(r.path for r in records),
        )
        for digest, records in duplicates.items()
    ]
    groups.sort(key=lambda g: (-g.file_size, g.digest.hex()))
    return groups


def find_duplicates(
    root: pathlib.Path,
    *,
    exclude: Iterable[str] = (),
    exclude_dir: Iterable[str] = (),
    skip_hidden: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress: bool = False,
    index: DuplicateIndex | None = None,
) -> ScanReport:
    """Find duplicate files under *root*.

    Raises ScanError if *root* is missing or not a directory. Files that
    cannot be hashed are logged, recorded in ``ScanReport.failures`` and
    skipped; the scan always continues.
    """
    validate_root(root)
    if index is None:
        index = DuplicateIndex(chunk_size=chunk_size)

    report = ScanReport(root=root, stats=index.stats)
    started = time.monotonic()

    files = walk(root, exclude=exclude, exclude_dir=exclude_dir, skip_hidden=skip_hidden)
    with tqdm(files, desc="Scanning", unit="file", disable=not progress) as bar:
        for path in bar:
            report.files_scanned += 1
            try:
                index.add(path)
            except FileHashError as exc:
                logger.warning(f"Skipping {exc.path}: {exc.reason}")
                report.failures.append(ScanFailure(path=exc.path, reason=str(exc.reason)))
                if exc.path != path:
                    logger.warning(f"Skipping {path}: same-size file {exc.path} could not be hashed")
                    report.failures.append(
                        ScanFailure(path=path, reason=f"same-size file {exc.path} could not be hashed")
                    )
                continue
            bar.set_postfix(hashed=format_size(index.stats.bytes_hashed), refresh=False)

    report.groups = _build_groups(index.collect_duplicates())
    report.elapsed = time.monotonic() - started

    stats = index.stats
    rate = stats.bytes_hashed / report.elapsed if report.elapsed > 0 else 0
    logger.debug(
        f"{report.files_scanned} files scanned, {stats.files_hashed} hashed "
        f"({format_size(stats.bytes_hashed)} in {report.elapsed:.1f}s, {format_size(int(rate))}/s), "
        f"{len(report.groups)} duplicate group(s)"
    )
    return report
