"""Lazily hashing duplicate index: size buckets first, SHA256 only on collision.

Files are grouped by size as they arrive. A size seen once is held as a
single pending record and never read. The second file of that size forces
both to be hashed, and from then on every file of that size is hashed on
arrival and filed under its digest::

    size -> Pending(record)
    size -> Resolved({digest: [record, ...], ...})

Every file is hashed at most once, and a file whose size is unique in the
tree is never hashed at all.

Hashing can fail on the new file or on the previously deferred one. Either
way the new file is not indexed. A deferred file that cannot be hashed is
evicted, so an unreadable file can cost at most one same-size neighbour its
place in the index. Avoiding that would mean hashing every file eagerly.

The index is not thread-safe. Use one instance per scan, from one thread.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from dupescan.errors import FileHashError, FileOpenError
from dupescan.hasher import DEFAULT_CHUNK_SIZE, Digest, hash_file

import functools
import logging
import pathlib

logger = logging.getLogger(__name__)

Hasher = Callable[[pathlib.Path], Digest]


@dataclass(frozen=True)
class FileRecord:
    """A file and its size at the time it was added."""

    path: pathlib.Path
    size: int


@dataclass
class Pending:
    """Size bucket holding the only file of its size seen so far.

    ``digest`` is set when the file was hashed but its bucket could not be
    resolved because the other file failed.
    """

    record: FileRecord
    digest: Digest | None = None


@dataclass
class Resolved:
    """Size bucket whose members are all hashed and grouped by digest."""

    groups: dict[Digest, list[FileRecord]] = field(default_factory=dict)


SizeBucket = Pending | Resolved


@dataclass
class IndexStats:
    files_added: int = 0
    files_hashed: int = 0
    bytes_hashed: int = 0
    failures: int = 0


class DuplicateIndex:
    """Classifies files into same-content groups, hashing as little as possible."""

    def __init__(self, hasher: Hasher | None = None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if hasher is None:
            hasher = functools.partial(hash_file, chunk_size=chunk_size)
        self._hasher = hasher
        self._buckets: dict[int, SizeBucket] = {}
        self.stats = IndexStats()

    def __len__(self) -> int:
        count = 0
        for bucket in self._buckets.values():
            if isinstance(bucket, Pending):
                count += 1
            else:
                count += sum(len(records) for records in bucket.groups.values())
        return count

    def _hash(self, record: FileRecord) -> Digest:
        try:
            digest = self._hasher(record.path)
        except FileHashError:
            self.stats.failures += 1
            raise
        self.stats.files_hashed += 1
        self.stats.bytes_hashed += record.size
        return digest

    def add(self, path: pathlib.Path, size: int | None = None) -> FileRecord:
        """Add a file to the index, hashing it (and a deferred peer) only if needed.

        *size* is taken from ``stat()`` when not given.

        Raises FileHashError if a needed hash cannot be computed. The new file
        is then not indexed. The error's ``path`` names the file that failed,
        which may be the previously deferred file rather than *path*.
        """
        if size is None:
            try:
                size = path.stat().st_size
            except OSError as exc:
                self.stats.failures += 1
                raise FileOpenError(path, exc) from exc
        record = FileRecord(path=path, size=size)

        bucket = self._buckets.get(size)
        if bucket is None:
            # First file of this size: nothing to compare against yet
            self._buckets[size] = Pending(record)
            logger.debug(f"deferred {path} ({size} bytes)")
        elif isinstance(bucket, Pending):
            self._resolve(bucket, record)
        else:
            digest = self._hash(record)
            members = bucket.groups.setdefault(digest, [])
            members.append(record)
            logger.debug(f"  {digest.hex()[:12]}.. {path} ({len(members)} with this hash)")

        self.stats.files_added += 1
        return record

    def _resolve(self, bucket: Pending, record: FileRecord) -> None:
        """Hash the deferred file and the newcomer, then switch the bucket to Resolved."""
        old = bucket.record
        logger.debug(f"size {old.size} seen twice, hashing {old.path} and {record.path}")

        if bucket.digest is None:
            try:
                bucket.digest = self._hash(old)
            except FileHashError:
                del self._buckets[old.size]
                logger.debug(f"evicted deferred {old.path}")
                raise
        old_digest = bucket.digest

        new_digest = self._hash(record)

        resolved = Resolved()
        resolved.groups[old_digest] = [old]
        resolved.groups.setdefault(new_digest, []).append(record)
        self._buckets[old.size] = resolved
        logger.debug(f"  {old_digest.hex()[:12]}.. {old.path}")
        logger.debug(f"  {new_digest.hex()[:12]}.. {record.path}")

    def collect_duplicates(self) -> dict[Digest, list[FileRecord]]:
        """Return every group of two or more files sharing size and digest.

        The result is a snapshot; later calls to add() do not change it.
        """
        duplicates: dict[Digest, list[FileRecord]] = {}
        for bucket in self._buckets.values():
            if isinstance(bucket, Pending):
                continue
            for digest, records in bucket.groups.items():
                if len(records) >= 2:
                    duplicates[digest] = list(records)
        return duplicates
