"""SHA256 content hashing and the Digest value type."""

from __future__ import annotations

from dataclasses import dataclass

from dupescan.errors import FileOpenError, FileReadError

import hashlib
import pathlib

DIGEST_SIZE = hashlib.sha256().digest_size
DEFAULT_CHUNK_SIZE = 65536


@dataclass(frozen=True)
class Digest:
    """Fixed-length SHA256 digest of a file's full content.

    Compared and hashed by value, so it can key a dict directly.
    """

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != DIGEST_SIZE:
            raise ValueError(f"digest must be {DIGEST_SIZE} bytes, got {len(self.value)}")

    @classmethod
    def fromhex(cls, text: str) -> Digest:
        return cls(bytes.fromhex(text))

    def hex(self) -> str:
        return self.value.hex()

    def __str__(self) -> str:
        return self.hex()


def hash_file(path: pathlib.Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Digest:
    """Compute the SHA256 digest of a file.

    Raises FileOpenError if the file cannot be opened and FileReadError if
    a read fails partway. The handle is closed either way.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    sha = hashlib.sha256()
    try:
        f = path.open("rb")
    except OSError as exc:
        raise FileOpenError(path, exc) from exc

    with f:
        try:
            while chunk := f.read(chunk_size):
                sha.update(chunk)
        except OSError as exc:
            raise FileReadError(path, exc) from exc
    return Digest(sha.digest())
