from __future__ import annotations

import base64
import hashlib
from typing import Iterator

U64_MAX = (1 << 64) - 1


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def b64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64_decode(value: str) -> bytes:
    return base64.b64decode(value)


def iter_chunks(data: bytes, size: int) -> Iterator[tuple[int, bytes]]:
    """Yield ``(offset, chunk)`` pairs covering ``data``.

    Empty input yields a single empty chunk at offset 0 so that callers
    still issue one write.
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive: {size}")
    if not data:
        yield 0, b""
        return
    for start in range(0, len(data), size):
        yield start, data[start:start + size]
