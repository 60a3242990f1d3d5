"""Content fingerprinting (SHA-256) for deduplication.

Streams may be async readers (``await stream.read(n)``, e.g. Starlette
UploadFile) or blocking binary files; blocking reads run in a worker
thread so hashing never stalls the event loop.
"""

from __future__ import annotations

import asyncio
import hashlib
import inspect
from typing import Any, BinaryIO

DEFAULT_CHUNK_SIZE = 65536


def hash_bytes(data: bytes) -> str:
    """Return the SHA-256 hex digest of data."""
    return hashlib.sha256(data).hexdigest()


def _is_async_reader(stream: Any) -> bool:
    return inspect.iscoroutinefunction(getattr(stream, "read", None))


def _tell_sync(file_data: BinaryIO) -> int | None:
    if not getattr(file_data, "seekable", lambda: False)():
        return None
    return file_data.tell()


async def stream_position(stream: Any) -> int | None:
    """Current offset of stream, or None when it cannot be sought back to.

    Async readers count as seekable when they expose ``seek`` and a ``tell``
    of their own or on the wrapped ``file`` (Starlette UploadFile).
    """
    if not _is_async_reader(stream):
        return await asyncio.to_thread(_tell_sync, stream)

    if getattr(stream, "seek", None) is None:
        return None
    tell = getattr(stream, "tell", None) or getattr(
        getattr(stream, "file", None), "tell", None
    )
    if tell is None:
        return None
    position = tell()
    if inspect.isawaitable(position):
        position = await position
    return position


async def seek_to(stream: Any, position: int) -> None:
    """Move stream to position, awaiting async seek when needed."""
    if _is_async_reader(stream):
        await stream.seek(position)
        return
    await asyncio.to_thread(stream.seek, position)


def _hash_sync(file_data: BinaryIO, chunk_size: int) -> str:
    """Blocking: one pass over file_data (run in executor)."""
    sha256 = hashlib.sha256()
    while chunk := file_data.read(chunk_size):
        sha256.update(chunk)
    return sha256.hexdigest()


async def hash_stream(stream: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Return the SHA-256 hex digest of everything left in stream.

    Only one chunk is held at a time. A seekable stream is put back where
    it started so the caller can read the same bytes again; anything else
    is consumed.
    """
    start = await stream_position(stream)

    if _is_async_reader(stream):
        sha256 = hashlib.sha256()
        while chunk := await stream.read(chunk_size):
            sha256.update(chunk)
        digest = sha256.hexdigest()
    else:
        digest = await asyncio.to_thread(_hash_sync, stream, chunk_size)

    if start is not None:
        await seek_to(stream, start)
    return digest


def _read_sync(file_data: BinaryIO, chunk_size: int) -> bytes:
    chunks: list[bytes] = []
    while chunk := file_data.read(chunk_size):
        chunks.append(chunk)
    return b"".join(chunks)


async def read_stream(stream: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Return everything left in stream, from its current position."""
    if not _is_async_reader(stream):
        return await asyncio.to_thread(_read_sync, stream, chunk_size)

    chunks: list[bytes] = []
    while chunk := await stream.read(chunk_size):
        chunks.append(chunk)
    return b"".join(chunks)
