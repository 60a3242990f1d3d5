"""Bounded remote download for upload_from_url.

Streams the body with httpx, aborting as soon as the running total passes
max_bytes. Redirects are not followed: a redirect target would bypass the
URL guard.
"""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import unquote, urlparse

import httpx

from filestore.application.dtos.storage import FetchedFile
from filestore.domain.exceptions import FileTooLargeException, RemoteFetchException

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_CONTENT_TYPE = "image/jpeg"


def infer_filename(url: str) -> str | None:
    """Last URL path segment, if it looks like a file name (contains a dot)."""
    segment = unquote(urlparse(url).path.rsplit("/", 1)[-1])
    return segment if "." in segment else None


def _content_type(resp: httpx.Response) -> str:
    raw = resp.headers.get("content-type", "")
    value = raw.split(";", 1)[0].strip().lower()
    return value or DEFAULT_CONTENT_TYPE


class RemoteFetcher:
    """Fetches remote files with a size ceiling and a wall-clock timeout.

    Args:
        max_bytes: Body size ceiling.
        user_agent: Sent on every request.
        chunk_size: Read size while streaming.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        max_bytes: int = DEFAULT_MAX_BYTES,
        user_agent: str = "filestore/1.0",
        chunk_size: int = 64 * 1024,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.max_bytes = max_bytes
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self._transport = transport

    async def fetch(self, url: str, timeout_ms: int) -> FetchedFile:
        """Download url.

        Raises:
            RemoteFetchException: Non-2xx status, timeout, or transport error.
            FileTooLargeException: Declared or streamed size above max_bytes.
        """
        try:
            async with asyncio.timeout(timeout_ms / 1000):
                return await self._fetch(url, timeout_ms / 1000)
        except (TimeoutError, httpx.TimeoutException) as e:
            raise RemoteFetchException(url, f"timed out after {timeout_ms}ms") from e
        except httpx.HTTPError as e:
            raise RemoteFetchException(url, str(e) or e.__class__.__name__) from e

    async def _fetch(self, url: str, timeout: float) -> FetchedFile:
        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as resp:
                if not resp.is_success:
                    raise RemoteFetchException(
                        url, f"HTTP {resp.status_code}", status_code=resp.status_code
                    )

                declared = resp.headers.get("content-length")
                if declared and declared.isdigit() and int(declared) > self.max_bytes:
                    logger.warning(
                        "Remote file %s declares %s bytes, over %s", url, declared, self.max_bytes
                    )
                    raise FileTooLargeException(self.max_bytes, int(declared))

                chunks: list[bytes] = []
                total = 0
                async for chunk in resp.aiter_bytes(self.chunk_size):
                    total += len(chunk)
                    if total > self.max_bytes:
                        logger.warning(
                            "Remote file %s passed %s bytes, aborting", url, self.max_bytes
                        )
                        raise FileTooLargeException(self.max_bytes, total)
                    chunks.append(chunk)

                return FetchedFile(
                    data=b"".join(chunks),
                    content_type=_content_type(resp),
                    filename=infer_filename(url),
                )
