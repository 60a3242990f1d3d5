"""Outbound HTTP clients."""

from filestore.infrastructure.external.http.remote_fetcher import RemoteFetcher

__all__ = ["RemoteFetcher"]
