"""HTTP execution context shared by all units of a run."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy
from yarl import URL

from hdata_conformance.config import ConformanceConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class HttpResponse:
    """Snapshot of an HTTP response, detached from the connection.

    Units retain these as artifacts so that dependents can inspect the
    response after the request has completed.
    """

    method: str
    url: str
    status: int
    headers: CIMultiDictProxy[str] = field(repr=False)
    body: bytes = field(default=b"", repr=False)

    @property
    def content_type(self) -> str | None:
        """Media type of the body without parameters, None when absent."""
        value = self.headers.get("Content-Type")
        if not value:
            return None
        return value.split(";", 1)[0].strip().lower()

    def header(self, name: str) -> str | None:
        """Return the first value of a header, case-insensitive."""
        return self.headers.get(name)


@dataclass(frozen=True, kw_only=True)
class ConformanceContext:
    """Configuration and HTTP session handed to every unit's execute()."""

    config: ConformanceConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: ConformanceConfig
    ) -> AsyncGenerator["ConformanceContext", None]:
        """Create context with managed session lifecycle."""
        headers: dict[str, str] = {}
        if config.token is not None:
            headers["Authorization"] = f"Bearer {config.token.get_secret_value()}"
        async with aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.timeout),
        ) as session:
            yield cls(config=config, session=session)

    def base_url(self, path: str = "") -> URL:
        """Return the baseURL under test, optionally joined with a path."""
        return join_url(URL(self.config.base_url), path)

    def invalid_base_url(self, path: str = "") -> URL | None:
        """Return the configured non-existent baseURL, None when not set."""
        if self.config.invalid_base_url is None:
            return None
        return join_url(URL(self.config.invalid_base_url), path)

    async def request(
        self,
        method: str,
        url: URL | str,
        *,
        headers: Mapping[str, str] | None = None,
        skip_auto_headers: Sequence[str] = (),
    ) -> HttpResponse:
        """Perform a request and return a detached snapshot of the response."""
        log.debug("%s %s headers=%s", method, url, dict(headers or {}))
        async with self.session.request(
            method,
            url,
            headers=headers,
            skip_auto_headers=skip_auto_headers,
        ) as response:
            body = await response.read()
            snapshot = HttpResponse(
                method=method,
                url=str(response.url),
                status=response.status,
                headers=CIMultiDictProxy(CIMultiDict(response.headers)),
                body=body,
            )
        log.debug("%s %s -> %d (%d bytes)", method, url, snapshot.status, len(body))
        return snapshot


def join_url(base: URL, path: str) -> URL:
    """Append a relative path to a base URL, with or without a trailing slash."""
    if not path:
        return base
    return base / path
