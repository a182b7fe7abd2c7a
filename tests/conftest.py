"""Shared fixtures."""

from collections.abc import AsyncGenerator, Generator

import pytest
from aioresponses import aioresponses as aioresponses_cls

from hdata_conformance.config import ConformanceConfig
from hdata_conformance.context import ConformanceContext
from hdata_conformance.testing.factories import ConformanceConfigFactory

BASE_URL = "http://hdr.test/hdr"
INVALID_BASE_URL = "http://hdr.test/missing"


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Intercept every request made through aiohttp."""
    with aioresponses_cls() as m:
        yield m


@pytest.fixture
def config() -> ConformanceConfig:
    return ConformanceConfigFactory.build(
        base_url=BASE_URL, invalid_base_url=INVALID_BASE_URL
    )


@pytest.fixture
async def context(
    config: ConformanceConfig, aioresponses: aioresponses_cls
) -> AsyncGenerator[ConformanceContext, None]:
    """Create context with managed session."""
    async with ConformanceContext.from_config(config) as ctx:
        yield ctx
