"""Configuration for a conformance run."""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator
from yarl import URL

from hdata_conformance.errors import ConfigError


class ConformanceConfig(BaseModel):
    """Configuration for a conformance run against a single HDR.

    - base_url: baseURL of the HDR under test
    - invalid_base_url: a baseURL known not to exist, used by the "not found"
      clauses; those units skip themselves when it is missing
    - token: optional bearer token sent with every request
    - units: ids of the units to run, empty means every registered unit
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    invalid_base_url: str | None = None
    token: SecretStr | None = None
    timeout: float = 30
    units: Sequence[str] = ()

    @field_validator("base_url", "invalid_base_url")
    @classmethod
    def _check_http_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        url = URL(value)
        if url.scheme not in {"http", "https"} or not url.host:
            raise ValueError(f"Expected an absolute http(s) URL but was: {value}")
        return value


async def load_config(path: Path) -> ConformanceConfig:
    """Load and validate a YAML configuration file.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or does not
            match the configuration schema

    """
    try:
        content = await asyncio.to_thread(path.read_text)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping")

    try:
        return ConformanceConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
