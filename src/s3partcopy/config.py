"""Configuration loading and Pydantic models for s3partcopy."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class EndpointConfig(BaseModel):
    """Storage provider endpoint and addressing configuration."""

    host: str = "s3.amazonaws.com"
    scheme: str = "https"
    port: int | None = None
    region: str = "us-east-1"
    path_style: bool = False


class CredentialsConfig(BaseModel):
    """Explicit credentials. Empty keys fall back to the AWS credential chain."""

    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""


class RetryConfig(BaseModel):
    """Retry policy applied by the dispatcher to idempotent requests."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=0.1, ge=0)
    max_delay: float = Field(default=2.0, ge=0)


class ClientConfig(BaseModel):
    """HTTP client behaviour."""

    timeout: float = 60.0
    validate_inputs: bool = False


class LoggingConfig(BaseModel):
    """Log output configuration."""

    level: str = "INFO"
    format: str = "text"


class MetricsConfig(BaseModel):
    """Prometheus metrics configuration."""

    enabled: bool = False


class S3PartCopyConfig(BaseModel):
    """Top-level s3partcopy configuration."""

    endpoint: EndpointConfig = Field(default_factory=EndpointConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)


def _parse_endpoint(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the endpoint section from YAML data into a dict for Pydantic.

    Accepts ``addressing_style: path`` as an alias for ``path_style: true``.
    """
    if data is None:
        return {}
    result: dict[str, Any] = {
        "host": data.get("host", "s3.amazonaws.com"),
        "scheme": data.get("scheme", "https"),
        "port": data.get("port"),
        "region": data.get("region", "us-east-1"),
        "path_style": data.get("path_style", False),
    }
    if data.get("addressing_style") == "path":
        result["path_style"] = True
    return result


def _parse_credentials(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the credentials section from YAML data."""
    if data is None:
        return {}
    return {
        "access_key_id": data.get("access_key_id", ""),
        "secret_access_key": data.get("secret_access_key", ""),
        "session_token": data.get("session_token", ""),
    }


def _parse_retry(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the retry section from YAML data."""
    if data is None:
        return {}
    return {
        "max_attempts": data.get("max_attempts", 3),
        "base_delay": data.get("base_delay", 0.1),
        "max_delay": data.get("max_delay", 2.0),
    }


def _parse_client(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the client section from YAML data."""
    if data is None:
        return {}
    return {
        "timeout": data.get("timeout", 60.0),
        "validate_inputs": data.get("validate_inputs", False),
    }


def _parse_logging(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the logging section from YAML data."""
    if data is None:
        return {}
    return {
        "level": data.get("level", "INFO"),
        "format": data.get("format", "text"),
    }


def _parse_metrics(data: dict[str, Any] | None) -> dict[str, Any]:
    """Parse the metrics section from YAML data."""
    if data is None:
        return {}
    return {"enabled": data.get("enabled", False)}


def load_config(path: Path) -> S3PartCopyConfig:
    """Load an S3PartCopyConfig from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A fully populated S3PartCopyConfig validated by Pydantic.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    return S3PartCopyConfig(
        endpoint=EndpointConfig(**_parse_endpoint(raw.get("endpoint"))),
        credentials=CredentialsConfig(**_parse_credentials(raw.get("credentials"))),
        retry=RetryConfig(**_parse_retry(raw.get("retry"))),
        client=ClientConfig(**_parse_client(raw.get("client"))),
        logging=LoggingConfig(**_parse_logging(raw.get("logging"))),
        metrics=MetricsConfig(**_parse_metrics(raw.get("metrics"))),
    )
