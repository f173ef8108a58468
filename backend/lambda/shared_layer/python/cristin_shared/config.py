"""cristin_shared.config — Configuration for the project proxy Lambdas.

Read once per container and handed to the handlers at construction.

Environment variables:
    ALLOWED_ORIGIN               default: *
    CRISTIN_API_URL              default: https://api.cristin.no/v2
    CRISTIN_API_URL_PARAMETER    optional SSM parameter overriding CRISTIN_API_URL
    PUBLIC_API_URL               default: https://api.dev.nva.aws.unit.no/project
    UPSTREAM_TIMEOUT_SECONDS     default: 10
    ENRICHMENT_MAX_WORKERS       default: 5
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .aws_clients import _get_ssm
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_ORIGIN = "*"
DEFAULT_CRISTIN_API_URL = "https://api.cristin.no/v2"
DEFAULT_PUBLIC_API_URL = "https://api.dev.nva.aws.unit.no/project"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 10.0
DEFAULT_ENRICHMENT_MAX_WORKERS = 5


@dataclass(frozen=True)
class ProjectsConfig:
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    cristin_api_url: str = DEFAULT_CRISTIN_API_URL
    public_api_url: str = DEFAULT_PUBLIC_API_URL
    upstream_timeout_seconds: float = DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    enrichment_max_workers: int = DEFAULT_ENRICHMENT_MAX_WORKERS


def _read_ssm_parameter(name: str) -> str:
    try:
        resp = _get_ssm().get_parameter(Name=name, WithDecryption=True)
    except ClientError as exc:
        code = exc.response.get("Error", {}).get("Code", "ClientError")
        raise ConfigurationError(f"SSM parameter lookup failed ({name}): {code}") from exc
    except BotoCoreError as exc:
        raise ConfigurationError(
            f"SSM parameter lookup failed ({name}): {exc.__class__.__name__}"
        ) from exc
    value = str((resp.get("Parameter") or {}).get("Value") or "").strip()
    if not value:
        raise ConfigurationError(f"SSM parameter {name} is empty")
    return value


def _positive_number(env: Mapping[str, str], key: str, default, cast):
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {raw!r}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> ProjectsConfig:
    """Build the configuration from environment variables (and SSM if asked)."""
    if env is None:
        env = os.environ

    cristin_api_url = (env.get("CRISTIN_API_URL") or DEFAULT_CRISTIN_API_URL).strip()
    parameter_name = (env.get("CRISTIN_API_URL_PARAMETER") or "").strip()
    if parameter_name:
        cristin_api_url = _read_ssm_parameter(parameter_name)
        logger.info("Cristin API URL resolved from SSM parameter %s", parameter_name)

    return ProjectsConfig(
        allowed_origin=(env.get("ALLOWED_ORIGIN") or DEFAULT_ALLOWED_ORIGIN).strip(),
        cristin_api_url=cristin_api_url.rstrip("/"),
        public_api_url=(env.get("PUBLIC_API_URL") or DEFAULT_PUBLIC_API_URL).strip().rstrip("/"),
        upstream_timeout_seconds=_positive_number(
            env, "UPSTREAM_TIMEOUT_SECONDS", DEFAULT_UPSTREAM_TIMEOUT_SECONDS, float
        ),
        enrichment_max_workers=_positive_number(
            env, "ENRICHMENT_MAX_WORKERS", DEFAULT_ENRICHMENT_MAX_WORKERS, int
        ),
    )
