"""project_query/lambda_function.py

Lambda API searching Cristin research projects by title. Every hit is
enriched with a detail fetch; hits whose detail fetch fails are returned
with summary data only.

Routes (via API Gateway proxy):
    GET     /project/?title=..&language=..&page=..&results=..
    OPTIONS /project/                  — CORS preflight

Environment variables:
    ALLOWED_ORIGIN               default: *
    CRISTIN_API_URL              default: https://api.cristin.no/v2
    CRISTIN_API_URL_PARAMETER    optional SSM parameter name
    PUBLIC_API_URL               default: https://api.dev.nva.aws.unit.no/project
    UPSTREAM_TIMEOUT_SECONDS     default: 10
    ENRICHMENT_MAX_WORKERS       default: 5
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from cristin_shared.config import load_config
from cristin_shared.handlers import QueryProjectsHandler
from cristin_shared.http_utils import _path_method

logger = logging.getLogger()
logger.setLevel(logging.INFO)

_handler: Optional[QueryProjectsHandler] = None


def _get_handler() -> QueryProjectsHandler:
    global _handler
    if _handler is None:
        _handler = QueryProjectsHandler(load_config())
    return _handler


def lambda_handler(event: Dict, context: Any) -> Dict:
    event = event or {}
    method, raw_path = _path_method(event) if isinstance(event, dict) else ("", "")

    logger.info("project_query: %s %s", method, raw_path)
    return _get_handler()(event, context)
