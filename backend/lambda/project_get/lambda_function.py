"""project_get/lambda_function.py

Lambda API returning one Cristin research project, shaped as an outbound
project record.

Routes (via API Gateway proxy):
    GET     /project/{id}?language=..
    OPTIONS /project/{id}              — CORS preflight

Environment variables: see project_query/lambda_function.py.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from cristin_shared.config import load_config
from cristin_shared.handlers import GetProjectHandler
from cristin_shared.http_utils import _path_method

logger = logging.getLogger()
logger.setLevel(logging.INFO)

_handler: Optional[GetProjectHandler] = None


def _get_handler() -> GetProjectHandler:
    global _handler
    if _handler is None:
        _handler = GetProjectHandler(load_config())
    return _handler


def lambda_handler(event: Dict, context: Any) -> Dict:
    event = event or {}
    method, raw_path = _path_method(event) if isinstance(event, dict) else ("", "")

    logger.info("project_get: %s %s", method, raw_path)
    return _get_handler()(event, context)
