"""cristin_shared.handlers — Request handlers for the project proxy.

Both handlers run the same pipeline and share the error mapping:

    validate       -> 400 on ValidationError
    build url      -> 500 on UrlConstructionError
    fetch          -> 404 on NotFoundError (lookup only),
                      502 on UpstreamError / DecodeError
    enrich         -> search only, never fails the request
    shape, respond -> 200, or 500 on anything unexpected

The search path tolerates failed detail fetches per hit; the lookup path
fails the request when its single detail fetch fails.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from .config import ProjectsConfig
from .cristin_client import CristinClient, HttpCristinClient, get_project, query_projects
from .enrichment import enrich
from .errors import ERROR_MESSAGE_SERVER_ERROR, CristinProxyError, InternalError, UpstreamError
from .http_utils import _path_method, _preflight, _problem, _response
from .shaping import SearchMeta, shape_detail_response, shape_search_response
from .urls import build_get_url, build_query_url
from .validation import validate_lookup, validate_search

logger = logging.getLogger(__name__)


class _ProjectHandler:
    operation = "project"

    def __init__(self, config: ProjectsConfig, client: Optional[CristinClient] = None):
        self.config = config
        self.client = client if client is not None else HttpCristinClient(config.upstream_timeout_seconds)

    def __call__(self, event: Optional[Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
        event = event or {}
        origin = self.config.allowed_origin
        method, path = "", ""

        try:
            method, path = _path_method(event)
            if method == "OPTIONS":
                return _preflight(origin)
            return _response(200, self._process(event), origin)
        except CristinProxyError as exc:
            if isinstance(exc, InternalError):
                logger.error("%s: internal failure: %s", self.operation, exc)
            elif isinstance(exc, UpstreamError):
                logger.warning("%s: upstream failure (status=%s): %s", self.operation, exc.upstream_status, exc)
            else:
                logger.info("%s: %s %s rejected: %s", self.operation, method, path, exc.message)
            return _problem(exc.status_code, exc.message, origin, exc.code)
        except Exception:
            logger.exception("%s: unhandled exception", self.operation)
            return _problem(500, ERROR_MESSAGE_SERVER_ERROR, origin)

    def _process(self, event: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class QueryProjectsHandler(_ProjectHandler):
    """GET /project/?title=..&language=..&page=..&results=.."""

    operation = "query_projects"

    def _process(self, event: Dict[str, Any]) -> Dict[str, Any]:
        started = time.monotonic()
        request = validate_search(event.get("queryStringParameters"))

        url = build_query_url(
            self.config.cristin_api_url,
            request.title,
            request.language,
            request.page,
            request.results_per_page,
        )
        result = query_projects(self.client, url)
        page = enrich(
            self.client,
            result.summaries,
            request.language,
            self.config.cristin_api_url,
            self.config.enrichment_max_workers,
        )

        meta = SearchMeta(
            request=request,
            upstream_url=url,
            public_base=self.config.public_api_url,
            total=result.total,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
        return shape_search_response(page, meta)


class GetProjectHandler(_ProjectHandler):
    """GET /project/{id}?language=.."""

    operation = "get_project"

    def _process(self, event: Dict[str, Any]) -> Dict[str, Any]:
        request = validate_lookup(event.get("pathParameters"), event.get("queryStringParameters"))
        url = build_get_url(self.config.cristin_api_url, request.id, request.language)
        detail = get_project(self.client, url, request.id)
        return shape_detail_response(detail, self.config.public_api_url, request.language)
