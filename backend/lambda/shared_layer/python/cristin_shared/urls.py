"""cristin_shared.urls — Upstream and public URL construction.

All builders are deterministic: fixed base path, fixed parameter order,
values percent-encoded with ``%20`` for spaces.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple
from urllib.parse import quote, urlencode, urlsplit

from .errors import UrlConstructionError
from .models import SearchRequest

CRISTIN_QUERY_PARAMETER_LANGUAGE_KEY = "lang"
CRISTIN_QUERY_PARAMETER_PAGE_KEY = "page"
CRISTIN_QUERY_PARAMETER_PER_PAGE_KEY = "per_page"
CRISTIN_QUERY_PARAMETER_TITLE_KEY = "title"

PROJECTS_PATH = "projects"


def _checked_base(base: str) -> str:
    parts = urlsplit(base or "")
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise UrlConstructionError(f"not an absolute http(s) base URL: {base!r}")
    return base.rstrip("/")


def _encode(params: Sequence[Tuple[str, object]]) -> str:
    try:
        return urlencode([(key, str(value)) for key, value in params], quote_via=quote, safe="")
    except UnicodeEncodeError as exc:
        raise UrlConstructionError(f"cannot encode query parameters: {exc}") from exc


def build_query_url(base: str, title: str, language: str, page: int, results_per_page: int) -> str:
    """Cristin list endpoint: ``{base}/projects/?lang&page&per_page&title``."""
    query = _encode([
        (CRISTIN_QUERY_PARAMETER_LANGUAGE_KEY, language),
        (CRISTIN_QUERY_PARAMETER_PAGE_KEY, page),
        (CRISTIN_QUERY_PARAMETER_PER_PAGE_KEY, results_per_page),
        (CRISTIN_QUERY_PARAMETER_TITLE_KEY, title),
    ])
    return f"{_checked_base(base)}/{PROJECTS_PATH}/?{query}"


def _encode_id(project_id: object) -> str:
    try:
        return quote(str(project_id), safe="")
    except UnicodeEncodeError as exc:
        raise UrlConstructionError(f"cannot encode project id: {exc}") from exc


def build_get_url(base: str, project_id: object, language: str) -> str:
    """Cristin detail endpoint: ``{base}/projects/{id}?lang``."""
    query = _encode([(CRISTIN_QUERY_PARAMETER_LANGUAGE_KEY, language)])
    return f"{_checked_base(base)}/{PROJECTS_PATH}/{_encode_id(project_id)}?{query}"


def build_public_search_url(public_base: str, request: SearchRequest, page: Optional[int] = None) -> str:
    """Public URL of a search, optionally for another page of the same query."""
    return f"{_checked_base(public_base)}/?{public_search_string(request, page)}"


def public_search_string(request: SearchRequest, page: Optional[int] = None) -> str:
    return _encode([
        ("language", request.language),
        ("page", request.page if page is None else page),
        ("results", request.results_per_page),
        ("title", request.title),
    ])


def build_public_project_url(public_base: str, project_id: object) -> str:
    return f"{_checked_base(public_base)}/{_encode_id(project_id)}"
