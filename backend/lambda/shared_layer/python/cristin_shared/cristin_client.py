"""cristin_shared.cristin_client — Cristin API access and strict decoding.

``CristinClient`` is the capability set the handlers depend on:
``fetch_list``, ``fetch_detail`` and ``decode``. ``HttpCristinClient`` is
the production implementation on top of ``urllib.request``; tests pass any
object with the same three methods.

Fetches make exactly one attempt. Every HTTP answer, including non-2xx, is
returned as an ``UpstreamResponse`` with its status untouched; only
transport failures (DNS, refused connection, timeout) raise
``UpstreamError``. Interpreting statuses is left to ``query_projects`` and
``get_project``.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .errors import (
    ERROR_MESSAGE_PROJECT_NOT_FOUND,
    DecodeError,
    NotFoundError,
    UpstreamError,
)
from .models import (
    CristinFundingSource,
    CristinKeyword,
    CristinOrganization,
    CristinPerson,
    CristinRole,
    CristinUnit,
    ListResult,
    ProjectDetail,
    ProjectSummary,
    UpstreamResponse,
)

logger = logging.getLogger(__name__)

TOTAL_COUNT_HEADER = "X-Total-Count"
DEFAULT_TIMEOUT_SECONDS = 10.0


class CristinClient(Protocol):
    def fetch_list(self, url: str) -> UpstreamResponse:
        ...

    def fetch_detail(self, url: str) -> UpstreamResponse:
        ...

    def decode(self, text: str, shape: type, many: bool = False) -> Any:
        ...


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _opt_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int)):
        return str(value)
    return None


def _text_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): v for k, v in value.items() if isinstance(v, str)}


def _objects(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _required_id(obj: Dict[str, Any]) -> str:
    raw = obj.get("cristin_project_id")
    if isinstance(raw, bool) or raw is None:
        raise DecodeError("missing cristin_project_id")
    if isinstance(raw, int):
        raw = str(raw)
    if not isinstance(raw, str) or not raw.isdigit() or not raw.isascii():
        raise DecodeError(f"cristin_project_id is not a numeric identifier: {raw!r}")
    return raw


def _unit(obj: Any, id_key: str, name_key: str) -> Optional[CristinUnit]:
    if not isinstance(obj, dict):
        return None
    return CristinUnit(
        id=_opt_str(obj.get(id_key)),
        name=_text_map(obj.get(name_key)),
        url=_opt_str(obj.get("url")),
    )


def _organization(obj: Any) -> Optional[CristinOrganization]:
    if not isinstance(obj, dict):
        return None
    institution = _unit(obj.get("institution"), "cristin_institution_id", "institution_name")
    unit = _unit(obj.get("unit"), "cristin_unit_id", "unit_name")
    if institution is None and unit is None:
        return None
    return CristinOrganization(institution=institution, unit=unit)


def _person(obj: Dict[str, Any]) -> CristinPerson:
    roles = tuple(
        CristinRole(role_code=_opt_str(role.get("role_code")), organization=_organization(role))
        for role in _objects(obj.get("roles"))
    )
    return CristinPerson(
        id=_opt_str(obj.get("cristin_person_id")),
        first_name=_opt_str(obj.get("first_name")),
        surname=_opt_str(obj.get("surname")),
        url=_opt_str(obj.get("url")),
        roles=roles,
    )


def _summary_fields(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "cristin_project_id": _required_id(obj),
        "title": _text_map(obj.get("title")),
        "main_language": _opt_str(obj.get("main_language")),
        "start_date": _opt_str(obj.get("start_date")),
        "end_date": _opt_str(obj.get("end_date")),
        "url": _opt_str(obj.get("url")),
    }


def _decode_summary(obj: Dict[str, Any]) -> ProjectSummary:
    return ProjectSummary(**_summary_fields(obj))


def _decode_detail(obj: Dict[str, Any]) -> ProjectDetail:
    return ProjectDetail(
        **_summary_fields(obj),
        status=_opt_str(obj.get("status")),
        coordinating_institution=_organization(obj.get("coordinating_institution")),
        funding=tuple(
            CristinFundingSource(
                code=_opt_str(source.get("funding_source_code")),
                names=_text_map(source.get("funding_source_name")),
                project_code=_opt_str(source.get("project_code")),
            )
            for source in _objects(obj.get("project_funding_sources"))
        ),
        participants=tuple(_person(p) for p in _objects(obj.get("participants"))),
        academic_summary=_text_map(obj.get("academic_summary")),
        popular_scientific_summary=_text_map(obj.get("popular_scientific_summary")),
        keywords=tuple(
            CristinKeyword(code=_opt_str(k.get("code")), name=_text_map(k.get("name")))
            for k in _objects(obj.get("keywords"))
        ),
    )


_DECODERS = {
    ProjectSummary: _decode_summary,
    ProjectDetail: _decode_detail,
}


def decode(text: str, shape: type, many: bool = False) -> Any:
    """Parse ``text`` into ``shape`` (or a tuple of them when ``many``).

    Raises DecodeError on malformed JSON, a top-level value of the wrong
    kind, or a missing/mistyped ``cristin_project_id``. Optional fields of
    an unexpected type are dropped.
    """
    decoder = _DECODERS.get(shape)
    if decoder is None:
        raise TypeError(f"no decoder for {shape!r}")
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc

    if many:
        if not isinstance(parsed, list):
            raise DecodeError(f"expected a JSON array, got {type(parsed).__name__}")
        items: List[Any] = []
        for item in parsed:
            if not isinstance(item, dict):
                raise DecodeError(f"expected JSON objects in array, got {type(item).__name__}")
            items.append(decoder(item))
        return tuple(items)

    if not isinstance(parsed, dict):
        raise DecodeError(f"expected a JSON object, got {type(parsed).__name__}")
    return decoder(parsed)


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


class HttpCristinClient:
    def __init__(self, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.timeout_seconds = timeout_seconds

    def fetch_list(self, url: str) -> UpstreamResponse:
        return self._get(url)

    def fetch_detail(self, url: str) -> UpstreamResponse:
        return self._get(url)

    def decode(self, text: str, shape: type, many: bool = False) -> Any:
        return decode(text, shape, many=many)

    def _get(self, url: str) -> UpstreamResponse:
        req = urllib.request.Request(url, method="GET", headers={"Accept": "application/json"})
        logger.info("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as resp:
                return UpstreamResponse(
                    status=resp.status,
                    body=resp.read().decode("utf-8", errors="replace"),
                    headers=dict(resp.headers.items()),
                )
        except urllib.error.HTTPError as exc:
            logger.warning("Cristin answered %s for %s", exc.code, url)
            return UpstreamResponse(
                status=exc.code,
                body=_error_body(exc),
                headers=dict((exc.headers or {}).items()),
            )
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            logger.error("Cristin request failed for %s: %s", url, exc)
            raise UpstreamError() from exc


def _error_body(exc: urllib.error.HTTPError) -> str:
    # Unreadable error bodies become empty.
    try:
        return exc.read().decode("utf-8", errors="replace")
    except (http.client.HTTPException, OSError) as read_exc:
        logger.warning("Could not read Cristin error body (status=%s): %s", exc.code, read_exc)
        return ""


# ---------------------------------------------------------------------------
# Status interpretation
# ---------------------------------------------------------------------------


def _total_count(response: UpstreamResponse) -> Optional[int]:
    raw = response.header(TOTAL_COUNT_HEADER)
    if raw is None:
        return None
    try:
        total = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring unparseable %s header: %r", TOTAL_COUNT_HEADER, raw)
        return None
    return total if total >= 0 else None


def query_projects(client: CristinClient, url: str) -> ListResult:
    """Fetch and decode one page of search results.

    Any non-2xx answer is an UpstreamError; a bad body is a DecodeError.
    """
    response = client.fetch_list(url)
    if not response.ok:
        raise UpstreamError(upstream_status=response.status)
    summaries: Tuple[ProjectSummary, ...] = client.decode(response.body, ProjectSummary, many=True)
    return ListResult(summaries=tuple(summaries), total=_total_count(response))


def get_project(client: CristinClient, url: str, project_id: object) -> ProjectDetail:
    """Fetch and decode one project.

    404 is a NotFoundError, any other non-2xx an UpstreamError.
    """
    response = client.fetch_detail(url)
    if response.status == 404:
        raise NotFoundError(ERROR_MESSAGE_PROJECT_NOT_FOUND % project_id)
    if not response.ok:
        raise UpstreamError(upstream_status=response.status)
    return client.decode(response.body, ProjectDetail)
