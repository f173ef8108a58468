"""cristin_shared.shaping — Cristin records to outbound project JSON.

Absent source fields are left out of the output instead of being written
as ``null``. Hit order is the order Cristin returned, and the pagination
block always echoes the request, however many hits were enriched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .models import (
    CristinOrganization,
    CristinPerson,
    EnrichedPage,
    ProjectDetail,
    ProjectSummary,
    SearchRequest,
)
from .urls import build_public_project_url, build_public_search_url, public_search_string

PROJECT_CONTEXT = "https://bibsysdev.github.io/src/project-context.json"
SEARCH_CONTEXT = "https://bibsysdev.github.io/src/search/example-search-context.json"

PROJECT_TYPE = "ResearchProject"
CRISTIN_IDENTIFIER_TYPE = "CristinIdentifier"
ORGANIZATION_TYPE = "Organization"
PERSON_TYPE = "Person"
PROJECT_MANAGER_TYPE = "ProjectManager"
PROJECT_PARTICIPANT_TYPE = "ProjectParticipant"
UNCONFIRMED_FUNDING_TYPE = "UnconfirmedFunding"
CRISTIN_PROJECT_MANAGER_ROLE = "PRO_MANAGER"

LEXVO_PREFIX = "http://lexvo.org/id/iso639-3/"
ISO639_3 = {
    "nb": "nob",
    "nn": "nno",
    "no": "nor",
    "en": "eng",
    "se": "sme",
    "sv": "swe",
    "da": "dan",
    "de": "deu",
    "fr": "fra",
    "es": "spa",
    "fi": "fin",
}


@dataclass(frozen=True)
class SearchMeta:
    request: SearchRequest
    upstream_url: str
    public_base: str
    total: Optional[int] = None
    processing_time_ms: int = 0


def _put(out: Dict[str, Any], key: str, value: Any) -> None:
    if value is None or value == {} or value == [] or value == ():
        return
    out[key] = value


def language_uri(code: Optional[str]) -> Optional[str]:
    iso = ISO639_3.get((code or "").lower())
    return f"{LEXVO_PREFIX}{iso}" if iso else None


def _main_title_language(titles: Mapping[str, str], main_language: Optional[str], language: str) -> Optional[str]:
    for candidate in (main_language, language):
        if candidate and candidate in titles:
            return candidate
    return next(iter(titles), None)


def _organization(org: Optional[CristinOrganization]) -> Optional[Dict[str, Any]]:
    if org is None:
        return None
    source = org.institution or org.unit
    if source is None:
        return None
    out: Dict[str, Any] = {}
    _put(out, "id", source.url)
    out["type"] = ORGANIZATION_TYPE
    _put(out, "name", dict(source.name))
    return out


def _contributor(person: CristinPerson) -> Dict[str, Any]:
    codes = {role.role_code for role in person.roles}
    identity: Dict[str, Any] = {}
    _put(identity, "id", person.url)
    identity["type"] = PERSON_TYPE
    _put(identity, "firstName", person.first_name)
    _put(identity, "lastName", person.surname)

    out: Dict[str, Any] = {
        "type": PROJECT_MANAGER_TYPE if CRISTIN_PROJECT_MANAGER_ROLE in codes else PROJECT_PARTICIPANT_TYPE,
        "identity": identity,
    }
    affiliation = next(
        (_organization(role.organization) for role in person.roles if role.organization),
        None,
    )
    _put(out, "affiliation", affiliation)
    return out


def _detail_fields(out: Dict[str, Any], detail: ProjectDetail) -> None:
    _put(out, "status", detail.status)
    _put(out, "coordinatingInstitution", _organization(detail.coordinating_institution))
    _put(out, "contributors", [_contributor(p) for p in detail.participants])
    funding: List[Dict[str, Any]] = []
    for source in detail.funding:
        item: Dict[str, Any] = {"type": UNCONFIRMED_FUNDING_TYPE}
        origin: Dict[str, Any] = {}
        _put(origin, "code", source.code)
        _put(origin, "names", dict(source.names))
        _put(item, "source", origin)
        _put(item, "code", source.project_code)
        funding.append(item)
    _put(out, "funding", funding)
    _put(out, "academicSummary", dict(detail.academic_summary))
    _put(out, "popularScientificSummary", dict(detail.popular_scientific_summary))
    keywords: List[Dict[str, Any]] = []
    for keyword in detail.keywords:
        item = {}
        _put(item, "type", keyword.code)
        _put(item, "label", dict(keyword.name))
        if item:
            keywords.append(item)
    _put(out, "keywords", keywords)


def shape_project(
    summary: Optional[ProjectSummary],
    detail: Optional[ProjectDetail],
    public_base: str,
    language: str,
    with_context: bool = False,
) -> Dict[str, Any]:
    """Shape one project; ``detail`` wins over ``summary`` where both exist."""
    source: Union[ProjectDetail, ProjectSummary, None] = detail or summary
    if source is None:
        raise ValueError("shape_project needs a summary or a detail record")

    out: Dict[str, Any] = {}
    if with_context:
        out["@context"] = PROJECT_CONTEXT
    out["id"] = build_public_project_url(public_base, source.cristin_project_id)
    out["type"] = PROJECT_TYPE
    out["identifiers"] = [{"type": CRISTIN_IDENTIFIER_TYPE, "value": source.cristin_project_id}]

    titles = dict(source.title)
    main_language = source.main_language
    if not titles and summary is not None:
        titles = dict(summary.title)
        main_language = main_language or summary.main_language
    main = _main_title_language(titles, main_language, language)
    if main is not None:
        out["title"] = titles[main]
        _put(out, "alternativeTitles", [{lang: text} for lang, text in titles.items() if lang != main])
    _put(out, "language", language_uri(source.main_language))
    _put(out, "startDate", source.start_date)
    _put(out, "endDate", source.end_date)

    if detail is not None:
        _detail_fields(out, detail)
    return out


def shape_detail_response(detail: ProjectDetail, public_base: str, language: str) -> Dict[str, Any]:
    return shape_project(None, detail, public_base, language, with_context=True)


def shape_search_response(page: EnrichedPage, meta: SearchMeta) -> Dict[str, Any]:
    request = meta.request
    hits = [
        shape_project(item.summary, item.detail, meta.public_base, request.language)
        for item in page
    ]

    if meta.total is not None:
        has_next = request.page * request.results_per_page < meta.total
    else:
        has_next = len(page) >= request.results_per_page

    out: Dict[str, Any] = {
        "@context": SEARCH_CONTEXT,
        "id": build_public_search_url(meta.public_base, request),
    }
    _put(out, "size", meta.total)
    out["searchString"] = public_search_string(request)
    out["page"] = request.page
    out["perPage"] = request.results_per_page
    out["firstRecord"] = (request.page - 1) * request.results_per_page + 1
    out["processingTime"] = meta.processing_time_ms
    out["upstreamUrl"] = meta.upstream_url
    if has_next:
        out["nextResults"] = build_public_search_url(meta.public_base, request, request.page + 1)
    if request.page > 1:
        out["previousResults"] = build_public_search_url(meta.public_base, request, request.page - 1)
    out["hits"] = hits
    return out
