"""cristin_shared.models — Request and record types.

Flat, frozen records. Missing upstream data is ``None`` (or an empty tuple
for sequences) and is dropped again by the shaper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class SearchRequest:
    title: str
    language: str = "nb"
    page: int = 1
    results_per_page: int = 5


@dataclass(frozen=True)
class LookupRequest:
    id: int
    language: str = "nb"


@dataclass(frozen=True)
class UpstreamResponse:
    status: int
    body: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True)
class CristinUnit:
    id: Optional[str] = None
    name: Dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None


@dataclass(frozen=True)
class CristinOrganization:
    institution: Optional[CristinUnit] = None
    unit: Optional[CristinUnit] = None


@dataclass(frozen=True)
class CristinRole:
    role_code: Optional[str] = None
    organization: Optional[CristinOrganization] = None


@dataclass(frozen=True)
class CristinPerson:
    id: Optional[str] = None
    first_name: Optional[str] = None
    surname: Optional[str] = None
    url: Optional[str] = None
    roles: Tuple[CristinRole, ...] = ()


@dataclass(frozen=True)
class CristinFundingSource:
    code: Optional[str] = None
    names: Dict[str, str] = field(default_factory=dict)
    project_code: Optional[str] = None


@dataclass(frozen=True)
class CristinKeyword:
    code: Optional[str] = None
    name: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectSummary:
    cristin_project_id: str
    title: Dict[str, str] = field(default_factory=dict)
    main_language: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class ProjectDetail:
    cristin_project_id: str
    title: Dict[str, str] = field(default_factory=dict)
    main_language: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    url: Optional[str] = None
    status: Optional[str] = None
    coordinating_institution: Optional[CristinOrganization] = None
    funding: Tuple[CristinFundingSource, ...] = ()
    participants: Tuple[CristinPerson, ...] = ()
    academic_summary: Dict[str, str] = field(default_factory=dict)
    popular_scientific_summary: Dict[str, str] = field(default_factory=dict)
    keywords: Tuple[CristinKeyword, ...] = ()


@dataclass(frozen=True)
class ListResult:
    summaries: Tuple[ProjectSummary, ...]
    total: Optional[int] = None


@dataclass(frozen=True)
class EnrichedProject:
    summary: ProjectSummary
    detail: Optional[ProjectDetail] = None


EnrichedPage = Tuple[EnrichedProject, ...]
