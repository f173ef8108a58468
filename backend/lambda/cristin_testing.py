"""Test doubles and Cristin payload builders for the project proxy tests.

``FakeCristinClient`` satisfies the CristinClient protocol with canned
upstream answers keyed by project id; an Exception in place of an answer
is raised from the fetch.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlsplit

from cristin_shared.cristin_client import decode
from cristin_shared.models import UpstreamResponse

CRISTIN_BASE = "https://api.cristin.no/v2"
PUBLIC_BASE = "https://api.dev.nva.aws.unit.no/project"

Outcome = Union[UpstreamResponse, Exception]


def cristin_summary(project_id: str, title: str = "Reindeer husbandry") -> Dict[str, Any]:
    return {
        "cristin_project_id": project_id,
        "title": {"en": title, "nb": f"{title} (nb)"},
        "main_language": "en",
        "start_date": "2016-01-01T00:00:00.000Z",
        "end_date": "2019-12-31T00:00:00.000Z",
        "url": f"{CRISTIN_BASE}/projects/{project_id}",
    }


def cristin_detail(project_id: str, title: str = "Reindeer husbandry") -> Dict[str, Any]:
    detail = cristin_summary(project_id, title)
    detail.update({
        "status": "ACTIVE",
        "coordinating_institution": {
            "institution": {
                "cristin_institution_id": "194",
                "institution_name": {"en": "Norwegian University of Science and Technology"},
                "url": f"{CRISTIN_BASE}/institutions/194",
            },
            "unit": {
                "cristin_unit_id": "194.63.10.0",
                "unit_name": {"en": "Department of Biology"},
                "url": f"{CRISTIN_BASE}/units/194.63.10.0",
            },
        },
        "project_funding_sources": [
            {
                "funding_source_code": "NFR",
                "funding_source_name": {"en": "Research Council of Norway"},
                "project_code": "411998",
            }
        ],
        "participants": [
            {
                "cristin_person_id": "12345",
                "first_name": "Kari",
                "surname": "Nordmann",
                "url": f"{CRISTIN_BASE}/persons/12345",
                "roles": [
                    {
                        "role_code": "PRO_MANAGER",
                        "institution": {
                            "cristin_institution_id": "194",
                            "institution_name": {"en": "Norwegian University of Science and Technology"},
                            "url": f"{CRISTIN_BASE}/institutions/194",
                        },
                    }
                ],
            },
            {
                "cristin_person_id": "67890",
                "first_name": "Ola",
                "surname": "Nordmann",
                "url": f"{CRISTIN_BASE}/persons/67890",
                "roles": [{"role_code": "PRO_PARTICIPANT"}],
            },
        ],
        "academic_summary": {"en": "Grazing patterns of semi-domestic reindeer."},
        "keywords": [{"code": "1234", "name": {"en": "Reindeer"}}],
    })
    return detail


def ok(payload: Any, headers: Optional[Dict[str, str]] = None) -> UpstreamResponse:
    return UpstreamResponse(status=200, body=json.dumps(payload), headers=headers or {})


def status(code: int, body: str = "") -> UpstreamResponse:
    return UpstreamResponse(status=code, body=body)


class FakeCristinClient:
    def __init__(self, list_outcome: Optional[Outcome] = None, details: Optional[Dict[str, Outcome]] = None):
        self.list_outcome = list_outcome if list_outcome is not None else ok([])
        self.details = details or {}
        self.list_calls: List[str] = []
        self.detail_calls: List[str] = []

    def fetch_list(self, url: str) -> UpstreamResponse:
        self.list_calls.append(url)
        if isinstance(self.list_outcome, Exception):
            raise self.list_outcome
        return self.list_outcome

    def fetch_detail(self, url: str) -> UpstreamResponse:
        self.detail_calls.append(url)
        project_id = urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1]
        outcome = self.details.get(project_id, status(404, '{"status": 404}'))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def decode(self, text: str, shape: type, many: bool = False) -> Any:
        return decode(text, shape, many=many)


