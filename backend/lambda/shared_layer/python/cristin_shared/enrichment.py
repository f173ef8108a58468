"""cristin_shared.enrichment — Per-hit detail fetches for search results.

Each summary on a search page gets one detail fetch. Fetches run in a
small thread pool and are joined before the page is returned. A failed
fetch only costs its own hit the detail fields: the hit stays on the page
with ``detail=None``, every other hit is unaffected, and nothing is
raised to the caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from .cristin_client import CristinClient, get_project
from .models import EnrichedPage, EnrichedProject, ProjectDetail, ProjectSummary
from .urls import build_get_url

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 5


def _fetch_detail(
    client: CristinClient,
    summary: ProjectSummary,
    language: str,
    base_url: str,
) -> Optional[ProjectDetail]:
    project_id = summary.cristin_project_id
    try:
        url = build_get_url(base_url, project_id, language)
        return get_project(client, url, project_id)
    except Exception as exc:
        logger.warning("Enrichment failed for project %s: %s", project_id, exc)
        return None


def enrich(
    client: CristinClient,
    summaries: Sequence[ProjectSummary],
    language: str,
    base_url: str,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> EnrichedPage:
    if not summaries:
        return ()

    with ThreadPoolExecutor(max_workers=max(1, min(len(summaries), max_workers))) as pool:
        futures = [
            pool.submit(_fetch_detail, client, summary, language, base_url)
            for summary in summaries
        ]
        details = [future.result() for future in futures]

    enriched = sum(1 for detail in details if detail is not None)
    if enriched < len(summaries):
        logger.info("Enriched %d of %d projects", enriched, len(summaries))
    return tuple(
        EnrichedProject(summary=summary, detail=detail)
        for summary, detail in zip(summaries, details)
    )
