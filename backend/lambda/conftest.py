from __future__ import annotations

import pytest

from cristin_shared.config import ProjectsConfig
from cristin_testing import CRISTIN_BASE, PUBLIC_BASE


@pytest.fixture
def config() -> ProjectsConfig:
    return ProjectsConfig(
        allowed_origin="*",
        cristin_api_url=CRISTIN_BASE,
        public_api_url=PUBLIC_BASE,
        upstream_timeout_seconds=1.0,
        enrichment_max_workers=5,
    )
