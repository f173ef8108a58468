"""cristin_shared.aws_clients — Lazy-singleton AWS service clients.

The SSM client is created on first call and cached for subsequent
invocations, so cold starts that never read a parameter never pay the
boto3 client construction cost.
"""

from __future__ import annotations

import os
from typing import Optional

import boto3
from botocore.config import Config

SSM_REGION: str = os.environ.get("SSM_REGION", os.environ.get("AWS_REGION", "eu-west-1"))

_ssm = None


def _get_ssm(region: Optional[str] = None):
    """Get (or create) the SSM client singleton."""
    global _ssm
    if _ssm is None:
        _ssm = boto3.client(
            "ssm",
            region_name=region or SSM_REGION,
            config=Config(retries={"max_attempts": 3, "mode": "standard"}),
        )
    return _ssm
