"""cristin_shared — Shared code for the Cristin project proxy Lambdas.

Provides:
    - Environment/SSM configuration
    - Query parameter validation and upstream URL construction
    - Cristin API client and per-hit enrichment
    - Shaping of Cristin records into outbound project JSON
    - API Gateway handlers with problem+json error mapping
"""

__version__ = "1.0.0"
