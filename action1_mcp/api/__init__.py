"""Generic dispatch engine for the Action1 REST API.

Declarative endpoint descriptors, path and query building, credential
resolution, the retrying HTTP client, pagination, entity resolution and job
polling.
"""

from .client import ApiClient, extract_items
from .credentials import CredentialCache, CredentialResolver
from .endpoints import ENDPOINTS
from .models import EndpointsSpec, HTTPMethod, Operation, PaginationStyle
from .paginate import Paginator, paginate
from .paths import build_query, interpolate_path
from .poll import poll_job
from .resolve import ResolvedEntity, resolve_to_ids

__all__ = [
    "ApiClient",
    "extract_items",
    "CredentialCache",
    "CredentialResolver",
    "ENDPOINTS",
    "EndpointsSpec",
    "HTTPMethod",
    "Operation",
    "PaginationStyle",
    "Paginator",
    "paginate",
    "build_query",
    "interpolate_path",
    "poll_job",
    "ResolvedEntity",
    "resolve_to_ids",
]
