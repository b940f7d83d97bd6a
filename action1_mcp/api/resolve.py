"""Turn human-supplied filters (names, emails, labels) into resource ids."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from ..errors import ResolutionFailure, UnsupportedOperation
from .client import ApiClient, extract_items
from .models import Operation
from .paths import interpolate_path, path_placeholders

NAME_FIELDS = ("name", "displayName", "hostname", "id")
EMAIL_FIELDS = ("email", "userEmail")
LABEL_FIELDS = ("label", "title")
ID_FIELDS = ("id", "endpointId", "groupId", "uuid")


@dataclass
class ResolvedEntity:
    id: Union[str, int, None]
    name: Optional[str] = None
    email: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None


def _first(item: Dict[str, Any], fields: Sequence[str]) -> Any:
    for field in fields:
        value = item.get(field)
        if value:
            return value
    return None


def _first_present(item: Dict[str, Any], fields: Sequence[str]) -> Any:
    for field in fields:
        if item.get(field) is not None:
            return item[field]
    return None


def _text(item: Dict[str, Any], fields: Sequence[str]) -> str:
    value = _first(item, fields)
    return str(value).lower() if value is not None else ""


def _matches(item: Dict[str, Any], names: Sequence[str], emails: Sequence[str], labels: Sequence[str]) -> bool:
    if names:
        name = _text(item, NAME_FIELDS)
        if any(n.lower() in name for n in names):
            return True
    if emails:
        email = _text(item, EMAIL_FIELDS)
        if any(e.lower() == email for e in emails):
            return True
    if labels:
        label = _text(item, LABEL_FIELDS)
        if any(l.lower() in label for l in labels):
            return True
    return False


async def resolve_to_ids(
    client: ApiClient,
    resource: str,
    org_id: Optional[Union[str, int]] = None,
    names: Optional[Sequence[str]] = None,
    emails: Optional[Sequence[str]] = None,
    labels: Optional[Sequence[str]] = None,
) -> List[ResolvedEntity]:
    """Resolve filters to entities by listing the resource once

    Only the first page is searched. Names and labels match as
    case-insensitive substrings, emails as case-insensitive equality.

    Raises:
        ResolutionFailure: If the resource cannot be listed or needs an orgId
            that was not given; raised before any network call
    """
    try:
        desc = client.spec.endpoint(resource, Operation.LIST)
    except UnsupportedOperation as e:
        raise ResolutionFailure(f"Resource {resource} does not support listing for resolution.") from e

    path = desc.path
    if "orgId" in path_placeholders(path):
        if org_id is None:
            raise ResolutionFailure(f"Resource {resource} requires 'orgId' to resolve.")
        path = interpolate_path(path, {"orgId": org_id})

    data = await client.get_with_retry(path)
    items = [it for it in extract_items(data) if isinstance(it, dict)]

    names, emails, labels = names or [], emails or [], labels or []
    matches = [it for it in items if _matches(it, names, emails, labels)]
    logging.info(f"[Resolve] {len(matches)} of {len(items)} {resource} matched")

    return [
        ResolvedEntity(
            id=_first_present(m, ID_FIELDS),
            name=_first(m, ("name", "displayName", "hostname")),
            email=_first(m, EMAIL_FIELDS),
            raw=m,
        )
        for m in matches
    ]


__all__ = [
    "ResolvedEntity",
    "resolve_to_ids",
]
