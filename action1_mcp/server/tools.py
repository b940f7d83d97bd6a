"""Tool functions exposed over MCP.

Each tool is an async method returning a dict with ``success``, ``message``
and optionally ``data``. Tools never raise: API errors and unexpected
exceptions are turned into ``success: False`` payloads by ``tool_call``.
Mutating tools pass the destructive-action gate before anything else.
"""

import functools
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..api.client import ApiClient, extract_items
from ..api.models import HTTPMethod, Operation, PaginationStyle, check_required
from ..api.paginate import Paginator
from ..api.paths import build_query, interpolate_path, path_placeholders
from ..api.poll import DEFAULT_TIMEOUT, poll_job
from ..api.resolve import resolve_to_ids
from ..errors import (
    Action1Error,
    ConfirmationDenied,
    HttpError,
    MissingParameter,
    PollError,
    ResponseParseError,
)
from .guard import allow_destructive

RESOURCE_ALIASES = {
    "endpoint": "endpoints",
    "devices": "endpoints",
    "groups": "endpoint_groups",
}

TOOL_NAMES = (
    "diagnose_config",
    "verify_auth",
    "audit_endpoints",
    "list_resources",
    "get_resource",
    "create_resource",
    "update_resource",
    "delete_resource",
    "call_action",
    "search_resources",
    "remove_entities",
    "list_endpoints_simple",
    "list_endpoint_status",
    "get_missing_updates",
    "get_remote_session_status",
    "start_remote_session",
    "get_agent_installation_links",
    "inspect_deployer",
    "delete_deployer",
    "modify_group_contents",
    "move_endpoint_simple",
)


def _ok(message: str, data: Any = None) -> dict:
    result = {"success": True, "message": message}
    if data is not None:
        result["data"] = data
    return result


def _fail(message: str, **extra) -> dict:
    return {"success": False, "message": message, **extra}


def failure_payload(exc: Exception) -> dict:
    """Convert an exception into the structured failure payload"""
    if isinstance(exc, ConfirmationDenied):
        return _fail(exc.reason)
    if isinstance(exc, MissingParameter):
        if exc.key == "orgId":
            return _fail("orgId is required (set ORG_ID or pass orgId).")
        return _fail(f"Missing required parameter: {exc.key}")
    if isinstance(exc, HttpError):
        return _fail(f"API call failed with status {exc.status}", status_code=exc.status, snippet=exc.snippet)
    if isinstance(exc, ResponseParseError):
        return _fail(str(exc), status_code=exc.status, snippet=exc.snippet)
    if isinstance(exc, PollError):
        return _fail(str(exc), data=exc.data)
    if isinstance(exc, Action1Error):
        return _fail(str(exc))
    return _fail(f"Unexpected error: {exc}")


def tool_call(func):
    """Run a tool and turn any raised error into a failure payload"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except Action1Error as e:
            logging.warning(f"[Tool] {func.__name__} failed: {e}")
            return failure_payload(e)
        except Exception as e:
            logging.exception(f"[Tool] Unexpected error in {func.__name__}: {e}")
            return failure_payload(e)

    return wrapper


def _simple_filter(items: List[Any], query: Optional[str], limit: Optional[int]) -> List[Any]:
    if query:
        q = query.lower()
        items = [it for it in items if q in json.dumps(it, default=str).lower()]
    return items[:limit] if limit else items


def _pick(obj: Dict[str, Any], keys) -> Any:
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return None


class Action1Tools:
    """The tool set, bound to one ApiClient

    Args:
        client: Client for the Action1 API; its settings provide the default
            orgId and the destructive-action flag
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.settings = client.settings
        self.spec = client.spec

    def functions(self) -> List[Any]:
        return [getattr(self, name) for name in TOOL_NAMES]

    # ── helpers ──────────────────────────────────────────────────────────────

    def _org(self, org_id: Optional[str]) -> Optional[str]:
        return org_id if org_id not in (None, "") else self.settings.org_id

    def _guard(self, confirm: Optional[str], dry_run: Optional[bool]) -> None:
        decision = allow_destructive(confirm, dry_run, self.settings.allow_destructive)
        if not decision.allowed:
            raise ConfirmationDenied(decision.reason)

    def _path(
        self,
        template: str,
        orgId: Optional[str] = None,
        id: Optional[str] = None,
        path_params: Optional[Dict[str, Any]] = None,
        **named: Any,
    ) -> str:
        """Fill a path template from orgId, explicit params and a trailing id

        ``id`` fills the last placeholder that is still unfilled, so
        ``/groups/{orgId}/{groupId}`` takes it as groupId.
        """
        names = path_placeholders(template)
        params: Dict[str, Any] = {}
        if "orgId" in names:
            params["orgId"] = self._org(orgId)
        params.update({k: v for k, v in (path_params or {}).items() if v is not None})
        params.update({k: v for k, v in named.items() if v is not None and k in names})
        if id is not None:
            unfilled = [n for n in names if params.get(n) is None]
            if unfilled:
                params[unfilled[-1]] = id
        return interpolate_path(template, params)

    def _resource_name(self, resource: str) -> str:
        return RESOURCE_ALIASES.get(resource, resource)

    # ── diagnostics ──────────────────────────────────────────────────────────

    @tool_call
    async def diagnose_config(self) -> dict:
        """Show the adapter configuration without revealing secrets."""
        cached = self.client.credentials.cache.credential
        data = {
            "baseUrl": self.client.base_url,
            "authScheme": self.spec.auth.scheme.value,
            "paginationStyle": self.spec.pagination.style.value,
            "hasToken": bool(self.settings.token),
            "tokenSource": self.settings.token_source,
            "hasClientCredentials": self.settings.has_client_credentials,
            "hasCachedToken": cached is not None,
            "hasDefaultOrg": bool(self.settings.org_id),
            "allowDestructive": self.settings.allow_destructive,
            "resources": sorted(self.spec.resources),
            "actions": sorted(self.spec.actions),
        }
        return _ok("Configuration snapshot", data)

    @tool_call
    async def verify_auth(self) -> dict:
        """Verify authentication by requesting the organizations list."""
        url = self.client.url_for("/organizations")
        try:
            data = await self.client.get_with_retry("/organizations")
        except HttpError as e:
            reason = "auth_failed" if e.status in (401, 403) else "http_error"
            return _fail(f"Authentication check failed ({reason})", data={
                "ok": False, "reason": reason, "status": e.status, "url": url,
            })
        return _ok("Authentication OK", {"ok": True, "sample": data})

    @tool_call
    async def audit_endpoints(self, orgId: Optional[str] = None, limit: int = 5) -> dict:
        """Probe every list/get endpoint that needs at most an orgId and report availability."""
        org_id = self._org(orgId)
        results: Dict[str, Any] = {}

        for name, res in self.spec.resources.items():
            for op in (Operation.LIST, Operation.GET):
                desc = res.operation(op)
                if desc is None or desc.method != HTTPMethod.GET:
                    continue
                placeholders = set(path_placeholders(desc.path))
                if not placeholders <= {"orgId"}:
                    continue
                if placeholders and org_id is None:
                    continue
                key = f"{name}:{op.value}"
                try:
                    data = await self.client.get_with_retry(self._path(desc.path, org_id))
                    items = extract_items(data)
                    results[key] = {
                        "ok": True,
                        "count": len(items) if isinstance(data, (list, dict)) else None,
                        "sample": items[:limit] if items else data,
                    }
                except Action1Error as e:
                    results[key] = {
                        "ok": False,
                        "status": getattr(e, "status", None),
                        "error": str(e),
                        "snippet": getattr(e, "snippet", None),
                    }

        if org_id is None:
            results["note"] = "No orgId provided; set ORG_ID env or pass orgId."
        return _ok("Audit complete", {"auditedAt": datetime.now(timezone.utc).isoformat(), "results": results})

    # ── generic dispatch ─────────────────────────────────────────────────────

    @tool_call
    async def list_resources(
        self,
        resource: str,
        filters: Optional[dict] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        cursor: Optional[str] = None,
        orgId: Optional[str] = None,
        subresource: Optional[str] = None,
        path_params: Optional[dict] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """List a resource, following pagination unless page or cursor is given."""
        desc = self.spec.endpoint(self._resource_name(resource), Operation.LIST, subresource)
        path = self._path(desc.path, orgId, path_params=path_params)

        config = self.spec.pagination
        params: Dict[str, Any] = dict(filters or {})
        if page is not None and config.style == PaginationStyle.PAGE:
            params[config.page_param or "page"] = page
        if per_page is not None and config.per_page_param:
            params[config.per_page_param] = per_page
        if cursor and config.cursor_param:
            params[config.cursor_param] = cursor

        paginator = Paginator(self.client, path, params)
        if page is not None or cursor:
            items = await paginator.fetch_next() or []
            data = {"items": items, "count": len(items)}
            if getattr(paginator, "cursor", None):
                data["next_cursor"] = paginator.cursor
        else:
            items = await paginator.collect(limit)
            data = {"items": items, "count": len(items)}
        return _ok(f"Listed {len(items)} {resource}", data)

    @tool_call
    async def get_resource(
        self,
        resource: str,
        id: Optional[str] = None,
        orgId: Optional[str] = None,
        endpointId: Optional[str] = None,
        subresource: Optional[str] = None,
        path_params: Optional[dict] = None,
    ) -> dict:
        """Fetch a single resource by id."""
        desc = self.spec.endpoint(self._resource_name(resource), Operation.GET, subresource)
        path = self._path(desc.path, orgId, id, path_params, endpointId=endpointId)
        data = await self.client.get_with_retry(path)
        return _ok(f"Fetched {resource}", data)

    @tool_call
    async def create_resource(
        self,
        resource: str,
        body: dict,
        orgId: Optional[str] = None,
        subresource: Optional[str] = None,
        path_params: Optional[dict] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Create a resource. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.endpoint(self._resource_name(resource), Operation.CREATE, subresource)
        path = self._path(desc.path, orgId, path_params=path_params)
        check_required(desc.body_schema, body)
        if dry_run:
            return _ok("Dry run: nothing was sent", {"method": desc.method.value, "path": path, "body": body, "dry_run": True})
        data = await self.client.request(path, method=desc.method.value, body=body)
        return _ok(f"Created {resource}", data)

    @tool_call
    async def update_resource(
        self,
        resource: str,
        body: dict,
        id: Optional[str] = None,
        orgId: Optional[str] = None,
        endpointId: Optional[str] = None,
        subresource: Optional[str] = None,
        path_params: Optional[dict] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Update a resource. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.endpoint(self._resource_name(resource), Operation.UPDATE, subresource)
        path = self._path(desc.path, orgId, id, path_params, endpointId=endpointId)
        check_required(desc.body_schema, body)
        if dry_run:
            return _ok("Dry run: nothing was sent", {"method": desc.method.value, "path": path, "body": body, "dry_run": True})
        data = await self.client.request(path, method=desc.method.value, body=body)
        return _ok(f"Updated {resource}", data)

    @tool_call
    async def delete_resource(
        self,
        resource: str,
        id: str,
        orgId: Optional[str] = None,
        subresource: Optional[str] = None,
        path_params: Optional[dict] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Delete a resource by id. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.endpoint(self._resource_name(resource), Operation.DELETE, subresource)
        path = self._path(desc.path, orgId, id, path_params)
        if dry_run:
            return _ok("Dry run: nothing was sent", {"method": desc.method.value, "path": path, "dry_run": True})
        data = await self.client.request(path, method=desc.method.value)
        return _ok(f"Deleted {resource} {id}", data or {"deleted": True})

    @tool_call
    async def call_action(
        self,
        action: str,
        body: Optional[dict] = None,
        orgId: Optional[str] = None,
        endpointId: Optional[str] = None,
        path_params: Optional[dict] = None,
        wait: bool = False,
        wait_timeout_s: int = int(DEFAULT_TIMEOUT),
        job_params: Optional[dict] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Invoke a named POST action such as move_endpoint or initiate_remote_session."""
        self._guard(confirm, dry_run)
        desc = self.spec.action(action)
        params: Dict[str, Any] = dict(path_params or {})
        if endpointId is not None:
            params["endpointId"] = endpointId
        path = self._path(desc.path, orgId, path_params=params)
        check_required(desc.body_schema, body)
        if dry_run:
            return _ok("Dry run: nothing was sent", {"method": "POST", "path": path, "body": body, "dry_run": True})

        data = await self.client.post_action(path, body)
        if wait and self.spec.job_status is not None:
            job = {"orgId": self._org(orgId), **params, **(job_params or {})}
            polled = await poll_job(self.client, job, timeout=wait_timeout_s)
            return _ok(f"Action {action} completed", {"initial": data, "final": polled})
        return _ok(f"Action {action} submitted", data)

    @tool_call
    async def search_resources(
        self,
        query: str,
        resource: Optional[str] = None,
        limit: Optional[int] = None,
        orgId: Optional[str] = None,
    ) -> dict:
        """Search the organization, or filter one resource's listing client-side when resource is given."""
        if resource is None:
            desc = self.spec.endpoint("search", Operation.LIST)
            path = self._path(desc.path, orgId)
            data = await self.client.get_with_retry(f"{path}{build_query({'q': query, 'limit': limit})}")
            return _ok(f"Search results for '{query}'", data)

        desc = self.spec.endpoint(self._resource_name(resource), Operation.LIST)
        path = self._path(desc.path, orgId)
        items = await Paginator(self.client, path).collect()
        filtered = _simple_filter(items, query, limit)
        return _ok(f"{len(filtered)} {resource} matched '{query}'", {
            "items": filtered,
            "warning": "Client-side search; official search endpoint not used.",
        })

    @tool_call
    async def remove_entities(
        self,
        resource: str,
        ids: Optional[List[str]] = None,
        names: Optional[List[str]] = None,
        emails: Optional[List[str]] = None,
        labels: Optional[List[str]] = None,
        orgId: Optional[str] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Delete several entities by id, or by name/email/label lookup. Each target is reported separately."""
        self._guard(confirm, dry_run)
        name = self._resource_name(resource)
        desc = self.spec.endpoint(name, Operation.DELETE)
        org_id = self._org(orgId)

        targets: List[Any] = list(ids or [])
        if not targets and (names or emails or labels):
            resolved = await resolve_to_ids(self.client, name, org_id, names, emails, labels)
            targets = [r.id for r in resolved if r.id is not None]
        if not targets:
            return _fail("No targets resolved.")

        results = []
        for target in targets:
            try:
                path = self._path(desc.path, org_id, target)
                if dry_run:
                    results.append({"target": target, "result": {"dry_run": True, "method": desc.method.value, "path": path}})
                    continue
                data = await self.client.request(path, method=desc.method.value)
                results.append({"target": target, "result": data or {"deleted": True}})
            except Action1Error as e:
                logging.warning(f"[Tool] remove_entities: {name} {target} failed: {e}")
                results.append({"target": target, "error": failure_payload(e)["message"]})

        failed = sum(1 for r in results if "error" in r)
        summary = {"executed": len(results), "failed": failed, "results": results}
        if failed:
            return _fail(f"{failed} of {len(results)} removals failed", data=summary)
        return _ok(f"Processed {len(results)} {name}", summary)

    # ── convenience ──────────────────────────────────────────────────────────

    @tool_call
    async def list_endpoints_simple(
        self,
        orgId: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """List managed endpoints with a compact set of fields and an optional text filter."""
        desc = self.spec.endpoint("endpoints", Operation.LIST)
        items = await Paginator(self.client, self._path(desc.path, orgId)).collect()
        simplified = [
            {
                "id": _pick(it, ["id", "endpointId", "uuid", "device_id"]),
                "name": _pick(it, ["name", "deviceName", "hostname", "computerName"]),
                "hostname": _pick(it, ["hostname", "fqdn", "dnsName"]),
                "os": _pick(it, ["os", "osName", "platform"]),
                "groupId": _pick(it, ["groupId", "group_id"]),
                "lastSeen": _pick(it, ["lastSeen", "last_seen", "lastCheckIn", "last_seen_at"]),
            }
            for it in items if isinstance(it, dict)
        ]
        filtered = _simple_filter(simplified, query, limit)
        return _ok(f"Listed {len(filtered)} endpoints", {"items": filtered})

    @tool_call
    async def list_endpoint_status(
        self,
        orgId: Optional[str] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """List endpoint connection status snapshots with an optional text filter."""
        desc = self.spec.endpoint("endpoints_status", Operation.LIST)
        items = await Paginator(self.client, self._path(desc.path, orgId)).collect()
        filtered = _simple_filter(items, query, limit)
        return _ok(f"Listed {len(filtered)} endpoint status entries", {"items": filtered})

    @tool_call
    async def get_missing_updates(self, endpointId: str, orgId: Optional[str] = None) -> dict:
        """List updates missing on a managed endpoint."""
        desc = self.spec.endpoint("endpoints", Operation.LIST, "missingUpdates")
        path = self._path(desc.path, orgId, endpointId=endpointId)
        items = await Paginator(self.client, path).collect()
        return _ok(f"{len(items)} missing updates", {"items": items})

    @tool_call
    async def get_remote_session_status(self, endpointId: str, sessionId: str, orgId: Optional[str] = None) -> dict:
        """Get the status of a remote session on an endpoint."""
        desc = self.spec.endpoint("endpoints", Operation.GET, "remoteSessions")
        path = self._path(desc.path, orgId, endpointId=endpointId, sessionId=sessionId)
        return _ok("Remote session status", await self.client.get_with_retry(path))

    @tool_call
    async def start_remote_session(
        self,
        endpointId: str,
        body: Optional[dict] = None,
        orgId: Optional[str] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Start a remote session on an endpoint. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.action("initiate_remote_session")
        path = self._path(desc.path, orgId, endpointId=endpointId)
        body = body or {}
        if dry_run:
            return _ok("Dry run: nothing was sent", {"path": path, "body": body, "dry_run": True})
        return _ok("Remote session requested", await self.client.post_action(path, body))

    @tool_call
    async def get_agent_installation_links(self, orgId: Optional[str] = None, installType: str = "windowsEXE") -> dict:
        """Get agent installation links for the organization."""
        desc = self.spec.endpoint("agent_installation", Operation.GET)
        path = self._path(desc.path, orgId, installType=installType)
        return _ok(f"Installation links ({installType})", await self.client.get_with_retry(path))

    @tool_call
    async def inspect_deployer(self, deployerId: str, orgId: Optional[str] = None) -> dict:
        """Get a deployer by id."""
        desc = self.spec.endpoint("deployers", Operation.GET)
        path = self._path(desc.path, orgId, deployerId=deployerId)
        return _ok("Deployer details", await self.client.get_with_retry(path))

    @tool_call
    async def delete_deployer(
        self,
        deployerId: str,
        orgId: Optional[str] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Delete a deployer. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.endpoint("deployers", Operation.DELETE)
        path = self._path(desc.path, orgId, deployerId=deployerId)
        if dry_run:
            return _ok("Dry run: nothing was sent", {"path": path, "dry_run": True})
        data = await self.client.request(path, method=desc.method.value)
        return _ok(f"Deleted deployer {deployerId}", data or {"deleted": True})

    @tool_call
    async def modify_group_contents(
        self,
        groupId: str,
        add: Optional[List[str]] = None,
        remove: Optional[List[str]] = None,
        orgId: Optional[str] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Add and/or remove endpoints in a group. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.endpoint("endpoint_groups", Operation.CREATE, "contents")
        path = self._path(desc.path, orgId, groupId=groupId)
        body: Dict[str, Any] = {}
        if add:
            body["add"] = add
        if remove:
            body["remove"] = remove
        if not body:
            return _fail("Specify add and/or remove arrays.")
        if dry_run:
            return _ok("Dry run: nothing was sent", {"path": path, "body": body, "dry_run": True})
        return _ok(f"Updated contents of group {groupId}", await self.client.request(path, method=desc.method.value, body=body))

    @tool_call
    async def move_endpoint_simple(
        self,
        endpointId: str,
        targetOrgId: str,
        orgId: Optional[str] = None,
        dry_run: bool = False,
        confirm: Optional[str] = None,
    ) -> dict:
        """Move an endpoint to another organization. Requires ALLOW_DESTRUCTIVE=true and confirm="YES" unless dry_run."""
        self._guard(confirm, dry_run)
        desc = self.spec.action("move_endpoint")
        path = self._path(desc.path, orgId, endpointId=endpointId)
        body = {"targetOrgId": targetOrgId}
        if dry_run:
            return _ok("Dry run: nothing was sent", {"path": path, "body": body, "dry_run": True})
        return _ok(f"Moved endpoint {endpointId}", await self.client.post_action(path, body))


__all__ = [
    "TOOL_NAMES",
    "Action1Tools",
    "failure_payload",
    "tool_call",
]
