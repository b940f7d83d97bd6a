"""Declarative descriptors for the wrapped REST API.

The descriptors form an immutable registry built once at import time. Tools
dispatch by looking operations up here; a missing operation is reported as
UnsupportedOperation instead of being attempted.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import MissingParameter, UnsupportedOperation


class HTTPMethod(Enum):
    """Supported HTTP methods for API endpoints"""
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


class Operation(Enum):
    """CRUD operations a resource may expose"""
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class AuthScheme(Enum):
    API_KEY = "apiKey"
    BEARER = "bearer"
    BASIC = "basic"
    OAUTH2 = "oauth2"


class PaginationStyle(Enum):
    NONE = "none"
    PAGE = "page"
    CURSOR = "cursor"
    LINK = "link"


@dataclass(frozen=True)
class APIParameter:
    """Configuration for a path parameter or body field

    Args:
        name: Parameter name
        type: Parameter type ("string", "number", "boolean", "object", "array")
        description: Parameter description for tool documentation
        required: Whether parameter is required (default: True)
        default: Default value for optional parameters
    """
    name: str
    type: str = "string"
    description: str = ""
    required: bool = True
    default: Optional[Any] = None


Schema = Tuple[APIParameter, ...]


def check_required(schema: Optional[Schema], values: Optional[Mapping[str, Any]]) -> None:
    """Raise MissingParameter for the first required field absent from values"""
    if not schema:
        return
    values = values or {}
    for param in schema:
        if param.required and values.get(param.name) is None:
            raise MissingParameter(param.name)


@dataclass(frozen=True)
class EndpointDescriptor:
    """A single HTTP operation

    Args:
        path: Path template relative to the base URL, e.g. /groups/{orgId}
        method: HTTP method to use
        params_schema: Path/query parameters the endpoint accepts
        body_schema: Body fields; required ones are checked before sending
    """
    path: str
    method: HTTPMethod
    params_schema: Optional[Schema] = None
    body_schema: Optional[Schema] = None


@dataclass(frozen=True)
class ActionDescriptor:
    """A named POST operation outside of CRUD semantics"""
    path: str
    method: HTTPMethod = HTTPMethod.POST
    body_schema: Optional[Schema] = None


@dataclass(frozen=True)
class ResourceDescriptor:
    """Up to five CRUD endpoints plus nested sub-resources"""
    list: Optional[EndpointDescriptor] = None
    get: Optional[EndpointDescriptor] = None
    create: Optional[EndpointDescriptor] = None
    update: Optional[EndpointDescriptor] = None
    delete: Optional[EndpointDescriptor] = None
    subresources: Mapping[str, "ResourceDescriptor"] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "subresources", MappingProxyType(dict(self.subresources)))

    def operation(self, op: Operation) -> Optional[EndpointDescriptor]:
        return getattr(self, op.value)

    def operations(self) -> Tuple[Operation, ...]:
        return tuple(op for op in Operation if self.operation(op) is not None)


@dataclass(frozen=True)
class AuthConfig:
    scheme: AuthScheme
    header: Optional[str] = None
    query_param: Optional[str] = None
    scopes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PaginationConfig:
    """How list endpoints paginate

    Args:
        style: One of none, page, cursor, link
        page_param: Request parameter carrying the page number (page style)
        per_page_param: Request parameter carrying the page size
        cursor_param: Request parameter carrying the cursor (cursor style)
        next_field: Response field carrying the next cursor or next link
    """
    style: PaginationStyle = PaginationStyle.NONE
    page_param: Optional[str] = None
    per_page_param: Optional[str] = None
    cursor_param: Optional[str] = None
    next_field: Optional[str] = None


@dataclass(frozen=True)
class JobStatusConfig:
    path_template: str
    status_field: str
    success_values: Tuple[str, ...]
    failure_values: Tuple[str, ...]
    label_field: Optional[str] = None


@dataclass(frozen=True)
class EndpointsSpec:
    """Process-wide description of the wrapped API"""
    base_url: str
    auth: AuthConfig
    pagination: PaginationConfig
    resources: Mapping[str, ResourceDescriptor]
    actions: Mapping[str, ActionDescriptor] = field(default_factory=dict)
    job_status: Optional[JobStatusConfig] = None

    def __post_init__(self):
        object.__setattr__(self, "resources", MappingProxyType(dict(self.resources)))
        object.__setattr__(self, "actions", MappingProxyType(dict(self.actions)))

    def resource(self, name: str, sub: Optional[str] = None) -> ResourceDescriptor:
        """Look up a resource, or one of its sub-resources

        Raises:
            UnsupportedOperation: If the resource or sub-resource is unknown
        """
        res = self.resources.get(name)
        if res is None:
            raise UnsupportedOperation(f'Unknown resource "{name}".')
        if sub is None:
            return res
        child = res.subresources.get(sub)
        if child is None:
            raise UnsupportedOperation(f'Resource "{name}" has no sub-resource "{sub}".')
        return child

    def endpoint(self, name: str, op: Operation, sub: Optional[str] = None) -> EndpointDescriptor:
        """Look up one operation of a resource

        Raises:
            UnsupportedOperation: If the resource does not define the operation
        """
        desc = self.resource(name, sub).operation(op)
        if desc is None:
            label = f"{name}.{sub}" if sub else name
            raise UnsupportedOperation(f'Resource "{label}" does not support {op.value}.')
        return desc

    def action(self, name: str) -> ActionDescriptor:
        action = self.actions.get(name)
        if action is None:
            raise UnsupportedOperation(f'Unknown action "{name}".')
        return action

    def describe(self) -> Dict[str, Any]:
        """Summarize resources and actions for diagnostics"""
        def _resource(res: ResourceDescriptor) -> Dict[str, Any]:
            out: Dict[str, Any] = {
                op.value: f"{res.operation(op).method.value} {res.operation(op).path}"
                for op in res.operations()
            }
            if res.subresources:
                out["subresources"] = {k: _resource(v) for k, v in res.subresources.items()}
            return out

        return {
            "resources": {k: _resource(v) for k, v in self.resources.items()},
            "actions": {k: f"{a.method.value} {a.path}" for k, a in self.actions.items()},
        }


__all__ = [
    "HTTPMethod",
    "Operation",
    "AuthScheme",
    "PaginationStyle",
    "APIParameter",
    "Schema",
    "check_required",
    "EndpointDescriptor",
    "ActionDescriptor",
    "ResourceDescriptor",
    "AuthConfig",
    "PaginationConfig",
    "JobStatusConfig",
    "EndpointsSpec",
]
