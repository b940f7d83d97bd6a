"""Action1 API surface.

Servers: https://app.action1.com/api/3.0 (NA), https://app.eu.action1.com/api/3.0 (EU),
https://app.au.action1.com/api/3.0 (AU). Override with API_BASE.

Lists paginate with ``limit`` and a ``next_page`` cursor. Auth is OAuth2: a
bearer token, either given directly or exchanged from client credentials.
No general job status endpoint is documented, so ``job_status`` is unset.
"""

from .models import (
    APIParameter,
    ActionDescriptor,
    AuthConfig,
    AuthScheme,
    EndpointDescriptor,
    EndpointsSpec,
    HTTPMethod,
    PaginationConfig,
    PaginationStyle,
    ResourceDescriptor,
)

DEFAULT_BASE_URL = "https://app.action1.com/api/3.0"

ORG_PARAMS = (APIParameter("orgId", description="Organization id"),)
ENDPOINT_PARAMS = ORG_PARAMS + (APIParameter("endpointId", description="Managed endpoint id"),)
GROUP_PARAMS = ORG_PARAMS + (APIParameter("groupId", description="Endpoint group id"),)
DEPLOYER_PARAMS = ORG_PARAMS + (APIParameter("deployerId", description="Deployer id"),)
SESSION_PARAMS = ENDPOINT_PARAMS + (APIParameter("sessionId", description="Remote session id"),)
INSTALL_PARAMS = ORG_PARAMS + (APIParameter("installType", description="Installer type, e.g. windowsEXE"),)

ANY_BODY = (APIParameter("body", type="object", required=False),)


def _get(path, params=ORG_PARAMS):
    return EndpointDescriptor(path, HTTPMethod.GET, params_schema=params)


def _patch(path, params):
    return EndpointDescriptor(path, HTTPMethod.PATCH, params_schema=params, body_schema=ANY_BODY)


def _delete(path, params):
    return EndpointDescriptor(path, HTTPMethod.DELETE, params_schema=params)


ENDPOINTS = EndpointsSpec(
    base_url=DEFAULT_BASE_URL,
    auth=AuthConfig(scheme=AuthScheme.OAUTH2),
    pagination=PaginationConfig(
        style=PaginationStyle.CURSOR,
        per_page_param="limit",
        cursor_param="next_page",
    ),
    resources={
        "organizations": ResourceDescriptor(
            list=EndpointDescriptor("/organizations", HTTPMethod.GET),
        ),
        "endpoints_status": ResourceDescriptor(
            list=_get("/endpoints/status/{orgId}"),
        ),
        "endpoints": ResourceDescriptor(
            list=_get("/endpoints/managed/{orgId}"),
            get=_get("/endpoints/managed/{orgId}/{endpointId}", ENDPOINT_PARAMS),
            update=_patch("/endpoints/managed/{orgId}/{endpointId}", ENDPOINT_PARAMS),
            delete=_delete("/endpoints/managed/{orgId}/{endpointId}", ENDPOINT_PARAMS),
            subresources={
                "general": ResourceDescriptor(
                    get=_get("/endpoints/managed/{orgId}/{endpointId}/general", ENDPOINT_PARAMS),
                ),
                "missingUpdates": ResourceDescriptor(
                    list=_get("/endpoints/managed/{orgId}/{endpointId}/missing-updates", ENDPOINT_PARAMS),
                ),
                "remoteSessions": ResourceDescriptor(
                    get=_get("/endpoints/managed/{orgId}/{endpointId}/remote-sessions/{sessionId}", SESSION_PARAMS),
                    update=_patch("/endpoints/managed/{orgId}/{endpointId}/remote-sessions/{sessionId}", SESSION_PARAMS),
                ),
            },
        ),
        "endpoint_groups": ResourceDescriptor(
            list=_get("/endpoints/groups/{orgId}"),
            create=EndpointDescriptor(
                "/endpoints/groups/{orgId}",
                HTTPMethod.POST,
                params_schema=ORG_PARAMS,
                body_schema=(APIParameter("name", description="Group name"),),
            ),
            get=_get("/endpoints/groups/{orgId}/{groupId}", GROUP_PARAMS),
            update=_patch("/endpoints/groups/{orgId}/{groupId}", GROUP_PARAMS),
            delete=_delete("/endpoints/groups/{orgId}/{groupId}", GROUP_PARAMS),
            subresources={
                "contents": ResourceDescriptor(
                    list=_get("/endpoints/groups/{orgId}/{groupId}/contents", GROUP_PARAMS),
                    create=EndpointDescriptor(
                        "/endpoints/groups/{orgId}/{groupId}/contents",
                        HTTPMethod.POST,
                        params_schema=GROUP_PARAMS,
                        body_schema=(
                            APIParameter("add", type="array", required=False),
                            APIParameter("remove", type="array", required=False),
                        ),
                    ),
                ),
            },
        ),
        "search": ResourceDescriptor(
            list=_get("/search/{orgId}"),
        ),
        "agent_deployment": ResourceDescriptor(
            get=_get("/endpoints/agent-deployment/{orgId}"),
            update=_patch("/endpoints/agent-deployment/{orgId}", ORG_PARAMS),
        ),
        "agent_installation": ResourceDescriptor(
            get=_get("/endpoints/agent-installation/{orgId}/{installType}", INSTALL_PARAMS),
        ),
        "deployers": ResourceDescriptor(
            list=_get("/endpoints/deployers/{orgId}"),
            get=_get("/endpoints/deployers/{orgId}/{deployerId}", DEPLOYER_PARAMS),
            delete=_delete("/endpoints/deployers/{orgId}/{deployerId}", DEPLOYER_PARAMS),
        ),
        "deployer_installation_windows": ResourceDescriptor(
            list=_get("/endpoints/deployer-installation/{orgId}/windowsEXE"),
        ),
    },
    actions={
        "move_endpoint": ActionDescriptor(
            "/endpoints/managed/{orgId}/{endpointId}/move",
            body_schema=(APIParameter("targetOrgId", description="Destination organization id"),),
        ),
        "initiate_remote_session": ActionDescriptor(
            "/endpoints/managed/{orgId}/{endpointId}/remote-sessions",
        ),
        "license_enterprise_trial": ActionDescriptor("/license/enterprise/trial"),
    },
)


__all__ = [
    "DEFAULT_BASE_URL",
    "ENDPOINTS",
]
