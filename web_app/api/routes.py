"""API routes implementation."""

from fastapi import APIRouter, Depends, Request, Response, status
from datetime import datetime, timezone

from .auth import get_authenticator
from .schemas import (
    CreateLinkRequest,
    UpdateLinkRequest,
    LinkResponse,
    DestinationResponse,
    OwnerResponse,
    HealthResponse,
    ErrorResponse,
)
from link_registry.common.urls import build_base_url, build_short_url
from link_registry.environment import RequestAuthenticator

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Short key not found"}}
MUTATION_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Authentication failed"},
    403: {"model": ErrorResponse, "description": "Not the owner of this link"},
    **NOT_FOUND,
}


def _short_url(request: Request, short_key: str) -> str:
    config = request.app.state.config
    base_url = build_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return build_short_url(short_key, base_url, config.path_prefix)


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **MUTATION_ERRORS,
        409: {"model": ErrorResponse, "description": "Short key already exists"},
    },
    summary="Create link",
    description="Register a destination URL. Optionally provide a custom short key.",
)
async def create_link(
    request: Request,
    body: CreateLinkRequest,
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """Create a link owned by the authenticated identity."""
    registry = request.app.state.registry
    owner = body.owner if body.owner is not None else (auth.principal or "")

    short_key = await registry.create(
        owner=owner,
        destination_url=body.destination_url,
        custom_key=body.custom_key,
        auth=auth,
    )
    record = await registry.get_record(short_key)

    return LinkResponse.from_record(short_key, _short_url(request, short_key), record)


@router.put(
    "/links/{short_key}",
    response_model=LinkResponse,
    responses=MUTATION_ERRORS,
    summary="Update link",
    description="Change the destination of a link you own.",
)
async def update_link(
    request: Request,
    short_key: str,
    body: UpdateLinkRequest,
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """Update a link's destination."""
    registry = request.app.state.registry

    await registry.update(
        caller=auth.principal or "",
        short_key=short_key,
        new_destination_url=body.destination_url,
        auth=auth,
    )
    record = await registry.get_record(short_key)

    return LinkResponse.from_record(short_key, _short_url(request, short_key), record)


@router.delete(
    "/links/{short_key}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=MUTATION_ERRORS,
    summary="Delete link",
    description="Delete a link you own. The key becomes available again.",
)
async def delete_link(
    request: Request,
    short_key: str,
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """Delete a link."""
    registry = request.app.state.registry

    await registry.delete(caller=auth.principal or "", short_key=short_key, auth=auth)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/links/{short_key}",
    response_model=LinkResponse,
    responses=NOT_FOUND,
    summary="Get link record",
)
async def get_link(request: Request, short_key: str):
    """Get the full record of a link."""
    record = await request.app.state.registry.get_record(short_key)
    return LinkResponse.from_record(short_key, _short_url(request, short_key), record)


@router.get(
    "/links/{short_key}/destination",
    response_model=DestinationResponse,
    responses=NOT_FOUND,
    summary="Get link destination",
)
async def get_destination(request: Request, short_key: str):
    """Get the destination URL of a link."""
    destination_url = await request.app.state.registry.get_destination(short_key)
    return DestinationResponse(short_key=short_key, destination_url=destination_url)


@router.get(
    "/links/{short_key}/owner",
    response_model=OwnerResponse,
    responses=NOT_FOUND,
    summary="Get link owner",
)
async def get_owner(request: Request, short_key: str):
    """Get the owner identity of a link."""
    owner = await request.app.state.registry.get_owner(short_key)
    return OwnerResponse(short_key=short_key, owner=owner)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    health = await request.app.state.registry.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store="healthy" if health["store"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
