"""API routes implementation."""

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Request, HTTPException, status
from datetime import datetime, timezone

from .schemas import (
    CreateLinkRequest,
    CreatedLinkResponse,
    LinkResponse,
    DeleteResponse,
    HealthResponse,
    ErrorResponse,
)
from linkreg.common.url_builder import build_base_url, build_short_url
from linkreg.errors import (
    CodeConflict,
    ExhaustedCodeSpace,
    InvalidCode,
    InvalidTarget,
    LinkNotFound,
    StorageFailure,
)

router = APIRouter()


def _storage_error(e: StorageFailure) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Storage error: {str(e)}",
    )


@router.post(
    "/links",
    response_model=CreatedLinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid target URL or short code"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        500: {"model": ErrorResponse, "description": "Code space exhausted or storage error"},
    },
    summary="Create short link",
    description="Create a short link. Optionally provide a custom 6-8 character code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    registry = request.app.state.registry
    config = request.app.state.config

    try:
        link = await registry.create(body.target_url, code=body.code)
    except (InvalidTarget, InvalidCode) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CodeConflict as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ExhaustedCodeSpace as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except StorageFailure as e:
        raise _storage_error(e)

    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    short_url = build_short_url(
        short_code=link.code,
        base_url=base_url,
        path_prefix=config.path_prefix,
    )

    return CreatedLinkResponse(**asdict(link), short_url=short_url)


@router.get(
    "/links",
    response_model=List[LinkResponse],
    summary="List short links",
    description="List every live link, newest first.",
)
async def list_links(request: Request):
    """List all links."""
    registry = request.app.state.registry

    try:
        links = await registry.list_links()
    except StorageFailure as e:
        raise _storage_error(e)

    return [LinkResponse(**asdict(link)) for link in links]


@router.get(
    "/links/{code}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Get short link",
    description="Get a link record including its click statistics.",
)
async def get_link(request: Request, code: str):
    """Get a single link."""
    registry = request.app.state.registry

    try:
        link = await registry.get(code)
    except LinkNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageFailure as e:
        raise _storage_error(e)

    return LinkResponse(**asdict(link))


@router.delete(
    "/links/{code}",
    response_model=DeleteResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
    },
    summary="Delete short link",
)
async def delete_link(request: Request, code: str):
    """Delete a link permanently."""
    registry = request.app.state.registry

    try:
        await registry.delete(code)
    except LinkNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageFailure as e:
        raise _storage_error(e)

    return DeleteResponse(deleted=True, code=code)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its backing store are healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    registry = request.app.state.registry

    healthy = await registry.health_check()

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        store="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
