"""API routes implementation."""

from typing import Optional

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import JSONResponse
from datetime import datetime, timezone

from .schemas import (
    GenerateRequest,
    GenerateResponse,
    LinkInfoResponse,
    HealthResponse,
    ErrorResponse,
)
from grue.common.headers import build_base_url
from grue.errors import ValidationError

router = APIRouter()


def request_base_url(request: Request) -> str:
    """Public domain prefix for links built while serving this request."""
    return build_base_url(
        headers=dict(request.headers),
        configured_base_url=request.app.state.config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty or invalid URL"},
        500: {"model": ErrorResponse, "description": "No free short code"},
        503: {"model": ErrorResponse, "description": "Link store unavailable"},
    },
    summary="Create short link",
    description="Shorten a URL. Submitting an already shortened URL returns its existing link.",
)
async def generate_link(request: Request, body: Optional[GenerateRequest] = None):
    """Create (or reuse) a short link."""
    service = request.app.state.service

    long_url = body.grue_link if body else None
    if not long_url or not long_url.strip():
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={})

    try:
        result = await service.shorten(long_url, base_url=request_base_url(request))
    except ValidationError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid URL!"},
        )

    return GenerateResponse(link=result.link, redirect=result.long_url)


@router.get(
    "/links/{short_code}",
    response_model=LinkInfoResponse,
    responses={
        404: {"description": "Short code not found"},
    },
    summary="Get link information",
    description="Get a short link's target and timestamps without counting a visit.",
)
async def get_link_info(request: Request, short_code: str):
    """Get information about a short link."""
    service = request.app.state.service

    record = await service.get_link(short_code)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    return LinkInfoResponse(
        short_code=record.short_code,
        link=service.short_link(record.short_code, request_base_url(request)),
        long_url=record.long_url,
        created_at=record.created_at,
        last_visited_at=record.last_visited_at,
        expires_at=record.expires_at,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
