"""Web interface routes implementation."""

import os
from fastapi import APIRouter, Request, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from grue.common.validators import is_valid_short_code
from grue.errors import ValidationError
from ..api.routes import request_base_url

router = APIRouter()

WEBSITE_TITLE = "Grue | Simple URL Shortener"

# Setup Jinja2 templates
template_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=template_dir)


def _render_index(request: Request, status_code: int = 200, **context) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": WEBSITE_TITLE, **context},
        status_code=status_code,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the homepage with the shorten form."""
    return _render_index(request)


@router.post("/", response_class=HTMLResponse, include_in_schema=False)
async def create_short_link_web(
    request: Request,
    grue_link: str = Form("", alias="grue-link"),
):
    """Handle form submission to create a short link."""
    service = request.app.state.service

    if not grue_link.strip():
        return _render_index(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            errors=["Please enter a URL to shorten."],
        )

    try:
        result = await service.shorten(grue_link, base_url=request_base_url(request))
    except ValidationError:
        return _render_index(
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
            errors=["Invalid URL!"],
            submitted=grue_link,
        )

    return _render_index(
        request,
        success="Successfully shortened the long url!",
        output={"link": result.link, "redirect": result.long_url},
    )


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service

    health = await service.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    else:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy",
        )


@router.get("/{shortlink}", include_in_schema=False)
async def redirect_to_url(request: Request, shortlink: str):
    """Redirect to the original URL."""
    service = request.app.state.service
    config = request.app.state.config

    is_valid, _ = is_valid_short_code(shortlink, length=config.short_code_length)
    # Resolving also records the visit
    long_url = await service.resolve(shortlink) if is_valid else None

    if not long_url:
        return templates.TemplateResponse(
            request,
            "404.html",
            {"title": WEBSITE_TITLE, "short_code": shortlink},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    # 302 so every visit comes back through us and refreshes last_visit
    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
