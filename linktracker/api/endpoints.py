"""
FastAPI Endpoints for Link Tracker Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Rate limiting
- Visitor fingerprinting and share URL construction
- Error handling and HTTP responses
- Delegating to the link service

All business logic is in services.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from linktracker.api.schemas import (
    CreateLinkRequest,
    CreateLinkResponse,
    LinkListResponse,
    LinkSummaryResponse,
    StatsResponse,
)
from linktracker.core.exceptions import (
    BackendUnavailableError,
    IdentifierExhaustedError,
    InvalidInputError,
    LinkExpiredError,
    LinkNotFoundError,
)
from linktracker.core.rate_limit import limiter, RATE_LIMITS
from linktracker.core.service_manager import get_link_service
from linktracker.core.setting import settings
from linktracker.core.validators import build_visitor_fingerprint, sanitize_link_id
from linktracker.services.link_service import LinkService

logger = logging.getLogger(__name__)

router = APIRouter()


def build_share_url(request: Request, link_id: str, campaign: str) -> str:
    """
    Public tracking URL for a link.
    
    Uses BASE_URL when configured, otherwise the address the request came in on.
    """
    base_url = settings.BASE_URL or str(request.base_url)
    return f"{base_url.rstrip('/')}/track/{link_id}?campaign={quote(campaign, safe='')}"


def internal_error(e: Exception) -> HTTPException:
    logger.error(f"Request failed: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error"
    )


@router.post(
    "/api/links",
    response_model=CreateLinkResponse,
    summary="Create a tracking link",
    description="Creates a short-lived link whose visits are counted"
)
@limiter.limit(RATE_LIMITS["create"])
async def create_link(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    body: CreateLinkRequest,
    service: LinkService = Depends(get_link_service)
) -> CreateLinkResponse:
    """
    Create a new tracking link.
    
    Returns:
        CreateLinkResponse with id, expiry, campaign and share URL
    
    Raises:
        HTTPException 400: If expiresInHours is not a number >= 1
        HTTPException 500: If no id could be allocated or storage failed
    """
    expires_in_hours = body.expires_in_hours
    if expires_in_hours is None:
        expires_in_hours = settings.DEFAULT_EXPIRES_IN_HOURS
    
    try:
        link = await service.create(expires_in_hours, body.campaign)
    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except (IdentifierExhaustedError, BackendUnavailableError) as e:
        raise internal_error(e)
    except Exception as e:
        raise internal_error(e)
    
    return CreateLinkResponse(
        id=link.id,
        expires=link.expires,
        campaign=link.campaign,
        share_url=build_share_url(request, link.id, link.campaign),
    )


@router.get(
    "/track/{link_id}",
    status_code=status.HTTP_302_FOUND,
    summary="Track a click and redirect",
    description="Counts the visit and redirects to the fixed target"
)
@limiter.limit(RATE_LIMITS["track"])
async def track_click(
    link_id: str,
    request: Request,
    campaign: Optional[str] = None,
    service: LinkService = Depends(get_link_service)
) -> RedirectResponse:
    """
    Record a click on a tracking link.
    
    Returns:
        RedirectResponse (HTTP 302) to the configured redirect target
    
    Raises:
        HTTPException 404: If the link does not exist
        HTTPException 410: If the link has expired
        HTTPException 429: If rate limit exceeded
    """
    sanitized_id = sanitize_link_id(link_id)
    if not sanitized_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid tracking link"
        )
    
    try:
        await service.record_click(
            sanitized_id,
            build_visitor_fingerprint(request),
            campaign
        )
    except LinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid tracking link"
        )
    except LinkExpiredError:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Tracking link has expired"
        )
    except BackendUnavailableError as e:
        raise internal_error(e)
    except Exception as e:
        raise internal_error(e)
    
    return RedirectResponse(
        url=settings.REDIRECT_TARGET,
        status_code=status.HTTP_302_FOUND
    )


@router.get(
    "/api/links/{link_id}",
    response_model=StatsResponse,
    summary="Get link statistics",
    description="Returns click counters and derived stats; expired links are still reported"
)
@limiter.limit(RATE_LIMITS["stats"])
async def get_link_stats(
    link_id: str,
    request: Request,  # Required for rate limiting
    service: LinkService = Depends(get_link_service)
) -> StatsResponse:
    """
    Get statistics for a tracking link.
    
    Raises:
        HTTPException 404: If the link does not exist
        HTTPException 429: If rate limit exceeded
    """
    sanitized_id = sanitize_link_id(link_id)
    if not sanitized_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    
    try:
        view = await service.get_stats(sanitized_id)
    except LinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    except BackendUnavailableError as e:
        raise internal_error(e)
    except Exception as e:
        raise internal_error(e)
    
    return StatsResponse(
        id=view.id,
        clicks=view.clicks,
        unique_clicks=view.unique_clicks,
        created=view.created,
        expires=view.expires,
        is_active=view.is_active,
        campaign=view.campaign,
        last_accessed=view.last_accessed,
        time_remaining=view.time_remaining,
        click_through_rate=view.click_through_rate,
    )


@router.get(
    "/api/links",
    response_model=LinkListResponse,
    summary="List all links",
    description="Dashboard view of every stored link and how many are still active"
)
@limiter.limit(RATE_LIMITS["list"])
async def list_links(
    request: Request,  # Required for rate limiting
    service: LinkService = Depends(get_link_service)
) -> LinkListResponse:
    """List every stored link, including expired ones not yet reaped."""
    try:
        listing = await service.list_all()
    except BackendUnavailableError as e:
        raise internal_error(e)
    except Exception as e:
        raise internal_error(e)
    
    return LinkListResponse(
        count=listing.count,
        active=listing.active,
        links=[
            LinkSummaryResponse(
                id=summary.id,
                created=summary.created,
                expires=summary.expires,
                clicks=summary.clicks,
                unique_clicks=summary.unique_clicks,
                campaign=summary.campaign,
                is_active=summary.is_active,
            )
            for summary in listing.links
        ],
    )
