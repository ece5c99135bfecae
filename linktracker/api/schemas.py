"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
JSON keys are camelCase on the wire; attributes stay snake_case in Python.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing fields with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateLinkRequest(CamelModel):
    """Request model for link creation endpoint."""
    expires_in_hours: Optional[float] = Field(
        default=None,
        description="Lifetime of the link in hours (default 24, must be >= 1)"
    )
    campaign: Optional[str] = Field(default=None, description="Campaign label")


class CreateLinkResponse(CamelModel):
    """Response model for link creation endpoint."""
    id: str = Field(..., description="The generated link id")
    expires: datetime = Field(..., description="Absolute expiry (ISO-8601)")
    campaign: str
    share_url: str = Field(..., description="URL to share; every visit is tracked")
    info: str = "Share this link to track clicks"


class StatsResponse(CamelModel):
    """Response model for single link statistics endpoint."""
    id: str
    clicks: int
    unique_clicks: int
    created: datetime
    expires: datetime
    is_active: bool
    campaign: str
    last_accessed: Optional[datetime] = None
    time_remaining: str
    click_through_rate: str


class LinkSummaryResponse(CamelModel):
    """One entry of the link listing."""
    id: str
    created: datetime
    expires: datetime
    clicks: int
    unique_clicks: int
    campaign: str
    is_active: bool


class LinkListResponse(CamelModel):
    """Response model for the link listing endpoint."""
    count: int
    active: int
    links: List[LinkSummaryResponse]
