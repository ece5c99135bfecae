"""
Statistics Projection

Derives the read-only reporting fields of a link at query time.
Nothing here is stored; the view is recomputed on every request.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from linktracker.core.link import Link

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class StatsView:
    """Reporting view of a link at a given instant."""
    id: str
    clicks: int
    unique_clicks: int
    created: datetime
    expires: datetime
    is_active: bool
    campaign: str
    last_accessed: Optional[datetime]
    hours_remaining: int
    minutes_remaining: int
    click_through_rate: str

    @property
    def time_remaining(self) -> str:
        return f"{self.hours_remaining} hours {self.minutes_remaining} minutes"


def format_click_through_rate(clicks: int, unique_clicks: int) -> str:
    """
    Unique clicks as a percentage of all clicks.
    
    Returns:
        Two-decimal percentage such as "66.67%", or exactly "0%" when
        there are no clicks yet
    """
    if clicks == 0:
        return "0%"
    return f"{unique_clicks / clicks * 100:.2f}%"


def split_remaining(remaining: timedelta) -> tuple[int, int]:
    """Truncate a non-negative duration to (whole hours, leftover whole minutes)."""
    total_seconds = int(remaining.total_seconds())
    hours, rest = divmod(total_seconds, SECONDS_PER_HOUR)
    return hours, rest // SECONDS_PER_MINUTE


class StatsProjector:
    """Pure derivation of reporting fields."""
    
    def is_active(self, link: Link, now: datetime) -> bool:
        return now < link.expires
    
    def project(self, link: Link, now: datetime) -> StatsView:
        remaining = max(timedelta(0), link.expires - now)
        hours, minutes = split_remaining(remaining)
        
        return StatsView(
            id=link.id,
            clicks=link.clicks,
            unique_clicks=link.unique_clicks,
            created=link.created,
            expires=link.expires,
            is_active=self.is_active(link, now),
            campaign=link.campaign,
            last_accessed=link.last_accessed,
            hours_remaining=hours,
            minutes_remaining=minutes,
            click_through_rate=format_click_through_rate(link.clicks, link.unique_clicks),
        )
