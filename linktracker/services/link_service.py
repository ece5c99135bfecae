"""
Link Service

This service orchestrates the link lifecycle:
- create: validate, allocate a unique id, store a zero-valued link
- record_click: reject unknown/expired links, apply the click atomically
- get_stats: read-only projection of one link
- list_all: activity summary of every stored link

Design Decisions:
- The store, id generator and clock are injected, so the service holds no
  global state and runs against any backend
- Click accounting and stats derivation are pure and run inside/after the
  store call; the store is the only place that blocks
- Errors propagate unchanged to the API layer, except duplicate ids which
  are retried here
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from linktracker.core.clock import Clock, utcnow
from linktracker.core.exceptions import (
    DuplicateIdentifierError,
    IdentifierExhaustedError,
    LinkExpiredError,
)
from linktracker.core.link import Link
from linktracker.core.validators import validate_expires_in_hours
from linktracker.services.click_accountant import ClickAccountant
from linktracker.services.identifier import IdentifierGenerator
from linktracker.services.stats_projector import StatsProjector, StatsView
from linktracker.store.base import LinkStore

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN_HOURS = 24
DEFAULT_CAMPAIGN = "default"
DEFAULT_MAX_ID_ATTEMPTS = 5


@dataclass(frozen=True)
class LinkSummary:
    """One entry of the link listing."""
    id: str
    created: datetime
    expires: datetime
    clicks: int
    unique_clicks: int
    campaign: str
    is_active: bool


@dataclass(frozen=True)
class LinkListing:
    """Result of list_all."""
    count: int
    active: int
    links: List[LinkSummary]


class LinkService:
    """
    Core business logic for tracking links.
    
    Separated from API layer for testability and maintainability.
    """
    
    def __init__(
        self,
        store: LinkStore,
        generator: Optional[IdentifierGenerator] = None,
        clock: Clock = utcnow,
        max_id_attempts: int = DEFAULT_MAX_ID_ATTEMPTS,
        default_campaign: str = DEFAULT_CAMPAIGN
    ):
        """
        Initialize the link service.
        
        Args:
            store: Link store holding every link
            generator: Id generator (8 hex characters by default)
            clock: Returns the current UTC time
            max_id_attempts: Ids to try before IdentifierExhaustedError
            default_campaign: Campaign used when create() gets None
        """
        self.store = store
        self.generator = generator or IdentifierGenerator()
        self.clock = clock
        self.max_id_attempts = max_id_attempts
        self.default_campaign = default_campaign
        self.accountant = ClickAccountant()
        self.projector = StatsProjector()
    
    async def create(
        self,
        expires_in_hours=DEFAULT_EXPIRES_IN_HOURS,
        campaign: Optional[str] = None
    ) -> Link:
        """
        Create a new tracking link.
        
        Args:
            expires_in_hours: Lifetime in hours, a finite number >= 1
            campaign: Initial campaign label (default campaign if None)
        
        Returns:
            The stored link
        
        Raises:
            InvalidInputError: If expires_in_hours is invalid
            IdentifierExhaustedError: If every generated id collided
            BackendUnavailableError: If the store fails
        """
        hours = validate_expires_in_hours(expires_in_hours)
        if campaign is None:
            campaign = self.default_campaign
        
        for attempt in range(1, self.max_id_attempts + 1):
            now = self.clock()
            link = Link(
                id=self.generator.generate(),
                created=now,
                expires=now + timedelta(hours=hours),
                campaign=campaign,
            )
            try:
                await self.store.insert(link)
            except DuplicateIdentifierError:
                logger.warning(f"Link id collision on '{link.id}' (attempt {attempt})")
                continue
            
            logger.info(f"Created link {link.id} campaign={campaign} expires={link.expires.isoformat()}")
            return link
        
        raise IdentifierExhaustedError(self.max_id_attempts)
    
    async def record_click(
        self,
        link_id: str,
        fingerprint: str,
        campaign: Optional[str] = None
    ) -> Link:
        """
        Record a click against a link.
        
        The expiry check runs twice: once up front to avoid a write attempt,
        and again inside the atomic update in case the link expired between
        the two.
        
        Returns:
            The link after the click was applied
        
        Raises:
            LinkNotFoundError: If the link does not exist
            LinkExpiredError: If the link has expired (nothing is written)
            BackendUnavailableError: If the store fails
        """
        link = await self.store.fetch(link_id)
        
        now = self.clock()
        if link.is_expired(now):
            logger.info(f"Rejected click on expired link {link_id}")
            raise LinkExpiredError(link_id)

        return await self.store.update(
            link_id,
            lambda current: self.accountant.apply(current, fingerprint, campaign, now)
        )
    
    async def get_stats(self, link_id: str) -> StatsView:
        """
        Project reporting fields for a link, expired or not.
        
        Raises:
            LinkNotFoundError: If the link does not exist
        """
        link = await self.store.fetch(link_id)
        return self.projector.project(link, self.clock())
    
    async def list_all(self) -> LinkListing:
        """Summarize every stored link, including expired ones not yet reaped."""
        links = await self.store.enumerate()
        now = self.clock()
        
        summaries = [
            LinkSummary(
                id=link.id,
                created=link.created,
                expires=link.expires,
                clicks=link.clicks,
                unique_clicks=link.unique_clicks,
                campaign=link.campaign,
                is_active=self.projector.is_active(link, now),
            )
            for link in links
        ]
        
        return LinkListing(
            count=len(summaries),
            active=sum(1 for summary in summaries if summary.is_active),
            links=summaries,
        )
