"""
Click Accounting

Applies a single click to a link snapshot. No I/O happens here: the
caller (the link service, inside LinkStore.update) is responsible for
persisting the returned link.
"""

import dataclasses
from datetime import datetime
from typing import Optional

from linktracker.core.exceptions import LinkExpiredError
from linktracker.core.link import Link


class ClickAccountant:
    """Deterministic click accounting over immutable links."""
    
    def apply(
        self,
        link: Link,
        fingerprint: str,
        campaign: Optional[str],
        now: datetime
    ) -> Link:
        """
        Record one click.
        
        Args:
            link: Current link state
            fingerprint: Opaque visitor identity used for deduplication
            campaign: Campaign label from the click, if any
            now: Time of the click
        
        Returns:
            New link with counters and timestamps updated
        
        Raises:
            LinkExpiredError: If the link expired before now
        """
        if link.is_expired(now):
            raise LinkExpiredError(link.id)
        
        clickers = link.clickers
        unique_clicks = link.unique_clicks
        if fingerprint not in clickers:
            clickers = clickers | {fingerprint}
            unique_clicks += 1
        
        return dataclasses.replace(
            link,
            clicks=link.clicks + 1,
            unique_clicks=unique_clicks,
            clickers=clickers,
            campaign=campaign if campaign else link.campaign,
            last_accessed=now,
        )
