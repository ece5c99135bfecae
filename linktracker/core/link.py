from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class Link:
    """Represent a tracked, time-bounded link and its click counters.
    
    Attributes:
        id (str):
            Short identifier generated at creation.
        created (datetime):
            Creation time (UTC).
        expires (datetime):
            Absolute expiry (UTC); clicks after this instant are rejected.
        campaign (str):
            Label overwritten by the latest click or create request supplying one.
        clicks (int):
            Total click events recorded.
        unique_clicks (int):
            Number of distinct visitor fingerprints seen.
        clickers (FrozenSet[str]):
            Fingerprints already counted towards unique_clicks.
        last_accessed (Optional[datetime]):
            Time of the most recent click, None until the first one.
    
    Instances are immutable; click accounting produces a new Link.
    """
    id: str
    created: datetime
    expires: datetime
    campaign: str
    clicks: int = 0
    unique_clicks: int = 0
    clickers: FrozenSet[str] = frozenset()
    last_accessed: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires
