"""
Database Models for Link Tracker Service

This module defines the SQLModel schema for the relational link store:
- LinkRecord: one row per tracking link with its click counters

Design Decisions:
- id is the primary key (the store never generates it)
- clickers is a JSON array; membership tests happen in Python on the
  decoded set, which is fine for per-link visitor counts
- version supports optimistic concurrency: every write bumps it and only
  succeeds if the row still has the version that was read
- Index on expires for the reaper sweep
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Integer, String
from sqlmodel import Column, Field, SQLModel


class LinkRecord(SQLModel, table=True):
    """
    Table storing tracking links.
    
    Fields:
    - id: Generated short identifier (primary key)
    - created: Creation timestamp
    - expires: Absolute expiry timestamp
    - clicks: Total clicks recorded
    - unique_clicks: Distinct fingerprints recorded
    - clickers: Fingerprints already counted (JSON array)
    - campaign: Latest campaign label
    - last_accessed: Time of the latest click
    - version: Optimistic concurrency counter
    """
    __tablename__ = "links"
    
    id: str = Field(sa_column=Column(String(32), primary_key=True))
    created: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    expires: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    unique_clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    clickers: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False)
    )
    campaign: str = Field(sa_column=Column(String(255), nullable=False))
    last_accessed: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    version: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
