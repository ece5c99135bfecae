"""
Tests for the LinkService orchestration.

Runs against both store backends (see the link_store fixture) with a fake
clock, so expiry is exercised by moving time forward.
"""

import asyncio
from datetime import timedelta

import pytest

from linktracker.core.exceptions import (
    IdentifierExhaustedError,
    InvalidInputError,
    LinkExpiredError,
    LinkNotFoundError,
)
from linktracker.services.expiry_reaper import ExpiryReaper
from linktracker.services.link_service import LinkService
from linktracker.store import InMemoryLinkStore

from tests.conftest import START_TIME, FakeClock, SequenceGenerator


class TestCreate:
    """Test link creation."""
    
    @pytest.mark.asyncio
    async def test_new_link_has_zero_counters(self, service):
        link = await service.create(2, "ads")
        
        assert link.clicks == 0
        assert link.unique_clicks == 0
        assert link.clickers == frozenset()
        assert link.last_accessed is None
        assert link.campaign == "ads"
        assert link.created == START_TIME
        assert link.expires == START_TIME + timedelta(hours=2)
    
    @pytest.mark.asyncio
    async def test_defaults(self, service):
        link = await service.create()
        
        assert link.campaign == "default"
        assert link.expires - link.created == timedelta(hours=24)
    
    @pytest.mark.asyncio
    async def test_fractional_hours(self, service):
        link = await service.create(1.5)
        assert link.expires - link.created == timedelta(minutes=90)
    
    @pytest.mark.asyncio
    async def test_link_is_stored(self, service, link_store):
        link = await service.create(1)
        assert await link_store.fetch(link.id) == link
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", [0, 0.99, -1, float("nan"), float("inf"), 1e8, 87601, "12", None])
    async def test_invalid_expiry_rejected(self, service, link_store, hours):
        with pytest.raises(InvalidInputError):
            await service.create(hours)
        assert await link_store.count() == 0
    
    @pytest.mark.asyncio
    async def test_duplicate_id_is_retried(self, link_store, clock):
        existing = await LinkService(
            link_store, generator=SequenceGenerator("aaaa1111"), clock=clock
        ).create(1)
        generator = SequenceGenerator("aaaa1111", "aaaa1111", "bbbb2222")
        service = LinkService(link_store, generator=generator, clock=clock)
        
        link = await service.create(1)
        
        assert link.id == "bbbb2222"
        assert generator.calls == 3
        assert await link_store.fetch(existing.id) == existing
    
    @pytest.mark.asyncio
    async def test_exhausted_retries(self, link_store, clock):
        await LinkService(link_store, generator=SequenceGenerator("aaaa1111"), clock=clock).create(1)
        service = LinkService(
            link_store,
            generator=SequenceGenerator(*["aaaa1111"] * 3),
            clock=clock,
            max_id_attempts=3,
        )
        
        with pytest.raises(IdentifierExhaustedError):
            await service.create(1)
        assert await link_store.count() == 1


class TestRecordClick:
    """Test click recording."""
    
    @pytest.mark.asyncio
    async def test_click_scenario(self, service, clock):
        """A, A, B from the ads campaign gives 3 clicks, 2 unique, 66.67%."""
        link = await service.create(1, "ads")
        
        clock.advance(minutes=1)
        after_a = await service.record_click(link.id, "A")
        assert (after_a.clicks, after_a.unique_clicks) == (1, 1)
        
        after_second_a = await service.record_click(link.id, "A")
        assert (after_second_a.clicks, after_second_a.unique_clicks) == (2, 1)
        
        after_b = await service.record_click(link.id, "B")
        assert (after_b.clicks, after_b.unique_clicks) == (3, 2)
        
        stats = await service.get_stats(link.id)
        assert stats.click_through_rate == "66.67%"
        assert stats.campaign == "ads"
        assert stats.last_accessed == clock.now
    
    @pytest.mark.asyncio
    async def test_click_campaign_overrides_stored_campaign(self, service):
        link = await service.create(1, "ads")
        
        await service.record_click(link.id, "A", "newsletter")
        await service.record_click(link.id, "B", "")
        
        assert (await service.get_stats(link.id)).campaign == "newsletter"
    
    @pytest.mark.asyncio
    async def test_unknown_link(self, service):
        with pytest.raises(LinkNotFoundError):
            await service.record_click("deadbeef", "A")
    
    @pytest.mark.asyncio
    async def test_expired_link_is_not_mutated(self, service, link_store, clock):
        link = await service.create(1)
        await service.record_click(link.id, "A")
        before = await link_store.fetch(link.id)
        
        clock.advance(hours=1, seconds=1)
        with pytest.raises(LinkExpiredError):
            await service.record_click(link.id, "B", "late")
        
        assert await link_store.fetch(link.id) == before
    
    @pytest.mark.asyncio
    async def test_concurrent_clicks_are_all_counted(self, service):
        """Clicks from 3 visitors, 12 in total, applied concurrently."""
        link = await service.create(1)
        fingerprints = ["A", "B", "C"] * 4
        
        await asyncio.gather(*(
            service.record_click(link.id, fingerprint) for fingerprint in fingerprints
        ))
        
        stats = await service.get_stats(link.id)
        assert stats.clicks == 12
        assert stats.unique_clicks == 3


class TestGetStats:
    """Test the read-only stats view."""
    
    @pytest.mark.asyncio
    async def test_fresh_link(self, service, clock):
        link = await service.create(2)
        clock.advance(minutes=45)
        
        stats = await service.get_stats(link.id)
        
        assert stats.is_active is True
        assert stats.time_remaining == "1 hours 15 minutes"
        assert stats.click_through_rate == "0%"
        assert stats.last_accessed is None
    
    @pytest.mark.asyncio
    async def test_stats_never_count_as_clicks(self, service):
        link = await service.create(1)
        for _ in range(3):
            await service.get_stats(link.id)
        assert (await service.get_stats(link.id)).clicks == 0
    
    @pytest.mark.asyncio
    async def test_expired_link_still_reported_until_reaped(self, service, link_store, clock):
        link = await service.create(1)
        await service.record_click(link.id, "A")
        await service.record_click(link.id, "A")
        clock.advance(hours=3)
        
        stats = await service.get_stats(link.id)
        assert stats.is_active is False
        assert stats.clicks == 2
        assert stats.unique_clicks == 1
        assert stats.time_remaining == "0 hours 0 minutes"
        
        await ExpiryReaper(link_store, clock=clock).sweep()
        
        with pytest.raises(LinkNotFoundError):
            await service.get_stats(link.id)
    
    @pytest.mark.asyncio
    async def test_unknown_link(self, service):
        with pytest.raises(LinkNotFoundError):
            await service.get_stats("deadbeef")


class TestListAll:
    """Test the listing of every link."""
    
    @pytest.mark.asyncio
    async def test_counts_active_and_expired(self, service, clock):
        short = await service.create(1, "short")
        long = await service.create(48, "long")
        await service.record_click(long.id, "A")
        clock.advance(hours=2)
        
        listing = await service.list_all()
        
        assert listing.count == 2
        assert listing.active == 1
        by_id = {summary.id: summary for summary in listing.links}
        assert by_id[short.id].is_active is False
        assert by_id[long.id].is_active is True
        assert by_id[long.id].clicks == 1
        assert by_id[long.id].campaign == "long"
    
    @pytest.mark.asyncio
    async def test_empty(self, service):
        listing = await service.list_all()
        assert (listing.count, listing.active, listing.links) == (0, 0, [])


@pytest.mark.asyncio
async def test_services_do_not_share_state():
    """Each service only sees its own injected store."""
    clock = FakeClock()
    first = LinkService(InMemoryLinkStore(), clock=clock)
    second = LinkService(InMemoryLinkStore(), clock=clock)
    
    link = await first.create(1)
    
    with pytest.raises(LinkNotFoundError):
        await second.get_stats(link.id)
