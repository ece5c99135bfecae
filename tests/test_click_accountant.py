"""Tests for click accounting over link snapshots."""

import random
from datetime import timedelta

import pytest

from linktracker.core.exceptions import LinkExpiredError
from linktracker.core.link import Link
from linktracker.services.click_accountant import ClickAccountant

from tests.conftest import START_TIME


def make_link(**overrides) -> Link:
    fields = {
        "id": "abc12345",
        "created": START_TIME,
        "expires": START_TIME + timedelta(hours=1),
        "campaign": "default",
    }
    fields.update(overrides)
    return Link(**fields)


class TestClickAccountant:
    """Test ClickAccountant.apply."""
    
    def setup_method(self):
        self.accountant = ClickAccountant()
        self.now = START_TIME + timedelta(minutes=5)
    
    def test_first_click_counts_as_unique(self):
        link = self.accountant.apply(make_link(), "visitor-a", None, self.now)
        
        assert link.clicks == 1
        assert link.unique_clicks == 1
        assert link.clickers == frozenset({"visitor-a"})
        assert link.last_accessed == self.now
    
    def test_repeat_fingerprint_only_increments_total(self):
        link = self.accountant.apply(make_link(), "visitor-a", None, self.now)
        link = self.accountant.apply(link, "visitor-a", None, self.now)
        
        assert link.clicks == 2
        assert link.unique_clicks == 1
    
    def test_input_snapshot_is_not_mutated(self):
        original = make_link()
        self.accountant.apply(original, "visitor-a", "ads", self.now)
        
        assert original.clicks == 0
        assert original.clickers == frozenset()
        assert original.campaign == "default"
        assert original.last_accessed is None
    
    def test_campaign_overwritten_when_supplied(self):
        link = self.accountant.apply(make_link(), "visitor-a", "newsletter", self.now)
        assert link.campaign == "newsletter"
    
    @pytest.mark.parametrize("campaign", [None, ""])
    def test_campaign_kept_when_missing_or_empty(self, campaign):
        link = self.accountant.apply(make_link(campaign="ads"), "visitor-a", campaign, self.now)
        assert link.campaign == "ads"
    
    def test_last_accessed_tracks_latest_click(self):
        later = self.now + timedelta(minutes=10)
        link = self.accountant.apply(make_link(), "visitor-a", None, self.now)
        link = self.accountant.apply(link, "visitor-b", None, later)
        assert link.last_accessed == later
    
    def test_expired_link_rejected(self):
        link = make_link()
        with pytest.raises(LinkExpiredError):
            self.accountant.apply(link, "visitor-a", None, link.expires + timedelta(seconds=1))
    
    def test_click_exactly_at_expiry_is_accepted(self):
        """Links expire strictly after their expiry instant."""
        link = make_link()
        updated = self.accountant.apply(link, "visitor-a", None, link.expires)
        assert updated.clicks == 1
    
    def test_counts_for_any_click_order(self):
        """N clicks over K fingerprints give clicks == N and unique == K."""
        fingerprints = ["a", "b", "c", "a", "a", "d", "b", "c", "e", "a"]
        rng = random.Random(7)
        
        for _ in range(20):
            rng.shuffle(fingerprints)
            link = make_link()
            for fingerprint in fingerprints:
                link = self.accountant.apply(link, fingerprint, None, self.now)
                assert link.unique_clicks <= link.clicks
            assert link.clicks == len(fingerprints)
            assert link.unique_clicks == len(set(fingerprints))
