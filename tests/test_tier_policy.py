"""
Tests for TierPolicy
Tag quotas, stable tier ranking and badge rules
"""
import pytest
from types import SimpleNamespace

from aib_hub.db.models import MembershipTier
from aib_hub.services.tier_policy import TierPolicy, get_tier_policy


def creator(name, tier):
    return SimpleNamespace(name=name, tier=tier)


class TestTagQuota:
    """Test quota lookup per tier"""

    def setup_method(self):
        self.policy = TierPolicy()

    def test_quota_per_tier(self):
        assert self.policy.tag_quota("BASE") == 0
        assert self.policy.tag_quota("GOLD") == 1
        assert self.policy.tag_quota("PLATINUM") == 3

    def test_quota_accepts_enum(self):
        assert self.policy.tag_quota(MembershipTier.GOLD) == 1

    def test_unknown_tier_raises(self):
        with pytest.raises(ValueError):
            self.policy.tag_quota("DIAMOND")


class TestToggleTag:
    """Test add/remove of purchased tags against the quota"""

    def setup_method(self):
        self.policy = TierPolicy()

    def test_add_within_quota(self):
        result = self.policy.toggle_tag([], "Video Editor", "GOLD")

        assert result.allowed
        assert result.changed
        assert result.added == "Video Editor"
        assert result.tags == ["Video Editor"]

    def test_add_at_quota_is_blocked_without_error(self):
        result = self.policy.toggle_tag(["Video Editor"], "Logo Creator", "GOLD")

        assert not result.allowed
        assert not result.changed
        assert result.tags == ["Video Editor"]
        assert result.message == "TIER LIMIT: GOLD ALLOWS 1 TAGS. UPGRADE TO ADD MORE."

    def test_base_tier_cannot_add(self):
        result = self.policy.toggle_tag([], "Video Editor", "BASE")

        assert not result.allowed
        assert result.tags == []
        assert "BASE ALLOWS 0 TAGS" in result.message

    def test_remove_is_always_allowed(self):
        result = self.policy.toggle_tag(["Video Editor"], "Video Editor", "BASE")

        assert result.allowed
        assert result.removed == "Video Editor"
        assert result.tags == []

    def test_platinum_fills_three_slots(self):
        tags = []
        for tag in ["Video Editor", "Logo Creator", "Web Developer", "Motion Designer"]:
            tags = self.policy.toggle_tag(tags, tag, "PLATINUM").tags

        assert tags == ["Video Editor", "Logo Creator", "Web Developer"]

    def test_quota_holds_after_every_successful_toggle(self):
        """Random-ish toggle sequence never leaves more tags than the quota"""
        sequence = ["A", "B", "A", "C", "D", "B", "E", "C", "A", "F"]
        for tier in ("BASE", "GOLD", "PLATINUM"):
            tags = []
            for tag in sequence:
                result = self.policy.toggle_tag(tags, tag, tier)
                if result.changed:
                    assert len(result.tags) <= self.policy.tag_quota(tier)
                tags = result.tags

    def test_input_list_is_not_mutated(self):
        current = ["Video Editor"]
        self.policy.toggle_tag(current, "Video Editor", "GOLD")

        assert current == ["Video Editor"]

    def test_downgraded_creator_keeps_tags_but_cannot_add(self):
        """Over-quota tags survive until removed; adds are blocked"""
        tags = ["Video Editor"]

        blocked = self.policy.toggle_tag(tags, "Logo Creator", "BASE")
        assert not blocked.allowed
        assert blocked.tags == ["Video Editor"]

        removed = self.policy.toggle_tag(tags, "Video Editor", "BASE")
        assert removed.tags == []


class TestRanking:
    """Test directory ranking"""

    def setup_method(self):
        self.policy = TierPolicy()

    def test_platinum_before_gold_before_base(self):
        creators = [creator("a", "BASE"), creator("b", "GOLD"), creator("c", "PLATINUM")]

        ranked = self.policy.sort_by_tier(creators)

        assert [c.name for c in ranked] == ["c", "b", "a"]

    def test_sort_is_stable_within_tier(self):
        creators = [
            creator("base-1", "BASE"),
            creator("gold-1", "GOLD"),
            creator("base-2", "BASE"),
            creator("plat-1", "PLATINUM"),
            creator("gold-2", "GOLD"),
            creator("base-3", "BASE"),
            creator("plat-2", "PLATINUM"),
        ]

        ranked = [c.name for c in self.policy.sort_by_tier(creators)]

        assert ranked == ["plat-1", "plat-2", "gold-1", "gold-2", "base-1", "base-2", "base-3"]

    def test_custom_tier_accessor(self):
        rows = [{"id": 1, "tier": "GOLD"}, {"id": 2, "tier": "PLATINUM"}]

        ranked = self.policy.sort_by_tier(rows, tier_of=lambda row: row["tier"])

        assert [row["id"] for row in ranked] == [2, 1]


class TestBadges:
    """Test premium display rules"""

    def setup_method(self):
        self.policy = TierPolicy()

    def test_premium_is_any_tier_above_base(self):
        assert not self.policy.is_premium("BASE")
        assert self.policy.is_premium("GOLD")
        assert self.policy.is_premium(MembershipTier.PLATINUM)

    def test_badge_copy(self):
        assert self.policy.badge("BASE") is None
        assert self.policy.badge("GOLD") == "Gold Verified"
        assert self.policy.badge("PLATINUM") == "Platinum Elite"

    def test_list_tiers_lowest_first(self):
        tiers = self.policy.list_tiers()

        assert [t.name for t in tiers] == ["BASE", "GOLD", "PLATINUM"]
        assert tiers[2].display_name == "Steel Platinum"
        assert "Direct WhatsApp contact" in tiers[2].features

    def test_tag_catalogue(self):
        labels = [tag["label"] for tag in self.policy.tag_catalogue()["tags"]]

        assert "Video Editor" in labels
        assert "UI/UX Design" in labels


class TestTierFile:
    """Test loading tier rules from a custom file"""

    def test_custom_quota(self, tmp_path):
        tiers_file = tmp_path / "tiers.yaml"
        tiers_file.write_text(
            "tiers:\n"
            "  BASE: {rank: 0, tag_quota: 1}\n"
            "  GOLD: {rank: 1, tag_quota: 2}\n"
            "  PLATINUM: {rank: 2, tag_quota: 5}\n"
        )

        policy = TierPolicy(tiers_file)

        assert policy.tag_quota("BASE") == 1
        assert policy.tag_quota("PLATINUM") == 5
        assert policy.tag_catalogue() == {"tags": []}

    def test_missing_tier_is_rejected(self, tmp_path):
        tiers_file = tmp_path / "tiers.yaml"
        tiers_file.write_text("tiers:\n  BASE: {rank: 0, tag_quota: 0}\n")

        with pytest.raises(ValueError, match="GOLD"):
            TierPolicy(tiers_file).list_tiers()

    def test_global_policy_is_shared(self):
        assert get_tier_policy() is get_tier_policy()
