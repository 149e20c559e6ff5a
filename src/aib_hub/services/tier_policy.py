"""
Tier Policy - membership tier entitlements and directory ranking
Tier rules (quota, rank, badge copy, features) are loaded from data/tiers.yaml
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union
import logging

import yaml

from ..config import config
from ..db.models import MembershipTier

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIER_LIMIT_MESSAGE = "TIER LIMIT: {tier} ALLOWS {quota} TAGS. UPGRADE TO ADD MORE."


@dataclass
class TagToggleResult:
    """
    Outcome of a tag toggle.

    A blocked add is not an error: `allowed` is False, `message` carries the
    user-facing tier limit text and `tags` is the unchanged list.
    """
    tags: List[str]
    allowed: bool = True
    added: Optional[str] = None
    removed: Optional[str] = None
    message: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.added is not None or self.removed is not None


@dataclass
class TierRules:
    name: str
    display_name: str
    rank: int
    tag_quota: int
    badge: Optional[str] = None
    price: Optional[str] = None
    features: List[str] = field(default_factory=list)


def _default_tiers_path() -> Path:
    return Path(__file__).parent.parent / "data" / "tiers.yaml"


class TierPolicy:
    """
    Membership tier entitlement engine
    Answers quota, ranking and badge questions for a tier
    """

    def __init__(self, tiers_path: Optional[Union[str, Path]] = None):
        self.tiers_path = Path(tiers_path) if tiers_path else _default_tiers_path()
        self._rules: Optional[Dict[str, TierRules]] = None
        self._tag_catalogue: Optional[Dict[str, Any]] = None

    def _load(self):
        """Load tier configuration from YAML file"""
        if self._rules is not None:
            return

        with open(self.tiers_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        rules = {}
        for name, tier_config in (raw.get("tiers") or {}).items():
            rules[name] = TierRules(
                name=name,
                display_name=tier_config.get("display_name", name.title()),
                rank=int(tier_config.get("rank", 0)),
                tag_quota=int(tier_config.get("tag_quota", 0)),
                badge=tier_config.get("badge"),
                price=tier_config.get("price"),
                features=list(tier_config.get("features") or []),
            )

        missing = [tier.value for tier in MembershipTier if tier.value not in rules]
        if missing:
            raise ValueError(f"Tier configuration {self.tiers_path} is missing tiers: {', '.join(missing)}")

        self._rules = rules
        self._tag_catalogue = raw.get("tag_catalogue") or {"tags": []}
        logger.info(f"Loaded {len(rules)} membership tiers from {self.tiers_path.name}")

    def get_rules(self, tier: Union[str, MembershipTier]) -> TierRules:
        """Get rules for a tier, raising ValueError for an unknown tier"""
        self._load()
        name = tier.value if isinstance(tier, MembershipTier) else str(tier)
        rules = self._rules.get(name)
        if rules is None:
            raise ValueError(f"Unknown membership tier: {name}")
        return rules

    def tag_quota(self, tier: Union[str, MembershipTier]) -> int:
        return self.get_rules(tier).tag_quota

    def rank(self, tier: Union[str, MembershipTier]) -> int:
        return self.get_rules(tier).rank

    def is_premium(self, tier: Union[str, MembershipTier]) -> bool:
        """Premium badge and highlight apply to every tier above BASE"""
        name = tier.value if isinstance(tier, MembershipTier) else str(tier)
        return name != MembershipTier.BASE.value

    def badge(self, tier: Union[str, MembershipTier]) -> Optional[str]:
        if not self.is_premium(tier):
            return None
        return self.get_rules(tier).badge

    def sort_by_tier(self, items: Iterable[T], tier_of: Callable[[T], str] = None) -> List[T]:
        """
        Rank items PLATINUM > GOLD > BASE.

        Relies on sorted() being stable: items of the same tier keep their
        source order, there is no secondary key.
        """
        if tier_of is None:
            tier_of = lambda item: item.tier  # noqa: E731
        return sorted(items, key=lambda item: -self.rank(tier_of(item)))

    def toggle_tag(self, current_tags: Iterable[str], tag: str, tier: Union[str, MembershipTier]) -> TagToggleResult:
        """
        Add the tag if absent, remove it if present.

        Adding is refused once the creator already holds quota(tier) tags.
        Removing is always allowed, so a creator holding more tags than the
        current quota (after a downgrade) keeps them until they remove one.
        """
        tags = list(current_tags or [])

        if tag in tags:
            tags.remove(tag)
            return TagToggleResult(tags=tags, removed=tag)

        quota = self.tag_quota(tier)
        if len(tags) >= quota:
            name = tier.value if isinstance(tier, MembershipTier) else str(tier)
            message = TIER_LIMIT_MESSAGE.format(tier=name, quota=quota)
            logger.info(f"Tag add blocked: {name} quota {quota} reached ({len(tags)} held)")
            return TagToggleResult(tags=tags, allowed=False, message=message)

        tags.append(tag)
        return TagToggleResult(tags=tags, added=tag)

    def list_tiers(self) -> List[TierRules]:
        """All tiers, lowest rank first"""
        self._load()
        return sorted(self._rules.values(), key=lambda rules: rules.rank)

    def tag_catalogue(self) -> Dict[str, Any]:
        self._load()
        return self._tag_catalogue


_policy_instance: Optional[TierPolicy] = None


def get_tier_policy() -> TierPolicy:
    """Get global tier policy instance (TIERS_FILE overrides the bundled rules)"""
    global _policy_instance
    if _policy_instance is None:
        _policy_instance = TierPolicy(config.TIERS_FILE)
    return _policy_instance
