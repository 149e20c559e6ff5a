"""
Listing Service - filter, rank and catalogue creator and job collections
All filtering happens in-process over fully fetched collections
"""
from dataclasses import dataclass, asdict
from typing import Generic, Iterable, List, Optional, TypeVar

from ..db.models import CreatorStatus, MembershipTier
from ..schemas import CreatorCard, CreatorSchema, JobSchema
from .tier_policy import TierPolicy
from .whatsapp import whatsapp_link

T = TypeVar("T")

CARD_TAG_COUNT = 2


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


@dataclass
class CreatorFilters:
    """Directory filters; an empty value means no constraint"""
    search: str = ""
    city: str = ""
    skill: str = ""

    def __post_init__(self):
        self.search = _clean(self.search)
        self.city = _clean(self.city)
        self.skill = _clean(self.skill)

    def matches(self, creator: CreatorSchema) -> bool:
        needle = self.search.lower()
        matches_search = needle in creator.full_name.lower() or needle in (creator.bio or "").lower()
        matches_city = not self.city or creator.city == self.city
        matches_skill = not self.skill or self.skill in creator.skills
        return matches_search and matches_city and matches_skill

    def as_dict(self) -> dict:
        return {key: (value or None) for key, value in asdict(self).items()}


@dataclass
class JobFilters:
    city: str = ""
    skill: str = ""

    def __post_init__(self):
        self.city = _clean(self.city)
        self.skill = _clean(self.skill)

    def matches(self, job: JobSchema) -> bool:
        matches_city = not self.city or job.city == self.city
        matches_skill = not self.skill or self.skill in job.required_skills
        return matches_city and matches_skill

    def as_dict(self) -> dict:
        return {key: (value or None) for key, value in asdict(self).items()}


@dataclass
class ListingResult(Generic[T]):
    items: List[T]
    filters: object

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def show_reset_filters(self) -> bool:
        """An empty result offers the reset-filters action"""
        return not self.items


class ListingService:
    """Compose search, city and skill filters and rank creators by tier"""

    def __init__(self, policy: TierPolicy):
        self.policy = policy

    def filter_creators(self, creators: Iterable[CreatorSchema], filters: CreatorFilters) -> ListingResult:
        """
        Public directory view: approved creators matching every active filter,
        ranked PLATINUM > GOLD > BASE with source order kept inside a tier.
        """
        visible = [
            creator for creator in creators
            if creator.status == CreatorStatus.APPROVED and filters.matches(creator)
        ]
        ranked = self.policy.sort_by_tier(visible, tier_of=lambda c: c.tier.value)
        return ListingResult(items=ranked, filters=filters)

    def filter_jobs(self, jobs: Iterable[JobSchema], filters: JobFilters) -> ListingResult:
        return ListingResult(items=[job for job in jobs if filters.matches(job)], filters=filters)

    def featured_creators(self, creators: Iterable[CreatorSchema], limit: int) -> List[CreatorSchema]:
        """Approved PLATINUM or featured creators, first `limit` in source order"""
        spotlight = [
            creator for creator in creators
            if creator.status == CreatorStatus.APPROVED
            and (creator.tier == MembershipTier.PLATINUM or creator.is_featured)
        ]
        return spotlight[:limit]

    def latest_jobs(self, jobs: Iterable[JobSchema], limit: int) -> List[JobSchema]:
        return sorted(jobs, key=lambda job: job.posted_date, reverse=True)[:limit]

    def city_catalogue(self, creators: Iterable[CreatorSchema], jobs: Iterable[JobSchema]) -> List[str]:
        """Sorted distinct cities over approved creators and all jobs"""
        cities = {creator.city for creator in creators if creator.status == CreatorStatus.APPROVED and creator.city}
        cities.update(job.city for job in jobs if job.city)
        return sorted(cities)

    def skill_catalogue(self, creators: Iterable[CreatorSchema]) -> List[str]:
        skills = set()
        for creator in creators:
            if creator.status == CreatorStatus.APPROVED:
                skills.update(creator.skills)
        return sorted(skills)

    def card_tags(self, creator: CreatorSchema) -> List[str]:
        """First two purchased tags, or skills when the creator holds none"""
        source = creator.purchased_tags if creator.purchased_tags else creator.skills
        return list(source[:CARD_TAG_COUNT])

    def to_card(self, creator: CreatorSchema) -> CreatorCard:
        tier = creator.tier.value
        return CreatorCard(
            **creator.model_dump(),
            is_premium=self.policy.is_premium(tier),
            badge=self.policy.badge(tier),
            card_tags=self.card_tags(creator),
            whatsapp_link=whatsapp_link(creator.whatsapp),
        )
