#!/usr/bin/env python
"""
Database seeding script
Populates the database with demo accounts, creators and briefs for development
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy.exc import SQLAlchemyError

from aib_hub.auth import get_password_hash
from aib_hub.config import config
from aib_hub.db import (
    Creator,
    CreatorStatus,
    Job,
    MembershipTier,
    PortfolioItem,
    Profile,
    SessionLocal,
    User,
    UserRole,
    init_db,
)

DEMO_PASSWORD = "testpassword123"

DEMO_CREATORS = [
    {
        "full_name": "Aarav Mehta",
        "city": "Indore",
        "skills": ["Premiere Pro", "After Effects", "Color Grading"],
        "purchased_tags": ["Video Editor", "Motion Designer", "Social Media Designer"],
        "bio": "Wedding films and brand reels with a cinematic grade.",
        "experience": "6 years",
        "whatsapp": "+91 98260 11111",
        "tier": MembershipTier.PLATINUM,
        "is_featured": True,
        "portfolio": [("video", "https://example.com/aarav/reel.mp4", "Showreel 2026")],
    },
    {
        "full_name": "Sana Qureshi",
        "city": "Bhopal",
        "skills": ["Illustrator", "Branding"],
        "purchased_tags": ["Logo Creator"],
        "bio": "Logos and identity systems for small brands.",
        "experience": "4 years",
        "whatsapp": "+91 98260 22222",
        "tier": MembershipTier.GOLD,
        "portfolio": [("image", "https://example.com/sana/logos.png", "Logo set")],
    },
    {
        "full_name": "Kabir Joshi",
        "city": "Remote",
        "skills": ["React", "Figma"],
        "bio": "Landing pages and product UI.",
        "experience": "3 years",
        "tier": MembershipTier.BASE,
    },
]

DEMO_JOBS = [
    {
        "title": "Reel Editor for Cafe Launch",
        "city": "Indore",
        "required_skills": ["Premiere Pro", "CapCut"],
        "description": "Five 30-second reels for an opening week campaign.",
        "budget": "₹8,000 / Project",
        "company": "Brew Street",
        "contact_email": "hello@brewstreet.example",
        "whatsapp": "+91 98260 33333",
    },
    {
        "title": "Logo Refresh",
        "city": "Remote",
        "required_skills": ["Illustrator", "Branding"],
        "description": "Modernise an existing logo and deliver a mini brand sheet.",
        "budget": "₹5,000",
        "company": config.DEFAULT_JOB_COMPANY,
        "contact_email": "founder@example.com",
    },
]


def _add_account(db, email: str, role: UserRole, full_name: str, city: str) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(DEMO_PASSWORD),
        full_name=full_name,
        city=city,
        is_active=True,
    )
    db.add(user)
    db.flush()
    db.add(Profile(id=user.id, role=role.value))
    return user


def seed_database():
    """Seed database with demo data"""
    if config.is_sqlite:
        init_db()

    db = SessionLocal()

    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"⚠️  Database already contains {existing_users} users. Skipping seed.")
            return

        print("Seeding database with demo data...")

        _add_account(db, "admin@example.com", UserRole.ADMIN, "Aib Admin", "Indore")

        for index, entry in enumerate(DEMO_CREATORS):
            user = _add_account(db, f"creator{index + 1}@example.com", UserRole.CREATOR, entry["full_name"], entry["city"])
            creator = Creator(
                linked_user_id=user.id,
                full_name=entry["full_name"],
                email=user.email,
                city=entry["city"],
                skills=entry["skills"],
                purchased_tags=entry.get("purchased_tags", []),
                bio=entry["bio"],
                experience=entry["experience"],
                whatsapp=entry.get("whatsapp", ""),
                is_featured=entry.get("is_featured", False),
                tier=entry["tier"].value,
                status=CreatorStatus.APPROVED.value,
            )
            for item_type, url, title in entry.get("portfolio", []):
                creator.portfolio.append(PortfolioItem(type=item_type, url=url, title=title))
            db.add(creator)

        for entry in DEMO_JOBS:
            db.add(Job(**entry))

        db.commit()

        print("✓ Database seeded successfully!")
        print(f"  Admin: admin@example.com / {DEMO_PASSWORD}")
        print(f"  Creators: creator1..{len(DEMO_CREATORS)}@example.com / {DEMO_PASSWORD}")
        print(f"  Jobs: {len(DEMO_JOBS)}")

    except SQLAlchemyError as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
