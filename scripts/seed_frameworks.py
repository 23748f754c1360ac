#!/usr/bin/env python3
"""
Restorative Framework Seeder

Inserts the built-in restorative conversation frameworks. Frameworks are
matched on title, so running the script twice is safe.

Usage:
    python scripts/seed_frameworks.py
    python scripts/seed_frameworks.py --create-tables   # create schema first (local SQLite)
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from edpsych.core.database import engine, get_db
from edpsych.core.models import Base, RestorativeFramework

BUILTIN_FRAMEWORKS: list[dict[str, Any]] = [
    {
        "title": "Basic Restorative Enquiry",
        "description": "Five core questions for resolving everyday incidents between pupils.",
        "age_group": "all",
        "scenario": "minor-conflict",
        "steps": [
            {
                "title": "What happened?",
                "description": "Let each person describe the incident in their own words.",
                "questions": ["What happened?", "What were you thinking at the time?"],
            },
            {
                "title": "Who has been affected?",
                "description": "Explore the impact on everyone involved.",
                "questions": [
                    "Who has been affected by what happened?",
                    "In what way have they been affected?",
                ],
            },
            {
                "title": "Putting things right",
                "description": "Agree what needs to happen next.",
                "questions": [
                    "What do you need to do to make things right?",
                    "How can we make sure this does not happen again?",
                ],
            },
        ],
    },
    {
        "title": "Primary School Circle Time",
        "description": "A whole-class circle for repairing relationships after a classroom conflict.",
        "age_group": "primary",
        "scenario": "classroom-conflict",
        "steps": [
            {
                "title": "Opening round",
                "description": "Pass the talking object and check in with every child.",
                "questions": ["How are you feeling today?"],
            },
            {
                "title": "Sharing",
                "description": "Children describe what happened and how it made them feel.",
                "questions": ["What happened in our class?", "How did it make you feel?"],
            },
            {
                "title": "Class agreement",
                "description": "Agree together on a class promise.",
                "questions": ["What can we all do to help our class feel safe and happy?"],
            },
        ],
    },
    {
        "title": "Secondary Peer Mediation",
        "description": "Trained student mediators support two peers to reach an agreement.",
        "age_group": "secondary",
        "scenario": "peer-conflict",
        "steps": [
            {
                "title": "Ground rules",
                "description": "Mediators introduce themselves and agree ground rules.",
                "questions": ["Do you both agree to listen without interrupting?"],
            },
            {
                "title": "Each side of the story",
                "description": "Each participant explains their perspective uninterrupted.",
                "questions": [
                    "Can you tell us what happened from your point of view?",
                    "How has this affected you?",
                ],
            },
            {
                "title": "Finding solutions",
                "description": "Participants propose and agree on a resolution.",
                "questions": [
                    "What would you like to happen now?",
                    "What are you willing to do to resolve this?",
                ],
            },
            {
                "title": "Written agreement",
                "description": "Record the agreement and arrange a check-in.",
                "questions": ["When shall we check in to see how things are going?"],
            },
        ],
    },
]


async def seed_frameworks(db: AsyncSession) -> int:
    """Insert missing built-in frameworks.

    Returns:
        Number of frameworks created
    """
    result = await db.execute(select(RestorativeFramework.title))
    existing = set(result.scalars().all())

    created = 0
    for framework_data in BUILTIN_FRAMEWORKS:
        if framework_data["title"] in existing:
            print(f"⏭️  Skipping existing framework: {framework_data['title']}")
            continue

        db.add(RestorativeFramework(**framework_data))
        created += 1
        print(f"✅ Added framework: {framework_data['title']}")

    await db.commit()
    return created


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed built-in restorative frameworks")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create all tables before seeding (use Alembic for PostgreSQL)",
    )
    args = parser.parse_args()

    print("🌱 Seeding restorative frameworks...")

    if args.create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("✅ Database tables created/verified")

    async for db in get_db():
        created = await seed_frameworks(db)

    await engine.dispose()
    print(f"\n🎉 Seeding complete: {created} framework(s) added")


if __name__ == "__main__":
    asyncio.run(main())
