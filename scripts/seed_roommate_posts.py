#!/usr/bin/env python3
"""
Seed demo roommate posts with randomized preference records so the matching
endpoints have a candidate pool to rank.

Run with:
    python scripts/seed_roommate_posts.py [count]
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import random
import uuid

from roommatch.domain.questionnaire import AnswerType
from roommatch.domain.reference_data import QUESTIONNAIRE
from roommatch.infrastructure.db.models import PostStatus, RoommatePost
from roommatch.infrastructure.db.session import dispose_engine, get_session_factory
from roommatch.infrastructure.repositories.preferences import SqlPreferenceStore

TITLES = [
    "Looking for a quiet roommate near campus",
    "2BR apartment, one room open",
    "Grad student seeking roommate for fall",
    "Room available in shared house",
    "Need a roommate, lease starts August",
]


def random_answers(rng: random.Random) -> dict:
    answers = {}
    for question in QUESTIONNAIRE:
        # Leave some questions unanswered so partial records show up too
        if rng.random() < 0.15:
            continue
        values = list(question.option_values)
        if question.answer_type == AnswerType.MULTI_SELECT:
            answers[question.id] = rng.sample(values, rng.randint(0, 2))
        else:
            answers[question.id] = rng.choice(values)
    return answers


async def seed(count: int) -> None:
    rng = random.Random(42)
    async with get_session_factory()() as session:
        store = SqlPreferenceStore(session)
        for index in range(count):
            owner_id = str(uuid.uuid4())
            session.add(
                RoommatePost(
                    owner_id=owner_id,
                    title=TITLES[index % len(TITLES)],
                    status=PostStatus.LOOKING,
                )
            )
            # Roughly one in five posters never took the quiz
            if rng.random() < 0.8:
                await store.put_preference_record(owner_id, random_answers(rng))
        await session.commit()
    print(f"✅ Seeded {count} roommate posts")


async def main() -> None:
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 25
    try:
        await seed(count)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
