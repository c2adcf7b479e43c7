#!/usr/bin/env python3
"""
Walk through the compatibility questionnaire in the terminal and save the
answers as the user's preference record.

Run with:
    python scripts/take_questionnaire.py <user-id>

Commands at each prompt: an option number, enter to skip, "b" to go back,
"q" to quit. Multi-select questions take comma separated option numbers, or
0 to select none.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import logging

from roommatch.core.logging import setup_logging
from roommatch.domain.questionnaire import AnswerType, Question, ValidationError
from roommatch.domain.repositories import PreferenceStoreError
from roommatch.domain.services.session import QuestionnaireSession, SessionState
from roommatch.infrastructure.db.session import dispose_engine, get_session_factory
from roommatch.infrastructure.repositories.preferences import SqlPreferenceStore


def parse_answer(question: Question, raw: str):
    """Turn typed option numbers into option values."""
    picks = [part.strip() for part in raw.split(",") if part.strip()]
    if question.answer_type == AnswerType.MULTI_SELECT and picks == ["0"]:
        return []
    try:
        indexes = [int(pick) for pick in picks]
    except ValueError as exc:
        raise ValidationError("Enter option numbers", question_id=question.id) from exc
    values = []
    for index in indexes:
        if not 1 <= index <= len(question.options):
            raise ValidationError(f"No option {index}", question_id=question.id)
        values.append(question.options[index - 1].value)
    if question.answer_type == AnswerType.MULTI_SELECT:
        return values
    if len(values) != 1:
        raise ValidationError("Pick exactly one option", question_id=question.id)
    return values[0]


async def run(owner_id: str) -> int:
    async with get_session_factory()() as db:
        store = SqlPreferenceStore(db)
        existing = await store.get_preference_record(owner_id)
        session = QuestionnaireSession(
            owner_id, store, existing_answers=existing.answers if existing else None
        )
        if existing:
            print(f"Editing saved preferences (updated {existing.updated_at:%Y-%m-%d})")

        while session.state == SessionState.IN_PROGRESS:
            question = session.current_question
            print(f"\n[{session.step_index + 1}/{len(session.questionnaire)}] {question.category}")
            print(question.prompt)
            for number, option in enumerate(question.options, 1):
                print(f"  {number}. {option.label}")
            current = session.draft_answers.get(question.id)
            if current is not None:
                print(f"  (current: {current})")

            raw = input("> ").strip().lower()
            if raw == "q":
                print("Quit without saving.")
                return 1
            if raw == "b":
                session.previous()
                continue
            if raw:
                try:
                    session.answer(parse_answer(question, raw))
                except ValidationError as exc:
                    print(f"  ! {exc}")
                    continue

            try:
                await session.next()
            except PreferenceStoreError as exc:
                print(f"  ! Could not save: {exc}. Press enter to retry.")

    record = session.record
    status = "complete" if record and record.is_complete else "partial"
    print(f"\n✅ Saved {status} preferences for {owner_id}")
    return 0


async def main() -> int:
    if len(sys.argv) != 2:
        print(__doc__)
        return 2
    try:
        return await run(sys.argv[1])
    finally:
        await dispose_engine()


if __name__ == "__main__":
    setup_logging(logging.WARNING, json_logs=False)
    sys.exit(asyncio.run(main()))
