from __future__ import annotations

import pytest
from roommatch.domain.models import PreferenceRecord
from roommatch.domain.questionnaire import AnswerType, ValidationError
from roommatch.domain.reference_data import QUESTIONNAIRE
from tests.utils import FULL_ANSWERS


def test_questionnaire_order_and_types() -> None:
    assert QUESTIONNAIRE.question_ids == (
        "cleanliness",
        "noise_level",
        "social_level",
        "sleep_schedule",
        "study_habits",
        "cooking_habits",
        "sharing_comfort",
        "pet_preference",
        "budget_range",
        "deal_breakers",
    )
    assert QUESTIONNAIRE.question("cleanliness").answer_type == AnswerType.SCALE
    assert QUESTIONNAIRE.question("deal_breakers").answer_type == AnswerType.MULTI_SELECT
    assert QUESTIONNAIRE.question("cleanliness").option_values == (1, 2, 3, 4, 5)


@pytest.mark.parametrize(
    ("question_id", "value"),
    [
        ("cleanliness", 0),
        ("cleanliness", 3.0),
        ("cleanliness", False),
        ("sleep_schedule", "sometimes"),
        ("sleep_schedule", ["normal"]),
        ("deal_breakers", "smoking"),
        ("deal_breakers", ["smoking", "pineapple_pizza"]),
        ("deal_breakers", {"smoking": True}),
    ],
)
def test_invalid_answers_are_rejected(question_id: str, value: object) -> None:
    with pytest.raises(ValidationError) as exc_info:
        QUESTIONNAIRE.validate_answer(question_id, value)

    assert exc_info.value.question_id == question_id


def test_multi_select_normalizes_to_set() -> None:
    assert QUESTIONNAIRE.validate_answer("deal_breakers", ("smoking", "smoking")) == frozenset(
        {"smoking"}
    )
    assert QUESTIONNAIRE.validate_answer("deal_breakers", []) == frozenset()


def test_validate_answers_follows_question_order() -> None:
    validated = QUESTIONNAIRE.validate_answers({"deal_breakers": [], "cleanliness": 2})

    assert list(validated) == ["cleanliness", "deal_breakers"]


def test_validate_answers_rejects_unknown_question() -> None:
    with pytest.raises(ValidationError) as exc_info:
        QUESTIONNAIRE.validate_answers({"cleanliness": 2, "favourite_colour": "blue"})

    assert exc_info.value.question_id == "favourite_colour"


def test_record_completeness() -> None:
    partial = PreferenceRecord.build("student-1", {"cleanliness": 3})
    full = PreferenceRecord.build("student-1", FULL_ANSWERS)

    assert partial.is_complete is False
    assert full.is_complete is True
    assert full.has_answer("deal_breakers")


def test_record_json_answers_sort_sets() -> None:
    record = PreferenceRecord.build(
        "student-1", {"deal_breakers": ["smoking", "loud_music"], "cleanliness": 5}
    )

    assert record.to_json_answers() == {
        "cleanliness": 5,
        "deal_breakers": ["loud_music", "smoking"],
    }
