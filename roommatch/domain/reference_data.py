from __future__ import annotations

from roommatch.domain.questionnaire import AnswerType, Option, Question, Questionnaire

SCALE_LABELS: dict[str, tuple[str, ...]] = {
    "cleanliness": ("Very messy", "Somewhat messy", "Average", "Pretty clean", "Very clean"),
    "noise_level": ("Love it loud", "Some noise is fine", "Moderate", "Prefer quiet", "Need silence"),
    "social_level": (
        "Always having friends over",
        "Regular social gatherings",
        "Occasional hangouts",
        "Prefer small groups",
        "Like to keep to myself",
    ),
}


def make_scale_question(question_id: str, category: str, prompt: str) -> Question:
    labels = SCALE_LABELS[question_id]
    return Question(
        id=question_id,
        category=category,
        prompt=prompt,
        answer_type=AnswerType.SCALE,
        options=tuple(Option(value=index, label=label) for index, label in enumerate(labels, 1)),
    )


def make_choice_question(
    question_id: str,
    category: str,
    prompt: str,
    options: list[tuple[str, str]],
    *,
    answer_type: AnswerType = AnswerType.SINGLE_CHOICE,
) -> Question:
    return Question(
        id=question_id,
        category=category,
        prompt=prompt,
        answer_type=answer_type,
        options=tuple(Option(value=value, label=label) for value, label in options),
    )


QUESTIONNAIRE = Questionnaire(
    [
        make_scale_question(
            "cleanliness", "Living Habits", "How would you describe your cleanliness level?"
        ),
        make_scale_question(
            "noise_level", "Living Habits", "What's your preferred noise level at home?"
        ),
        make_scale_question("social_level", "Social Preferences", "How social are you at home?"),
        make_choice_question(
            "sleep_schedule",
            "Lifestyle",
            "What's your typical sleep schedule?",
            [
                ("early_bird", "Early bird (bed by 10pm, up by 7am)"),
                ("normal", "Normal schedule (bed by 11pm, up by 8am)"),
                ("night_owl", "Night owl (bed after midnight)"),
                ("irregular", "Irregular/varies by day"),
            ],
        ),
        make_choice_question(
            "study_habits",
            "Academic",
            "Where do you prefer to study?",
            [
                ("bedroom", "In my bedroom"),
                ("common_area", "Common areas at home"),
                ("library", "Library/campus"),
                ("coffee_shops", "Coffee shops/cafes"),
                ("group_study", "Group study sessions"),
            ],
        ),
        make_choice_question(
            "cooking_habits",
            "Kitchen & Food",
            "How often do you cook at home?",
            [
                ("daily", "Daily - I love cooking!"),
                ("few_times_week", "A few times a week"),
                ("occasionally", "Occasionally/weekends"),
                ("rarely", "Rarely - mostly takeout"),
                ("meal_prep", "Meal prep on Sundays"),
            ],
        ),
        make_choice_question(
            "sharing_comfort",
            "Sharing",
            "How comfortable are you with sharing household items?",
            [
                ("everything", "Happy to share everything"),
                ("kitchen_items", "Kitchen items and cleaning supplies"),
                ("basic_items", "Just basic items (toilet paper, etc.)"),
                ("prefer_separate", "Prefer to keep things separate"),
            ],
        ),
        make_choice_question(
            "pet_preference",
            "Pets & Allergies",
            "What's your stance on pets?",
            [
                ("love_pets", "Love pets, have/want some"),
                ("ok_with_pets", "Fine with roommate's pets"),
                ("no_preference", "No preference either way"),
                ("prefer_no_pets", "Prefer no pets"),
                ("allergic", "Allergic to certain animals"),
            ],
        ),
        make_choice_question(
            "budget_range",
            "Financial",
            "What's your monthly budget for rent/housing?",
            [
                ("under_500", "Under $500"),
                ("500_800", "$500 - $800"),
                ("800_1200", "$800 - $1200"),
                ("1200_1600", "$1200 - $1600"),
                ("over_1600", "Over $1600"),
            ],
        ),
        make_choice_question(
            "deal_breakers",
            "Deal Breakers",
            "Which of these would be deal breakers for you?",
            [
                ("smoking", "Smoking indoors"),
                ("heavy_drinking", "Heavy drinking/partying"),
                ("overnight_guests", "Frequent overnight guests"),
                ("loud_music", "Loud music/TV"),
                ("messy_common_areas", "Messy common areas"),
                ("different_schedules", "Very different schedules"),
                ("no_communication", "Poor communication"),
            ],
            answer_type=AnswerType.MULTI_SELECT,
        ),
    ]
)

# budget_range is asked but carries no weight
DEFAULT_FACTOR_WEIGHTS: dict[str, float] = {
    "cleanliness": 0.20,
    "noise_level": 0.15,
    "social_level": 0.15,
    "sleep_schedule": 0.10,
    "study_habits": 0.10,
    "cooking_habits": 0.10,
    "sharing_comfort": 0.10,
    "pet_preference": 0.05,
    "deal_breakers": 0.05,
}
