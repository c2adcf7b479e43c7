"""
Questionnaire schemas
"""

from pydantic import BaseModel, Field


class QuestionOption(BaseModel):
    value: int | str
    label: str


class QuestionItem(BaseModel):
    """One questionnaire step"""

    id: str
    step: int = Field(..., ge=1, description="1-based position in the questionnaire")
    category: str
    prompt: str
    answer_type: str = Field(..., description="scale, singleChoice or multiSelect")
    options: list[QuestionOption]


class QuestionnaireResponse(BaseModel):
    questions: list[QuestionItem]
    scored_factors: list[str] = Field(
        default_factory=list, description="Question ids that carry weight in scoring"
    )
