"""
Questionnaire definition endpoint
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends
from roommatch.api.schemas.questionnaire import QuestionnaireResponse
from roommatch.core.config import Settings, get_settings
from roommatch.domain.reference_data import QUESTIONNAIRE

logger = structlog.get_logger()
router = APIRouter(prefix="/questionnaire", tags=["Questionnaire"])


@router.get("", response_model=QuestionnaireResponse)
async def get_questionnaire(settings: Settings = Depends(get_settings)) -> Any:
    """
    Return the ordered compatibility questions. Order is the step order.
    """
    questions = [
        {
            "id": question.id,
            "step": step,
            "category": question.category,
            "prompt": question.prompt,
            "answer_type": question.answer_type.value,
            "options": [{"value": o.value, "label": o.label} for o in question.options],
        }
        for step, question in enumerate(QUESTIONNAIRE, 1)
    ]
    await logger.ainfo("get_questionnaire", count=len(questions))
    return {
        "questions": questions,
        "scored_factors": [factor.factor_id for factor in settings.factor_table()],
    }
