"""POST /v1/quiz/score - per-category quiz scores"""

from fastapi import APIRouter

from rimborsami_engine.api.v1.schemas import CategoryScoreSchema, QuizAnswersRequest, QuizScoreResponse
from rimborsami_engine.domain.scoring import applicable_categories, estimate_quiz_total, score_categories

router = APIRouter()


@router.post("/quiz/score", response_model=QuizScoreResponse)
def score_quiz(request_body: QuizAnswersRequest):
    """
    Score every refund category from the user's quiz answers.

    Returns:
        One entry per category plus the headline estimate shown after the quiz
    """
    scores = score_categories(request_body.answers)

    return QuizScoreResponse(
        categories=[
            CategoryScoreSchema(
                category=score.category.value,
                total_points=score.total_points,
                applies=score.applies,
            )
            for score in scores.values()
        ],
        applicable_categories=[c.value for c in applicable_categories(scores)],
        estimated_total=estimate_quiz_total(request_body.answers),
    )
