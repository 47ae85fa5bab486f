"""Category scoring engine - evaluates the quiz rule tables against a user's answers"""

from typing import Any, Dict, List, Mapping, Optional, Union

from rimborsami_engine.domain.categories import QUIZ_CATEGORIES, Category
from rimborsami_engine.domain.facts import build_fact_record, normalize_answers
from rimborsami_engine.domain.models import CategoryScore, FactRecord
from rimborsami_engine.domain.rules import APPLIES_PREDICATES, QUIZ_QUESTIONS, RULE_TABLE


def score_category(category: Category, facts: FactRecord) -> CategoryScore:
    """
    Sum the points of every rule in the category that matches the user's answer.

    Rules fire on exact string equality. Several questions may feed the same
    category (bank draws from "bank" and "cards"), and their points are summed.
    `applies` comes from the category's own predicate, not from the point total.
    """
    answers = facts.for_category(category)
    total_points = sum(
        rule.points
        for rule in RULE_TABLE.get(category, [])
        if answers.get(rule.question_id) == rule.expected_value
    )
    predicate = APPLIES_PREDICATES.get(category)
    applies = predicate(answers) if predicate is not None else False

    return CategoryScore(
        category=category,
        total_points=total_points,
        applies=applies,
        evidence=answers,
    )


def score_categories(answers: Union[Optional[Mapping[str, Any]], FactRecord]) -> Dict[Category, CategoryScore]:
    """
    Main entry point: score every quiz category.

    Accepts the raw answer map (question id -> selected option value) or an
    already built FactRecord. Always returns one CategoryScore per category.
    """
    facts = answers if isinstance(answers, FactRecord) else build_fact_record(answers)
    return {category: score_category(category, facts) for category in QUIZ_CATEGORIES}


def applicable_categories(scores: Mapping[Category, CategoryScore]) -> List[Category]:
    return [category for category, score in scores.items() if score.applies]


def estimate_quiz_total(answers: Optional[Mapping[str, Any]]) -> int:
    """Headline estimate shown at the end of the quiz: points of every answered option"""
    normalized = normalize_answers(answers)
    return sum(question.points_for(normalized.get(question.id)) for question in QUIZ_QUESTIONS)
