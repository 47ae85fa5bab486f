"""Declarative quiz rule tables.

This module is the single place that knows which quiz question belongs to which
category, how many points each answer is worth, when a category applies and how
a category-specific refund amount is chosen. The evaluators in scoring.py and
matching.py only read these tables.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from rimborsami_engine.domain.categories import Category


@dataclass(frozen=True)
class QuestionRule:
    """An (answer -> points) rule: fires when answers[question_id] == expected_value"""

    question_id: str
    expected_value: str
    points: int


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    category: Category
    options: Tuple[Tuple[str, int], ...]  # (value, points), in display order

    def points_for(self, value: Optional[str]) -> int:
        for option_value, points in self.options:
            if option_value == value:
                return points
        return 0


QUIZ_QUESTIONS: Tuple[QuizQuestion, ...] = (
    QuizQuestion("flights", Category.FLIGHT, (("multiple", 800), ("once", 400), ("no", 0))),
    QuizQuestion("ecommerce", Category.ECOMMERCE, (("weekly", 200), ("monthly", 100), ("rarely", 30), ("never", 0))),
    QuizQuestion("returns", Category.ECOMMERCE, (("often", 300), ("sometimes", 150), ("no", 0))),
    QuizQuestion("bank", Category.BANK, (("multiple", 200), ("once", 80), ("unsure", 50), ("no", 0))),
    QuizQuestion("cards", Category.BANK, (("many", 150), ("two", 80), ("one", 40), ("none", 0))),
    QuizQuestion("insurance", Category.INSURANCE, (("multiple", 300), ("few", 150), ("no", 0))),
    QuizQuestion("claims", Category.INSURANCE, (("multiple", 500), ("once", 250), ("no", 0))),
    QuizQuestion("electronics", Category.WARRANTY, (("multiple", 200), ("few", 100), ("no", 0))),
    QuizQuestion("defects", Category.WARRANTY, (("multiple", 400), ("once", 200), ("no", 0))),
    QuizQuestion("telecom", Category.TELECOM, (("often", 150), ("sometimes", 80), ("no", 0))),
    QuizQuestion("energy", Category.ENERGY, (("often", 300), ("sometimes", 150), ("no", 0))),
    QuizQuestion("transport", Category.TRANSPORT, (("weekly", 100), ("monthly", 50), ("rarely", 20), ("never", 0))),
    QuizQuestion("auto", Category.AUTOMOTIVE, (("new", 200), ("used", 150), ("no", 0))),
    QuizQuestion("tech_accounts", Category.TECH, (("multiple", 200), ("once", 100), ("no", 0))),
    QuizQuestion("class_actions", Category.CLASS_ACTION, (("very", 500), ("free", 300), ("no", 0))),
)

QUESTIONS_BY_ID: Dict[str, QuizQuestion] = {q.id: q for q in QUIZ_QUESTIONS}


def _build_rule_table() -> Dict[Category, List[QuestionRule]]:
    table: Dict[Category, List[QuestionRule]] = {}
    for question in QUIZ_QUESTIONS:
        rules = table.setdefault(question.category, [])
        for value, points in question.options:
            if points > 0:
                rules.append(QuestionRule(question.id, value, points))
    return table


# category -> non-zero point rules
RULE_TABLE: Dict[Category, List[QuestionRule]] = _build_rule_table()

# category -> question ids, in quiz order
CATEGORY_QUESTIONS: Dict[Category, Tuple[str, ...]] = {
    category: tuple(q.id for q in QUIZ_QUESTIONS if q.category is category)
    for category in dict.fromkeys(q.category for q in QUIZ_QUESTIONS)
}


# Applicability predicates. Each category has its own shape of evidence,
# so these stay explicit rather than going through a generic rule language.

Answers = Mapping[str, str]


def _answered_other_than(answers: Answers, question_id: str, negative: str) -> bool:
    value = answers.get(question_id)
    return bool(value) and value != negative


def flight_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "flights", "no")


def ecommerce_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "ecommerce", "never") or _answered_other_than(answers, "returns", "no")


def bank_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "bank", "no") or _answered_other_than(answers, "cards", "none")


def insurance_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "insurance", "no") or _answered_other_than(answers, "claims", "no")


def warranty_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "electronics", "no") or _answered_other_than(answers, "defects", "no")


def telecom_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "telecom", "no")


def energy_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "energy", "no")


def transport_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "transport", "never")


def automotive_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "auto", "no")


def tech_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "tech_accounts", "no")


def class_action_applies(answers: Answers) -> bool:
    return _answered_other_than(answers, "class_actions", "no")


APPLIES_PREDICATES: Dict[Category, Callable[[Answers], bool]] = {
    Category.FLIGHT: flight_applies,
    Category.ECOMMERCE: ecommerce_applies,
    Category.BANK: bank_applies,
    Category.INSURANCE: insurance_applies,
    Category.WARRANTY: warranty_applies,
    Category.TELECOM: telecom_applies,
    Category.ENERGY: energy_applies,
    Category.TRANSPORT: transport_applies,
    Category.AUTOMOTIVE: automotive_applies,
    Category.TECH: tech_applies,
    Category.CLASS_ACTION: class_action_applies,
}


# Category-specific amount rules. Each returns a literal amount or None to
# fall back to the catalog midpoint.

AmountRule = Callable[[Answers], Optional[int]]


def flight_amount(answers: Answers) -> Optional[int]:
    return 600 if answers.get("flights") == "multiple" else 400


def insurance_amount(answers: Answers) -> Optional[int]:
    return 500 if answers.get("claims") == "multiple" else None


def energy_amount(answers: Answers) -> Optional[int]:
    return 300 if answers.get("energy") == "often" else 150


def class_action_amount(answers: Answers) -> Optional[int]:
    return 500 if answers.get("class_actions") == "very" else 300


DEFAULT_AMOUNT_RULES: Dict[Category, AmountRule] = {
    Category.FLIGHT: flight_amount,
}

EXTENDED_AMOUNT_RULES: Dict[Category, AmountRule] = {
    **DEFAULT_AMOUNT_RULES,
    Category.INSURANCE: insurance_amount,
    Category.ENERGY: energy_amount,
    Category.CLASS_ACTION: class_action_amount,
}


MATCH_REASONS: Dict[Category, str] = {
    Category.FLIGHT: "Hai indicato problemi con voli",
    Category.ECOMMERCE: "Acquisti frequenti online",
    Category.BANK: "Utilizzi servizi bancari",
    Category.INSURANCE: "Hai polizze assicurative",
    Category.WARRANTY: "Acquisti di elettronica recenti",
    Category.TELECOM: "Problemi con operatori telefonici",
    Category.ENERGY: "Anomalie nelle bollette",
    Category.TRANSPORT: "Uso frequente di trasporti pubblici",
    Category.AUTOMOTIVE: "Possiedi un'auto recente",
    Category.TECH: "Account su piattaforme tech",
    Category.CLASS_ACTION: "Interesse per class action",
}


def amount_rules(extended: bool = False) -> Dict[Category, AmountRule]:
    """Pick the amount rule set"""
    return EXTENDED_AMOUNT_RULES if extended else DEFAULT_AMOUNT_RULES
