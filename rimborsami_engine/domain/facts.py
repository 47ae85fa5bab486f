"""Fact normalization for quiz answers, form submissions and parsed documents.

Everything here is lenient: unknown identifiers are dropped, malformed values
are treated as "no evidence" and nothing raises.
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

from rimborsami_engine.domain.categories import Category, parse_category, parse_risk_level
from rimborsami_engine.domain.models import (
    AutoAnalysis,
    BankAnalysis,
    CondominiumAnalysis,
    DocumentAnalysis,
    FactRecord,
    HealthAnalysis,
    Irregularity,
    SuspiciousFee,
    WorkAnalysis,
    freeze_facts,
)
from rimborsami_engine.domain.rules import CATEGORY_QUESTIONS, QUESTIONS_BY_ID


def normalize_answers(raw: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Keep only known quiz questions with string answers"""
    if not raw:
        return {}
    return {
        question_id: value
        for question_id, value in raw.items()
        if question_id in QUESTIONS_BY_ID and isinstance(value, str) and value
    }


def build_fact_record(raw: Optional[Mapping[str, Any]]) -> FactRecord:
    """Group normalized answers by the category their question belongs to"""
    answers = normalize_answers(raw)
    facts: Dict[Category, Dict[str, str]] = {}
    for category, question_ids in CATEGORY_QUESTIONS.items():
        facts[category] = {qid: answers[qid] for qid in question_ids if qid in answers}
    return freeze_facts(facts)


# Data-collection forms: (field, required) per category
FORM_FIELDS: Dict[Category, Tuple[Tuple[str, bool], ...]] = {
    Category.FLIGHT: (
        ("flight_number", True),
        ("flight_date", True),
        ("departure_airport", True),
        ("arrival_airport", True),
        ("delay_hours", False),
        ("issue_type", True),
        ("airline", True),
    ),
    Category.ECOMMERCE: (
        ("order_number", True),
        ("order_date", True),
        ("seller_name", True),
        ("product_name", True),
        ("amount", True),
        ("issue_type", True),
    ),
    Category.BANK: (
        ("bank_name", True),
        ("account_type", True),
        ("issue_type", True),
        ("period_start", True),
        ("period_end", True),
        ("estimated_amount", False),
        ("details", False),
    ),
    Category.INSURANCE: (
        ("insurance_company", True),
        ("policy_number", True),
        ("policy_type", True),
        ("claim_date", True),
        ("claim_amount", True),
        ("details", False),
    ),
    Category.WARRANTY: (
        ("product_name", True),
        ("purchase_date", True),
        ("seller_name", True),
        ("issue_description", True),
        ("purchase_amount", False),
    ),
    Category.TELECOM: (
        ("operator_name", True),
        ("phone_number", True),
        ("issue_type", True),
        ("issue_date", True),
        ("amount", False),
        ("details", False),
    ),
    Category.ENERGY: (
        ("supplier_name", True),
        ("contract_type", True),
        ("issue_type", True),
        ("billing_period", True),
        ("disputed_amount", False),
        ("pod_pdr", False),
    ),
}

GENERIC_FORM_FIELDS: Tuple[Tuple[str, bool], ...] = (
    ("company_name", True),
    ("issue_date", True),
    ("issue_description", True),
    ("amount", False),
)


def form_fields_for(category: Any) -> Tuple[Tuple[str, bool], ...]:
    return FORM_FIELDS.get(parse_category(category), GENERIC_FORM_FIELDS)


def normalize_form_submission(category: Any, fields: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Keep the known, non-blank fields of a data-collection form as strings"""
    if not fields:
        return {}
    normalized = {}
    for name, _ in form_fields_for(category):
        value = fields.get(name)
        if value is None or isinstance(value, (dict, list)):
            continue
        text = str(value).strip()
        if text:
            normalized[name] = text
    return normalized


def missing_required_fields(category: Any, fields: Optional[Mapping[str, Any]]) -> List[str]:
    normalized = normalize_form_submission(category, fields)
    return [name for name, required in form_fields_for(category) if required and name not in normalized]


# Parsed-document JSON -> DocumentAnalysis


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_number(value: Any) -> Optional[float]:
    # bool is an int subclass but never a meaningful score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _strings(value: Any) -> List[str]:
    return [str(item) for item in _as_list(value) if item is not None]


def _irregularities(value: Any) -> List[Irregularity]:
    items = []
    for raw in _as_list(value):
        raw = _as_dict(raw)
        items.append(
            Irregularity(
                type=_as_str(raw.get("type")) or "",
                severity=parse_risk_level(raw.get("severity")),
                description=_as_str(raw.get("description")) or "",
                legal_reference=_as_str(raw.get("legal_reference")) or "",
            )
        )
    return items


def parse_bank_analysis(raw: Any) -> Optional[BankAnalysis]:
    if not isinstance(raw, dict):
        return None
    interest = _as_dict(raw.get("interest_analysis"))
    fees = _as_dict(raw.get("fees_analysis"))
    late_fees = _as_dict(raw.get("late_fees_analysis"))
    anomalies_found = raw.get("anomalies_found")
    anomalies = raw.get("anomalies")
    return BankAnalysis(
        account_type=_as_str(raw.get("account_type")),
        bank_name=_as_str(raw.get("bank_name")),
        nominal_rate=_as_number(interest.get("nominal_rate")),
        effective_rate=_as_number(interest.get("effective_rate")),
        usury_threshold=_as_number(interest.get("usury_threshold")),
        is_usurious=interest.get("is_usurious") is True,
        total_fees=_as_number(fees.get("total_fees")),
        suspicious_fees=[
            SuspiciousFee(
                name=_as_str(_as_dict(fee).get("name")) or "",
                amount=_as_number(_as_dict(fee).get("amount")) or 0.0,
                issue=_as_str(_as_dict(fee).get("issue")) or "",
            )
            for fee in _as_list(fees.get("suspicious_fees"))
        ],
        total_late_fees=_as_number(late_fees.get("total_late_fees")),
        late_fees_excessive=late_fees.get("is_excessive") is True,
        risk_score=_as_number(raw.get("risk_score")),
        risk_level=parse_risk_level(raw.get("risk_level")),
        estimated_refund=_as_number(raw.get("estimated_refund")),
        anomalies_found=_strings(anomalies_found) if isinstance(anomalies_found, list) else None,
        anomalies=_strings(anomalies) if isinstance(anomalies, list) else None,
    )


def parse_condominium_analysis(raw: Any) -> Optional[CondominiumAnalysis]:
    if not isinstance(raw, dict):
        return None
    return CondominiumAnalysis(
        document_subtype=_as_str(raw.get("document_subtype")),
        irregularities=_irregularities(raw.get("irregularities")),
        risk_score=_as_number(raw.get("risk_score")),
        risk_level=parse_risk_level(raw.get("risk_level")),
        actionable_advice=_strings(raw.get("actionable_advice")),
    )


def parse_work_analysis(raw: Any) -> Optional[WorkAnalysis]:
    if not isinstance(raw, dict):
        return None
    return WorkAnalysis(
        document_subtype=_as_str(raw.get("document_subtype")),
        employer=_as_str(raw.get("employer")),
        irregularities=_irregularities(raw.get("irregularities")),
        risk_score=_as_number(raw.get("risk_score")),
        risk_level=parse_risk_level(raw.get("risk_level")),
        actionable_advice=_strings(raw.get("actionable_advice")),
    )


def parse_health_analysis(raw: Any) -> Optional[HealthAnalysis]:
    if not isinstance(raw, dict):
        return None
    return HealthAnalysis(
        document_subtype=_as_str(raw.get("document_subtype")),
        provider=_as_str(raw.get("provider")),
        amount=_as_number(raw.get("amount")),
        deductible_amount=_as_number(raw.get("deductible_amount")),
        risk_score=_as_number(raw.get("risk_score")),
        risk_level=parse_risk_level(raw.get("risk_level")),
    )


def parse_auto_analysis(raw: Any) -> Optional[AutoAnalysis]:
    if not isinstance(raw, dict):
        return None
    return AutoAnalysis(
        document_subtype=_as_str(raw.get("document_subtype")),
        amount=_as_number(raw.get("amount")),
        irregularities=_irregularities(raw.get("irregularities")),
        risk_score=_as_number(raw.get("risk_score")),
        risk_level=parse_risk_level(raw.get("risk_level")),
        actionable_advice=_strings(raw.get("actionable_advice")),
    )


def parse_document_analysis(raw: Optional[Mapping[str, Any]]) -> Optional[DocumentAnalysis]:
    """
    Build a DocumentAnalysis from the parser's JSON blob.

    Returns None for a missing or non-object payload so callers get the
    "no data" defaults downstream.
    """
    if not isinstance(raw, Mapping):
        return None
    return DocumentAnalysis(
        document_type=_as_str(raw.get("document_type")),
        document_category=_as_str(raw.get("document_category")),
        summary=_as_str(raw.get("summary")),
        potential_issues=_strings(raw.get("potential_issues")),
        suggested_categories=_strings(raw.get("suggested_categories")),
        risk_score=_as_number(raw.get("risk_score")),
        risk_level=parse_risk_level(raw.get("risk_level")),
        bank_analysis=parse_bank_analysis(raw.get("bank_analysis")),
        condominium_analysis=parse_condominium_analysis(raw.get("condominium_analysis")),
        work_analysis=parse_work_analysis(raw.get("work_analysis")),
        health_analysis=parse_health_analysis(raw.get("health_analysis")),
        auto_analysis=parse_auto_analysis(raw.get("auto_analysis")),
    )
