"""Document risk aggregation - unified score, level and anomaly count across document analyses"""

import logging
from typing import List, Optional

from rimborsami_engine.domain.categories import DocumentCategory, RiskLevel, parse_document_category
from rimborsami_engine.domain.models import DocumentAnalysis, RiskAssessment

logger = logging.getLogger(__name__)

DEFAULT_ANOMALY_MULTIPLIER = 15

# Sub-analysis scores at or above this flag the document as anomalous
ANOMALY_SCORE_THRESHOLD = 50

# Suggested categories checked in this order when no sub-analysis is present
_SUGGESTED_CATEGORY_ORDER = (
    DocumentCategory.FLIGHT,
    DocumentCategory.ECOMMERCE,
    DocumentCategory.TELECOM,
    DocumentCategory.ENERGY,
    DocumentCategory.INSURANCE,
)


def clamp_score(value: float) -> int:
    return int(max(0, min(100, round(value))))


def resolve_level(score: float) -> RiskLevel:
    """
    Map a score to its risk bucket.

    Thresholds (upper bound inclusive):
    - <= 25: low
    - <= 50: medium
    - <= 75: high
    - > 75:  critical
    """
    if score <= 25:
        return RiskLevel.LOW
    elif score <= 50:
        return RiskLevel.MEDIUM
    elif score <= 75:
        return RiskLevel.HIGH
    else:
        return RiskLevel.CRITICAL


def _bank_anomalies(analysis: DocumentAnalysis) -> List[str]:
    bank = analysis.bank_analysis
    if bank is None:
        return []
    if bank.anomalies_found is not None:
        return bank.anomalies_found
    return bank.anomalies or []


def count_anomalies(analysis: Optional[DocumentAnalysis]) -> int:
    """Sum of every anomaly/irregularity list; absent lists count as zero"""
    if analysis is None:
        return 0
    count = len(analysis.potential_issues) + len(_bank_anomalies(analysis))
    for sub in (analysis.condominium_analysis, analysis.work_analysis, analysis.auto_analysis):
        if sub is not None:
            count += len(sub.irregularities)
    return count


def derive_score(anomaly_count: int, multiplier: int = DEFAULT_ANOMALY_MULTIPLIER) -> int:
    """Fallback score: zero only with no anomalies, grows with the count, saturates at 100"""
    if anomaly_count <= 0:
        return 0
    return min(100, anomaly_count * max(1, multiplier))


def assess_document_risk(
    analysis: Optional[DocumentAnalysis],
    anomaly_multiplier: int = DEFAULT_ANOMALY_MULTIPLIER,
) -> RiskAssessment:
    """
    Main entry point: compute the RiskAssessment of a parsed document.

    Score priority (first present wins, never averaged):
    1. bank_analysis.risk_score
    2. condominium_analysis.risk_score
    3. derived from the aggregated anomaly count

    An explicit risk_level on the bank (then condominium) analysis wins over
    the level computed from the score. A contradiction is logged, not raised.
    """
    if analysis is None:
        return RiskAssessment()

    anomaly_count = count_anomalies(analysis)
    bank = analysis.bank_analysis
    condominium = analysis.condominium_analysis

    if bank is not None and bank.risk_score is not None:
        score = clamp_score(bank.risk_score)
    elif condominium is not None and condominium.risk_score is not None:
        score = clamp_score(condominium.risk_score)
    else:
        score = derive_score(anomaly_count, anomaly_multiplier)

    computed_level = resolve_level(score)
    explicit_level = None
    if bank is not None and bank.risk_level is not None:
        explicit_level = bank.risk_level
    elif condominium is not None and condominium.risk_level is not None:
        explicit_level = condominium.risk_level

    level = computed_level
    if explicit_level is not None:
        if explicit_level is not computed_level:
            logger.warning(
                "Explicit risk level contradicts score",
                extra={
                    "step": "risk_label_inconsistency",
                    "score": score,
                    "explicit_level": explicit_level.value,
                    "computed_level": computed_level.value,
                },
            )
        level = explicit_level

    estimated_refund = 0.0
    if bank is not None and bank.estimated_refund is not None:
        estimated_refund = max(0.0, bank.estimated_refund)

    return RiskAssessment(
        score=score,
        level=level,
        anomaly_count=anomaly_count,
        estimated_refund=estimated_refund,
    )


def level_is_inconsistent(assessment: RiskAssessment) -> bool:
    """True when the reported level is an explicit label that disagrees with the score"""
    return assessment.level is not resolve_level(assessment.score)


def collect_anomalies(analysis: Optional[DocumentAnalysis]) -> List[str]:
    """Every anomaly description across the document, de-duplicated in first-seen order"""
    if analysis is None:
        return []

    anomalies = list(analysis.potential_issues) + list(_bank_anomalies(analysis))
    for sub in (analysis.condominium_analysis, analysis.work_analysis, analysis.auto_analysis):
        if sub is not None:
            anomalies.extend(item.description for item in sub.irregularities)

    return list(dict.fromkeys(a for a in anomalies if a))


def has_anomalies(analysis: Optional[DocumentAnalysis]) -> bool:
    """Whether the document deserves the user's attention"""
    if analysis is None:
        return False

    if analysis.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        return True

    bank = analysis.bank_analysis
    if bank is not None:
        if bank.is_usurious or bank.late_fees_excessive or bank.suspicious_fees:
            return True
        if (bank.risk_score or 0) >= ANOMALY_SCORE_THRESHOLD:
            return True

    for sub in (analysis.condominium_analysis, analysis.work_analysis, analysis.auto_analysis):
        if sub is None:
            continue
        if sub.irregularities or (sub.risk_score or 0) >= ANOMALY_SCORE_THRESHOLD:
            return True

    return False


def get_document_category(analysis: Optional[DocumentAnalysis]) -> DocumentCategory:
    """
    Pick the catalog bucket for a parsed document.

    An explicit, recognised document_category wins; otherwise the present
    sub-analysis decides, then the parser's suggested categories. Anything
    else is OTHER.
    """
    if analysis is None:
        return DocumentCategory.OTHER

    explicit = parse_document_category(analysis.document_category)
    if explicit is not None:
        return explicit

    if analysis.bank_analysis is not None:
        return DocumentCategory.BANK
    if analysis.condominium_analysis is not None:
        return DocumentCategory.CONDOMINIUM
    if analysis.work_analysis is not None:
        return DocumentCategory.WORK
    if analysis.health_analysis is not None:
        return DocumentCategory.HEALTH
    if analysis.auto_analysis is not None:
        return DocumentCategory.AUTO

    suggested = set(analysis.suggested_categories)
    for category in _SUGGESTED_CATEGORY_ORDER:
        if category.value in suggested:
            return category

    return DocumentCategory.OTHER
