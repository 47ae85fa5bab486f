"""POST /v1/documents/assess - risk assessment of a parsed document"""

import time
from dataclasses import asdict

from fastapi import APIRouter, Request

from rimborsami_engine.api.dependencies import get_request_id
from rimborsami_engine.api.v1.schemas import DocumentAssessRequest, DocumentAssessResponse, RiskAssessmentSchema
from rimborsami_engine.config import settings
from rimborsami_engine.domain.categories import catalog_label
from rimborsami_engine.domain.facts import parse_document_analysis
from rimborsami_engine.domain.refunds import estimate_bank_document_refund
from rimborsami_engine.domain.risk import (
    assess_document_risk,
    collect_anomalies,
    get_document_category,
    has_anomalies,
    level_is_inconsistent,
)
from rimborsami_engine.infrastructure.observability.logging import log_risk_assessment
from rimborsami_engine.infrastructure.observability.metrics import record_assessment

router = APIRouter()


@router.post("/documents/assess", response_model=DocumentAssessResponse)
def assess_document(request_body: DocumentAssessRequest, request: Request):
    """
    Compute the unified risk view of a document the upstream parser analysed.

    A missing payload is the "no data" case: score 0, level low, nothing found.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    analysis = parse_document_analysis(request_body.parsed_data)
    assessment = assess_document_risk(analysis, anomaly_multiplier=settings.anomaly_score_multiplier)
    category = get_document_category(analysis)
    refund = estimate_bank_document_refund(analysis.bank_analysis if analysis else None)

    duration_ms = (time.time() - start_time) * 1000
    record_assessment(assessment.level.value, level_is_inconsistent(assessment))
    log_risk_assessment(
        request_id,
        category.value,
        assessment.score,
        assessment.level.value,
        assessment.anomaly_count,
        duration_ms,
    )

    return DocumentAssessResponse(
        risk=RiskAssessmentSchema(
            score=assessment.score,
            level=assessment.level.value,
            anomaly_count=assessment.anomaly_count,
            estimated_refund=assessment.estimated_refund,
        ),
        document_category=category.value,
        catalog_label=catalog_label(category),
        anomalies=collect_anomalies(analysis),
        has_anomalies=has_anomalies(analysis),
        refund=asdict(refund),
    )
