"""Pydantic schemas for API request/response validation"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class QuizAnswersRequest(BaseModel):
    """Request body for POST /v1/quiz/score"""

    answers: Dict[str, Optional[str]] = Field(default_factory=dict, description="Question id -> selected option value")


class CategoryScoreSchema(BaseModel):
    category: str
    total_points: int
    applies: bool


class QuizScoreResponse(BaseModel):
    """Response for POST /v1/quiz/score"""

    categories: List[CategoryScoreSchema]
    applicable_categories: List[str]
    estimated_total: int


class OpportunitySchema(BaseModel):
    """Catalog entry sent inline with a match request"""

    id: str = Field(..., min_length=1)
    category: str
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    title: str = ""
    active: bool = True


class MatchRequest(BaseModel):
    """Request body for POST /v1/opportunities/match"""

    answers: Dict[str, Optional[str]] = Field(default_factory=dict)
    catalog: Optional[List[OpportunitySchema]] = Field(
        default=None, description="Opportunity catalog; fetched from the catalog store when omitted"
    )
    exclude_ids: List[str] = Field(default_factory=list, description="Opportunities the user already holds")


class MatchedOpportunitySchema(BaseModel):
    opportunity_id: str
    category: str
    estimated_amount: int
    match_reason: str


class MatchResponse(BaseModel):
    """Response for POST /v1/opportunities/match"""

    matched_count: int
    estimated_total: int
    matches: List[MatchedOpportunitySchema]


class DocumentAssessRequest(BaseModel):
    """Request body for POST /v1/documents/assess"""

    parsed_data: Optional[Dict[str, Any]] = None


class RiskAssessmentSchema(BaseModel):
    score: int
    level: str
    anomaly_count: int
    estimated_refund: float


class BreakdownItemSchema(BaseModel):
    label: str
    value: str
    unit: Optional[str] = None


class RefundEstimateSchema(BaseModel):
    amount: float
    formula: str
    legal_reference: str
    confidence: str
    breakdown: List[BreakdownItemSchema] = Field(default_factory=list)
    source: Optional[str] = None
    valid_period: Optional[str] = None


class DocumentAssessResponse(BaseModel):
    """Response for POST /v1/documents/assess"""

    risk: RiskAssessmentSchema
    document_category: str
    catalog_label: str
    anomalies: List[str]
    has_anomalies: bool
    refund: RefundEstimateSchema


class FormNormalizeRequest(BaseModel):
    """Request body for POST /v1/forms/normalize"""

    category: str
    fields: Dict[str, Any] = Field(default_factory=dict)


class FormNormalizeResponse(BaseModel):
    category: str
    facts: Dict[str, str]
    missing_fields: List[str]
    complete: bool


class FlightRefundRequest(BaseModel):
    distance_km: float = Field(..., ge=0)
    delay_hours: float = Field(0, ge=0)
    cancelled: bool = False
    notice_days: Optional[int] = Field(default=None, ge=0)


class UsuryRefundRequest(BaseModel):
    applied_taeg: float = Field(..., gt=0, description="Applied TAEG, percent")
    product_type: str = "credito_personale"
    total_interest: float = Field(..., ge=0)


class FineRefundRequest(BaseModel):
    fine_amount: float = Field(..., ge=0)
    appeal_probability: Literal["alta", "media", "bassa"]
    notification_fees: Optional[float] = Field(default=None, ge=0)


class WorkRefundRequest(BaseModel):
    kind: Literal["straordinario", "tfr", "differenze_retributive"]
    monthly_salary: float = Field(..., ge=0)
    overtime_hours: Optional[float] = Field(default=None, ge=0)
    hourly_pay: Optional[float] = Field(default=None, gt=0)
    years_of_service: Optional[float] = Field(default=None, gt=0)
    contested_months: Optional[int] = Field(default=None, gt=0)
    contested_monthly_amount: Optional[float] = Field(default=None, ge=0)


class CondominiumRefundRequest(BaseModel):
    kind: Literal["impugnazione_delibera", "spese_illegittime", "rivalsa_amministratore"]
    contested_amount: Optional[float] = Field(default=None, ge=0)
    complexity: Literal["semplice", "media", "complessa"] = "media"
