"""Domain models - pure Python dataclasses representing scoring inputs and outcomes"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from rimborsami_engine.domain.categories import Category, RiskLevel


@dataclass(frozen=True)
class FactRecord:
    """Per-category view of the user's answers, immutable once built"""

    facts: Mapping[Category, Mapping[str, str]]

    def for_category(self, category: Category) -> Mapping[str, str]:
        return self.facts.get(category, MappingProxyType({}))

    def answer(self, category: Category, question_id: str) -> Optional[str]:
        return self.for_category(category).get(question_id)


@dataclass(frozen=True)
class CategoryScore:
    """Outcome of evaluating one category's rule table"""

    category: Category
    total_points: int
    applies: bool
    evidence: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OpportunityDefinition:
    """Catalog entry supplied by the opportunity store (read-only)"""

    id: str
    category: str
    min_amount: float = 0
    max_amount: float = 0
    title: str = ""
    active: bool = True


@dataclass(frozen=True)
class MatchedOpportunity:
    opportunity_id: str
    category: Category
    estimated_amount: int
    match_reason: str = ""


# Parsed document analyses. Every field is optional because the upstream
# parser only fills what it could extract.


@dataclass
class Irregularity:
    type: str = ""
    severity: Optional[RiskLevel] = None
    description: str = ""
    legal_reference: str = ""


@dataclass
class SuspiciousFee:
    name: str = ""
    amount: float = 0.0
    issue: str = ""


@dataclass
class BankAnalysis:
    account_type: Optional[str] = None
    bank_name: Optional[str] = None
    nominal_rate: Optional[float] = None
    effective_rate: Optional[float] = None
    usury_threshold: Optional[float] = None
    is_usurious: bool = False
    total_fees: Optional[float] = None
    suspicious_fees: List[SuspiciousFee] = field(default_factory=list)
    total_late_fees: Optional[float] = None
    late_fees_excessive: bool = False
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    estimated_refund: Optional[float] = None
    anomalies_found: Optional[List[str]] = None
    anomalies: Optional[List[str]] = None


@dataclass
class CondominiumAnalysis:
    document_subtype: Optional[str] = None
    irregularities: List[Irregularity] = field(default_factory=list)
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    actionable_advice: List[str] = field(default_factory=list)


@dataclass
class WorkAnalysis:
    document_subtype: Optional[str] = None
    employer: Optional[str] = None
    irregularities: List[Irregularity] = field(default_factory=list)
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    actionable_advice: List[str] = field(default_factory=list)


@dataclass
class HealthAnalysis:
    document_subtype: Optional[str] = None
    provider: Optional[str] = None
    amount: Optional[float] = None
    deductible_amount: Optional[float] = None
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None


@dataclass
class AutoAnalysis:
    document_subtype: Optional[str] = None
    amount: Optional[float] = None
    irregularities: List[Irregularity] = field(default_factory=list)
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    actionable_advice: List[str] = field(default_factory=list)


@dataclass
class DocumentAnalysis:
    """Output of the upstream document parser, one optional sub-analysis per document kind"""

    document_type: Optional[str] = None
    document_category: Optional[str] = None
    summary: Optional[str] = None
    potential_issues: List[str] = field(default_factory=list)
    suggested_categories: List[str] = field(default_factory=list)
    risk_score: Optional[float] = None
    risk_level: Optional[RiskLevel] = None
    bank_analysis: Optional[BankAnalysis] = None
    condominium_analysis: Optional[CondominiumAnalysis] = None
    work_analysis: Optional[WorkAnalysis] = None
    health_analysis: Optional[HealthAnalysis] = None
    auto_analysis: Optional[AutoAnalysis] = None


@dataclass(frozen=True)
class RiskAssessment:
    """Unified risk projection of a parsed document"""

    score: int = 0
    level: RiskLevel = RiskLevel.LOW
    anomaly_count: int = 0
    estimated_refund: float = 0.0


@dataclass
class BreakdownItem:
    label: str
    value: str
    unit: Optional[str] = None


@dataclass
class RefundEstimate:
    """Result of one refund calculator"""

    amount: float
    formula: str
    legal_reference: str
    confidence: str  # "high" | "medium" | "low"
    breakdown: List[BreakdownItem] = field(default_factory=list)
    source: Optional[str] = None
    valid_period: Optional[str] = None


def freeze_facts(facts: Dict[Category, Dict[str, str]]) -> FactRecord:
    """Wrap per-category answer maps in read-only proxies"""
    return FactRecord(
        facts=MappingProxyType({cat: MappingProxyType(dict(answers)) for cat, answers in facts.items()})
    )
