"""Canonical category identifiers shared by the scorer, matcher and document helpers"""

from enum import Enum
from typing import Optional


class Category(str, Enum):
    """Refund domains known to the quiz and the opportunity catalog"""

    FLIGHT = "flight"
    ECOMMERCE = "ecommerce"
    BANK = "bank"
    INSURANCE = "insurance"
    WARRANTY = "warranty"
    TELECOM = "telecom"
    ENERGY = "energy"
    TRANSPORT = "transport"
    AUTOMOTIVE = "automotive"
    TECH = "tech"
    CLASS_ACTION = "class_action"
    OTHER = "other"


# Categories scored from quiz answers, in quiz order
QUIZ_CATEGORIES = tuple(c for c in Category if c is not Category.OTHER)


class DocumentCategory(str, Enum):
    """Buckets used to group uploaded documents"""

    BANK = "bank"
    CONDOMINIUM = "condominium"
    WORK = "work"
    HEALTH = "health"
    AUTO = "auto"
    FLIGHT = "flight"
    ECOMMERCE = "ecommerce"
    TELECOM = "telecom"
    ENERGY = "energy"
    INSURANCE = "insurance"
    TAX = "tax"
    OTHER = "other"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Labels shown by the document catalog UI
CATALOG_LABELS = {
    DocumentCategory.FLIGHT: "voli",
    DocumentCategory.ECOMMERCE: "ecommerce",
    DocumentCategory.TELECOM: "telecom",
    DocumentCategory.ENERGY: "energia",
    DocumentCategory.BANK: "banche",
    DocumentCategory.INSURANCE: "assicurazioni",
    DocumentCategory.AUTO: "auto",
    DocumentCategory.CONDOMINIUM: "condominio",
    DocumentCategory.WORK: "lavoro",
    DocumentCategory.TAX: "fisco",
    DocumentCategory.HEALTH: "sanita",
    DocumentCategory.OTHER: "altro",
}

_LABEL_TO_DOCUMENT_CATEGORY = {label: cat for cat, label in CATALOG_LABELS.items()}


def parse_category(value: Optional[str]) -> Category:
    """Map a raw catalog category string to Category, unknown values become OTHER"""
    if not isinstance(value, str):
        return Category.OTHER
    try:
        return Category(value.strip().lower())
    except ValueError:
        return Category.OTHER


def parse_document_category(value: Optional[str]) -> Optional[DocumentCategory]:
    """Accept either the English identifier or the Italian catalog label"""
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    if key in _LABEL_TO_DOCUMENT_CATEGORY:
        return _LABEL_TO_DOCUMENT_CATEGORY[key]
    try:
        return DocumentCategory(key)
    except ValueError:
        return None


def parse_risk_level(value: Optional[str]) -> Optional[RiskLevel]:
    if not isinstance(value, str):
        return None
    try:
        return RiskLevel(value.strip().lower())
    except ValueError:
        return None


def catalog_label(category: DocumentCategory) -> str:
    """Italian catalog label for a document category"""
    return CATALOG_LABELS.get(category, CATALOG_LABELS[DocumentCategory.OTHER])
