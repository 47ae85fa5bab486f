"""Prometheus metrics for monitoring matches, document risk levels and catalog health"""

from prometheus_client import Counter, Histogram

# Matching metrics
opportunity_match_counter = Counter(
    "rimborsami_opportunity_matches_total",
    "Opportunities matched from quiz answers",
    ["category"],
)

# Document metrics
document_assessment_counter = Counter(
    "rimborsami_document_assessments_total",
    "Parsed documents assessed",
    ["level"],  # low | medium | high | critical
)

risk_label_inconsistency_counter = Counter(
    "rimborsami_risk_label_inconsistency_total",
    "Documents whose explicit risk level contradicts their score",
)

# Catalog store metrics
catalog_fetch_failures_counter = Counter(
    "catalog_fetch_failures_total",
    "Failed opportunity catalog calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_matches(categories) -> None:
    """Count one match per matched opportunity, labelled by category"""
    for category in categories:
        opportunity_match_counter.labels(category=category).inc()


def record_assessment(level: str, inconsistent: bool) -> None:
    document_assessment_counter.labels(level=level).inc()
    if inconsistent:
        risk_label_inconsistency_counter.inc()
