"""Unit tests for document risk aggregation"""

import logging

import pytest

from rimborsami_engine.domain.categories import DocumentCategory, RiskLevel
from rimborsami_engine.domain.facts import parse_document_analysis
from rimborsami_engine.domain.models import RiskAssessment
from rimborsami_engine.domain.risk import (
    assess_document_risk,
    collect_anomalies,
    count_anomalies,
    derive_score,
    get_document_category,
    has_anomalies,
    level_is_inconsistent,
    resolve_level,
)


def assess(raw):
    return assess_document_risk(parse_document_analysis(raw))


@pytest.mark.parametrize(
    "score, level",
    [
        (0, RiskLevel.LOW),
        (25, RiskLevel.LOW),
        (26, RiskLevel.MEDIUM),
        (50, RiskLevel.MEDIUM),
        (51, RiskLevel.HIGH),
        (75, RiskLevel.HIGH),
        (76, RiskLevel.CRITICAL),
        (100, RiskLevel.CRITICAL),
    ],
)
def test_resolve_level_boundaries(score, level):
    """Test tier boundaries are inclusive on the lower tier"""
    assert resolve_level(score) is level


def test_none_analysis_defaults():
    """Test the 'no data' case is a valid default"""
    assessment = assess_document_risk(None)

    assert assessment == RiskAssessment(score=0, level=RiskLevel.LOW, anomaly_count=0, estimated_refund=0)
    assert assess(None) == assessment
    assert assess("not a dict") == assessment


def test_assess_is_idempotent():
    analysis = parse_document_analysis({"potential_issues": ["a"], "bank_analysis": {"risk_score": 40}})
    assert assess_document_risk(analysis) == assess_document_risk(analysis)


def test_bank_risk_score_wins():
    """Test an explicit bank score takes priority over the fallback"""
    assessment = assess({"bank_analysis": {"risk_score": 82}})

    assert assessment.score == 82
    assert assessment.level is RiskLevel.CRITICAL


def test_bank_score_beats_condominium_score():
    assessment = assess(
        {
            "bank_analysis": {"risk_score": 10},
            "condominium_analysis": {"risk_score": 90},
        }
    )
    assert assessment.score == 10


def test_condominium_irregularities_fallback_score():
    """Test a derived score when no explicit score is present"""
    assessment = assess({"condominium_analysis": {"irregularities": [{}, {}, {}]}})

    assert assessment.anomaly_count == 3
    assert assessment.score == 45
    assert assessment.level is RiskLevel.MEDIUM


def test_condominium_score_used_when_no_bank_score():
    assessment = assess({"bank_analysis": {}, "condominium_analysis": {"risk_score": 60}})
    assert assessment.score == 60
    assert assessment.level is RiskLevel.HIGH


def test_anomaly_count_aggregates_lists():
    """Test counts are summed across every anomaly list"""
    assessment = assess({"potential_issues": ["a", "b"], "bank_analysis": {"anomalies_found": ["c"]}})
    assert assessment.anomaly_count == 3


def test_anomaly_count_every_source():
    analysis = parse_document_analysis(
        {
            "potential_issues": ["p"],
            "bank_analysis": {"anomalies": ["b1", "b2"]},
            "condominium_analysis": {"irregularities": [{"description": "c"}]},
            "work_analysis": {"irregularities": [{"description": "w"}]},
            "auto_analysis": {"irregularities": [{"description": "a1"}, {"description": "a2"}]},
        }
    )
    assert count_anomalies(analysis) == 7


def test_anomalies_found_preferred_over_anomalies():
    analysis = parse_document_analysis({"bank_analysis": {"anomalies_found": ["x"], "anomalies": ["y", "z"]}})
    assert count_anomalies(analysis) == 1


def test_absent_lists_count_zero():
    assessment = assess({"work_analysis": {}, "auto_analysis": {"irregularities": None}})

    assert assessment.anomaly_count == 0
    assert assessment.score == 0
    assert assessment.level is RiskLevel.LOW


def test_derive_score_saturates():
    assert derive_score(0) == 0
    assert derive_score(1) == 15
    assert derive_score(7) == 100
    assert derive_score(50) == 100
    assert derive_score(2, multiplier=10) == 20


def test_custom_multiplier():
    analysis = parse_document_analysis({"potential_issues": ["a", "b"]})
    assert assess_document_risk(analysis, anomaly_multiplier=30).score == 60


def test_score_clamped():
    assert assess({"bank_analysis": {"risk_score": 180}}).score == 100
    assert assess({"bank_analysis": {"risk_score": -20}}).score == 0


def test_non_numeric_score_ignored():
    assessment = assess({"bank_analysis": {"risk_score": "high", "anomalies_found": ["a"]}})
    assert assessment.score == 15


def test_explicit_level_wins_and_is_logged(caplog):
    """Test a contradicting explicit label is trusted and logged, never raised"""
    with caplog.at_level(logging.WARNING):
        assessment = assess({"bank_analysis": {"risk_score": 10, "risk_level": "critical"}})

    assert assessment.score == 10
    assert assessment.level is RiskLevel.CRITICAL
    assert level_is_inconsistent(assessment)
    assert any(getattr(r, "step", None) == "risk_label_inconsistency" for r in caplog.records)


def test_consistent_explicit_level_not_flagged(caplog):
    with caplog.at_level(logging.WARNING):
        assessment = assess({"condominium_analysis": {"risk_score": 40, "risk_level": "medium"}})

    assert assessment.level is RiskLevel.MEDIUM
    assert not level_is_inconsistent(assessment)
    assert not caplog.records


def test_unknown_level_label_ignored():
    assessment = assess({"bank_analysis": {"risk_score": 60, "risk_level": "severe"}})
    assert assessment.level is RiskLevel.HIGH


def test_estimated_refund_from_bank_only():
    assert assess({"bank_analysis": {"estimated_refund": 320.5}}).estimated_refund == 320.5
    assert assess({"condominium_analysis": {"risk_score": 90}}).estimated_refund == 0
    assert assess({"bank_analysis": {"estimated_refund": -5}}).estimated_refund == 0


def test_collect_anomalies_deduplicates():
    analysis = parse_document_analysis(
        {
            "potential_issues": ["Commissione non dovuta", "Interessi eccessivi"],
            "bank_analysis": {"anomalies_found": ["Interessi eccessivi"]},
            "work_analysis": {"irregularities": [{"description": "Ferie non pagate"}]},
        }
    )
    assert collect_anomalies(analysis) == ["Commissione non dovuta", "Interessi eccessivi", "Ferie non pagate"]
    assert collect_anomalies(None) == []


def test_collect_anomalies_skips_blank_descriptions():
    analysis = parse_document_analysis(
        {"condominium_analysis": {"irregularities": [{}, {"description": ""}, {"description": "Spese non approvate"}]}}
    )
    assert collect_anomalies(analysis) == ["Spese non approvate"]
    assert collect_anomalies(parse_document_analysis({"condominium_analysis": {"irregularities": [{}, {}]}})) == []


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, False),
        ({}, False),
        ({"bank_analysis": {"interest_analysis": {"is_usurious": True}}}, True),
        ({"bank_analysis": {"late_fees_analysis": {"is_excessive": True}}}, True),
        ({"bank_analysis": {"fees_analysis": {"suspicious_fees": [{"name": "x", "amount": 5}]}}}, True),
        ({"bank_analysis": {"risk_score": 50}}, True),
        ({"bank_analysis": {"risk_score": 49}}, False),
        ({"condominium_analysis": {"irregularities": [{}]}}, True),
        ({"work_analysis": {"risk_score": 70}}, True),
        ({"risk_level": "critical"}, True),
        ({"risk_level": "high"}, True),
        ({"risk_level": "medium"}, False),
        ({"auto_analysis": {"risk_level": "critical"}}, False),
        ({"health_analysis": {"amount": 100}}, False),
    ],
)
def test_has_anomalies(raw, expected):
    assert has_anomalies(parse_document_analysis(raw)) is expected


@pytest.mark.parametrize(
    "raw, category",
    [
        (None, DocumentCategory.OTHER),
        ({}, DocumentCategory.OTHER),
        ({"bank_analysis": {}}, DocumentCategory.BANK),
        ({"condominium_analysis": {}}, DocumentCategory.CONDOMINIUM),
        ({"work_analysis": {}}, DocumentCategory.WORK),
        ({"health_analysis": {}}, DocumentCategory.HEALTH),
        ({"auto_analysis": {}}, DocumentCategory.AUTO),
        ({"bank_analysis": {}, "work_analysis": {}}, DocumentCategory.BANK),
        ({"suggested_categories": ["telecom", "flight"]}, DocumentCategory.FLIGHT),
        ({"suggested_categories": ["insurance"]}, DocumentCategory.INSURANCE),
        ({"suggested_categories": ["crypto"]}, DocumentCategory.OTHER),
        ({"document_category": "condominio", "bank_analysis": {}}, DocumentCategory.CONDOMINIUM),
        ({"document_category": "energy"}, DocumentCategory.ENERGY),
        ({"document_category": "sconosciuta", "work_analysis": {}}, DocumentCategory.WORK),
    ],
)
def test_get_document_category(raw, category):
    assert get_document_category(parse_document_analysis(raw)) is category
