"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient

from rimborsami_engine.api.main import create_app
from rimborsami_engine.domain.models import OpportunityDefinition


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def negative_answers() -> dict[str, str]:
    """Every quiz question answered with its 'nothing to report' option"""
    return {
        "flights": "no",
        "ecommerce": "never",
        "returns": "no",
        "bank": "no",
        "cards": "none",
        "insurance": "no",
        "claims": "no",
        "electronics": "no",
        "defects": "no",
        "telecom": "no",
        "energy": "no",
        "transport": "never",
        "auto": "no",
        "tech_accounts": "no",
        "class_actions": "no",
    }


@pytest.fixture
def sample_catalog() -> list[OpportunityDefinition]:
    """Small opportunity catalog, one or two entries per category"""
    return [
        OpportunityDefinition(id="opp_flight", category="flight", min_amount=250, max_amount=600),
        OpportunityDefinition(id="opp_ecommerce", category="ecommerce", min_amount=20, max_amount=200),
        OpportunityDefinition(id="opp_bank_fees", category="bank", min_amount=50, max_amount=500),
        OpportunityDefinition(id="opp_bank_usury", category="bank", min_amount=100, max_amount=2001),
        OpportunityDefinition(id="opp_energy", category="energy", min_amount=100, max_amount=400),
        OpportunityDefinition(id="opp_class_action", category="class_action", min_amount=100, max_amount=1000),
    ]
