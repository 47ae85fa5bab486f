"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from rimborsami_engine.config import settings
from rimborsami_engine.domain.rules import amount_rules
from rimborsami_engine.infrastructure.clients.catalog import CatalogClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_catalog_client() -> CatalogClient:
    """Provide opportunity catalog client instance"""
    return CatalogClient()


def get_amount_rules():
    """Amount rule set selected by configuration"""
    return amount_rules(extended=settings.extended_amount_rules)
