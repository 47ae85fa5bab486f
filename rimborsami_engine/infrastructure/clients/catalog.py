"""Opportunity catalog HTTP client (read-only)"""

from typing import Any, Dict, List

import httpx

from rimborsami_engine.config import settings
from rimborsami_engine.domain.exceptions import CatalogAPIError, InvalidCatalogDataError
from rimborsami_engine.domain.models import OpportunityDefinition


def opportunity_from_row(row: Dict[str, Any]) -> OpportunityDefinition:
    """Map one catalog row to an OpportunityDefinition; null amounts become 0"""
    return OpportunityDefinition(
        id=str(row["id"]),
        category=row["category"],
        min_amount=row.get("min_amount") or 0,
        max_amount=row.get("max_amount") or 0,
        title=row.get("title") or "",
        active=row.get("active", True) is not False,
    )


class CatalogClient:
    """Client for the opportunity catalog store"""

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.catalog_api_base
        self.api_key = api_key if api_key is not None else settings.catalog_api_key
        self.timeout = timeout or settings.http_timeout_seconds

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"apikey": self.api_key, "Authorization": f"Bearer {self.api_key}"}

    async def get_active_opportunities(self) -> List[OpportunityDefinition]:
        """
        Fetch every active opportunity, in catalog order.

        Raises:
            CatalogAPIError: On timeout or HTTP errors
            InvalidCatalogDataError: When a row is missing required fields
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/rest/v1/opportunities",
                    params={"select": "*", "active": "eq.true"},
                    headers=self._headers(),
                )
                response.raise_for_status()
                rows = response.json()
            except httpx.TimeoutException as e:
                raise CatalogAPIError(f"Catalog API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise CatalogAPIError(f"Catalog API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise CatalogAPIError(f"Catalog API unreachable: {e}") from e
            except ValueError as e:
                raise InvalidCatalogDataError(f"Catalog API returned invalid JSON: {e}") from e

        if not isinstance(rows, list):
            raise InvalidCatalogDataError("Catalog API did not return a list of opportunities")

        try:
            return [opportunity_from_row(row) for row in rows]
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidCatalogDataError(f"Invalid opportunity data from catalog: {e}") from e
