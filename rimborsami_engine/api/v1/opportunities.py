"""POST /v1/opportunities/match - match catalog opportunities to quiz answers"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request

from rimborsami_engine.api.dependencies import get_amount_rules, get_catalog_client, get_request_id
from rimborsami_engine.api.v1.schemas import MatchedOpportunitySchema, MatchRequest, MatchResponse
from rimborsami_engine.domain.exceptions import CatalogAPIError
from rimborsami_engine.domain.matching import estimated_total, match_opportunities
from rimborsami_engine.domain.models import OpportunityDefinition
from rimborsami_engine.domain.scoring import applicable_categories, score_categories
from rimborsami_engine.infrastructure.clients.catalog import CatalogClient
from rimborsami_engine.infrastructure.observability.logging import log_match_outcome
from rimborsami_engine.infrastructure.observability.metrics import catalog_fetch_failures_counter, record_matches

router = APIRouter()


@router.post("/opportunities/match", response_model=MatchResponse)
async def match(
    request_body: MatchRequest,
    request: Request,
    catalog_client: CatalogClient = Depends(get_catalog_client),
    rules=Depends(get_amount_rules),
):
    """
    Match refund opportunities for a quiz submission.

    Flow:
    1. Use the inline catalog, or fetch the active catalog from the store
    2. Score every category from the answers
    3. Match the catalog against the applicable categories
    4. Return matches with their estimated amounts
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        if request_body.catalog is not None:
            catalog = [OpportunityDefinition(**item.model_dump()) for item in request_body.catalog]
        else:
            catalog = await catalog_client.get_active_opportunities()
    except CatalogAPIError as e:
        catalog_fetch_failures_counter.inc()
        logging.error(f"Catalog API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Opportunity catalog unavailable")
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    scores = score_categories(request_body.answers)
    matches = match_opportunities(
        scores,
        catalog,
        amount_rules=rules,
        exclude_ids=request_body.exclude_ids,
    )
    total = estimated_total(matches)

    duration_ms = (time.time() - start_time) * 1000
    record_matches(m.category.value for m in matches)
    log_match_outcome(request_id, len(applicable_categories(scores)), len(matches), total, duration_ms)

    return MatchResponse(
        matched_count=len(matches),
        estimated_total=total,
        matches=[
            MatchedOpportunitySchema(
                opportunity_id=m.opportunity_id,
                category=m.category.value,
                estimated_amount=m.estimated_amount,
                match_reason=m.match_reason,
            )
            for m in matches
        ],
    )
