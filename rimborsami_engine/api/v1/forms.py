"""POST /v1/forms/normalize - normalize a data-collection form submission"""

from fastapi import APIRouter

from rimborsami_engine.api.v1.schemas import FormNormalizeRequest, FormNormalizeResponse
from rimborsami_engine.domain.facts import missing_required_fields, normalize_form_submission

router = APIRouter()


@router.post("/forms/normalize", response_model=FormNormalizeResponse)
def normalize_form(request_body: FormNormalizeRequest):
    facts = normalize_form_submission(request_body.category, request_body.fields)
    missing = missing_required_fields(request_body.category, request_body.fields)

    return FormNormalizeResponse(
        category=request_body.category,
        facts=facts,
        missing_fields=missing,
        complete=not missing,
    )
