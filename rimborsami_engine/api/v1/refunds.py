"""POST /v1/refunds/* - statutory refund calculators"""

from dataclasses import asdict

from fastapi import APIRouter

from rimborsami_engine.api.v1.schemas import (
    CondominiumRefundRequest,
    FineRefundRequest,
    FlightRefundRequest,
    RefundEstimateSchema,
    UsuryRefundRequest,
    WorkRefundRequest,
)
from rimborsami_engine.domain import refunds

router = APIRouter()


@router.post("/refunds/flight", response_model=RefundEstimateSchema)
def flight_refund(request_body: FlightRefundRequest):
    """EU 261/2004 compensation for a delayed or cancelled flight"""
    return asdict(refunds.calculate_flight_compensation(**request_body.model_dump()))


@router.post("/refunds/usury", response_model=RefundEstimateSchema)
def usury_refund(request_body: UsuryRefundRequest):
    """Interest refundable above the usury threshold"""
    return asdict(refunds.calculate_bank_usury(**request_body.model_dump()))


@router.post("/refunds/fine", response_model=RefundEstimateSchema)
def fine_refund(request_body: FineRefundRequest):
    return asdict(refunds.calculate_fine_refund(**request_body.model_dump()))


@router.post("/refunds/work", response_model=RefundEstimateSchema)
def work_refund(request_body: WorkRefundRequest):
    return asdict(refunds.calculate_work_refund(**request_body.model_dump()))


@router.post("/refunds/condominium", response_model=RefundEstimateSchema)
def condominium_refund(request_body: CondominiumRefundRequest):
    return asdict(refunds.calculate_condominium_refund(**request_body.model_dump()))
