"""Payment and download-credit routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from resume_builder.api.dependencies import CurrentUserId, get_payment_gateway
from resume_builder.api.errors import to_http_exception
from resume_builder.api.schemas.payments import (
    InitiatePaymentRequest,
    InitiatePaymentResponse,
    UseCreditResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from resume_builder.errors import ResumeBuilderError
from resume_builder.services.payment_gateway import RazorpayGateway
from resume_builder.services.payments import (
    initiate_payment,
    use_download_credit,
    verify_payment,
)

router = APIRouter(prefix="/payments", tags=["payments"])
downloads_router = APIRouter(prefix="/downloads", tags=["payments"])

GatewayDependency = Annotated[RazorpayGateway, Depends(get_payment_gateway)]


@router.post("/initiate", response_model=InitiatePaymentResponse)
def initiate_payment_endpoint(
    data: InitiatePaymentRequest,
    user_id: CurrentUserId,
    gateway: GatewayDependency,
) -> InitiatePaymentResponse:
    """Open a gateway order for a download-credit plan."""
    try:
        order = initiate_payment(user_id, data.plan, gateway=gateway)
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
    return InitiatePaymentResponse(**order)


@router.post("/verify", response_model=VerifyPaymentResponse)
def verify_payment_endpoint(
    data: VerifyPaymentRequest,
    user_id: CurrentUserId,
    gateway: GatewayDependency,
) -> VerifyPaymentResponse:
    """Check the gateway signature and grant the plan's download credits once."""
    try:
        result = verify_payment(
            user_id,
            data.razorpay_order_id,
            data.razorpay_payment_id,
            data.razorpay_signature,
            gateway=gateway,
        )
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
    return VerifyPaymentResponse(**result)


@downloads_router.post("/use-credit", response_model=UseCreditResponse)
def use_credit_endpoint(user_id: CurrentUserId) -> UseCreditResponse:
    try:
        remaining = use_download_credit(user_id)
    except ResumeBuilderError as e:
        raise to_http_exception(e) from e
    return UseCreditResponse(success=True, download_credits=remaining)
