"""Pydantic schemas for payment and download-credit endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InitiatePaymentRequest(_CamelSchema):
    plan: str = Field(..., description="Plan identifier: 'single' or 'bundle'")


class InitiatePaymentResponse(_CamelSchema):
    order_id: str
    amount: int
    currency: str
    key_id: str


class VerifyPaymentRequest(_CamelSchema):
    """Request schema carrying the checkout widget's callback values."""

    razorpay_order_id: str = Field(..., description="Gateway order id")
    razorpay_payment_id: str = Field(..., description="Gateway payment id")
    razorpay_signature: str = Field(..., description="HMAC signature from the gateway")
    plan: str | None = Field(None, description="Plan the order was opened for")


class VerifyPaymentResponse(_CamelSchema):
    success: bool
    message: str
    credits_granted: int = 0


class UseCreditResponse(_CamelSchema):
    success: bool
    download_credits: int
