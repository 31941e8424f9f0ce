"""Download-credit purchases and consumption.

A payment moves ``pending -> completed`` on a verified signature or
``pending -> failed`` when the gateway refuses to create the order. The
completion is a conditional UPDATE committed together with the credit
grant, so replayed or concurrent verifications grant credits once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select, update

from resume_builder.data.db import get_session
from resume_builder.data.models import Payment, User
from resume_builder.data.models.payment import (
    PAYMENT_COMPLETED,
    PAYMENT_FAILED,
    PAYMENT_PENDING,
)
from resume_builder.errors import (
    ExternalServiceError,
    InsufficientCreditsError,
    PaymentVerificationError,
    ResumeValidationError,
)
from resume_builder.services.users import (
    consume_download_credit,
    get_or_create_user,
    grant_download_credits,
)

logger = logging.getLogger(__name__)

__all__ = [
    "PLANS",
    "PaymentGateway",
    "Plan",
    "initiate_payment",
    "use_download_credit",
    "verify_payment",
]


@dataclass(frozen=True, slots=True)
class Plan:
    id: str
    amount: int
    credits: int
    currency: str = "INR"


PLANS: dict[str, Plan] = {
    "single": Plan(id="single", amount=1000, credits=1),
    "bundle": Plan(id="bundle", amount=10000, credits=20),
}


class PaymentGateway(Protocol):
    key_id: str

    def create_order(self, amount: int, currency: str, receipt: str) -> dict: ...

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool: ...


def initiate_payment(user_id: str, plan: str, *, gateway: PaymentGateway) -> dict:
    """Open a checkout for *plan*.

    Returns:
        ``order_id``, ``amount``, ``currency`` and ``key_id`` for the client
        checkout widget.

    Raises:
        ResumeValidationError: If *plan* is unknown.
        PaymentConfigurationError: If the gateway has no credentials.
        ExternalServiceError: If the gateway fails to create the order.
    """
    selected = PLANS.get(plan)
    if selected is None:
        raise ResumeValidationError(f"Invalid plan: {plan!r}")

    with get_session() as session:
        get_or_create_user(session, user_id)
        payment = Payment(
            user_id=user_id,
            amount=selected.amount,
            currency=selected.currency,
            status=PAYMENT_PENDING,
            plan=selected.id,
            credits_granted=selected.credits,
        )
        session.add(payment)
        session.flush()
        payment_id = payment.id

    try:
        order = gateway.create_order(selected.amount, selected.currency, payment_id)
    except ExternalServiceError:
        with get_session() as session:
            session.execute(
                update(Payment).where(Payment.id == payment_id).values(status=PAYMENT_FAILED)
            )
        logger.warning("Payment %s marked failed after gateway error", payment_id)
        raise

    with get_session() as session:
        session.execute(
            update(Payment)
            .where(Payment.id == payment_id)
            .values(razorpay_order_id=order["id"])
        )

    logger.info("Initiated %s payment %s (order %s)", plan, payment_id, order["id"])
    return {
        "order_id": order["id"],
        "amount": selected.amount,
        "currency": selected.currency,
        "key_id": gateway.key_id,
    }


def verify_payment(
    user_id: str,
    order_id: str,
    payment_id: str,
    signature: str,
    *,
    gateway: PaymentGateway,
) -> dict:
    """Confirm a checkout and grant its download credits.

    Returns:
        ``success``, ``message`` and the number of ``credits_granted`` by this
        call (0 when the payment had already been completed).

    Raises:
        PaymentVerificationError: On a bad signature, an unknown order or a
            failed payment. Nothing is written in that case.
    """
    if not (order_id and payment_id and signature):
        raise PaymentVerificationError("Missing payment verification fields")
    if not gateway.verify_signature(order_id, payment_id, signature):
        logger.warning("Rejected payment signature for order %s", order_id)
        raise PaymentVerificationError("Invalid payment signature")

    with get_session() as session:
        payment = session.execute(
            select(Payment).where(
                Payment.razorpay_order_id == order_id,
                Payment.user_id == user_id,
            )
        ).scalar_one_or_none()
        if payment is None:
            raise PaymentVerificationError("Payment not found")
        if payment.status == PAYMENT_COMPLETED:
            return {
                "success": True,
                "message": "Payment already verified",
                "credits_granted": 0,
            }
        if payment.status == PAYMENT_FAILED:
            raise PaymentVerificationError("Payment has failed")

        result = session.execute(
            update(Payment)
            .where(Payment.id == payment.id, Payment.status == PAYMENT_PENDING)
            .values(
                status=PAYMENT_COMPLETED,
                razorpay_payment_id=payment_id,
                razorpay_signature=signature,
            )
        )
        if result.rowcount != 1:
            return {
                "success": True,
                "message": "Payment already verified",
                "credits_granted": 0,
            }
        credits = payment.credits_granted
        grant_download_credits(session, user_id, credits)

    logger.info("Payment for order %s completed; granted %d credits", order_id, credits)
    return {
        "success": True,
        "message": "Payment verified successfully",
        "credits_granted": credits,
    }


def use_download_credit(user_id: str) -> int:
    """Spend one download credit and return the remaining balance.

    Raises:
        InsufficientCreditsError: If the balance is already zero.
    """
    with get_session() as session:
        if not consume_download_credit(session, user_id):
            raise InsufficientCreditsError("download", "No download credits remaining")
        remaining = session.execute(
            select(User.download_credits).where(User.id == user_id)
        ).scalar_one()
    return remaining
