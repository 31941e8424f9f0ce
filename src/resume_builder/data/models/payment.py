"""Payment model for download-credit purchases.

A payment row is written before the gateway order exists, so abandoned
checkouts still leave a ``pending`` record behind.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from resume_builder.data.db import Base

if TYPE_CHECKING:
    from resume_builder.data.models.user import User

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"


class Payment(Base):
    """Razorpay transaction record.

    Attributes:
        id: UUID primary key, also sent to the gateway as the order receipt.
        user_id: Owner of the purchase.
        razorpay_order_id: Gateway order id, set once the order is created.
        razorpay_payment_id: Gateway payment id, set on verification.
        razorpay_signature: Signature submitted by the client on verification.
        amount: Price in minor currency units (paise).
        currency: ISO currency code.
        status: ``pending``, ``completed`` or ``failed``.
        plan: Plan identifier the purchase was made for.
        credits_granted: Download credits granted when the payment completes.
    """

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    razorpay_order_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True, index=True
    )
    razorpay_payment_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    razorpay_signature: Mapped[str | None] = mapped_column(String(500), nullable=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="INR")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=PAYMENT_PENDING)
    plan: Mapped[str] = mapped_column(String(50), nullable=False)
    credits_granted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    user: Mapped[User] = relationship("User", back_populates="payments")
