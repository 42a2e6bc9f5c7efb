"""
Conversion models: leads and payments.

Leads are captured by signup forms and carry the session id of the session
they were captured in; they have no visitor id of their own. Payments are
written by the payment provider webhooks and reference the visitor directly.

Usage:
    ```python
    from sqlalchemy import select
    from common.models import Lead, Payment

    lead_stmt = select(Lead).where(Lead.session_id.in_(session_ids)).limit(1)
    payment_stmt = select(Payment).where(Payment.visitor_id == visitor_id)
    ```
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import DECIMAL, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from common.database import Base


class Lead(Base):
    """
    Model representing a captured lead.

    Attributes:
        id (str): Unique lead identifier (UUID). Primary key.
        project_id (str): Project ID (UUID).
        session_id (str | None): Session in which the lead was captured. This is
            the only link between a lead and a visitor.
        email (str): Lead email address.
        name (str | None): Display name, when the form asked for one.
        created_at (datetime): Capture time (inherited from Base).

    Table:
        leads
    """
    __tablename__ = "leads"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()")
    )
    project_id: Mapped[str] = mapped_column(UUID(as_uuid=False), index=True)
    session_id: Mapped[str | None] = mapped_column(String(255), index=True)
    email: Mapped[str] = mapped_column(String(320))
    name: Mapped[str | None] = mapped_column(String(255))


class Payment(Base):
    """
    Model representing a payment received from a visitor.

    Attributes:
        id (str): Unique payment identifier (UUID). Primary key.
        project_id (str): Project ID (UUID).
        visitor_id (str | None): Visitor the payment is attributed to.
        amount (Decimal | None): Payment amount. Stored as DECIMAL(15, 2).
        currency (str): ISO currency code.
        status (str): Provider status string (e.g. "succeeded", "refunded").
        customer_email (str | None): Email reported by the payment provider.
        created_at (datetime): Payment time (inherited from Base).

    Table:
        payments

    Note:
        - Amounts are summed as-is; all payments of a project are assumed to
          share a currency
    """
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()")
    )
    project_id: Mapped[str] = mapped_column(UUID(as_uuid=False), index=True)
    visitor_id: Mapped[str | None] = mapped_column(String(255), index=True)
    amount: Mapped[Decimal | None] = mapped_column(DECIMAL(15, 2))
    currency: Mapped[str] = mapped_column(String(10), server_default=text("'BRL'"))
    status: Mapped[str] = mapped_column(String(50))
    customer_email: Mapped[str | None] = mapped_column(String(320))
