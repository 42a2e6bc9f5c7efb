"""
Event model for visitor behavior tracking.

This module contains the ORM model for the raw tracking events written by the
tracking pixel and the event ingestion API. The journey engine only reads
these rows; every touchpoint in a reconstructed journey is one Event.

Event Types:
    The ``event_type`` column is free-form. The tracking layer emits at least:
    - page_view: Page navigation
    - session_start: First event of a new session
    - signup: Lead capture form submitted
    - purchase: Checkout completed

Common Fields:
    - project_id: Project identifier every query is scoped by
    - visitor_id: Opaque, persistent visitor identifier (nullable for events
      sent before the visitor cookie was set)
    - session_id: Session identifier, shared with leads captured in the session
    - utm_*: Campaign attribution parameters from the landing URL
    - device_type / browser / os: User agent classification
    - country_code / city: IP geolocation

Usage:
    ```python
    from sqlalchemy import select
    from common.models import Event

    stmt = (
        select(Event)
        .where(Event.project_id == project_id, Event.visitor_id == visitor_id)
        .order_by(Event.created_at.asc())
    )
    ```
"""

from __future__ import annotations

from sqlalchemy import String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from common.database import Base


class Event(Base):
    """
    Model representing a single tracked event.

    Attributes:
        id (str): Unique event identifier (UUID). Primary key. Auto-generated.
        project_id (str): Project ID (UUID). Required for project scoping.
        visitor_id (str | None): Opaque visitor identifier assigned upstream.
        session_id (str): Session identifier.
        event_type (str): Kind of event (page_view, session_start, signup, purchase, ...).
        page_url (str | None): URL of the page where the event happened.
        referrer (str | None): Referrer URL reported by the browser.
        utm_source / utm_medium / utm_campaign / utm_term / utm_content (str | None):
            Campaign parameters.
        device_type (str | None): "desktop", "mobile" or "tablet".
        browser (str | None): Browser family.
        os (str | None): Operating system family.
        country_code (str | None): ISO country code from IP geolocation.
        city (str | None): City from IP geolocation.
        created_at (datetime): Event time (inherited from Base).

    Table:
        events
    """
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()")
    )
    project_id: Mapped[str] = mapped_column(UUID(as_uuid=False), index=True)
    visitor_id: Mapped[str | None] = mapped_column(String(255), index=True)
    session_id: Mapped[str] = mapped_column(String(255), index=True)
    event_type: Mapped[str] = mapped_column(String(100))
    page_url: Mapped[str | None] = mapped_column(Text)
    referrer: Mapped[str | None] = mapped_column(Text)
    utm_source: Mapped[str | None] = mapped_column(String(255))
    utm_medium: Mapped[str | None] = mapped_column(String(255))
    utm_campaign: Mapped[str | None] = mapped_column(String(255))
    utm_term: Mapped[str | None] = mapped_column(String(255))
    utm_content: Mapped[str | None] = mapped_column(String(255))
    device_type: Mapped[str | None] = mapped_column(String(50))
    browser: Mapped[str | None] = mapped_column(String(100))
    os: Mapped[str | None] = mapped_column(String(100))
    country_code: Mapped[str | None] = mapped_column(String(10))
    city: Mapped[str | None] = mapped_column(String(255))
