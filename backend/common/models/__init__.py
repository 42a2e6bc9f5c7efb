"""
Common ORM models for backend services.

This module provides the SQLAlchemy ORM models for the three record collections
the journey engine reads:

   - Event: Raw tracking events (page views, session starts, signups, purchases)
   - Lead: Captured leads, linked to visitors through their session id
   - Payment: Payments, linked to visitors directly

All models inherit from common.database.Base, which provides the created_at
timestamp every collection is ordered by.

Usage:
    ```python
    from common.models import Event, Lead, Payment
    ```
"""

from .conversions import Lead, Payment
from .events import Event

__all__ = [
    "Event",
    "Lead",
    "Payment",
]
