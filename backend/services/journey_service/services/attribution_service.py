"""
Multi-Touch Revenue Attribution.

This module splits the revenue of one journey across the sources that brought
the visitor in, under four attribution models:

    - First-Touch: all revenue to the journey's first source
    - Last-Touch: all revenue to the last touchpoint carrying a source
    - Linear: revenue split evenly over the unique sources
    - Time-Decay: source i of the unique-source list weighs 2**i, so sources
      discovered later in the journey receive exponentially more credit

A touchpoint qualifies as a source when it carries a UTM source or a referrer.
Its source key is the UTM source, else the referrer's hostname, else the raw
referrer. The unique-source list keeps the first qualifying touchpoint of each
source key, in order of first appearance.

Example:
    ```python
    report = AttributionCalculator().calculate(journey)
    for entry in report.time_decay:
        print(entry.source, f"{entry.percentage:.1f}%", entry.revenue)
    ```

Note:
    Percentages are floats. Revenues are Decimals rounded to cents, so the
    revenues of a multi-entry model may differ from the total by a cent.
"""

from decimal import ROUND_HALF_UP, Decimal
from urllib.parse import urlsplit

from services.journey_service.models import AttributionEntry, AttributionReport, Journey, Touchpoint

DIRECT_SOURCE = "direct"
CENT = Decimal("0.01")


def _cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def referrer_host(referrer: str) -> str:
    """Hostname of an absolute referrer URL, or the referrer itself when it has none."""
    try:
        parts = urlsplit(referrer)
        host = parts.hostname
    except ValueError:
        return referrer
    if parts.scheme and host:
        return host
    return referrer


def is_qualifying(touchpoint: Touchpoint) -> bool:
    return bool(touchpoint.utm_source or touchpoint.referrer)


def resolve_source_key(touchpoint: Touchpoint) -> str:
    if touchpoint.utm_source:
        return touchpoint.utm_source
    if touchpoint.referrer:
        return referrer_host(touchpoint.referrer)
    return DIRECT_SOURCE


def unique_sources(touchpoints: list[Touchpoint]) -> list[tuple[str, Touchpoint]]:
    """First qualifying touchpoint per source key, in order of first appearance."""
    seen: set[str] = set()
    sources: list[tuple[str, Touchpoint]] = []
    for touchpoint in touchpoints:
        if not is_qualifying(touchpoint):
            continue
        key = resolve_source_key(touchpoint)
        if key in seen:
            continue
        seen.add(key)
        sources.append((key, touchpoint))
    return sources


class AttributionCalculator:
    """Computes the four attribution views of a journey."""

    def calculate(self, journey: Journey) -> AttributionReport:
        """
        Attribute a journey's revenue under every model.

        Args:
            journey: A journey with at least one touchpoint.

        Returns:
            AttributionReport: First-touch, last-touch, linear and time-decay entries.

        Raises:
            ValueError: If the journey has no touchpoints.
        """
        if not journey.touchpoints:
            raise ValueError(f"Journey of visitor {journey.visitor_id} has no touchpoints")

        total = journey.total_revenue
        sources = unique_sources(journey.touchpoints)
        first_touch = self._first_touch(journey)

        if sources:
            linear = self._linear(sources, total)
            time_decay = self._time_decay(sources, total)
        else:
            # No sourced touchpoint means the first source is null, i.e. direct
            linear = [first_touch]
            time_decay = [first_touch]

        return AttributionReport(
            visitor_id=journey.visitor_id,
            total_revenue=total,
            first_touch=first_touch,
            last_touch=self._last_touch(journey, first_touch),
            linear=linear,
            time_decay=time_decay,
            touchpoint_count=max(len(sources), 1),
            payment_count=len(journey.payments),
        )

    @staticmethod
    def _first_touch(journey: Journey) -> AttributionEntry:
        source = journey.first_source
        return AttributionEntry(
            source=source.utm_source or DIRECT_SOURCE,
            medium=source.utm_medium,
            campaign=source.utm_campaign,
            percentage=100.0,
            revenue=journey.total_revenue,
        )

    @staticmethod
    def _last_touch(journey: Journey, first_touch: AttributionEntry) -> AttributionEntry:
        qualifying = [tp for tp in journey.touchpoints if is_qualifying(tp)]
        if not qualifying:
            return first_touch

        last = qualifying[-1]
        return AttributionEntry(
            source=resolve_source_key(last),
            medium=last.utm_medium,
            campaign=last.utm_campaign,
            percentage=100.0,
            revenue=journey.total_revenue,
        )

    @staticmethod
    def _linear(sources: list[tuple[str, Touchpoint]], total: Decimal) -> list[AttributionEntry]:
        count = len(sources)
        return [
            AttributionEntry(
                source=key,
                medium=touchpoint.utm_medium,
                campaign=touchpoint.utm_campaign,
                percentage=100 / count,
                revenue=_cents(total / count),
            )
            for key, touchpoint in sources
        ]

    @staticmethod
    def _time_decay(sources: list[tuple[str, Touchpoint]], total: Decimal) -> list[AttributionEntry]:
        weights = [2**index for index in range(len(sources))]
        total_weight = sum(weights)
        return [
            AttributionEntry(
                source=key,
                medium=touchpoint.utm_medium,
                campaign=touchpoint.utm_campaign,
                percentage=weight / total_weight * 100,
                revenue=_cents(total * weight / total_weight),
            )
            for (key, touchpoint), weight in zip(sources, weights)
        ]
