"""
Tests for multi-touch revenue attribution.
"""

from decimal import Decimal

import pytest

from services.journey_service.models import Journey
from services.journey_service.services.attribution_service import (
    AttributionCalculator,
    is_qualifying,
    referrer_host,
    resolve_source_key,
    unique_sources,
)
from services.journey_service.services.journey_builder import to_touchpoint


@pytest.fixture
def calculator():
    return AttributionCalculator()


@pytest.fixture
def three_source_journey(make_journey, make_event, make_payment):
    """google, then facebook, then a partner.com referral, and a 100.00 payment."""
    return make_journey(
        events=[
            make_event(0, utm_source="google", utm_medium="cpc", utm_campaign="brand"),
            make_event(5, utm_source="facebook", utm_medium="social"),
            make_event(7),
            make_event(9, referrer="partner.com"),
        ],
        payments=[make_payment("100.00")],
    )


class TestSourceResolution:

    def test_referrer_host_of_absolute_url(self):
        assert referrer_host("https://www.Partner.com/blog?x=1") == "www.partner.com"

    def test_referrer_without_scheme_is_kept_raw(self):
        assert referrer_host("partner.com") == "partner.com"

    def test_unparseable_referrer_is_kept_raw(self):
        assert referrer_host("http://[broken") == "http://[broken"

    def test_utm_source_wins_over_referrer(self, make_event):
        touchpoint = to_touchpoint(make_event(utm_source="newsletter", referrer="https://mail.example.com/"))
        assert resolve_source_key(touchpoint) == "newsletter"

    def test_touchpoint_without_source_does_not_qualify(self, make_event):
        touchpoint = to_touchpoint(make_event(referrer=None))
        assert not is_qualifying(touchpoint)
        assert resolve_source_key(touchpoint) == "direct"

    def test_unique_sources_keep_first_occurrence(self, make_event):
        touchpoints = [
            to_touchpoint(make_event(0, id="g1", utm_source="google", utm_campaign="first")),
            to_touchpoint(make_event(1, id="fb", utm_source="facebook")),
            to_touchpoint(make_event(2, id="g2", utm_source="google", utm_campaign="second")),
        ]

        sources = unique_sources(touchpoints)

        assert [(key, tp.id) for key, tp in sources] == [("google", "g1"), ("facebook", "fb")]


class TestAttributionCalculator:

    def test_three_source_example(self, calculator, three_source_journey):
        report = calculator.calculate(three_source_journey)

        assert report.total_revenue == Decimal("100.00")
        assert report.touchpoint_count == 3
        assert report.payment_count == 1

        assert report.first_touch.source == "google"
        assert report.first_touch.medium == "cpc"
        assert report.first_touch.campaign == "brand"
        assert report.first_touch.percentage == 100.0
        assert report.first_touch.revenue == Decimal("100.00")

        assert report.last_touch.source == "partner.com"
        assert report.last_touch.revenue == Decimal("100.00")

        assert [e.source for e in report.linear] == ["google", "facebook", "partner.com"]
        assert all(e.percentage == pytest.approx(100 / 3) for e in report.linear)
        assert all(e.revenue == Decimal("33.33") for e in report.linear)

        assert [e.source for e in report.time_decay] == ["google", "facebook", "partner.com"]
        assert [round(e.percentage, 1) for e in report.time_decay] == [14.3, 28.6, 57.1]
        assert [e.revenue for e in report.time_decay] == [Decimal("14.29"), Decimal("28.57"), Decimal("57.14")]

    def test_linear_and_time_decay_percentages_sum_to_100(self, calculator, three_source_journey):
        report = calculator.calculate(three_source_journey)

        assert sum(e.percentage for e in report.linear) == pytest.approx(100.0)
        assert sum(e.percentage for e in report.time_decay) == pytest.approx(100.0)

    def test_representative_touchpoint_supplies_medium_and_campaign(self, calculator, three_source_journey):
        report = calculator.calculate(three_source_journey)

        assert report.linear[0].medium == "cpc"
        assert report.linear[1].medium == "social"
        assert report.linear[2].medium is None

    def test_no_qualifying_touchpoints_is_all_direct(self, calculator, make_journey, make_event, make_payment):
        journey = make_journey(events=[make_event(0), make_event(3)], payments=[make_payment("80.00")])

        report = calculator.calculate(journey)

        for entries in ([report.first_touch], [report.last_touch], report.linear, report.time_decay):
            assert len(entries) == 1
            assert entries[0].source == "direct"
            assert entries[0].percentage == 100.0
            assert entries[0].revenue == Decimal("80.00")
        assert report.touchpoint_count == 1

    def test_single_source_models_agree(self, calculator, make_journey, make_event, make_payment):
        journey = make_journey(
            events=[make_event(0, utm_source="google"), make_event(2, utm_source="google")],
            payments=[make_payment("59.90")],
        )

        report = calculator.calculate(journey)

        assert report.linear == report.time_decay
        assert report.linear[0].source == report.first_touch.source == "google"
        assert report.linear[0].percentage == 100.0
        assert report.linear[0].revenue == report.first_touch.revenue

    def test_last_touch_uses_referrer_hostname(self, calculator, make_journey, make_event):
        journey = make_journey(
            events=[make_event(0, utm_source="google"), make_event(1, referrer="https://blog.partner.com/post")]
        )

        report = calculator.calculate(journey)

        assert report.last_touch.source == "blog.partner.com"
        assert report.total_revenue == Decimal("0")
        assert report.last_touch.revenue == Decimal("0")

    def test_journey_without_touchpoints_is_rejected(self, calculator):
        # model_construct skips the min_length validation
        empty = Journey.model_construct(visitor_id="v-empty", touchpoints=[], payments=[], total_revenue=Decimal("0"))

        with pytest.raises(ValueError):
            calculator.calculate(empty)
