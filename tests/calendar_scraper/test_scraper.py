"""
Tests for calendar_scraper.scraper — the per-pair unit of work and the
whole run, driven against a fake hotel page.
"""

import asyncio
from datetime import date

import pytest

from calendar_scraper.base import SiteLoadError
from calendar_scraper.schema import PRICE_FAILED, PRICE_NOT_FOUND, DatePair
from calendar_scraper.scraper import process_pair, scrape_rates, select_date_pair
from calendar_scraper.sites.riu import RiuSite

from fakes import LANDING_URL, RESULTS_URL, SELECTORS, FakeElement, FakeHotelPage


TODAY = date(2026, 10, 14)  # Wednesday
PAIR = DatePair(date(2026, 10, 23), date(2026, 10, 30))


def run(coro):
    return asyncio.run(coro)


def hotel_page(**kwargs):
    page = FakeHotelPage((2026, 10), min_date=TODAY, **kwargs)
    page.url = LANDING_URL
    return page


class TestSelectDatePair:
    def test_selects_and_submits(self, config):
        page = hotel_page()
        page.navigate_on_search = False
        assert run(select_date_pair(page, config, SELECTORS, PAIR))
        assert page.searches == [(PAIR.check_in, PAIR.check_out)]
        assert page.keyboard.presses == ["Escape"]
        assert not page.open

    def test_check_out_in_following_month(self, config):
        page = hotel_page(pane_count=1)
        page.navigate_on_search = False
        pair = DatePair(date(2026, 10, 30), date(2026, 11, 6))
        assert run(select_date_pair(page, config, SELECTORS, pair))
        assert page.searches == [(pair.check_in, pair.check_out)]

    def test_grid_never_renders(self, config):
        page = hotel_page()
        page.grid_fails = {1}
        assert not run(select_date_pair(page, config, SELECTORS, PAIR))
        assert page.searches == []

    def test_missing_search_button(self, config):
        page = hotel_page()
        page.register(SELECTORS.submit, [])
        assert not run(select_date_pair(page, config, SELECTORS, PAIR))

    def test_disabled_search_button(self, config):
        page = hotel_page()
        page.register(SELECTORS.submit, [FakeElement(disabled=True)])
        assert not run(select_date_pair(page, config, SELECTORS, PAIR))

    def test_failed_selection_closes_calendar(self, config):
        page = hotel_page(pane_count=1, last_offset=0)
        pair = DatePair(date(2026, 10, 30), date(2026, 11, 6))
        assert not run(select_date_pair(page, config, SELECTORS, pair))
        assert page.keyboard.presses == ["Escape"]
        assert not page.open

    def test_clears_pending_check_in_before_selecting(self, config):
        page = hotel_page()
        page.navigate_on_search = False
        page.calendar.range.append(date(2026, 10, 16))
        assert run(select_date_pair(page, config, SELECTORS, PAIR))
        assert page.calendar.clear.clicks == 1
        assert page.searches == [(PAIR.check_in, PAIR.check_out)]

    def test_missing_clear_target_is_not_fatal(self, config):
        page = hotel_page()
        page.navigate_on_search = False
        page.register(SELECTORS.clear, [])
        assert run(select_date_pair(page, config, SELECTORS, PAIR))
        assert page.searches == [(PAIR.check_in, PAIR.check_out)]

    def test_landing_search_requires_navigation(self, config):
        page = hotel_page()
        page.navigate_on_search = False
        assert not run(select_date_pair(page, config, SELECTORS, PAIR, expect_navigation=True))

    def test_landing_search_navigates(self, config):
        page = hotel_page()
        assert run(select_date_pair(page, config, SELECTORS, PAIR, expect_navigation=True))
        assert page.url == RESULTS_URL


class TestProcessPair:
    def test_records_price(self, config):
        page = hotel_page()
        result = run(process_pair(page, RiuSite(), config, PAIR))
        assert result.check_in == PAIR.check_in
        assert result.check_out == PAIR.check_out
        assert result.price == "123,00 USD"
        assert result.succeeded

    def test_grid_timeout_records_failure(self, config):
        page = hotel_page()
        page.grid_fails = {1}
        result = run(process_pair(page, RiuSite(), config, PAIR))
        assert result.price == PRICE_FAILED
        assert not result.succeeded

    def test_price_never_appears(self, config):
        page = hotel_page()
        page.price_hidden = True
        result = run(process_pair(page, RiuSite(), config, PAIR))
        assert result.price == PRICE_NOT_FOUND

    def test_driver_exception_is_contained(self, config):
        page = hotel_page()

        def detached():
            raise RuntimeError("Execution context was destroyed")

        page.register(SELECTORS.panel, detached)
        result = run(process_pair(page, RiuSite(), config, PAIR))
        assert result.price == PRICE_FAILED
        assert page.keyboard.presses == ["Escape"]

    def test_unreachable_check_out_closes_calendar(self, config):
        page = hotel_page(pane_count=1, last_offset=0)
        pair = DatePair(date(2026, 10, 30), date(2026, 11, 6))
        result = run(process_pair(page, RiuSite(), config, pair))
        assert result.price == PRICE_FAILED
        assert page.keyboard.presses == ["Escape"]
        assert not page.open

    def test_narrates_recorded_stage(self, config, capsys):
        page = hotel_page()
        run(process_pair(page, RiuSite(), config, PAIR))
        assert "✓ Recorded Fri Oct 23 2026 to Fri Oct 30 2026: 123,00 USD" in capsys.readouterr().out


class TestScrapeRates:
    def test_full_run(self, config):
        page = hotel_page()
        result = run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=4))

        assert result.site_id == "riu"
        assert result.url == LANDING_URL
        assert result.scraped_at
        assert [r.check_in for r in result.results] == [
            date(2026, 10, 16), date(2026, 10, 23), date(2026, 10, 30), date(2026, 11, 6),
        ]
        assert result.initial_price == "116,00 USD"
        assert result.succeeded_count == 4
        assert result.errors == []

    def test_initial_pair_reused(self, config):
        page = hotel_page()
        result = run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=2))
        # Landing search + one results-page search
        assert len(page.searches) == 2
        assert result.results[0].price == result.initial_price

    def test_initial_pair_reselected(self, config):
        page = hotel_page()
        run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=2, reuse_initial=False))
        assert len(page.searches) == 3
        assert page.searches[0] == page.searches[1]

    def test_failed_pair_does_not_stop_run(self, config):
        page = hotel_page()
        # Open #1 is the landing search; the first pair reuses its price,
        # so open #2 belongs to the second pair
        page.grid_fails = {2}
        result = run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=4))
        assert [r.succeeded for r in result.results] == [True, False, True, True]
        assert result.results[1].price == PRICE_FAILED

    def test_pair_after_mid_selection_failure_keeps_its_own_dates(self, config):
        page = hotel_page()
        panels = page.calendar.panels

        # Open #2 (second pair) loses the calendar after check-in is picked
        def detaches_after_check_in():
            if page.opens == 2 and len(page.calendar.range) == 1:
                raise RuntimeError("Element is not attached to the DOM")
            return panels()

        page.register(SELECTORS.panel, detaches_after_check_in)
        result = run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=3))
        assert [r.succeeded for r in result.results] == [True, False, True]
        assert page.searches[-1] == (date(2026, 10, 30), date(2026, 11, 6))
        assert result.results[2].price == "130,00 USD"

    def test_accepts_cookies_and_reads_promo(self, config):
        page = hotel_page()
        cookie_button = FakeElement()
        cookie_button.on_click = lambda: page.register("#accept-cookies", [])
        page.register("#accept-cookies", [cookie_button])
        page.register(".promo", [FakeElement(children={
            ".promo-title": [FakeElement(text="20% OFF")],
            ".promo-message": [FakeElement(text="Promo code: MIAMI20")],
        })])
        result = run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=1))
        assert cookie_button.clicks == 1
        assert result.coupon.promo_code == "MIAMI20"
        assert result.coupon.discount_label == "20% OFF"

    def test_initial_search_failure_is_recorded(self, config):
        page = hotel_page()
        page.navigate_on_search = False
        result = run(scrape_rates(page, RiuSite(), config, today=TODAY, limit=2))
        assert result.initial_price == PRICE_FAILED
        assert any("Initial search failed" in e for e in result.errors)
        assert len(result.results) == 2

    def test_site_load_failure_raises(self, config):
        page = hotel_page()
        page.goto_error = RuntimeError("net::ERR_NAME_NOT_RESOLVED")
        with pytest.raises(SiteLoadError):
            run(scrape_rates(page, RiuSite(), config, today=TODAY))
