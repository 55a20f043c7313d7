"""
Tests for calendar_scraper.extract — price reading and promo modal.
"""

import asyncio

from calendar_scraper.extract import extract_price, inspect_promo_modal
from calendar_scraper.schema import PRICE_ERROR, PRICE_NOT_FOUND
from calendar_scraper.sites.riu import RiuSite

from fakes import FakeElement, make_config


def run(coro):
    return asyncio.run(coro)


def show_price(page, amount, currency="USD"):
    page.register(".price", [FakeElement()])
    page.register(".price strong", [FakeElement(text=amount)])
    page.register(".price strong + *", [FakeElement(text=currency)])


class TestExtractPrice:
    def test_amount_and_currency(self, page, config):
        show_price(page, " 2.345,60 ", "USD")
        assert run(extract_price(page, RiuSite(), config)) == "2.345,60 USD"

    def test_missing_currency(self, page, config):
        page.register(".price", [FakeElement()])
        page.register(".price strong", [FakeElement(text="980")])
        assert run(extract_price(page, RiuSite(), config)) == "980"

    def test_timeout_returns_sentinel(self, page, config):
        assert run(extract_price(page, RiuSite(), config)) == PRICE_NOT_FOUND

    def test_empty_amount_returns_sentinel(self, page, config):
        page.register(".price", [FakeElement()])
        assert run(extract_price(page, RiuSite(), config)) == PRICE_NOT_FOUND

    def test_driver_error_returns_sentinel(self, page, config):
        page.register(".price", [FakeElement()])

        def detached():
            raise RuntimeError("Element is not attached to the DOM")

        page.register(".price strong", detached)
        assert run(extract_price(page, RiuSite(), config)) == PRICE_ERROR


class TestInspectPromoModal:
    def _modal(self, page, title, message):
        close = FakeElement()
        page.register(".promo", [FakeElement(children={
            ".promo-title": [FakeElement(text=title)],
            ".promo-message": [FakeElement(text=message)],
        })])
        page.register(".promo-close", [close])
        return close

    def test_reads_and_dismisses(self, page, config):
        close = self._modal(page, "Get 15% OFF your stay", "Use code RIUPLAZA15 when you book")
        coupon = run(inspect_promo_modal(page, RiuSite(), config, timeout=100))
        assert coupon.discount_label == "15% OFF"
        assert coupon.promo_code == "RIUPLAZA15"
        assert "RIUPLAZA15" in coupon.raw_message
        assert close.clicks == 1

    def test_prefilled_code_input_wins(self, page, config):
        self._modal(page, "10% off", "Book direct and save")
        page.register("input[name='promoCode']", [FakeElement(attrs={"value": "direct10"})])
        coupon = run(inspect_promo_modal(page, RiuSite(), config, timeout=100))
        assert coupon.promo_code == "DIRECT10"

    def test_no_modal(self, page, config):
        assert run(inspect_promo_modal(page, RiuSite(), config, timeout=100)) is None
        assert page.keyboard.presses == []

    def test_modal_without_offer_is_dismissed_with_escape(self, page, config):
        page.register(".promo", [FakeElement(children={
            ".promo-title": [FakeElement(text="Welcome")],
            ".promo-message": [FakeElement(text="Sign up for our newsletter")],
        })])
        assert run(inspect_promo_modal(page, RiuSite(), config, timeout=100)) is None
        assert page.keyboard.presses == ["Escape"]

    def test_site_without_promo(self, page):
        config = make_config(promo=None)
        assert run(inspect_promo_modal(page, RiuSite(), config)) is None
