"""
Price and Promo Extraction

Reads the displayed room price after a search, and inspects the
promotional modal the site shows once per session.
"""

from __future__ import annotations

from typing import Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .base import click_with_fallback, query_text, wait_for_optional
from .schema import PRICE_ERROR, PRICE_NOT_FOUND, CouponOffer
from .sites.base import BaseSite, SiteConfig


async def read_price_text(page, config: SiteConfig) -> str:
    """Current price amount text without waiting ('' if not rendered)."""
    try:
        return await query_text(page, config.price_amount)
    except Exception:
        return ""


async def extract_price(page, site: BaseSite, config: SiteConfig) -> str:
    """
    Wait for the price block and return '<amount> <currency>'.

    Returns PRICE_NOT_FOUND if the block never appears, PRICE_ERROR on any
    other driver failure. Never raises.
    """
    try:
        await page.wait_for_selector(config.price_container, timeout=config.price_timeout_ms)
    except PlaywrightTimeoutError:
        print("  No price found")
        return PRICE_NOT_FOUND
    except Exception as e:
        print(f"  Error extracting price: {e}")
        return PRICE_ERROR

    try:
        amount = await query_text(page, config.price_amount)
        currency = await query_text(page, config.price_currency)
    except Exception as e:
        print(f"  Error extracting price: {e}")
        return PRICE_ERROR

    if not amount:
        print("  No price found")
        return PRICE_NOT_FOUND

    price = site.format_price(amount, currency)
    print(f"  Found price: {price}")
    return price


async def inspect_promo_modal(page, site: BaseSite, config: SiteConfig, timeout: int = 3000) -> Optional[CouponOffer]:
    """
    Read the promotional modal if it shows up, then dismiss it.

    Absence of the modal is normal; returns None in that case.
    """
    promo = config.promo
    if promo is None:
        return None

    modal = await wait_for_optional(page, promo.modal, timeout)
    if modal is None:
        print("  No promotional modal shown")
        return None

    title = await query_text(modal, promo.title)
    message = await query_text(modal, promo.message)

    code_value = ""
    if promo.code_input:
        code_input = await page.query_selector(promo.code_input)
        if code_input is not None:
            code_value = (await code_input.get_attribute("value")) or ""

    coupon = site.parse_promo_text(title, message, code_value)
    if coupon:
        print(f"  Promo found: {coupon.discount_label or '-'} code={coupon.promo_code or '-'}")
    else:
        print("  Promotional modal carries no code")

    await _dismiss_modal(page, promo.close)
    return coupon


async def _dismiss_modal(page, close_selector: str) -> None:
    if close_selector:
        close = await page.query_selector(close_selector)
        if close is not None and await click_with_fallback(page, close):
            return
    await page.keyboard.press("Escape")
