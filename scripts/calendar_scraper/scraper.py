"""
Rate Calendar Scraper

Opens a hotel page, runs the initial landing-page search, then reselects
every Friday-to-Friday date pair in the results-page calendar and records
the displayed price for each.

A failed pair is recorded with a sentinel price and the run moves on; only
a hotel page that never loads stops the run.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from .base import (
    SiteLoadError,
    accept_cookies,
    click_with_fallback,
    create_browser,
    navigate_with_retry,
    poll_until,
    wait_for_optional,
)
from .dates import WINDOW_MONTHS, DateRangeGenerator, group_by_month
from .extract import extract_price, inspect_promo_modal, read_price_text
from .navigator import CalendarNavigator
from .schema import PRICE_FAILED, DatePair, DateRangeResult, ScrapeRun
from .sites.base import BaseSite, CalendarSelectors, SiteConfig


class PairStage(Enum):
    NOT_STARTED = "not started"
    SELECTING = "selecting"
    EXTRACTING = "extracting"
    RECORDED = "recorded"


# ---------------------------------------------------------------------------
# One date pair: open → select → submit
# ---------------------------------------------------------------------------

async def open_calendar(page, config: SiteConfig, selectors: CalendarSelectors) -> bool:
    """Click the date field and wait for the day grid. False if it never renders."""
    trigger = await wait_for_optional(page, selectors.trigger, config.trigger_timeout_ms)
    if trigger is None:
        print(f"  Date field not found: {selectors.trigger}")
        return False
    if not await click_with_fallback(page, trigger):
        return False

    if await wait_for_optional(page, selectors.grid, config.grid_timeout_ms) is None:
        print("  Calendar did not open")
        return False
    return True


async def submit_search(
    page,
    config: SiteConfig,
    selectors: CalendarSelectors,
    expect_navigation: bool = False,
) -> bool:
    """
    Click the search button and wait for the outcome.

    On the landing page the search navigates to the results page; on the
    results page it re-renders the price in place. Waits are bounded and a
    timeout only produces a console note.
    """
    price_before = await read_price_text(page, config)
    url_before = page.url

    button = await wait_for_optional(page, selectors.submit, config.grid_timeout_ms)
    if button is None:
        print("  Search button not found")
        return False
    if await button.is_disabled():
        print("  Search button is not clickable")
        return False
    if not await click_with_fallback(page, button):
        return False
    print("  Submitted search, waiting for prices...")

    if expect_navigation:
        async def navigated():
            return page.url != url_before

        if await poll_until(page, navigated, timeout=config.results_timeout_ms):
            try:
                await page.wait_for_load_state("networkidle", timeout=config.results_timeout_ms)
            except Exception:
                print("  Results page still loading, continuing...")
        else:
            print("  URL did not change after search")
            return False

    async def price_updated():
        text = await read_price_text(page, config)
        return bool(text) and text != price_before

    if not await poll_until(page, price_updated, timeout=config.price_timeout_ms):
        print("  Timeout waiting for price update, continuing...")
    return True


async def close_calendar(page) -> None:
    try:
        await page.keyboard.press("Escape")
    except Exception as e:
        print(f"  Could not close calendar with Escape key: {e}")


async def clear_selection(page, selector: str) -> bool:
    """Click a neutral part of the calendar so the next day click starts a new range."""
    target = await page.query_selector(selector)
    if target is None:
        print("  Could not clear existing selection")
        return False
    return await click_with_fallback(page, target)


async def select_date_pair(
    page,
    config: SiteConfig,
    selectors: CalendarSelectors,
    pair: DatePair,
    expect_navigation: bool = False,
) -> bool:
    """
    Select check-in and check-out in the calendar and submit the search.

    Once the calendar is open it is dismissed again on every exit path of
    the results-page variant, so a failed pair never leaves a half-made
    range behind for the next one.
    """
    if not await open_calendar(page, config, selectors):
        return False

    try:
        return await _select_and_submit(page, config, selectors, pair, expect_navigation)
    finally:
        if not expect_navigation:
            await close_calendar(page)


async def _select_and_submit(
    page,
    config: SiteConfig,
    selectors: CalendarSelectors,
    pair: DatePair,
    expect_navigation: bool,
) -> bool:
    if selectors.clear:
        await clear_selection(page, selectors.clear)

    navigator = CalendarNavigator(
        page,
        selectors,
        max_forward=config.max_forward,
        settle_timeout=config.settle_timeout_ms,
    )

    print(f"  Selecting check-in: {pair.check_in.isoformat()}")
    if not await navigator.select_day(pair.check_in):
        print(f"  Failed to select check-in date: {pair.check_in.isoformat()}")
        return False

    print(f"  Selecting check-out: {pair.check_out.isoformat()}")
    if not await navigator.select_day(pair.check_out):
        print(f"  Failed to select check-out date: {pair.check_out.isoformat()}")
        return False

    return await submit_search(page, config, selectors, expect_navigation=expect_navigation)


async def process_pair(page, site: BaseSite, config: SiteConfig, pair: DatePair) -> DateRangeResult:
    """
    Run one pair through selecting → extracting → recorded.

    Driver exceptions are converted to PRICE_FAILED at this boundary.
    """
    stage = PairStage.NOT_STARTED
    try:
        stage = PairStage.SELECTING
        if await select_date_pair(page, config, config.results_calendar, pair):
            stage = PairStage.EXTRACTING
            price = await extract_price(page, site, config)
        else:
            print(f"  ✗ Failed to select dates for {pair.describe()}")
            price = PRICE_FAILED
    except Exception as e:
        print(f"  ✗ Error while {stage.value} {pair.describe()}: {e}")
        price = PRICE_FAILED

    stage = PairStage.RECORDED
    result = DateRangeResult.for_pair(pair, price)
    mark = "✓" if result.succeeded else "✗"
    print(f"  {mark} {stage.value.capitalize()} {pair.describe()}: {price}")
    return result


async def run_initial_search(page, site: BaseSite, config: SiteConfig, pair: DatePair) -> str:
    """Search the first pair from the landing page, landing on the results page."""
    try:
        ok = await select_date_pair(page, config, config.landing_calendar, pair, expect_navigation=True)
    except Exception as e:
        print(f"  Error setting initial dates: {e}")
        return PRICE_FAILED
    if not ok:
        return PRICE_FAILED
    return await extract_price(page, site, config)


# ---------------------------------------------------------------------------
# Whole run
# ---------------------------------------------------------------------------

def print_date_pairs(pairs: list[DatePair]) -> None:
    print(f"\nFound {len(pairs)} Friday-to-Friday date pairs:")
    for month_label, month_pairs in group_by_month(pairs).items():
        print(f"\n{month_label}:")
        for i, pair in enumerate(month_pairs, 1):
            print(f"  {i}. {pair.describe()}")


async def scrape_rates(
    page,
    site: BaseSite,
    config: SiteConfig,
    today: Optional[date] = None,
    months: int = WINDOW_MONTHS,
    reuse_initial: bool = True,
    limit: Optional[int] = None,
) -> ScrapeRun:
    """
    Collect prices for every date pair on an already-open page.

    reuse_initial: record the landing-search price for the matching pair
    instead of selecting it again on the results page.

    Raises SiteLoadError if the hotel page cannot be loaded.
    """
    run = ScrapeRun(
        site_id=config.site_id,
        url=config.url,
        scraped_at=datetime.now().isoformat(),
    )

    print(f"Navigating to {config.name}: {config.url}")
    if not await navigate_with_retry(
        page, config.url, max_retries=config.nav_retries, timeout=config.nav_timeout_ms,
    ):
        raise SiteLoadError(f"Failed to load {config.url}")

    await accept_cookies(page, config.cookie_accept)

    try:
        run.coupon = await inspect_promo_modal(page, site, config)
    except Exception as e:
        run.warnings.append(f"Promo modal inspection failed: {e}")

    pairs = list(DateRangeGenerator(today, months=months))
    if limit is not None:
        pairs = pairs[:limit]
    if not pairs:
        run.warnings.append("No date pairs generated")
        return run
    print_date_pairs(pairs)

    initial = pairs[0]
    print(f"\n=== INITIAL SEARCH: {initial.describe()} ===")
    run.initial_price = await run_initial_search(page, site, config, initial)
    initial_result = DateRangeResult.for_pair(initial, run.initial_price)
    if not initial_result.succeeded:
        run.errors.append(f"Initial search failed: {run.initial_price}")

    print("\n=== COLLECTING PRICES ===")
    for i, pair in enumerate(pairs):
        print(f"\n--- Processing date pair {i + 1}/{len(pairs)}: {pair.describe()} ---")

        if reuse_initial and pair == initial and initial_result.succeeded:
            print(f"  Skipping, matches the initial search ({run.initial_price})")
            run.results.append(initial_result)
            continue

        run.results.append(await process_pair(page, site, config, pair))

        if i < len(pairs) - 1:
            await page.wait_for_timeout(config.pause_ms)

    return run


async def scrape_hotel(
    site: BaseSite,
    config: SiteConfig,
    headless: bool = True,
    **kwargs,
) -> ScrapeRun:
    """Launch a browser, run scrape_rates, and close the browser."""
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser, _context, page = await create_browser(p, headless=headless)
        try:
            return await scrape_rates(page, site, config, **kwargs)
        finally:
            await browser.close()
