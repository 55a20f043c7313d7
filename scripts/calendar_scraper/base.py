"""
Browser Helpers

Browser setup, navigation retry, click fallback and wait predicates shared
by the calendar navigator, the extractor and the orchestrator.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class SiteLoadError(RuntimeError):
    """The hotel page could not be loaded; the run cannot start."""


# ---------------------------------------------------------------------------
# Browser setup
# ---------------------------------------------------------------------------

async def create_browser(playwright, headless: bool = True, viewport: dict | None = None):
    """Create a browser + context with standard settings."""
    browser = await playwright.chromium.launch(headless=headless)
    context = await browser.new_context(
        viewport=viewport or {"width": 1920, "height": 1080},
        user_agent=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        locale="en-US",
    )
    page = await context.new_page()
    return browser, context, page


async def navigate_with_retry(
    page,
    url: str,
    max_retries: int = 3,
    backoff_base: float = 2.0,
    timeout: int = 60000,
) -> bool:
    """
    Navigate to a URL with exponential backoff retry.

    Tries networkidle first, falls back to domcontentloaded, then retries.
    Returns True if navigation succeeded, False if all retries exhausted.
    """
    strategies = ["networkidle", "domcontentloaded"]

    for attempt in range(max_retries):
        for strategy in strategies:
            try:
                await page.goto(url, wait_until=strategy, timeout=timeout)
                return True
            except Exception as e:
                if strategy == "networkidle":
                    continue
                elif attempt < max_retries - 1:
                    wait_time = backoff_base ** (attempt + 1)
                    print(f"  Retry {attempt + 1}/{max_retries} after {wait_time:.0f}s: {e}")
                    await asyncio.sleep(wait_time)
                    break
                else:
                    print(f"  All {max_retries} retries failed for {url}: {e}")
                    return False

    return False


# ---------------------------------------------------------------------------
# Element interaction
# ---------------------------------------------------------------------------

async def click_with_fallback(page, element, timeout: int = 5000) -> bool:
    """
    Click an element, falling back to a script-dispatched click.

    Overlays and off-screen panels make the native click fail on some
    calendar buttons; el.click() inside the page ignores actionability.
    Returns False only if both strategies fail.
    """
    try:
        await element.click(timeout=timeout)
        return True
    except Exception as e:
        print(f"  Regular click failed ({type(e).__name__}), trying JavaScript click...")

    try:
        await page.evaluate("el => el.click()", element)
        return True
    except Exception as e:
        print(f"  JavaScript click failed: {e}")
        return False


async def safe_inner_text(element) -> str:
    """Element text, stripped; empty string on detached elements."""
    if element is None:
        return ""
    try:
        return (await element.inner_text()).strip()
    except Exception:
        return ""


async def query_text(scope, selector: str) -> str:
    """Text of the first match of selector inside scope, or ''."""
    if not selector:
        return ""
    el = await scope.query_selector(selector)
    return await safe_inner_text(el)


# ---------------------------------------------------------------------------
# Waiting
# ---------------------------------------------------------------------------

async def wait_for_optional(page, selector: str, timeout: int):
    """wait_for_selector that returns None on timeout instead of raising."""
    try:
        return await page.wait_for_selector(selector, timeout=timeout)
    except PlaywrightTimeoutError:
        return None


async def poll_until(
    page,
    check: Callable[[], Awaitable[bool]],
    timeout: int,
    interval: int = 250,
) -> bool:
    """
    Re-evaluate an async predicate until it holds or timeout (ms) elapses.

    Uses page.wait_for_timeout between polls so the page keeps rendering.
    """
    elapsed = 0
    while True:
        if await check():
            return True
        if elapsed >= timeout:
            return False
        await page.wait_for_timeout(interval)
        elapsed += interval


async def accept_cookies(page, selector: str, timeout: int = 2000) -> bool:
    """Click the cookie-consent accept button if the banner is shown."""
    if not selector:
        return False
    button = await page.query_selector(selector)
    if button is None:
        print("  No cookie banner found, proceeding...")
        return False

    print("  Found cookie consent banner, accepting cookies...")
    if not await click_with_fallback(page, button):
        return False
    try:
        await page.wait_for_selector(selector, state="hidden", timeout=timeout)
    except PlaywrightTimeoutError:
        print("  Cookie banner still visible, continuing...")
    return True
