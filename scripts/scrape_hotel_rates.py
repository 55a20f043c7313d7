#!/usr/bin/env python3
"""
Scrape hotel rates across Friday-to-Friday stays.

Opens the hotel page, searches the first Friday-to-Friday stay from the
landing page, then reselects every following stay in the results-page
calendar over the next 6 months and prints a price table.

Usage:
    python scripts/scrape_hotel_rates.py [--site riu] [--url URL] [--today 2026-10-18] \\
        [--months 6] [--limit 4] [--headed] [--reselect-initial] [-o data/riu-rates.json]

Requirements:
    pip install playwright
    playwright install chromium
"""

import argparse
import asyncio
import json
import sys
from datetime import date

try:
    from playwright.async_api import async_playwright  # noqa: F401
except ImportError:
    print("Playwright not installed. Run: pip install playwright && playwright install chromium")
    sys.exit(1)

from calendar_scraper import SiteLoadError, detect_site, get_site, get_site_config, validate_run
from calendar_scraper.dates import day_of_week
from calendar_scraper.scraper import scrape_hotel


def print_summary(run) -> None:
    """Print the final price table."""
    print("\n" + "=" * 60)
    print("FINAL PRICE SUMMARY")
    print("=" * 60)
    print()
    print("| # | Check-in | Check-out | Price |")
    print("|---|----------|-----------|-------|")
    for i, r in enumerate(run.results, 1):
        marker = "" if r.succeeded else " ✗"
        print(
            f"| {i} | {r.check_in.isoformat()} ({day_of_week(r.check_in)}) "
            f"| {r.check_out.isoformat()} ({day_of_week(r.check_out)}) | {r.price}{marker} |"
        )

    print(f"\nCollected {run.succeeded_count}/{len(run.results)} prices")
    if run.coupon:
        print(f"Promo: {run.coupon.discount_label or '-'} code={run.coupon.promo_code or '-'}")
    for w in run.warnings:
        print(f"  ⚠️ {w}")
    for e in run.errors:
        print(f"  ❌ {e}")


def main():
    parser = argparse.ArgumentParser(description="Scrape hotel prices for Friday-to-Friday stays")
    parser.add_argument("--site", help="Site id (default: detected from --url, else riu)")
    parser.add_argument("--url", help="Hotel page URL (default: site's configured hotel)")
    parser.add_argument("--today", help="Reference date YYYY-MM-DD (default: today)")
    parser.add_argument("--months", type=int, default=6, help="Months ahead to cover (default: 6)")
    parser.add_argument("--limit", type=int, help="Only process the first N date pairs")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--reselect-initial",
        action="store_true",
        help="Select the initial-search stay again instead of reusing its price",
    )
    parser.add_argument("--output", "-o", help="Output JSON file path")
    args = parser.parse_args()

    site_id = args.site or (detect_site(args.url) if args.url else None) or "riu"
    try:
        site = get_site(site_id)
    except ValueError as e:
        print(e)
        sys.exit(2)

    today = date.fromisoformat(args.today) if args.today else None
    config = get_site_config(site_id, url=args.url)

    try:
        run = asyncio.run(scrape_hotel(
            site,
            config,
            headless=not args.headed,
            today=today,
            months=args.months,
            reuse_initial=not args.reselect_initial,
            limit=args.limit,
        ))
    except SiteLoadError as e:
        print(f"Scraping failed: {e}")
        sys.exit(1)

    run.warnings.extend(validate_run(run))

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(run.to_dict(), f, ensure_ascii=False, indent=2)
        print(f"\nSaved to: {args.output}")

    print_summary(run)


if __name__ == "__main__":
    main()
