"""
Scrape Output Schema

Dataclasses for date pairs, per-pair price observations, the optional
promotional coupon, and the run-level result returned by the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Optional


# Sentinel prices recorded instead of raising
PRICE_NOT_FOUND = "Price not found"
PRICE_ERROR = "Error extracting price"
PRICE_FAILED = "Failed to get price"

SENTINELS = (PRICE_NOT_FOUND, PRICE_ERROR, PRICE_FAILED)


@dataclass(frozen=True)
class DatePair:
    """A check-in/check-out combination."""

    check_in: date
    check_out: date

    def __post_init__(self):
        if self.check_out <= self.check_in:
            raise ValueError(
                f"check_out {self.check_out} must be after check_in {self.check_in}"
            )

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def month_label(self) -> str:
        """Check-in month, e.g. 'November 2026'."""
        return self.check_in.strftime("%B %Y")

    def describe(self) -> str:
        return f"{self.check_in.strftime('%a %b %d %Y')} to {self.check_out.strftime('%a %b %d %Y')}"

    def to_dict(self) -> dict:
        return {
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
        }


@dataclass(frozen=True)
class DateRangeResult:
    """Price observed for one date pair."""

    check_in: date
    check_out: date
    price: str

    @classmethod
    def for_pair(cls, pair: DatePair, price: str) -> DateRangeResult:
        return cls(check_in=pair.check_in, check_out=pair.check_out, price=price)

    @property
    def succeeded(self) -> bool:
        """False when price is one of the sentinel values."""
        return bool(self.price) and self.price not in SENTINELS

    def to_dict(self) -> dict:
        return {
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DateRangeResult:
        return cls(
            check_in=date.fromisoformat(data["check_in"]),
            check_out=date.fromisoformat(data["check_out"]),
            price=data.get("price", PRICE_FAILED),
        )


@dataclass(frozen=True)
class CouponOffer:
    """Promotional code found in the site's promo modal."""

    discount_label: str = ""
    promo_code: str = ""
    raw_message: str = ""

    @property
    def is_populated(self) -> bool:
        return bool(self.promo_code or self.discount_label)


@dataclass
class ScrapeRun:
    """
    Result of one scrape session.

    results keeps the order in which date pairs were processed.
    """

    # Provenance
    site_id: str = ""
    url: str = ""
    scraped_at: str = ""

    # Observations
    initial_price: str = ""
    results: list[DateRangeResult] = field(default_factory=list)
    coupon: Optional[CouponOffer] = None

    # Run metadata
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded_count(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    def to_dict(self) -> dict:
        return {
            "site_id": self.site_id,
            "url": self.url,
            "scraped_at": self.scraped_at,
            "initial_price": self.initial_price,
            "results": [r.to_dict() for r in self.results],
            "coupon": asdict(self.coupon) if self.coupon else None,
            "errors": self.errors,
            "warnings": self.warnings,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScrapeRun:
        coupon_data = data.get("coupon")
        return cls(
            site_id=data.get("site_id", ""),
            url=data.get("url", ""),
            scraped_at=data.get("scraped_at", ""),
            initial_price=data.get("initial_price", ""),
            results=[DateRangeResult.from_dict(r) for r in data.get("results", [])],
            coupon=CouponOffer(**coupon_data) if coupon_data else None,
            errors=data.get("errors", []),
            warnings=data.get("warnings", []),
        )


def validate_run(run: ScrapeRun) -> list[str]:
    """
    Validate a ScrapeRun and return a list of warnings.

    Does not raise: a run with failed pairs is still a usable run.
    """
    warnings = []

    if not run.site_id:
        warnings.append("Missing site_id")
    if not run.url:
        warnings.append("Missing url")
    if not run.scraped_at:
        warnings.append("Missing scraped_at timestamp")

    if not run.results:
        warnings.append("No date pairs processed")
        return warnings

    failed = [r for r in run.results if not r.succeeded]
    if len(failed) == len(run.results):
        warnings.append("No prices extracted for any date pair")
    else:
        for r in failed:
            warnings.append(f"No price for {r.check_in.isoformat()} to {r.check_out.isoformat()}: {r.price}")

    return warnings
