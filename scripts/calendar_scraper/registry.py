"""
Site Registry

Maps URLs and site IDs to site classes, and applies overrides from
data/site-sources.json to the site's built-in configuration.
"""

from __future__ import annotations

import json
import re
from dataclasses import fields, replace
from pathlib import Path
from typing import Optional

from .sites.base import BaseSite, SiteConfig


# URL pattern → site_id mapping
_URL_PATTERNS: list[tuple[str, str]] = [
    (r"(^|\.|//)riu\.com", "riu"),
]

# Lazy-loaded site instances
_site_cache: dict[str, BaseSite] = {}

_site_sources_cache: dict | None = None

# Only scalar settings may be overridden; selectors stay in the site modules
_OVERRIDABLE = {
    f.name for f in fields(SiteConfig)
    if f.name not in ("site_id", "landing_calendar", "results_calendar", "promo")
}


def load_site_sources(path: Optional[Path] = None) -> dict:
    """Load per-site overrides from site-sources.json (empty if absent)."""
    global _site_sources_cache
    if path is None and _site_sources_cache is not None:
        return _site_sources_cache

    config_path = path or Path(__file__).parent.parent.parent / "data" / "site-sources.json"
    sources = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            sources = json.load(f).get("sources", {})

    if path is None:
        _site_sources_cache = sources
    return sources


def detect_site(url: str) -> Optional[str]:
    """
    Detect site_id from a URL.

    Returns site_id string or None if URL doesn't match any known site.
    """
    for pattern, site_id in _URL_PATTERNS:
        if re.search(pattern, url):
            return site_id
    return None


def get_site(site_id: str) -> BaseSite:
    """
    Get a site instance for the given site_id.

    Raises ValueError if no site is registered for the site_id.
    """
    if site_id in _site_cache:
        return _site_cache[site_id]

    site = _create_site(site_id)
    _site_cache[site_id] = site
    return site


def _create_site(site_id: str) -> BaseSite:
    if site_id == "riu":
        from .sites.riu import RiuSite
        return RiuSite()
    raise ValueError(
        f"No site registered for site_id '{site_id}'. "
        f"Available: {', '.join(get_available_sites())}"
    )


def get_available_sites() -> list[str]:
    """Return list of all available site IDs."""
    return ["riu"]


def get_site_config(site_id: str, sources: Optional[dict] = None, **overrides) -> SiteConfig:
    """
    Build the SiteConfig for site_id.

    Precedence: keyword overrides > site-sources.json > site defaults.
    Unknown keys are ignored with a warning.
    """
    config = get_site(site_id).build_config()
    sources = load_site_sources() if sources is None else sources

    merged = dict(sources.get(site_id, {}))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(k for k in merged if k not in _OVERRIDABLE)
    for key in unknown:
        print(f"  Warning: ignoring unknown setting '{key}' for {site_id}")
        merged.pop(key)

    return replace(config, **merged) if merged else config
