"""
Shared fixtures for calendar scraper tests.

The fake page and element classes live in fakes.py.
"""

import os
import sys

import pytest

# Add scripts/ to path so we can import the calendar_scraper package
_scripts_dir = os.path.join(os.path.dirname(__file__), "..", "..", "scripts")
if _scripts_dir not in sys.path:
    sys.path.insert(0, _scripts_dir)
_tests_dir = os.path.dirname(__file__)
if _tests_dir not in sys.path:
    sys.path.insert(0, _tests_dir)

from fakes import FakePage, make_config  # noqa: E402


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def page():
    return FakePage()
