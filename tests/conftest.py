"""
Pytest configuration and shared fixtures.
"""

import threading
import time

import pytest

from jobhelper.logger import get_logger

# Create the shared logger before any module grabs it: no log files, no console.
get_logger(enable_file=False, enable_console=False)

from jobhelper.cache import VerificationCache  # noqa: E402
from jobhelper.models import Keyword, ScorerConfig  # noqa: E402
from jobhelper.storage import MemoryStore  # noqa: E402


class FakeSearch:
    """
    Search collaborator returning canned HTML per employer name.

    If `gate` is set, every search blocks until the event fires, so tests
    can enqueue several items before the first search completes.
    """

    def __init__(self, pages=None, errors=None, gate=None):
        self.pages = pages or {}
        self.errors = errors or {}
        self.gate = gate
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def search(self, employer_name):
        with self._lock:
            self.calls.append(employer_name)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                self.gate.wait(5)
            else:
                time.sleep(0.001)
            if employer_name in self.errors:
                raise self.errors[employer_name]
            return self.pages.get(employer_name, "<html><body>No results.</body></html>")
        finally:
            with self._lock:
                self.in_flight -= 1


class SleepRecorder:
    """Stands in for time.sleep and records requested delays."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


def result_page(*hrefs: str) -> str:
    """DuckDuckGo-style results page with one primary anchor per href."""
    rows = "\n".join(
        f'<div class="result"><h2><a class="result__a" href="{href}">Result</a></h2></div>'
        for href in hrefs
    )
    return f"<html><body><div id='links'>{rows}</div></body></html>"


def wait_until(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(memory_store) -> VerificationCache:
    return VerificationCache(memory_store)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def acme_page() -> str:
    """Results page with a website and a LinkedIn profile."""
    return result_page(
        "https://www.linkedin.com/company/acme",
        "https://acme.example",
        "https://acme-careers.example/jobs",
    )


@pytest.fixture
def scorer_config() -> ScorerConfig:
    return ScorerConfig(
        block_keywords=[Keyword("Confidential", True), Keyword("Staffing", True), Keyword("Hiring", False)],
        priority_keywords=[Keyword("Remote", True), Keyword("Python", True)],
        easy_apply_filter=False,
        min_hourly_rate=0,
        disallowed_terms=["unpaid"],
    )
