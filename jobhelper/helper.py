"""
Caller-facing entry points.

JobHelper wires a store, the verification queue and the settings together
for the presentation layer: `request_verification` for employers and
`score_listing` for listings.
"""

from concurrent.futures import Future
from typing import Optional

from .cache import VerificationCache
from .extractor import extract_links
from .models import ListingScore, ScoreInputs, VerificationResult, VerificationSignal
from .scorer import score_listing
from .search import DuckDuckGoSearch
from .settings import SettingsStore
from .verifier import MIN_REQUEST_DELAY, VerificationQueue


class JobHelper:

    def __init__(self, store, search=None, min_delay: float = MIN_REQUEST_DELAY, **queue_kwargs):
        self.store = store
        self.settings = SettingsStore(store)
        self.settings.init()
        self.cache = VerificationCache(store)
        self.queue = VerificationQueue(
            search=search or DuckDuckGoSearch(),
            cache=self.cache,
            extract=self.extract,
            min_delay=min_delay,
            **queue_kwargs,
        )

    def extract(self, raw_document: str) -> VerificationSignal:
        """Extract links using the social domains stored at call time."""
        return extract_links(raw_document, social_domains=self.settings.get_social_domains())

    def request_verification(self, employer_name: str) -> "Future[VerificationResult]":
        return self.queue.submit(employer_name)

    def score_listing(self, inputs: ScoreInputs, config=None) -> ListingScore:
        return score_listing(inputs, config or self.settings.scorer_config())

    def cached_verification(self, employer_name: str) -> Optional[VerificationResult]:
        signal = self.cache.get(employer_name)
        if signal is None:
            return None
        return VerificationResult.from_signal(signal, from_cache=True)
