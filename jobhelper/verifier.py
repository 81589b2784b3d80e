"""
Verification queue.

Serializes employer searches through a single consumer thread:

- cache hits resolve immediately and never wait;
- cache misses search, extract, cache, then resolve;
- after a search, if more items are queued, the consumer sleeps
  `min_delay` seconds before taking the next one.

At most one search is in flight per queue and results complete in
submission order.
"""

import threading
import time
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Deque

from .cache import VerificationCache
from .extractor import extract_links
from .logger import get_logger
from .models import VerificationResult, VerificationSignal

logger = get_logger()

MIN_REQUEST_DELAY = 2.0  # seconds between outbound searches


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class QueueItem:
    employer_name: str
    future: Future


class VerificationQueue:
    """
    Single-consumer FIFO of verification requests.

    `submit` may be called from any thread. The first submit on an idle
    queue starts a drain thread; submits while it runs only enqueue.
    """

    def __init__(
        self,
        search,
        cache: VerificationCache,
        extract: Callable[[str], VerificationSignal] = extract_links,
        min_delay: float = MIN_REQUEST_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = now_ms,
    ):
        self.search = search
        self.cache = cache
        self.extract = extract
        self.min_delay = min_delay
        self._sleep = sleep
        self._clock = clock

        self._items: Deque[QueueItem] = deque()
        self._lock = threading.Lock()
        self._draining = False

    @property
    def is_draining(self) -> bool:
        with self._lock:
            return self._draining

    def pending(self) -> int:
        with self._lock:
            return len(self._items)

    def submit(self, employer_name: str) -> "Future[VerificationResult]":
        item = QueueItem(employer_name=employer_name, future=Future())
        with self._lock:
            self._items.append(item)
            if self._draining:
                return item.future
            self._draining = True

        worker = threading.Thread(target=self._drain, name="verification-queue", daemon=True)
        worker.start()
        return item.future

    def _drain(self) -> None:
        try:
            while True:
                with self._lock:
                    if not self._items:
                        self._draining = False
                        return
                    item = self._items.popleft()

                if not item.future.set_running_or_notify_cancel():
                    logger.debug("Skipping cancelled verification", employer=item.employer_name)
                    continue

                searched = self._process(item)

                if searched:
                    with self._lock:
                        more = bool(self._items)
                    if more:
                        logger.debug("Throttling before next search", delay=self.min_delay)
                        self._sleep(self.min_delay)
        except BaseException as e:
            # The next submit must be able to start a fresh drain.
            logger.error("Verification drain stopped", error=repr(e))
            with self._lock:
                self._draining = False
            raise

    def _process(self, item: QueueItem) -> bool:
        """Resolve one item. Returns True when an outbound search was made."""
        name = item.employer_name
        searched = False
        try:
            cached = self.cache.get(name)
            if cached is not None:
                logger.record_cache_hit()
                logger.debug("Verification cache hit", employer=name)
                item.future.set_result(VerificationResult.from_signal(cached, from_cache=True))
                return False

            logger.record_cache_miss()
            searched = True
            logger.record_search()
            raw_document = self.search.search(name)
            signal = self.extract(raw_document)
            signal.timestamp = self._clock()
            self.cache.put(name, signal)
        except Exception as e:
            # Item-level failure: this caller gets the error, the queue keeps going.
            if searched:
                logger.record_search_failure(type(e).__name__)
            logger.warning("Verification failed", employer=name, error=str(e))
            item.future.set_exception(e)
            return searched

        logger.info(
            "Employer verified" if signal.verified else "Employer not verified",
            employer=name,
            website=signal.website,
            social=len(signal.social),
        )
        item.future.set_result(VerificationResult.from_signal(signal, from_cache=False))
        return True
