"""
Verification cache: employer name -> last VerificationSignal.

The whole map lives in a single store slot. `get` and `put` read the full
map and `put` writes it back, so concurrent writers outside the
verification queue would lose updates. No TTL: a newer put always wins.
"""

from typing import Dict, Optional

from .logger import get_logger
from .models import VerificationSignal

logger = get_logger()

CACHE_SLOT = "verification_cache"


class VerificationCache:

    def __init__(self, store, slot: str = CACHE_SLOT):
        self.store = store
        self.slot = slot

    def _load(self) -> Dict[str, dict]:
        data = self.store.get(self.slot)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Verification cache slot is not an object, starting empty", slot=self.slot)
            return {}
        return data

    def get(self, employer_name: str) -> Optional[VerificationSignal]:
        # Keys are the literal employer name: "Acme" and "ACME" are separate entries.
        entry = self._load().get(employer_name)
        if entry is None:
            return None
        return VerificationSignal.from_dict(entry)

    def put(self, employer_name: str, signal: VerificationSignal) -> None:
        cache = self._load()
        cache[employer_name] = signal.to_dict()
        self.store.set(self.slot, cache)

    def entries(self) -> Dict[str, VerificationSignal]:
        return {name: VerificationSignal.from_dict(entry) for name, entry in self._load().items()}
