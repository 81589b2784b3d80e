"""
User settings kept in the key-value store.

Keyword lists are ordered and unique by exact text. New block keywords
start disabled, new priority keywords start enabled.
"""

from typing import Any, List

from .errors import ConfigError
from .extractor import DEFAULT_SOCIAL_DOMAINS
from .logger import get_logger
from .models import Keyword, ScorerConfig

logger = get_logger()

KEYWORDS = "keywords"
PRIORITY_KEYWORDS = "priorityKeywords"
EASY_APPLY_ENABLED = "easyApplyEnabled"
VERIFICATION_ENABLED = "verificationEnabled"
HIDE_UNVERIFIED = "hideUnverified"
MIN_HOURLY_RATE = "minHourlyRate"
DISALLOWED_TERMS = "disallowedTerms"
SOCIAL_DOMAINS = "socialDomains"

DEFAULT_KEYWORDS = [
    {"text": "Confidential", "enabled": False},
    {"text": "Hiring", "enabled": False},
]
DEFAULT_DISALLOWED_TERMS = ["unpaid", "commission only", "commission-only"]

DEFAULTS = {
    KEYWORDS: DEFAULT_KEYWORDS,
    EASY_APPLY_ENABLED: False,
    VERIFICATION_ENABLED: True,
    HIDE_UNVERIFIED: False,
    PRIORITY_KEYWORDS: [],
    MIN_HOURLY_RATE: 0,
    DISALLOWED_TERMS: DEFAULT_DISALLOWED_TERMS,
    SOCIAL_DOMAINS: list(DEFAULT_SOCIAL_DOMAINS),
}


def parse_rate(value: Any) -> float:
    """
    Parse a minimum hourly rate.

    Raises:
        ConfigError: If value is not a non-negative number
    """
    if isinstance(value, bool):
        raise ConfigError(f"Minimum hourly rate must be a number, got {value!r}")
    try:
        rate = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Minimum hourly rate must be a number, got {value!r}") from e
    if rate != rate or rate < 0:  # NaN or negative
        raise ConfigError(f"Minimum hourly rate must be >= 0, got {value!r}")
    return rate


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("1", "true", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


def _keywords_from(raw: Any) -> List[Keyword]:
    if not isinstance(raw, list):
        return []
    return [Keyword.from_dict(k) for k in raw if isinstance(k, dict) and k.get("text")]


def _strings_from(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [s for s in raw if isinstance(s, str) and s.strip()]


class SettingsStore:

    def __init__(self, store):
        self.store = store

    def init(self) -> None:
        """Write defaults for every setting that has never been saved."""
        for key, default in DEFAULTS.items():
            if self.store.get(key) is None:
                self.store.set(key, default)
        if not self.store.get(KEYWORDS):
            self.store.set(KEYWORDS, DEFAULT_KEYWORDS)

    def _get(self, key: str) -> Any:
        value = self.store.get(key)
        return DEFAULTS[key] if value is None else value

    # Keyword lists

    def get_keywords(self, priority: bool = False) -> List[Keyword]:
        return _keywords_from(self._get(PRIORITY_KEYWORDS if priority else KEYWORDS))

    def save_keywords(self, keywords: List[Keyword], priority: bool = False) -> None:
        self.store.set(PRIORITY_KEYWORDS if priority else KEYWORDS, [k.to_dict() for k in keywords])

    def add_keyword(self, text: str, priority: bool = False) -> bool:
        """Append a keyword unless one with the exact same text exists."""
        keywords = self.get_keywords(priority)
        if any(k.text == text for k in keywords):
            return False
        keywords.append(Keyword(text=text, enabled=priority))
        self.save_keywords(keywords, priority)
        return True

    def remove_keyword(self, text: str, priority: bool = False) -> bool:
        keywords = self.get_keywords(priority)
        kept = [k for k in keywords if k.text != text]
        if len(kept) == len(keywords):
            return False
        self.save_keywords(kept, priority)
        return True

    def toggle_keyword(self, text: str, priority: bool = False) -> bool:
        keywords = self.get_keywords(priority)
        for k in keywords:
            if k.text == text:
                k.enabled = not k.enabled
                self.save_keywords(keywords, priority)
                return True
        return False

    # Flags and values

    def get_easy_apply_enabled(self) -> bool:
        return bool(self._get(EASY_APPLY_ENABLED))

    def set_easy_apply_enabled(self, enabled: bool) -> None:
        self.store.set(EASY_APPLY_ENABLED, bool(enabled))

    def get_verification_enabled(self) -> bool:
        return bool(self._get(VERIFICATION_ENABLED))

    def set_verification_enabled(self, enabled: bool) -> None:
        self.store.set(VERIFICATION_ENABLED, bool(enabled))

    def get_hide_unverified(self) -> bool:
        return bool(self._get(HIDE_UNVERIFIED))

    def set_hide_unverified(self, enabled: bool) -> None:
        self.store.set(HIDE_UNVERIFIED, bool(enabled))

    def get_min_hourly_rate(self) -> float:
        """Stored minimum rate; an invalid value disables the check."""
        raw = self._get(MIN_HOURLY_RATE)
        try:
            return parse_rate(raw)
        except ConfigError as e:
            logger.warning("Ignoring invalid minimum hourly rate", value=raw, error=str(e))
            return 0.0

    def set_min_hourly_rate(self, value: Any) -> None:
        self.store.set(MIN_HOURLY_RATE, parse_rate(value))

    def get_disallowed_terms(self) -> List[str]:
        return _strings_from(self._get(DISALLOWED_TERMS))

    def set_disallowed_terms(self, terms: List[str]) -> None:
        self.store.set(DISALLOWED_TERMS, _strings_from(list(terms)))

    def get_social_domains(self) -> List[str]:
        return _strings_from(self._get(SOCIAL_DOMAINS)) or list(DEFAULT_SOCIAL_DOMAINS)

    def set_social_domains(self, domains: List[str]) -> None:
        self.store.set(SOCIAL_DOMAINS, [d.strip().lower() for d in _strings_from(list(domains))])

    def scorer_config(self) -> ScorerConfig:
        return ScorerConfig(
            block_keywords=self.get_keywords(),
            priority_keywords=self.get_keywords(priority=True),
            easy_apply_filter=self.get_easy_apply_enabled(),
            min_hourly_rate=self.get_min_hourly_rate(),
            disallowed_terms=self.get_disallowed_terms(),
        )

    def as_dict(self) -> dict:
        return {
            KEYWORDS: [k.to_dict() for k in self.get_keywords()],
            PRIORITY_KEYWORDS: [k.to_dict() for k in self.get_keywords(priority=True)],
            EASY_APPLY_ENABLED: self.get_easy_apply_enabled(),
            VERIFICATION_ENABLED: self.get_verification_enabled(),
            HIDE_UNVERIFIED: self.get_hide_unverified(),
            MIN_HOURLY_RATE: self.get_min_hourly_rate(),
            DISALLOWED_TERMS: self.get_disallowed_terms(),
            SOCIAL_DOMAINS: self.get_social_domains(),
        }
