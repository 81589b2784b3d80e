"""Filter and score job listings against the user's keywords and pay floor."""

import math
import re
from typing import Iterable, List, Optional

from .models import KEEP, FilterDecision, Keyword, ListingScore, ScoreInputs, ScorerConfig
from .normalize import contains_term, normalize_text, parse_number

HOURS_PER_YEAR = 2080  # 40 h/week * 52 weeks

REASON_NO_SALARY = "no salary info"
REASON_EASY_APPLY = "easy-apply filter"

_AMOUNT = r"\$\s?(\d{1,3}(?:,\d{3})+|\d+)(\.\d+)?"
HOURLY_RATE = re.compile(
    _AMOUNT + r"\s*(?:/\s*(?:hrs?|hours?)\b|per\s+hour\b|an\s+hour\b|hourly\b)",
    re.I,
)
YEARLY_RATE = re.compile(
    _AMOUNT + r"\s*([kK])?\s*(?:/\s*(?:yrs?|years?)\b|per\s+(?:year|annum)\b|a\s+year\b|annually\b)",
    re.I,
)
MONEY_MENTION = re.compile(r"\$\s?\d")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def enabled(keywords: Iterable[Keyword]) -> List[Keyword]:
    return [k for k in keywords if k.enabled]


def priority_matches(keywords: Iterable[Keyword], text: str) -> List[str]:
    """Enabled keywords found in text, each counted once."""
    blob = normalize_text(text)
    return [k.text for k in enabled(keywords) if normalize_text(k.text) in blob]


def priority_score(keywords: Iterable[Keyword], text: str) -> int:
    """
    Percentage (0-100) of enabled priority keywords present in text.

    Zero enabled keywords always scores 0.
    """
    active = enabled(keywords)
    if not active:
        return 0
    matches = priority_matches(active, text)
    return _round_half_up(100 * len(matches) / len(active))


def extract_rate(text: str) -> Optional[float]:
    """
    Hourly pay mentioned in text.

    An hourly figure ("$45.50/hr") wins over a yearly one ("$83,200/yr",
    "$120K per year"); yearly figures are divided by 2080.
    """
    if not text:
        return None

    m = HOURLY_RATE.search(text)
    if m:
        return parse_number(m.group(1) + (m.group(2) or ""))

    m = YEARLY_RATE.search(text)
    if m:
        amount = parse_number(m.group(1) + (m.group(2) or ""))
        if amount is None:
            return None
        if m.group(3):
            amount *= 1000
        return amount / HOURS_PER_YEAR

    return None


def extract_listing_rate(inputs: ScoreInputs) -> Optional[float]:
    """Scan the scoped metadata fragments first, the full listing text last."""
    for fragment in inputs.metadata:
        rate = extract_rate(fragment)
        if rate is not None:
            return rate
    return extract_rate(inputs.listing_text)


def has_salary_info(inputs: ScoreInputs) -> bool:
    texts = [inputs.listing_text, *inputs.metadata]
    return any(MONEY_MENTION.search(t or "") for t in texts)


def is_easy_apply(inputs: ScoreInputs) -> bool:
    if inputs.easy_apply is not None:
        return inputs.easy_apply
    return any(contains_term(fragment, "easy apply") for fragment in inputs.metadata)


def find_disallowed_term(inputs: ScoreInputs, terms: Iterable[str]) -> Optional[str]:
    for term in terms:
        if contains_term(inputs.listing_text, term) or contains_term(inputs.title, term):
            return term
    return None


def find_block_keyword(inputs: ScoreInputs, keywords: Iterable[Keyword]) -> Optional[Keyword]:
    """First enabled block keyword found in the company name or title, in list order."""
    for keyword in enabled(keywords):
        if contains_term(inputs.company_name, keyword.text) or contains_term(inputs.title, keyword.text):
            return keyword
    return None


def filter_decision(inputs: ScoreInputs, config: ScorerConfig) -> FilterDecision:
    """
    Decide whether to hide a listing. Rules run in a fixed order and the
    first match wins:

    1. no "$" amount anywhere in the listing
    2. a disallowed term in the listing text or title
    3. an extracted hourly rate below the configured minimum (0 disables)
    4. an enabled block keyword in the company name or title
    5. easy-apply listing while the easy-apply filter is on
    """
    if not has_salary_info(inputs):
        return FilterDecision(True, REASON_NO_SALARY)

    term = find_disallowed_term(inputs, config.disallowed_terms)
    if term is not None:
        return FilterDecision(True, f"disallowed term: {term}")

    if config.min_hourly_rate > 0:
        rate = extract_listing_rate(inputs)
        if rate is not None and rate < config.min_hourly_rate:
            return FilterDecision(True, f"below minimum rate: ${config.min_hourly_rate:g}/hr")

    keyword = find_block_keyword(inputs, config.block_keywords)
    if keyword is not None:
        return FilterDecision(True, f"Matched: {keyword.text}")

    if config.easy_apply_filter and is_easy_apply(inputs):
        return FilterDecision(True, REASON_EASY_APPLY)

    return KEEP


def score_listing(inputs: ScoreInputs, config: ScorerConfig) -> ListingScore:
    decision = filter_decision(inputs, config)
    if decision.should_filter:
        return ListingScore(decision=decision)

    blob = f"{inputs.title}\n{inputs.listing_text}"
    return ListingScore(
        decision=decision,
        priority_score=priority_score(config.priority_keywords, blob),
        matched_keywords=priority_matches(config.priority_keywords, blob),
    )
