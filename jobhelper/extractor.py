"""
Link extraction from DuckDuckGo HTML search results.

Turns a raw results page into a VerificationSignal: the first non-social
result becomes the employer's website, social-platform results are
collected as profiles.
"""

from typing import Callable, Iterable, List, Sequence
import re

from bs4 import BeautifulSoup

from .errors import ParseError
from .logger import get_logger
from .models import VerificationSignal
from .normalize import (
    classification_host,
    expand_protocol_relative,
    host_of,
    host_matches,
    strip_trailing_slash,
    unwrap_redirect,
)

logger = get_logger()

DEFAULT_SOCIAL_DOMAINS = (
    "linkedin.com",
    "twitter.com",
    "crunchbase.com",
    "facebook.com",
    "instagram.com",
)

SEARCH_ENGINE_DOMAIN = "duckduckgo.com"
COMPETING_ENGINE_DOMAINS = ("google.com", "bing.com")

RESULT_ANCHOR_SELECTOR = "a.result__a[href]"
ABSOLUTE_HREF = re.compile(r"^https?://", re.I)


def _result_anchor_links(soup: BeautifulSoup) -> List[str]:
    """Primary strategy: anchors carrying the result link class."""
    return [a["href"] for a in soup.select(RESULT_ANCHOR_SELECTOR)]


def _absolute_href_links(soup: BeautifulSoup) -> List[str]:
    """Fallback strategy: any element in the document with an absolute http(s) href."""
    return [el["href"] for el in soup.find_all(href=ABSOLUTE_HREF)]


CANDIDATE_STRATEGIES: Sequence[Callable[[BeautifulSoup], List[str]]] = (
    _result_anchor_links,
    _absolute_href_links,
)


def collect_candidates(raw_document: str) -> List[str]:
    """Run the strategies in order and return the first non-empty candidate list."""
    soup = BeautifulSoup(raw_document or "", "html.parser")
    for strategy in CANDIDATE_STRATEGIES:
        links = strategy(soup)
        if links:
            logger.debug("Collected candidate links", strategy=strategy.__name__, count=len(links))
            return links
    return []


def normalize_candidate(href: str) -> str:
    """
    Expand and unwrap a candidate href.

    Returns the href to classify, or raises ParseError when the link is
    junk or malformed.
    """
    href = expand_protocol_relative(href.strip())
    href, decoded = unwrap_redirect(href)

    if href.startswith("/") and not decoded:
        raise ParseError(f"Root-relative link: {href!r}")

    host = host_of(href)
    if host_matches(host, SEARCH_ENGINE_DOMAIN) and not decoded:
        raise ParseError(f"Search engine internal link: {href!r}")
    if any(host_matches(host, d) for d in COMPETING_ENGINE_DOMAINS):
        raise ParseError(f"Competing search engine link: {href!r}")
    return href


def extract_links(
    raw_document: str,
    social_domains: Iterable[str] = DEFAULT_SOCIAL_DOMAINS,
) -> VerificationSignal:
    """
    Parse a search-results document into website and social links.

    The returned signal has no timestamp; the verification queue stamps it
    when the result is cached. Identical input always yields an identical
    signal.
    """
    social_domains = tuple(d.lower() for d in social_domains)
    signal = VerificationSignal()

    for raw_href in collect_candidates(raw_document):
        try:
            href = normalize_candidate(raw_href)
            host = classification_host(href)
        except ParseError as e:
            logger.debug("Skipping candidate link", href=raw_href, reason=str(e))
            continue

        stored = strip_trailing_slash(href)
        if any(domain in host for domain in social_domains):
            signal.add_social(stored)
        elif signal.website is None:
            signal.website = stored

    return signal
