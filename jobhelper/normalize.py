from typing import Optional, Tuple
from urllib.parse import unquote, urlparse
import re

from .errors import ParseError

REDIRECT_PARAM = re.compile(r"(?:[?&])uddg=([^&]+)")


def normalize_text(s: str) -> str:
    """Lowercase form used for case-insensitive substring matching."""
    return (s or "").lower()


def contains_term(haystack: str, term: str) -> bool:
    return bool(term) and normalize_text(term) in normalize_text(haystack)


def expand_protocol_relative(href: str) -> str:
    if href.startswith("//"):
        return "https:" + href
    return href


def unwrap_redirect(href: str) -> Tuple[str, bool]:
    """
    Replace a search-engine redirect wrapper with its encoded target.

    Returns (href, decoded) where decoded tells whether a target was found.
    """
    match = REDIRECT_PARAM.search(href)
    if not match:
        return href, False
    try:
        target = unquote(match.group(1), errors="strict")
    except UnicodeDecodeError as e:
        raise ParseError(f"Undecodable redirect target in {href!r}") from e
    return target, True


def host_of(href: str) -> str:
    """Lowercased host of an absolute URL, or '' when there is none."""
    try:
        return (urlparse(href).hostname or "").lower()
    except ValueError as e:
        raise ParseError(f"Malformed URL: {href!r}") from e


def host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def classification_host(href: str) -> str:
    """
    Host used to classify a link, with a leading 'www.' removed.

    Raises ParseError when href is not an absolute http(s) URL.
    """
    try:
        parsed = urlparse(href)
        host = parsed.hostname
        parsed.port  # raises on a non-numeric port
    except ValueError as e:
        raise ParseError(f"Malformed URL: {href!r}") from e
    if parsed.scheme not in ("http", "https") or not host:
        raise ParseError(f"Not an absolute http(s) URL: {href!r}")
    host = host.lower()
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def strip_trailing_slash(href: str) -> str:
    return href[:-1] if href.endswith("/") else href


def parse_number(amount: str) -> Optional[float]:
    """Parse '83,200' or '45.50' into a float; None when not numeric."""
    try:
        return float(amount.replace(",", ""))
    except (AttributeError, ValueError):
        return None
