from typing import Optional
from urllib.parse import quote_plus

import requests

from .errors import NetworkError
from .logger import get_logger

logger = get_logger()

DUCKDUCKGO_HTML_ENDPOINT = "https://html.duckduckgo.com/html/"

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Upgrade-Insecure-Requests": "1",
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
}


def build_search_url(query: str, base_url: str = DUCKDUCKGO_HTML_ENDPOINT) -> str:
    return f"{base_url}?q={quote_plus(query)}"


class DuckDuckGoSearch:
    """
    Fetches the HTML results page for an employer name.

    No retries: a failed request raises NetworkError and the caller
    decides what to do with it.
    """

    def __init__(
        self,
        base_url: str = DUCKDUCKGO_HTML_ENDPOINT,
        timeout: float = 20,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, employer_name: str) -> str:
        """
        Return the raw results document for employer_name.

        Raises:
            NetworkError: On any HTTP error, timeout, or request failure
        """
        url = build_search_url(employer_name, self.base_url)
        try:
            resp = self.session.get(url, headers=DEFAULT_HEADERS, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            logger.error("Search request failed", query=employer_name, status=status)
            raise NetworkError(f"Search request failed ({status}) for {employer_name!r}") from e
        except requests.exceptions.Timeout as e:
            logger.warning("Search request timed out", query=employer_name)
            raise NetworkError(f"Search request timed out for {employer_name!r}") from e
        except requests.exceptions.RequestException as e:
            logger.error("Search request error", query=employer_name, error=str(e))
            raise NetworkError(f"Search request error for {employer_name!r}: {e}") from e

        html = resp.text
        logger.debug("Fetched search results", query=employer_name, size=len(html))
        if html.lstrip().startswith("{"):
            # Blocked requests and instant answers come back as JSON.
            logger.warning("Search returned JSON instead of HTML", query=employer_name, preview=html[:200])
        return html
