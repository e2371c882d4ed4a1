"""
iTunes Search API Client

Provides a small interface to the public iTunes Search API with:
- Rate limiting (fixed pause between successive requests)
- An explicit request timeout
- JSON response parsing into SearchCandidate objects
- A descriptive user agent

The Search API has no published quota; Apple asks for roughly 20 calls per
minute, and bursts are answered with HTTP 403/429.
https://performance-partners.apple.com/search-api
"""

import time
import logging
from typing import Optional, Dict, Any, List
import requests

from soundtrack.exceptions import ITunesAPIError, RateLimitError, ValidationError
from soundtrack.models import SearchCandidate
from soundtrack.text_utils import build_search_term

logger = logging.getLogger(__name__)


class ITunesClient:
    """
    Client for the iTunes Search API.

    Every call to `search_songs` is one outbound query; `queries_made`
    counts them. Failures raise ITunesAPIError so callers can decide
    whether to continue.

    Args:
        delay: Minimum seconds between requests (default: 0.5)
        user_agent: User agent dict with app_name, version, contact
        timeout: Request timeout in seconds
        base_url: Search endpoint
        country: Optional storefront code (e.g. "us")
    """

    def __init__(
        self,
        delay: float = 0.5,
        user_agent: Optional[Dict[str, str]] = None,
        timeout: float = 10.0,
        base_url: str = "https://itunes.apple.com/search",
        country: Optional[str] = None,
    ):
        self.base_url = base_url
        self.min_delay = max(delay, 0.0)
        self.timeout = timeout
        self.country = country
        self.last_request_time = 0.0
        self.queries_made = 0

        self.session = requests.Session()
        if user_agent is None:
            user_agent = {
                'app_name': 'book-soundtrack-enricher',
                'version': '1.0',
                'contact': 'your.email@example.com'
            }

        user_agent_string = (
            f"{user_agent['app_name']}/{user_agent['version']} "
            f"( {user_agent['contact']} )"
        )
        self.session.headers.update({
            'User-Agent': user_agent_string,
            'Accept': 'application/json'
        })

        logger.debug(f"iTunes client initialized with user agent: {user_agent_string}")

    def _wait_for_rate_limit(self):
        """Keep successive requests at least `min_delay` seconds apart."""
        current_time = time.time()
        time_since_last = current_time - self.last_request_time

        if time_since_last < self.min_delay:
            wait_time = self.min_delay - time_since_last
            logger.debug(f"Rate limiting: waiting {wait_time:.2f}s")
            time.sleep(wait_time)

        self.last_request_time = time.time()

    def _make_request(self, params: Dict[str, str]) -> Dict[str, Any]:
        """
        Make a request to the search endpoint with rate limiting.

        Args:
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            RateLimitError: on HTTP 403/429
            ITunesAPIError: on any other non-2xx status, network error,
                timeout or undecodable body
        """
        self._wait_for_rate_limit()
        self.queries_made += 1

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise ITunesAPIError(f"iTunes request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise ITunesAPIError(f"iTunes request failed: {e}") from e

        if response.status_code in (403, 429):
            raise RateLimitError(
                f"iTunes API rate limited: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
        if not 200 <= response.status_code < 300:
            raise ITunesAPIError(
                f"iTunes API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ITunesAPIError(f"iTunes API returned invalid JSON: {response.text[:200]}") from e

        if not isinstance(body, dict) or not isinstance(body.get('results'), list):
            raise ITunesAPIError("iTunes API response has no 'results' list")
        return body

    def search_songs(self, artist: str, title: str, limit: int = 5) -> List[SearchCandidate]:
        """
        Search the catalog for a song by artist and title.

        Args:
            artist: Artist name
            title: Song title
            limit: Maximum number of results (default: 5)

        Returns:
            Candidates in the service's relevance order. Results missing a
            track id or names are dropped.
        """
        term = build_search_term(artist, title)
        params = {
            'term': term,
            'media': 'music',
            'entity': 'song',
            'limit': str(limit),
        }
        if self.country:
            params['country'] = self.country

        logger.debug(f"Searching iTunes for '{term}'")
        body = self._make_request(params)

        candidates: List[SearchCandidate] = []
        for raw in body['results']:
            try:
                candidates.append(SearchCandidate.from_api(raw))
            except ValidationError as e:
                logger.debug(f"Dropping result: {e}")

        logger.debug(
            f"iTunes search returned {body.get('resultCount', len(body['results']))} raw results, "
            f"{len(candidates)} usable for '{term}'"
        )
        return candidates

    def __repr__(self) -> str:
        return f"ITunesClient(delay={self.min_delay}s, timeout={self.timeout}s, queries={self.queries_made})"
