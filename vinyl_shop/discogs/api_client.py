"""
Discogs API Client

Client for the Discogs database API: release search, release details and
image downloads. Requests are authenticated with a personal access token
passed as a query parameter. No retries or rate limiting: every failure is
raised to the caller as a VinylShopError.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..common.errors import ConfigurationError, DecodeError, UpstreamError, ValidationError
from ..mapping.hooks import ImportHooks
from ..models import Pagination, Release, SearchPage, SearchResult

logger = logging.getLogger(__name__)


class DiscogsAPIClient:
    """
    Client for the Discogs REST API.

    Usage:
        with DiscogsAPIClient(token="abc", store_url="https://shop.example.com") as client:
            page = client.search("Kind of Blue")
            release = client.get_release(page.results[0].id)
    """

    API_BASE_URL = "https://api.discogs.com"
    USER_AGENT = "VinylShopDiscogs/1.0"
    TIMEOUT = 15
    DEFAULT_PER_PAGE = 20

    def __init__(self, token: str, store_url: str = "", hooks: Optional[ImportHooks] = None):
        """
        Initialize the API client.

        Args:
            token: Discogs personal access token
            store_url: Public URL of the shop, appended to the User-Agent
            hooks: Hook registry for search actions and result filters
        """
        self.token = (token or "").strip()
        self.hooks = hooks or ImportHooks()

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": f"{self.USER_AGENT} +{store_url}",
            "Accept": "application/json",
        })

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _require_token(self) -> None:
        if not self.token:
            raise ConfigurationError(
                "Discogs API token is not configured. Please add it in settings."
            )

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET a Discogs endpoint and decode the JSON body.

        Raises:
            UpstreamError: transport failure or non-200 status
            DecodeError: body is not valid JSON
        """
        url = f"{self.API_BASE_URL}{path}"
        params = dict(params, token=self.token)

        try:
            response = self.session.get(url, params=params, timeout=self.TIMEOUT)
        except requests.exceptions.Timeout:
            logger.error("Discogs request timeout: %s", path)
            raise UpstreamError("Discogs API request timed out.")
        except requests.exceptions.RequestException as e:
            logger.error("Discogs request failed: %s", e)
            raise UpstreamError(f"Discogs API request failed: {e}")

        if response.status_code != 200:
            message = f"Discogs API returned error code {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message += f": {body['message']}"
            logger.error("%s (%s)", message, path)
            raise UpstreamError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.error("Invalid JSON from Discogs: %s", response.text[:200])
            raise DecodeError("Failed to decode API response.")

        if not isinstance(data, dict):
            raise DecodeError("Failed to decode API response.")
        return data

    def search(self, query: str, page: int = 1, per_page: int = DEFAULT_PER_PAGE,
               result_type: str = "release") -> SearchPage:
        """
        Search the Discogs database.

        Args:
            query: Free-text query (artist, title, catalog number...)
            page: 1-based page number
            per_page: Results per page
            result_type: Discogs result type filter

        Returns:
            SearchPage with flattened results and pagination
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query is required.")
        self._require_token()

        page = max(int(page or 1), 1)
        self.hooks.do_action("before_search", query, page)

        data = self._get("/database/search", {
            "q": query,
            "type": result_type,
            "per_page": per_page,
            "page": page,
        })

        results = data.get("results")
        try:
            search_page = SearchPage(
                results=[SearchResult.from_api(item) for item in results if isinstance(item, dict)]
                if isinstance(results, list) else [],
                pagination=Pagination.from_api(data.get("pagination")),
            )
        except (TypeError, ValueError) as e:
            logger.error("Malformed search response for %r: %s", query, e)
            raise DecodeError("Failed to decode API response.")
        logger.info("Search %r page %d: %d result(s)", query, page, len(search_page.results))

        search_page = self.hooks.apply_filters("search_results", search_page)
        self.hooks.do_action("after_search", query, page, search_page)
        return search_page

    def get_release(self, release_id: int) -> Release:
        """
        Fetch full release details.

        Args:
            release_id: Discogs release id

        Returns:
            Release
        """
        try:
            release_id = int(release_id)
        except (TypeError, ValueError):
            raise ValidationError("Release ID is required.")
        if release_id <= 0:
            raise ValidationError("Release ID is required.")
        self._require_token()

        data = self._get(f"/releases/{release_id}", {})
        logger.info("Fetched release %d: %s", release_id, data.get("title", ""))
        return Release.from_api(data)

    def download_image(self, image_url: str) -> bytes:
        """
        Download an image from the Discogs image CDN.

        Returns:
            Raw image bytes
        """
        if not image_url:
            raise ValidationError("No image URL provided.")

        try:
            response = self.session.get(image_url, timeout=self.TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"Image download failed: {e}")

        if response.status_code != 200:
            raise UpstreamError(
                f"Image download returned error code {response.status_code}",
                status_code=response.status_code,
            )
        return response.content
