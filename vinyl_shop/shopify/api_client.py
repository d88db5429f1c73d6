"""
Shopify API Client

Client for the Shopify Admin API (REST and GraphQL) used as the store's
data layer. Handles authentication, request pacing and retries on 429/5xx.
Failures are returned as None with the reason kept in ``last_error`` so
callers can raise a meaningful PersistenceError.
"""

import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

logger = logging.getLogger(__name__)


class ShopifyAPIClient:
    """
    Client for the Shopify Admin API.

    Usage:
        client = ShopifyAPIClient(shop="my-store", access_token="shpat_xxx")

        # REST request
        result = client.rest_request("POST", "products.json", {"product": {...}})

        # GraphQL request
        result = client.graphql_request(query, variables)
    """

    API_VERSION = "2025-01"
    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
    SUPPORTED_METHODS = {"GET", "POST", "PUT", "DELETE"}

    def __init__(self, shop: str, access_token: str):
        """
        Initialize the API client.

        Args:
            shop: Shop name (without .myshopify.com) or full domain
            access_token: Shopify Admin API access token
        """
        # Normalize shop name
        if ".myshopify.com" in shop:
            self.shop = shop.replace("https://", "").replace("http://", "").split(".myshopify.com")[0]
        else:
            self.shop = shop

        self.access_token = access_token
        self.base_url = f"https://{self.shop}.myshopify.com/admin/api/{self.API_VERSION}"
        self.graphql_url = f"{self.base_url}/graphql.json"
        self.last_error = ""

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })

        # Request pacing (2 req/sec)
        self.last_request_time = 0.0
        self.min_request_interval = 0.5

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def product_admin_url(self, product_id: int) -> str:
        """Admin page for editing a product."""
        return f"https://admin.shopify.com/store/{self.shop}/products/{product_id}"

    def _pace(self):
        """Keep at least min_request_interval between requests."""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)
        self.last_request_time = time.time()

    def _send(self, method: str, url: str, label: str, payload: Optional[Dict], timeout: int):
        """
        Send a request, retrying on rate limiting and gateway errors.

        Returns:
            requests.Response, or None when the request could not complete
        """
        for attempt in range(self.MAX_RETRIES):
            self._pace()

            try:
                if method == "GET":
                    response = self.session.get(url, timeout=timeout)
                elif method == "DELETE":
                    response = self.session.delete(url, timeout=timeout)
                elif method == "PUT":
                    response = self.session.put(url, json=payload, timeout=timeout)
                else:
                    response = self.session.post(url, json=payload, timeout=timeout)
            except requests.exceptions.Timeout:
                self.last_error = f"Shopify request timeout: {label}"
                logger.error(self.last_error)
                return None
            except requests.exceptions.RequestException as e:
                self.last_error = f"Shopify request failed: {e}"
                logger.error(self.last_error)
                return None

            if response.status_code in self.RETRYABLE_STATUS_CODES:
                retry_after = int(float(response.headers.get("Retry-After", 2 ** attempt)))
                logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                               response.status_code, label, attempt + 1,
                               self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            if response.status_code >= 400:
                self.last_error = f"Shopify API error {response.status_code}: {response.text[:200]}"
                logger.error(self.last_error)
                return None

            return response

        self.last_error = f"Max retries ({self.MAX_RETRIES}) exceeded for {method} {label}"
        logger.error(self.last_error)
        return None

    def rest_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        timeout: int = 30
    ) -> Optional[Dict]:
        """
        Make a REST API request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., "products.json")
            data: Request body for POST/PUT
            timeout: Request timeout in seconds

        Returns:
            Response JSON ({} for empty bodies) or None on error
        """
        if method not in self.SUPPORTED_METHODS:
            raise ValueError(f"Unsupported method: {method}")

        self.last_error = ""
        url = urljoin(self.base_url + "/", endpoint)
        response = self._send(method, url, endpoint, data, timeout)
        if response is None:
            return None

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            self.last_error = f"Invalid JSON from Shopify on {endpoint}"
            logger.error(self.last_error)
            return None

    def graphql_request(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        timeout: int = 30
    ) -> Optional[Dict]:
        """
        Make a GraphQL API request.

        Args:
            query: GraphQL query or mutation
            variables: Query variables
            timeout: Request timeout in seconds

        Returns:
            Response data (without 'data' wrapper) or None on error
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        self.last_error = ""
        response = self._send("POST", self.graphql_url, "GraphQL", payload, timeout)
        if response is None:
            return None

        try:
            result = response.json()
        except ValueError:
            self.last_error = "Invalid JSON from Shopify GraphQL"
            logger.error(self.last_error)
            return None

        if "errors" in result:
            self.last_error = f"GraphQL errors: {result['errors']}"
            logger.error(self.last_error)
            return None

        return result.get("data")
