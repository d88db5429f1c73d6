"""
Shopify Product Store

Persists mapped releases in Shopify: products with a single SKU variant,
``discogs.*`` metafields, custom collections for the genre/style tree and
the product image.

Collections are keyed on name + parent. A genre collection gets the handle
``rock``; a style under it gets ``rock-punk`` and records its parent in the
``discogs.parent_handle`` metafield.
"""

import base64
import logging
import posixpath
from typing import Dict, Iterable, List, Optional
from urllib.parse import quote, urlparse

from ..common.errors import PersistenceError
from ..common.transliteration import generate_handle
from ..models import SKU_PREFIX, CategoryPath, ProductDraft
from .api_client import ShopifyAPIClient

logger = logging.getLogger(__name__)

METAFIELD_NAMESPACE = "discogs"

# Metafield key -> Shopify metafield type (anything else is single line text)
METAFIELD_TYPES = {
    "release_id": "number_integer",
    "thumbnail_url": "url",
    "tracklist": "multi_line_text_field",
}

FIND_BY_SKU_QUERY = """
query ($query: String!) {
    productVariants(first: 10, query: $query) {
        edges {
            node {
                sku
                product {
                    legacyResourceId
                    metafield(namespace: "%s", key: "release_id") {
                        value
                    }
                }
            }
        }
    }
}
""" % METAFIELD_NAMESPACE

METAFIELDS_SET_MUTATION = """
mutation ($metafields: [MetafieldsSetInput!]!) {
    metafieldsSet(metafields: $metafields) {
        metafields {
            key
        }
        userErrors {
            field
            message
        }
    }
}
"""


def collection_handle(path: CategoryPath) -> str:
    """
    Handle for a category collection.

    Example:
        >>> collection_handle(CategoryPath("Punk", parent="Rock"))
        'rock-punk'
    """
    if path.parent:
        return generate_handle(path.name, prefix=f"{generate_handle(path.parent)}-")
    return generate_handle(path.name)


class ShopifyProductStore:
    """
    Product, metafield, collection and image persistence on Shopify.

    Usage:
        store = ShopifyProductStore(ShopifyAPIClient(shop, token))
        product_id = store.create_product(draft)
        store.set_metafields(product_id, draft.metadata)
    """

    def __init__(self, client: ShopifyAPIClient, namespace: str = METAFIELD_NAMESPACE):
        self.client = client
        self.namespace = namespace

        # handle -> collection id, filled as collections are looked up
        self._collection_cache: Dict[str, int] = {}

    def admin_url(self, product_id: int) -> str:
        return self.client.product_admin_url(product_id)

    # ── Products ──────────────────────────────────────────────────────────────

    def find_product_by_release_id(self, release_id: int) -> Optional[int]:
        """
        Find a product whose ``discogs.release_id`` metafield equals release_id.

        Candidates are found through the SKU and confirmed against the
        metafield.

        Returns:
            Product id, or None when no product references the release

        Raises:
            PersistenceError: the lookup itself failed
        """
        sku = f"{SKU_PREFIX}{release_id}"
        data = self.client.graphql_request(FIND_BY_SKU_QUERY, {"query": f"sku:{sku}"})
        if data is None:
            raise PersistenceError(
                f"Could not check for existing products: {self.client.last_error or 'unknown error'}"
            )

        edges = (data.get("productVariants") or {}).get("edges", [])
        for edge in edges:
            product = (edge.get("node") or {}).get("product") or {}
            metafield = product.get("metafield") or {}
            if str(metafield.get("value", "")) == str(release_id):
                return int(product["legacyResourceId"])

        return None

    def create_product(self, draft: ProductDraft) -> int:
        """
        Create the product with one variant carrying the SKU.

        Returns:
            New product id
        """
        data = {
            "product": {
                "title": draft.title,
                "body_html": draft.description,
                "vendor": draft.vendor,
                "product_type": draft.product_type,
                "status": draft.status,
                "tags": ", ".join(draft.tags),
                "variants": [
                    {
                        "sku": draft.sku,
                        "inventory_management": "shopify",
                    }
                ],
            }
        }

        result = self.client.rest_request("POST", "products.json", data)
        if not result or "product" not in result:
            logger.error("Failed to create product %s: %s", draft.sku, self.client.last_error)
            raise PersistenceError("Failed to create product.")

        product_id = int(result["product"]["id"])
        logger.info("Created product: %s (ID: %s, %s)", draft.title, product_id, draft.status)
        return product_id

    def set_metafields(self, product_id: int, metadata: Dict[str, str]) -> None:
        """Write metadata as product metafields in one metafieldsSet call."""
        if not metadata:
            return

        metafields = [
            {
                "ownerId": f"gid://shopify/Product/{product_id}",
                "namespace": self.namespace,
                "key": key,
                "type": METAFIELD_TYPES.get(key, "single_line_text_field"),
                "value": value,
            }
            for key, value in metadata.items()
        ]

        data = self.client.graphql_request(METAFIELDS_SET_MUTATION, {"metafields": metafields})
        if data is None:
            raise PersistenceError(
                f"Product {product_id} created but metafields could not be saved: {self.client.last_error}"
            )

        user_errors = (data.get("metafieldsSet") or {}).get("userErrors") or []
        if user_errors:
            messages = "; ".join(e.get("message", "") for e in user_errors)
            raise PersistenceError(f"Product {product_id} created but metafields were rejected: {messages}")

        logger.debug("Saved %d metafields on product %s", len(metafields), product_id)

    # ── Collections ───────────────────────────────────────────────────────────

    def _find_collection(self, handle: str) -> Optional[int]:
        result = self.client.rest_request("GET", f"custom_collections.json?handle={quote(handle)}&fields=id,handle")
        if not result:
            return None
        for collection in result.get("custom_collections", []):
            if collection.get("handle") == handle:
                return int(collection["id"])
        return None

    def get_or_create_collection(self, path: CategoryPath) -> Optional[int]:
        """
        Return the collection id for path, creating the collection if needed.

        Returns:
            Collection id, or None when it could neither be found nor created
        """
        handle = collection_handle(path)
        if not handle:
            logger.warning("Skipping category with empty handle: %r", path.name)
            return None

        if handle in self._collection_cache:
            return self._collection_cache[handle]

        collection_id = self._find_collection(handle)
        if collection_id is None:
            collection_id = self._create_collection(path, handle)

        if collection_id is not None:
            self._collection_cache[handle] = collection_id
        return collection_id

    def _create_collection(self, path: CategoryPath, handle: str) -> Optional[int]:
        collection = {
            "title": path.name,
            "handle": handle,
            "published": True,
        }
        if path.parent:
            collection["metafields"] = [
                {
                    "namespace": self.namespace,
                    "key": "parent_handle",
                    "type": "single_line_text_field",
                    "value": generate_handle(path.parent),
                }
            ]

        result = self.client.rest_request("POST", "custom_collections.json", {"custom_collection": collection})
        if result and "custom_collection" in result:
            collection_id = int(result["custom_collection"]["id"])
            logger.info("Created collection: %s (ID: %s)", handle, collection_id)
            return collection_id

        logger.error("Failed to create collection: %s", handle)
        return None

    def assign_categories(self, product_id: int, paths: Iterable[CategoryPath]) -> List[int]:
        """
        Get or create a collection per path and add the product to each.

        Returns:
            Ids of the collections the product was added to
        """
        assigned: List[int] = []
        for path in paths:
            collection_id = self.get_or_create_collection(path)
            if collection_id is None or collection_id in assigned:
                continue

            data = {"collect": {"product_id": product_id, "collection_id": collection_id}}
            if self.client.rest_request("POST", "collects.json", data) is None:
                logger.error("Failed to add product %s to collection %s", product_id, collection_id)
                continue
            assigned.append(collection_id)

        return assigned

    # ── Images ────────────────────────────────────────────────────────────────

    def attach_image(self, product_id: int, content: bytes, source_url: str, alt: str = "") -> Optional[int]:
        """
        Upload image bytes as the product's featured image.

        Returns:
            Image id, or None on failure
        """
        filename = posixpath.basename(urlparse(source_url).path) or f"release-{product_id}.jpg"
        data = {
            "image": {
                "attachment": base64.b64encode(content).decode("ascii"),
                "filename": filename,
                "alt": alt,
                "position": 1,
            }
        }

        result = self.client.rest_request("POST", f"products/{product_id}/images.json", data)
        if result and "image" in result:
            return int(result["image"]["id"])

        logger.warning("Failed to attach image to product %s: %s", product_id, self.client.last_error)
        return None
