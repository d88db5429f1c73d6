"""Shared test fixtures."""

from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from vinyl_shop.common.settings import Settings
from vinyl_shop.models import CategoryPath, ProductDraft, Release


def make_response(status_code: int = 200, json_data=None, content: bytes = b"{}", invalid_json: bool = False):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = {}
    response.content = content
    response.text = str(json_data)
    if invalid_json:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def release_data():
    """Raw /releases/{id} payload, trimmed to the fields the importer reads."""
    return {
        "id": 249504,
        "title": "Kind Of Blue",
        "artists": [{"name": "Miles Davis", "role": ""}],
        "artists_sort": "Davis, Miles",
        "labels": [{"name": "Columbia", "catno": "CL 1355"}],
        "country": "US",
        "released": "1959-08-17",
        "year": 1959,
        "genres": ["Jazz"],
        "styles": ["Modal", "Cool Jazz"],
        "formats": [{"name": "Vinyl", "qty": "1", "descriptions": ["LP", "Album", "Mono"]}],
        "tracklist": [
            {"position": "A1", "title": "So What", "duration": "9:22"},
            {"position": "A2", "title": "Freddie Freeloader", "duration": "9:46"},
            {"position": "B1", "title": "Blue In Green", "duration": ""},
        ],
        "notes": "Recorded at Columbia 30th Street Studio.\n\nOriginal mono pressing.",
        "images": [
            {"type": "primary", "uri": "https://i.discogs.com/primary.jpg", "uri150": "https://i.discogs.com/p150.jpg"},
            {"type": "secondary", "uri": "https://i.discogs.com/back.jpg", "uri150": ""},
        ],
        "thumb": "https://i.discogs.com/thumb.jpg",
    }


@pytest.fixture
def release(release_data):
    return Release.from_api(release_data)


@pytest.fixture
def settings(tmp_path):
    s = Settings(
        discogs_token="test-token",
        default_product_status="draft",
        store_url="https://shop.example.com",
        shopify_shop="test-store",
        shopify_access_token="shpat_test",
        admin_keys={"admin-key": ["manage_products", "manage_settings"], "clerk-key": ["manage_products"]},
        session_secret="test-secret",
        ledger_path=str(tmp_path / "ledger.db"),
    )
    s.source_path = tmp_path / "settings.yaml"
    return s


class FakeProductStore:
    """In-memory stand-in for ShopifyProductStore."""

    def __init__(self):
        self.products: Dict[int, ProductDraft] = {}
        self.metafields: Dict[int, Dict[str, str]] = {}
        self.collections: Dict[CategoryPath, int] = {}
        self.assignments: Dict[int, List[int]] = {}
        self.images: Dict[int, bytes] = {}
        self.fail_create = False
        self.fail_image = False
        self.fail_metafields = False
        self._next_id = 1000

    def admin_url(self, product_id: int) -> str:
        return f"https://admin.example.com/products/{product_id}"

    def find_product_by_release_id(self, release_id: int) -> Optional[int]:
        for product_id, metadata in self.metafields.items():
            if metadata.get("release_id") == str(release_id):
                return product_id
        return None

    def create_product(self, draft: ProductDraft) -> int:
        from vinyl_shop.common.errors import PersistenceError

        if self.fail_create:
            raise PersistenceError("Failed to create product.")
        self._next_id += 1
        self.products[self._next_id] = draft
        return self._next_id

    def set_metafields(self, product_id: int, metadata: Dict[str, str]) -> None:
        from vinyl_shop.common.errors import PersistenceError

        if self.fail_metafields:
            raise PersistenceError(f"Product {product_id} created but metafields could not be saved: timeout")
        self.metafields[product_id] = dict(metadata)

    def delete_product(self, product_id: int) -> None:
        """Simulate removing a product in the Shopify admin."""
        self.products.pop(product_id, None)
        self.metafields.pop(product_id, None)

    def assign_categories(self, product_id: int, paths) -> List[int]:
        ids = []
        for path in paths:
            if path not in self.collections:
                self.collections[path] = len(self.collections) + 1
            ids.append(self.collections[path])
        self.assignments[product_id] = ids
        return ids

    def attach_image(self, product_id: int, content: bytes, source_url: str, alt: str = "") -> Optional[int]:
        if self.fail_image:
            return None
        self.images[product_id] = content
        return 1


@pytest.fixture
def fake_store():
    return FakeProductStore()


@pytest.fixture
def response_factory():
    """Factory for mock requests.Response objects."""
    return make_response
