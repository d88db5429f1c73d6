"""
Product data models.

Pure data classes for the store side: the product draft produced by the
release mapper, its category paths, and the outcome of an import.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

SKU_PREFIX = "DISCOGS-"


@dataclass(frozen=True)
class CategoryPath:
    """
    A category to assign, identified by name and optional parent name.

    Genres are top-level (``parent is None``); styles hang under a genre.
    """
    name: str
    parent: Optional[str] = None


@dataclass
class ProductDraft:
    """
    Store product mapped from one release, not yet persisted.

    Field Groups:
    - Core fields: title, HTML description, short description, SKU, status
    - Shopify fields: vendor, product type, tags
    - Metadata: flat key/value pairs stored as product metafields
    - Taxonomy: category paths (genre / style tree)
    - Image: single source URL, downloaded and attached after creation
    """

    title: str
    sku: str
    status: str = "draft"
    description: str = ""
    short_description: str = ""
    vendor: str = ""
    product_type: str = ""
    tags: List[str] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    categories: List[CategoryPath] = field(default_factory=list)
    image_url: str = ""

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.title:
            raise ValueError("Product title is required")
        if not self.sku:
            raise ValueError("Product SKU is required")


@dataclass
class ImportResult:
    """Outcome of a successful release import."""
    product_id: int
    release_id: int
    admin_url: str = ""
    image_attached: bool = False
    category_ids: List[int] = field(default_factory=list)
