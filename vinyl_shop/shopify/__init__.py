"""
Shopify integration modules.

Modules:
    api_client - Shared REST/GraphQL client for Shopify Admin API
    product_store - Products, metafields, collections and images
"""

from .api_client import ShopifyAPIClient
from .product_store import METAFIELD_NAMESPACE, ShopifyProductStore, collection_handle

__all__ = [
    # API Client
    'ShopifyAPIClient',
    # Persistence
    'METAFIELD_NAMESPACE',
    'ShopifyProductStore',
    'collection_handle',
]
