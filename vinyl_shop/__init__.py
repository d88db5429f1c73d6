"""
Vinyl Shop Discogs

Search the Discogs catalog and import releases as Shopify products.

Modules:
    models      - Data models (Release, SearchPage, ProductDraft)
    common      - Shared utilities (settings, errors, logging, text helpers)
    discogs     - Discogs API client
    mapping     - Release-to-product mapping and hooks
    shopify     - Shopify API client and product store
    importer    - Import orchestration and ledger
    admin       - FastAPI admin endpoints
"""

__version__ = "1.0.0"
