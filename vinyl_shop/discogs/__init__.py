"""
Discogs catalog integration.

Modules:
    api_client - Search, release details and image downloads
"""

from .api_client import DiscogsAPIClient

__all__ = ['DiscogsAPIClient']
