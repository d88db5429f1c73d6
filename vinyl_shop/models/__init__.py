"""
Data models for catalog releases and store products.

This module contains pure data classes with no business logic.
"""

from .product import SKU_PREFIX, CategoryPath, ImportResult, ProductDraft
from .release import (
    Artist,
    Label,
    Pagination,
    Release,
    ReleaseFormat,
    ReleaseImage,
    SearchPage,
    SearchResult,
    Track,
)

__all__ = [
    'Artist',
    'CategoryPath',
    'ImportResult',
    'Label',
    'Pagination',
    'ProductDraft',
    'Release',
    'ReleaseFormat',
    'ReleaseImage',
    'SKU_PREFIX',
    'SearchPage',
    'SearchResult',
    'Track',
]
