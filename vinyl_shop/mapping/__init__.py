"""
Release-to-product mapping.

Modules:
    release_mapper - Pure mapping from Release to ProductDraft
    hooks - Filter/action registry run around mapping and import
    status_rules - Built-in product status filters
"""

from .hooks import ImportHooks
from .release_mapper import (
    ReleaseMapper,
    build_category_paths,
    build_description,
    build_metadata,
    build_short_description,
    format_formats,
    format_tracklist,
    select_image_url,
)
from .status_rules import GenreAutoPublishRule

__all__ = [
    'GenreAutoPublishRule',
    'ImportHooks',
    'ReleaseMapper',
    'build_category_paths',
    'build_description',
    'build_metadata',
    'build_short_description',
    'format_formats',
    'format_tracklist',
    'select_image_url',
]
