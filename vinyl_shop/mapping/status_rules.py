"""
Product status rules.

Filters for the ``product_status`` hook. The genre allow-list rule is
installed by default: releases tagged with an allow-listed genre are
published straight away, everything else keeps the configured status.
"""

from typing import Iterable

from ..models import Release

PUBLISHED_STATUS = "active"


class GenreAutoPublishRule:
    """
    Publish releases whose genres include an allow-listed genre.

    Matching is exact and case-sensitive ("Rock" matches, "rock" does not).
    """

    def __init__(self, genres: Iterable[str], published_status: str = PUBLISHED_STATUS):
        self.genres = frozenset(genres)
        self.published_status = published_status

    def __call__(self, status: str, release: Release) -> str:
        for genre in release.genres:
            if genre in self.genres:
                return self.published_status
        return status
