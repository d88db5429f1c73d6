"""
Release Mapper

Converts one Discogs release into a ProductDraft: title, HTML description,
short description, SKU, status, category paths, metafields and the image to
attach. Mapping is deterministic; the only inputs besides the release are
the configured default status and the registered hooks.
"""

import html
import logging
from typing import Dict, List, Optional

from ..common.text_utils import autop, join_non_empty, sanitize_text_field
from ..models import SKU_PREFIX, CategoryPath, ProductDraft, Release, ReleaseFormat, Track
from .hooks import ImportHooks

logger = logging.getLogger(__name__)

UNTITLED_RELEASE = "Untitled Release"
SHORT_DESCRIPTION_SEPARATOR = " • "


def join_names(names: List[str]) -> str:
    """Join names with ", " skipping blanks."""
    return ", ".join(n for n in names if n)


def format_tracklist(tracklist: List[Track]) -> str:
    """
    Format a tracklist as plain text, one track per line.

    Example:
        >>> format_tracklist([Track(position="A1", title="Intro", duration="1:02")])
        'A1. Intro (1:02)'
    """
    lines = []
    for track in tracklist:
        line = ""
        if track.position:
            line += f"{track.position}. "
        line += track.title
        if track.duration:
            line += f" ({track.duration})"
        if line:
            lines.append(line)
    return "\n".join(lines)


def format_formats(formats: List[ReleaseFormat]) -> str:
    """
    Format physical formats, e.g. ``Vinyl (2x) - LP, Album, Gatefold``.

    Multiple formats are joined with ", ".
    """
    entries = []
    for fmt in formats:
        text = fmt.name
        if fmt.qty:
            text += f" ({fmt.qty}x)"
        if fmt.descriptions:
            text += " - " + ", ".join(fmt.descriptions)
        entries.append(text)
    return ", ".join(entries)


def build_description(release: Release) -> str:
    """Notes as paragraphs followed by the tracklist as an ordered list."""
    description = autop(release.notes)

    if release.tracklist:
        items = []
        for track in release.tracklist:
            if not track.title:
                continue
            item = html.escape(track.title)
            if track.duration:
                item += f" <em>({html.escape(track.duration)})</em>"
            items.append(f"<li>{item}</li>")
        description += "<h3>Tracklist</h3><ol>" + "".join(items) + "</ol>"

    return description


def build_short_description(release: Release) -> str:
    """``year • country • genres``, omitting empty parts."""
    return join_non_empty(
        [release.year, release.country, join_names(release.genres)],
        SHORT_DESCRIPTION_SEPARATOR,
    )


def build_category_paths(release: Release) -> List[CategoryPath]:
    """
    Genres become top-level categories with every style nested under each
    genre. Without genres, styles become top-level categories.
    """
    paths: List[CategoryPath] = []

    if release.genres:
        for genre in release.genres:
            paths.append(CategoryPath(genre))
            for style in release.styles:
                paths.append(CategoryPath(style, parent=genre))
    else:
        for style in release.styles:
            paths.append(CategoryPath(style))

    # Preserve order, drop repeats (Discogs occasionally lists a genre twice)
    return list(dict.fromkeys(paths))


def select_image_url(release: Release) -> str:
    """First high-resolution image, else cover image, else thumbnail."""
    if release.images and release.images[0].uri:
        return release.images[0].uri
    if release.cover_image:
        return release.cover_image
    return release.thumb


def build_metadata(release: Release, tracklist_text: str = "", short_description: str = "") -> Dict[str, str]:
    """
    Flat key/value metadata stored on the product.

    Keys are only present when the release carries a value for them.
    """
    artist = join_names(release.artist_names) or release.artists_sort

    candidates = [
        ("release_id", str(release.id) if release.id else ""),
        ("release_name", release.title),
        ("artist", artist),
        ("country", release.country),
        ("date", release.released or release.year),
        ("label", join_names(release.label_names)),
        ("genre", join_names(release.genres)),
        ("style", join_names(release.styles)),
        ("format", format_formats(release.formats)),
        ("thumbnail_url", release.thumb),
        ("short_description", short_description),
    ]

    metadata = {}
    for key, value in candidates:
        value = sanitize_text_field(value)
        if value:
            metadata[key] = value

    # Multi-line: keep newlines
    if tracklist_text:
        metadata["tracklist"] = tracklist_text

    return metadata


class ReleaseMapper:
    """
    Maps releases to product drafts, running the mapping filters.

    Usage:
        mapper = ReleaseMapper(hooks)
        draft = mapper.map(release, default_status="draft")
    """

    def __init__(self, hooks: Optional[ImportHooks] = None):
        self.hooks = hooks or ImportHooks()

    def map(self, release: Release, default_status: str = "draft") -> ProductDraft:
        """Build the ProductDraft for release."""
        hooks = self.hooks

        status = hooks.apply_filters("product_status", default_status, release)
        tracklist_text = hooks.apply_filters("tracklist_format", format_tracklist(release.tracklist), release)
        description = hooks.apply_filters("product_description", build_description(release), release)
        short_description = hooks.apply_filters(
            "product_short_description", build_short_description(release), release
        )
        categories = hooks.apply_filters("product_categories", build_category_paths(release), release)

        draft = ProductDraft(
            title=release.title or UNTITLED_RELEASE,
            sku=f"{SKU_PREFIX}{release.id}",
            status=status,
            description=description,
            short_description=short_description,
            vendor=join_names(release.artist_names) or release.artists_sort,
            product_type=release.formats[0].name if release.formats else "",
            tags=list(release.styles),
            metadata=build_metadata(release, tracklist_text, short_description),
            categories=list(categories),
            image_url=select_image_url(release),
        )

        logger.debug("Mapped release %s -> %s (%s, %d categories)",
                     release.id, draft.sku, draft.status, len(draft.categories))
        return draft
