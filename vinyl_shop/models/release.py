"""
Discogs release data models.

Data classes for the catalog side: full releases fetched by id and the flat
rows returned by a database search. ``from_api`` constructors accept the raw
JSON dictionaries and tolerate missing keys.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


def _text(value: Any) -> str:
    """Coerce a JSON scalar to str, treating None and 0 as empty."""
    if value is None or value == 0:
        return ""
    return str(value)


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


@dataclass
class Artist:
    name: str
    role: str = ""


@dataclass
class Label:
    name: str
    catno: str = ""


@dataclass
class ReleaseFormat:
    """One physical format entry, e.g. ``Vinyl (2x) - LP, Album``."""
    name: str
    qty: str = ""
    descriptions: List[str] = field(default_factory=list)


@dataclass
class Track:
    position: str = ""
    title: str = ""
    duration: str = ""


@dataclass
class ReleaseImage:
    uri: str
    type: str = ""
    uri150: str = ""


@dataclass
class Release:
    """
    A single Discogs release (one pressing/edition of a recording).

    Transient: fetched per request and never stored locally.
    """

    id: int
    title: str = ""
    artists: List[Artist] = field(default_factory=list)
    artists_sort: str = ""
    labels: List[Label] = field(default_factory=list)
    country: str = ""
    released: str = ""
    year: str = ""
    genres: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    formats: List[ReleaseFormat] = field(default_factory=list)
    tracklist: List[Track] = field(default_factory=list)
    notes: str = ""
    images: List[ReleaseImage] = field(default_factory=list)
    cover_image: str = ""
    thumb: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Release":
        """Build a Release from a ``/releases/{id}`` response."""
        try:
            release_id = int(data.get("id") or 0)
        except (TypeError, ValueError):
            release_id = 0

        return cls(
            id=release_id,
            title=_text(data.get("title")),
            artists=[
                Artist(name=str(a["name"]), role=_text(a.get("role")))
                for a in _dict_list(data.get("artists")) if a.get("name")
            ],
            artists_sort=_text(data.get("artists_sort")),
            labels=[
                Label(name=str(lb["name"]), catno=_text(lb.get("catno")))
                for lb in _dict_list(data.get("labels")) if lb.get("name")
            ],
            country=_text(data.get("country")),
            released=_text(data.get("released")),
            year=_text(data.get("year")),
            genres=_str_list(data.get("genres")),
            styles=_str_list(data.get("styles")),
            formats=[
                ReleaseFormat(
                    name=str(fmt["name"]),
                    qty=_text(fmt.get("qty")),
                    descriptions=_str_list(fmt.get("descriptions")),
                )
                for fmt in _dict_list(data.get("formats")) if fmt.get("name")
            ],
            tracklist=[
                Track(
                    position=_text(t.get("position")),
                    title=_text(t.get("title")),
                    duration=_text(t.get("duration")),
                )
                for t in _dict_list(data.get("tracklist"))
            ],
            notes=_text(data.get("notes")),
            images=[
                ReleaseImage(uri=_text(img.get("uri")), type=_text(img.get("type")), uri150=_text(img.get("uri150")))
                for img in _dict_list(data.get("images"))
            ],
            cover_image=_text(data.get("cover_image")),
            thumb=_text(data.get("thumb")),
        )

    @property
    def artist_names(self) -> List[str]:
        return [a.name for a in self.artists]

    @property
    def label_names(self) -> List[str]:
        return [lb.name for lb in self.labels]


@dataclass
class SearchResult:
    """One row of a database search, list fields already joined."""
    id: int
    title: str = ""
    year: str = ""
    format: str = ""
    label: str = ""
    country: str = ""
    genre: str = ""
    style: str = ""
    thumb: str = ""
    cover_image: str = ""

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "SearchResult":
        try:
            result_id = int(item.get("id") or 0)
        except (TypeError, ValueError):
            result_id = 0
        return cls(
            id=result_id,
            title=_text(item.get("title")),
            year=_text(item.get("year")),
            format=", ".join(_str_list(item.get("format"))),
            label=", ".join(_str_list(item.get("label"))),
            country=_text(item.get("country")),
            genre=", ".join(_str_list(item.get("genre"))),
            style=", ".join(_str_list(item.get("style"))),
            thumb=_text(item.get("thumb")),
            cover_image=_text(item.get("cover_image")),
        )


@dataclass
class Pagination:
    page: int = 1
    pages: int = 1
    per_page: int = 20
    items: int = 0

    @classmethod
    def from_api(cls, data: Any) -> "Pagination":
        if not isinstance(data, dict):
            return cls()
        return cls(
            page=int(data.get("page") or 1),
            pages=int(data.get("pages") or 1),
            per_page=int(data.get("per_page") or 20),
            items=int(data.get("items") or 0),
        )


@dataclass
class SearchPage:
    """Normalized search response: results plus pagination."""
    results: List[SearchResult] = field(default_factory=list)
    pagination: Pagination = field(default_factory=Pagination)
