"""Tests for vinyl_shop/mapping/release_mapper.py"""

import pytest

from vinyl_shop.mapping.hooks import ImportHooks
from vinyl_shop.mapping.release_mapper import (
    ReleaseMapper,
    build_category_paths,
    build_description,
    build_metadata,
    build_short_description,
    format_formats,
    format_tracklist,
    select_image_url,
)
from vinyl_shop.mapping.status_rules import GenreAutoPublishRule
from vinyl_shop.models import CategoryPath, Release, ReleaseFormat, ReleaseImage, Track


class TestFormatTracklist:
    def test_single_track(self):
        assert format_tracklist([Track(position="A1", title="Intro", duration="1:02")]) == "A1. Intro (1:02)"

    def test_optional_parts(self):
        tracks = [
            Track(position="", title="Hidden Track", duration=""),
            Track(position="B2", title="Outro", duration=""),
        ]
        assert format_tracklist(tracks) == "Hidden Track\nB2. Outro"

    def test_skips_empty_lines(self):
        assert format_tracklist([Track(), Track(title="X")]) == "X"

    def test_empty(self):
        assert format_tracklist([]) == ""


class TestFormatFormats:
    def test_full_entry(self):
        fmt = ReleaseFormat(name="Vinyl", qty="2", descriptions=["LP", "Album"])
        assert format_formats([fmt]) == "Vinyl (2x) - LP, Album"

    def test_name_only(self):
        assert format_formats([ReleaseFormat(name="CD")]) == "CD"

    def test_multiple_formats(self):
        formats = [ReleaseFormat(name="Vinyl", qty="1"), ReleaseFormat(name="File", descriptions=["MP3"])]
        assert format_formats(formats) == "Vinyl (1x), File - MP3"


class TestBuildDescription:
    def test_notes_and_tracklist(self, release):
        html = build_description(release)
        assert html.startswith("<p>Recorded at Columbia 30th Street Studio.</p>\n<p>Original mono pressing.</p>\n")
        assert "<h3>Tracklist</h3><ol>" in html
        assert "<li>So What <em>(9:22)</em></li>" in html
        assert "<li>Blue In Green</li>" in html
        assert html.endswith("</ol>")

    def test_tracks_in_order(self, release):
        html = build_description(release)
        assert html.index("So What") < html.index("Freddie Freeloader") < html.index("Blue In Green")

    def test_escapes_titles(self):
        release = Release(id=1, tracklist=[Track(title="Rock & Roll <Live>")])
        assert "<li>Rock &amp; Roll &lt;Live&gt;</li>" in build_description(release)

    def test_no_notes_no_tracklist(self):
        assert build_description(Release(id=1)) == ""

    def test_untitled_tracks_skipped(self):
        release = Release(id=1, tracklist=[Track(position="A1", title="")])
        assert build_description(release) == "<h3>Tracklist</h3><ol></ol>"


class TestBuildShortDescription:
    def test_all_parts(self, release):
        assert build_short_description(release) == "1959 • US • Jazz"

    def test_multiple_genres(self):
        release = Release(id=1, year="1972", country="UK", genres=["Rock", "Blues"])
        assert build_short_description(release) == "1972 • UK • Rock, Blues"

    def test_omits_empty_parts(self):
        assert build_short_description(Release(id=1, country="Germany")) == "Germany"
        assert build_short_description(Release(id=1, year="1980", genres=["Electronic"])) == "1980 • Electronic"

    def test_nothing(self):
        assert build_short_description(Release(id=1)) == ""


class TestBuildCategoryPaths:
    def test_cartesian_genres_and_styles(self):
        release = Release(id=1, genres=["Rock", "Jazz"], styles=["Fusion", "Prog Rock"])
        paths = build_category_paths(release)
        assert paths == [
            CategoryPath("Rock"),
            CategoryPath("Fusion", "Rock"),
            CategoryPath("Prog Rock", "Rock"),
            CategoryPath("Jazz"),
            CategoryPath("Fusion", "Jazz"),
            CategoryPath("Prog Rock", "Jazz"),
        ]

    @pytest.mark.parametrize("genres,styles", [
        (["Jazz"], ["Modal"]),
        (["Rock", "Pop"], ["Punk", "New Wave", "Mod"]),
        (["Electronic", "Hip Hop", "Funk / Soul"], ["Trip Hop"]),
    ])
    def test_every_genre_parent_every_style_child(self, genres, styles):
        paths = set(build_category_paths(Release(id=1, genres=genres, styles=styles)))
        for genre in genres:
            assert CategoryPath(genre) in paths
            for style in styles:
                assert CategoryPath(style, genre) in paths
        assert len(paths) == len(genres) * (len(styles) + 1)

    def test_styles_top_level_without_genres(self):
        paths = build_category_paths(Release(id=1, styles=["House", "Techno"]))
        assert paths == [CategoryPath("House"), CategoryPath("Techno")]

    def test_genres_only(self):
        assert build_category_paths(Release(id=1, genres=["Classical"])) == [CategoryPath("Classical")]

    def test_empty(self):
        assert build_category_paths(Release(id=1)) == []

    def test_duplicates_removed(self):
        paths = build_category_paths(Release(id=1, genres=["Rock", "Rock"], styles=["Punk"]))
        assert paths == [CategoryPath("Rock"), CategoryPath("Punk", "Rock")]


class TestSelectImageUrl:
    def test_first_image_wins(self):
        release = Release(
            id=1,
            images=[ReleaseImage(uri="https://img/1.jpg"), ReleaseImage(uri="https://img/2.jpg")],
            cover_image="https://img/cover.jpg",
            thumb="https://img/thumb.jpg",
        )
        assert select_image_url(release) == "https://img/1.jpg"

    def test_cover_image_fallback(self):
        release = Release(id=1, cover_image="https://img/cover.jpg", thumb="https://img/thumb.jpg")
        assert select_image_url(release) == "https://img/cover.jpg"

    def test_thumb_fallback(self):
        assert select_image_url(Release(id=1, thumb="https://img/thumb.jpg")) == "https://img/thumb.jpg"

    def test_no_image(self):
        assert select_image_url(Release(id=1)) == ""


class TestBuildMetadata:
    def test_flattened_fields(self, release):
        metadata = build_metadata(release, tracklist_text="A1. So What (9:22)", short_description="1959 • US • Jazz")
        assert metadata["release_id"] == "249504"
        assert metadata["release_name"] == "Kind Of Blue"
        assert metadata["artist"] == "Miles Davis"
        assert metadata["label"] == "Columbia"
        assert metadata["country"] == "US"
        assert metadata["date"] == "1959-08-17"
        assert metadata["genre"] == "Jazz"
        assert metadata["style"] == "Modal, Cool Jazz"
        assert metadata["format"] == "Vinyl (1x) - LP, Album, Mono"
        assert metadata["thumbnail_url"] == "https://i.discogs.com/thumb.jpg"
        assert metadata["tracklist"] == "A1. So What (9:22)"
        assert metadata["short_description"] == "1959 • US • Jazz"

    def test_artists_sort_fallback(self):
        metadata = build_metadata(Release(id=1, artists_sort="Various"))
        assert metadata["artist"] == "Various"

    def test_year_fallback_for_date(self):
        assert build_metadata(Release(id=1, year="1958"))["date"] == "1958"

    def test_missing_values_omitted(self):
        assert build_metadata(Release(id=1)) == {"release_id": "1"}

    def test_tracklist_keeps_newlines(self):
        metadata = build_metadata(Release(id=1), tracklist_text="A1. One\nA2. Two")
        assert metadata["tracklist"] == "A1. One\nA2. Two"


class TestReleaseMapper:
    def test_maps_release(self, release):
        draft = ReleaseMapper().map(release, default_status="draft")
        assert draft.title == "Kind Of Blue"
        assert draft.sku == "DISCOGS-249504"
        assert draft.status == "draft"
        assert draft.vendor == "Miles Davis"
        assert draft.product_type == "Vinyl"
        assert draft.tags == ["Modal", "Cool Jazz"]
        assert draft.short_description == "1959 • US • Jazz"
        assert draft.image_url == "https://i.discogs.com/primary.jpg"
        assert CategoryPath("Modal", "Jazz") in draft.categories
        assert draft.metadata["tracklist"].splitlines()[0] == "A1. So What (9:22)"

    def test_untitled_release(self):
        draft = ReleaseMapper().map(Release(id=5))
        assert draft.title == "Untitled Release"

    def test_is_deterministic(self, release):
        mapper = ReleaseMapper()
        assert mapper.map(release, "draft") == mapper.map(release, "draft")

    def test_status_filter_allow_list(self):
        hooks = ImportHooks()
        hooks.add_filter("product_status", GenreAutoPublishRule(["Rock", "Jazz"]))
        mapper = ReleaseMapper(hooks)

        jazz = Release(id=1, year="1958", genres=["Jazz", "Blues"])
        blues = Release(id=2, year="1958", genres=["Blues"])
        lowercase = Release(id=3, year="1958", genres=["rock"])

        assert mapper.map(jazz, "draft").status == "active"
        assert mapper.map(blues, "draft").status == "draft"
        assert mapper.map(lowercase, "archived").status == "archived"

    def test_filters_applied(self, release):
        hooks = ImportHooks()
        hooks.add_filter("tracklist_format", lambda text, rel: text.upper())
        hooks.add_filter("product_description", lambda html, rel: html + "<p>Graded VG+</p>")
        hooks.add_filter("product_short_description", lambda text, rel: f"{text} • Mono")
        hooks.add_filter("product_categories", lambda paths, rel: [p for p in paths if p.parent is None])
        draft = ReleaseMapper(hooks).map(release)

        assert draft.metadata["tracklist"].startswith("A1. SO WHAT")
        assert draft.description.endswith("<p>Graded VG+</p>")
        assert draft.short_description == "1959 • US • Jazz • Mono"
        assert draft.metadata["short_description"] == "1959 • US • Jazz • Mono"
        assert draft.categories == [CategoryPath("Jazz")]
