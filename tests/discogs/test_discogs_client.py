"""Tests for vinyl_shop/discogs/api_client.py"""

from unittest.mock import patch

import pytest
import requests

from vinyl_shop.common.errors import ConfigurationError, DecodeError, UpstreamError, ValidationError
from vinyl_shop.discogs.api_client import DiscogsAPIClient
from vinyl_shop.mapping.hooks import ImportHooks
from vinyl_shop.models import SearchPage

SEARCH_PAYLOAD = {
    "pagination": {"page": 1, "pages": 3, "per_page": 20, "items": 45},
    "results": [
        {
            "id": 249504,
            "title": "Miles Davis - Kind Of Blue",
            "year": "1959",
            "format": ["Vinyl", "LP", "Album"],
            "label": ["Columbia"],
            "country": "US",
            "genre": ["Jazz"],
            "style": ["Modal"],
            "thumb": "https://i.discogs.com/t.jpg",
            "cover_image": "https://i.discogs.com/c.jpg",
        }
    ],
}


@pytest.fixture
def client():
    return DiscogsAPIClient(token="test-token", store_url="https://shop.example.com")


class TestInit:
    def test_user_agent_includes_store_url(self, client):
        assert client.session.headers["User-Agent"] == "VinylShopDiscogs/1.0 +https://shop.example.com"

    def test_token_is_stripped(self):
        assert DiscogsAPIClient(token="  abc ").token == "abc"


class TestSearch:
    def test_successful_search(self, client, response_factory):
        response = response_factory(200, SEARCH_PAYLOAD)

        with patch.object(client.session, "get", return_value=response) as mock_get:
            page = client.search("Kind of Blue")

        assert isinstance(page, SearchPage)
        assert page.results[0].id == 249504
        assert page.results[0].format == "Vinyl, LP, Album"
        assert page.pagination.pages == 3
        assert page.pagination.items == 45

        url = mock_get.call_args.args[0]
        kwargs = mock_get.call_args.kwargs
        assert url == "https://api.discogs.com/database/search"
        assert kwargs["params"] == {
            "q": "Kind of Blue", "type": "release", "per_page": 20, "page": 1, "token": "test-token",
        }
        assert kwargs["timeout"] == 15

    def test_page_parameter(self, client, response_factory):
        with patch.object(client.session, "get", return_value=response_factory(200, SEARCH_PAYLOAD)) as mock_get:
            client.search("blue", page=3)
        assert mock_get.call_args.kwargs["params"]["page"] == 3

    def test_empty_query_fails_before_network(self, client):
        with patch.object(client.session, "get") as mock_get:
            with pytest.raises(ValidationError, match="Search query is required"):
                client.search("   ")
        mock_get.assert_not_called()

    def test_missing_token(self):
        client = DiscogsAPIClient(token="")
        with patch.object(client.session, "get") as mock_get:
            with pytest.raises(ConfigurationError, match="token is not configured"):
                client.search("blue")
        mock_get.assert_not_called()

    def test_missing_results_key(self, client, response_factory):
        with patch.object(client.session, "get", return_value=response_factory(200, {})):
            page = client.search("blue")
        assert page.results == []
        assert page.pagination.page == 1
        assert page.pagination.per_page == 20

    def test_hooks_run(self, response_factory):
        hooks = ImportHooks()
        events = []
        hooks.add_action("before_search", lambda q, p: events.append(("before", q, p)))
        hooks.add_action("after_search", lambda q, p, page: events.append(("after", len(page.results))))
        hooks.add_filter("search_results", lambda page: SearchPage(results=[], pagination=page.pagination))
        client = DiscogsAPIClient(token="t", hooks=hooks)

        with patch.object(client.session, "get", return_value=response_factory(200, SEARCH_PAYLOAD)):
            page = client.search("blue")

        assert page.results == []
        assert events == [("before", "blue", 1), ("after", 0)]


class TestGetRelease:
    def test_successful_get(self, client, release_data, response_factory):
        with patch.object(client.session, "get", return_value=response_factory(200, release_data)) as mock_get:
            release = client.get_release(249504)

        assert release.title == "Kind Of Blue"
        assert mock_get.call_args.args[0] == "https://api.discogs.com/releases/249504"
        assert mock_get.call_args.kwargs["params"] == {"token": "test-token"}

    @pytest.mark.parametrize("bad_id", [0, -1, None, "abc"])
    def test_invalid_id(self, client, bad_id):
        with patch.object(client.session, "get") as mock_get:
            with pytest.raises(ValidationError, match="Release ID is required"):
                client.get_release(bad_id)
        mock_get.assert_not_called()

    def test_missing_token(self):
        with pytest.raises(ConfigurationError):
            DiscogsAPIClient(token="").get_release(1)


class TestErrors:
    def test_error_status_with_message(self, client, response_factory):
        response = response_factory(404, {"message": "Release not found."})
        with patch.object(client.session, "get", return_value=response):
            with pytest.raises(UpstreamError) as exc_info:
                client.get_release(999999999)

        assert exc_info.value.message == "Discogs API returned error code 404: Release not found."
        assert exc_info.value.status_code == 404

    def test_error_status_without_json(self, client, response_factory):
        response = response_factory(500, invalid_json=True)
        with patch.object(client.session, "get", return_value=response):
            with pytest.raises(UpstreamError) as exc_info:
                client.search("blue")
        assert exc_info.value.message == "Discogs API returned error code 500"

    def test_no_retry_on_rate_limit(self, client, response_factory):
        response = response_factory(429, {"message": "You are making requests too quickly."})
        with patch.object(client.session, "get", return_value=response) as mock_get:
            with pytest.raises(UpstreamError, match="429"):
                client.search("blue")
        assert mock_get.call_count == 1

    def test_invalid_json(self, client, response_factory):
        with patch.object(client.session, "get", return_value=response_factory(200, invalid_json=True)):
            with pytest.raises(DecodeError, match="Failed to decode"):
                client.get_release(1)

    def test_non_object_json(self, client, response_factory):
        with patch.object(client.session, "get", return_value=response_factory(200, ["not", "an", "object"])):
            with pytest.raises(DecodeError):
                client.get_release(1)

    def test_malformed_pagination(self, client, response_factory):
        payload = {"results": [], "pagination": {"page": "one"}}
        with patch.object(client.session, "get", return_value=response_factory(200, payload)):
            with pytest.raises(DecodeError, match="Failed to decode"):
                client.search("blue")

    def test_timeout(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.Timeout):
            with pytest.raises(UpstreamError, match="timed out"):
                client.search("blue")

    def test_connection_error(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(UpstreamError, match="request failed"):
                client.get_release(1)


class TestDownloadImage:
    def test_returns_bytes(self, client, response_factory):
        response = response_factory(200, content=b"\xff\xd8jpeg")
        with patch.object(client.session, "get", return_value=response):
            assert client.download_image("https://i.discogs.com/a.jpg") == b"\xff\xd8jpeg"

    def test_empty_url(self, client):
        with pytest.raises(ValidationError, match="No image URL"):
            client.download_image("")

    def test_error_status(self, client, response_factory):
        with patch.object(client.session, "get", return_value=response_factory(403)):
            with pytest.raises(UpstreamError, match="403"):
                client.download_image("https://i.discogs.com/a.jpg")
