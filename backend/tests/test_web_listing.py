"""
School Directory — Listing Helpers and API Client
===================================================

What:  Tests for the search filter, card images and DirectoryClient.
How:   DirectoryClient runs against httpx.MockTransport.
"""

import httpx
import pytest

from school_directory.exceptions import ApiClientError
from school_directory.services.upload_service import ImageUpload
from school_directory.web.client import DirectoryClient
from school_directory.web.listing import (
    PLACEHOLDER_IMAGE,
    SAMPLE_SCHOOLS,
    card_image,
    matches_term,
)


def _matching(schools, term):
    return [school for school in schools if matches_term(school, term)]


class TestMatchesTerm:

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("", ["Green Valley High School", "Sunrise Academy", "Oak Tree International"]),
            ("  ", ["Green Valley High School", "Sunrise Academy", "Oak Tree International"]),
            ("SUNRISE", ["Sunrise Academy"]),
            ("bangal", ["Oak Tree International"]),
            ("maharashtra", ["Green Valley High School"]),
            ("high", ["Green Valley High School"]),
            ("nowhere", []),
        ],
    )
    def test_matches_name_city_or_state(self, term, expected):
        assert [s["name"] for s in _matching(SAMPLE_SCHOOLS, term)] == expected

    def test_city_substring(self):
        schools = [{"name": "Alpha", "city": "Mumbai", "state": "MH"}, {"name": "Beta", "city": "Delhi", "state": "DL"}]
        assert [s["city"] for s in _matching(schools, "mum")] == ["Mumbai"]

    def test_address_is_not_searched(self):
        assert _matching(SAMPLE_SCHOOLS, "Knowledge Avenue") == []

    def test_none_term_keeps_everything(self):
        assert len(_matching(SAMPLE_SCHOOLS, None)) == 3


class TestCardImage:

    def test_missing_image_uses_placeholder(self):
        assert card_image({"image": None}, "http://localhost:3001") == PLACEHOLDER_IMAGE

    def test_stored_reference_stays_relative_without_base_url(self):
        school = {"image": "/uploads/schoolImages/school-1-2.png"}
        assert card_image(school) == "/uploads/schoolImages/school-1-2.png"

    def test_stored_reference_uses_configured_base_url(self):
        school = {"image": "/uploads/schoolImages/school-1-2.png"}
        assert card_image(school, "http://localhost:3001/") == (
            "http://localhost:3001/uploads/schoolImages/school-1-2.png"
        )

    def test_absolute_url_is_kept(self):
        school = {"image": "https://cdn.example.com/a.png"}
        assert card_image(school, "http://localhost:3001") == "https://cdn.example.com/a.png"


class TestDirectoryClient:

    @pytest.mark.asyncio
    async def test_list_schools(self):
        def handler(request):
            assert request.url.path == "/api/schools"
            return httpx.Response(200, json=[{"id": 1}])

        client = DirectoryClient("http://api.test", transport=httpx.MockTransport(handler))
        assert await client.list_schools() == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_error_response_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": "validation_error", "message": "Contact must be 7 to 15 digits"})

        client = DirectoryClient("http://api.test", transport=httpx.MockTransport(handler))
        with pytest.raises(ApiClientError, match="Contact must be 7 to 15 digits") as exc_info:
            await client.create_school({"name": "x"})
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        client = DirectoryClient("http://api.test", transport=httpx.MockTransport(handler))
        with pytest.raises(ApiClientError, match="could not be reached") as exc_info:
            await client.get_stats()
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_unreadable_success_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>proxy page</html>")

        client = DirectoryClient("http://api.test", transport=httpx.MockTransport(handler))
        with pytest.raises(ApiClientError, match="unreadable"):
            await client.get_stats()

    @pytest.mark.asyncio
    async def test_create_sends_image_as_multipart(self, sample_image_bytes):
        seen = {}

        def handler(request):
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.read()
            return httpx.Response(201, json={"message": "School added successfully", "id": 7, "image": None})

        client = DirectoryClient("http://api.test", transport=httpx.MockTransport(handler))
        result = await client.create_school(
            {"name": "Sunrise Academy"},
            ImageUpload("campus.png", "image/png", sample_image_bytes),
        )

        assert result["id"] == 7
        assert seen["content_type"].startswith("multipart/form-data")
        assert b'name="image"; filename="campus.png"' in seen["body"]
        assert sample_image_bytes in seen["body"]
