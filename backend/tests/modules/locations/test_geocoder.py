"""Tests for the Mapbox geocoder."""

import pytest
import httpx
from unittest.mock import patch, MagicMock, AsyncMock

from modules.locations.exceptions import GeocodingUnavailableError
from modules.locations.geocoder import MapboxGeocoder


def _mock_client(response=None, error=None):
    client = MagicMock()
    if error is not None:
        client.get = AsyncMock(side_effect=error)
    else:
        client.get = AsyncMock(return_value=response)
    return client


def _response(payload):
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json.return_value = payload
    return response


PARIS = {
    "type": "FeatureCollection",
    "features": [
        {
            "center": [2.3522, 48.8566],
            "relevance": 0.97,
            "place_name": "Paris, France",
        }
    ],
}


class TestMapboxGeocoder:
    @pytest.fixture
    def geocoder(self):
        return MapboxGeocoder(access_token="pk.test", timeout=2.5)

    def test_is_configured(self):
        assert MapboxGeocoder("pk.test").is_configured is True
        assert MapboxGeocoder("").is_configured is False

    @pytest.mark.asyncio
    async def test_missing_token_is_unavailable(self):
        with pytest.raises(GeocodingUnavailableError, match="not configured"):
            await MapboxGeocoder("").geocode("Paris, France")

    @pytest.mark.asyncio
    async def test_returns_first_match(self, geocoder):
        client = _mock_client(_response(PARIS))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            match = await geocoder.geocode("Paris, France")

        assert match.longitude == 2.3522
        assert match.latitude == 48.8566
        assert match.relevance == 0.97
        assert match.place_name == "Paris, France"

    @pytest.mark.asyncio
    async def test_request_shape(self, geocoder):
        """One request: place types, a single result, bounded timeout."""
        client = _mock_client(_response(PARIS))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            await geocoder.geocode("Paris, France")

        client.get.assert_awaited_once()
        url = client.get.call_args.args[0]
        kwargs = client.get.call_args.kwargs
        assert url.endswith("/Paris%2C%20France.json")
        assert kwargs["params"] == {
            "access_token": "pk.test",
            "types": "place,locality,region",
            "limit": 1,
        }
        assert kwargs["timeout"] == 2.5

    @pytest.mark.asyncio
    async def test_no_features_is_none(self, geocoder):
        client = _mock_client(_response({"features": []}))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            assert await geocoder.geocode("Nowhere, Atlantis") is None

    @pytest.mark.asyncio
    async def test_missing_relevance_defaults_to_one(self, geocoder):
        payload = {"features": [{"center": [10.0, 20.0]}]}
        client = _mock_client(_response(payload))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            match = await geocoder.geocode("Somewhere")

        assert match.relevance == 1.0

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable(self, geocoder):
        client = _mock_client(error=httpx.TimeoutException("timed out"))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            with pytest.raises(GeocodingUnavailableError, match="timed out"):
                await geocoder.geocode("Paris, France")

    @pytest.mark.asyncio
    async def test_http_status_error_is_unavailable(self, geocoder):
        response = _response({})
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "429 Too Many Requests",
            request=MagicMock(),
            response=MagicMock(status_code=429),
        )
        client = _mock_client(response)
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            with pytest.raises(GeocodingUnavailableError) as exc_info:
                await geocoder.geocode("Paris, France")

        assert exc_info.value.service == "mapbox"
        assert exc_info.value.code == "GEOCODING_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_malformed_body_is_unavailable(self, geocoder):
        response = _response(None)
        response.json.side_effect = ValueError("Expecting value")
        client = _mock_client(response)
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            with pytest.raises(GeocodingUnavailableError, match="not JSON"):
                await geocoder.geocode("Paris, France")

    @pytest.mark.asyncio
    async def test_feature_without_center_is_unavailable(self, geocoder):
        client = _mock_client(_response({"features": [{"relevance": 1}]}))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            with pytest.raises(GeocodingUnavailableError):
                await geocoder.geocode("Paris, France")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"features": [{"center": ["x", "y"]}]},
        {"features": [{"center": [None, 1]}]},
        {"features": [{"center": [2.35, 48.85], "relevance": "high"}]},
        {"features": {"a": 1}},
        {"features": ["oops"]},
        {"features": [{"center": "ab"}]},
        {"features": [{"center": [200, 10]}]},
        {"features": [{"center": [10, -95]}]},
        {"features": [{"center": [float("nan"), 10]}]},
    ])
    async def test_unusable_feature_is_unavailable(self, geocoder, payload):
        client = _mock_client(_response(payload))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            with pytest.raises(GeocodingUnavailableError):
                await geocoder.geocode("Paris, France")

    @pytest.mark.asyncio
    async def test_zero_relevance_kept(self, geocoder):
        client = _mock_client(_response({"features": [{"center": [1.0, 2.0], "relevance": 0}]}))
        with patch("httpx.AsyncClient") as mock_client_class:
            mock_client_class.return_value.__aenter__.return_value = client
            mock_client_class.return_value.__aexit__.return_value = None

            match = await geocoder.geocode("Somewhere")

        assert match.relevance == 0.0
