import pytest
import requests
from unittest.mock import MagicMock, patch
from loaders.location import LocationResolver, ParcelLocation, build_embed_url

@pytest.fixture
def mock_resolver():
    session = MagicMock()
    session.headers = {}
    yield LocationResolver(session=session)

def test_embed_url_encodes_address():
    """Verify the address is percent-encoded into the query."""
    url = build_embed_url("Frond G, Palm Jumeirah, Dubai", zoom=15)
    assert "q=Frond%20G%2C%20Palm%20Jumeirah%2C%20Dubai" in url
    assert "z=15" in url
    assert "output=embed" in url

def test_embed_url_escapes_separators():
    """Verify ampersands cannot break out of the query parameter."""
    url = build_embed_url("A & B #1", zoom=12)
    assert "q=A%20%26%20B%20%231&" in url
    assert "z=12" in url

def test_resolve_success(mock_resolver):
    """Verify a Nominatim hit becomes a ParcelLocation."""
    mock_response = MagicMock()
    mock_response.json.return_value = [{
        "lat": "25.112",
        "lon": "55.139",
        "display_name": "Palm Jumeirah, Dubai, United Arab Emirates",
    }]
    mock_resolver.session.get.return_value = mock_response

    result = mock_resolver.resolve("Frond G, Palm Jumeirah, Dubai")
    assert isinstance(result, ParcelLocation)
    assert result.latitude == 25.112
    assert result.longitude == 55.139
    assert result.display_name.startswith("Palm Jumeirah")
    assert mock_resolver.session.headers["User-Agent"] == LocationResolver.USER_AGENT

def test_resolve_caches_lookups(mock_resolver):
    """Verify repeated addresses are served from the cache."""
    mock_response = MagicMock()
    mock_response.json.return_value = [{"lat": "25.0", "lon": "55.0", "display_name": "Dubai"}]
    mock_resolver.session.get.return_value = mock_response

    first = mock_resolver.resolve("Downtown Dubai")
    second = mock_resolver.resolve("  downtown   DUBAI ")
    assert first == second
    assert mock_resolver.session.get.call_count == 1

def test_resolve_no_results(mock_resolver):
    """Verify an empty result list resolves to None and is cached."""
    mock_response = MagicMock()
    mock_response.json.return_value = []
    mock_resolver.session.get.return_value = mock_response

    assert mock_resolver.resolve("Nowhere Street") is None
    assert mock_resolver.resolve("Nowhere Street") is None
    assert mock_resolver.session.get.call_count == 1

@pytest.mark.parametrize("address", ["", "   ", None])
def test_resolve_blank_address(mock_resolver, address):
    """Verify blank addresses never hit the network."""
    assert mock_resolver.resolve(address) is None
    mock_resolver.session.get.assert_not_called()

def test_resolve_service_failure(mock_resolver):
    """Verify network errors resolve to None instead of raising."""
    with patch.object(mock_resolver, "_search", side_effect=requests.ConnectionError("offline")):
        assert mock_resolver.resolve("Business Bay, Dubai") is None
