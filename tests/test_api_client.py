"""
API client tests using aioresponses for clean HTTP mocking
"""
import pytest
import aiohttp
from unittest.mock import MagicMock, patch
from aioresponses import aioresponses

from api.client import APIClient, eq, get_global_client, cleanup_global_client
from exceptions import APIException, ConflictException

BASE_URL = "https://api.example.com/rest/v1"


def make_mock_config():
    """Mock configuration for testing."""
    config = MagicMock()
    config.rest_base_url = BASE_URL
    config.api_token = "test-token"
    config.default_timeout = 10
    config.connect_timeout = 5
    return config


class TestAPIClientWithAioresponses:
    """Test API client with aioresponses for HTTP mocking."""

    @pytest.fixture
    def mock_config(self):
        return make_mock_config()

    @pytest.fixture
    def api_client(self, mock_config):
        """Create API client with mocked config."""
        with patch('api.client.get_config', return_value=mock_config):
            return APIClient()

    def test_headers(self, api_client):
        """Supabase needs the key both as apikey and as a bearer token."""
        headers = api_client.headers
        assert headers['apikey'] == "test-token"
        assert headers['Authorization'] == "Bearer test-token"
        assert headers['Content-Type'] == "application/json"

    def test_build_url_and_params(self, api_client):
        url = api_client._add_params(
            api_client._build_url("picks"),
            [("game_id", eq("G1")), ("order", "created_at.asc")]
        )
        assert url == f"{BASE_URL}/picks?game_id=eq.G1&order=created_at.asc"

    def test_missing_configuration(self):
        config = make_mock_config()
        config.rest_base_url = ""
        with patch('api.client.get_config', return_value=config):
            with pytest.raises(ValueError, match="SUPABASE_URL"):
                APIClient()

        config = make_mock_config()
        config.api_token = ""
        with patch('api.client.get_config', return_value=config):
            with pytest.raises(ValueError, match="API_TOKEN"):
                APIClient()

    @pytest.mark.asyncio
    async def test_get_request_success(self, api_client):
        """Test successful GET request."""
        expected_data = [{"id": "1", "user_id": "A"}]

        with aioresponses() as m:
            m.get(f"{BASE_URL}/picks?game_id=eq.G1", payload=expected_data, status=200)

            result = await api_client.get("picks", params=[("game_id", eq("G1"))])

            assert result == expected_data

    @pytest.mark.asyncio
    async def test_get_request_404(self, api_client):
        """Test GET request returning 404."""
        with aioresponses() as m:
            m.get(f"{BASE_URL}/missing_table", status=404)

            result = await api_client.get("missing_table")

            assert result is None

    @pytest.mark.asyncio
    async def test_get_request_401_auth_error(self, api_client):
        """Test GET request with authentication error."""
        with aioresponses() as m:
            m.get(f"{BASE_URL}/picks", status=401)

            with pytest.raises(APIException, match="Authentication failed"):
                await api_client.get("picks")

    @pytest.mark.asyncio
    async def test_get_request_403_forbidden(self, api_client):
        """Test GET request with forbidden error."""
        with aioresponses() as m:
            m.get(f"{BASE_URL}/picks", status=403)

            with pytest.raises(APIException, match="Access forbidden"):
                await api_client.get("picks")

    @pytest.mark.asyncio
    async def test_get_request_500_server_error(self, api_client):
        """Test GET request with server error."""
        with aioresponses() as m:
            m.get(f"{BASE_URL}/picks", status=500, body="Internal Server Error")

            with pytest.raises(APIException, match="GET request failed with status 500"):
                await api_client.get("picks")

    @pytest.mark.asyncio
    async def test_get_request_network_error(self, api_client):
        """Network failures are wrapped as APIException."""
        with aioresponses() as m:
            m.get(f"{BASE_URL}/picks", exception=aiohttp.ClientConnectionError("refused"))

            with pytest.raises(APIException, match="Network error"):
                await api_client.get("picks")

    @pytest.mark.asyncio
    async def test_post_request_success(self, api_client):
        """Test successful POST request."""
        input_data = {"user_id": "A", "player_name": "Dylan Larkin", "game_id": "G1"}
        expected_response = [{"id": "1", **input_data}]

        with aioresponses() as m:
            m.post(f"{BASE_URL}/picks", payload=expected_response, status=201)

            result = await api_client.post("picks", input_data)

            assert result == expected_response

    @pytest.mark.asyncio
    async def test_post_request_409_conflict(self, api_client):
        """A unique constraint violation comes back as ConflictException."""
        with aioresponses() as m:
            m.post(f"{BASE_URL}/picks", status=409, body="duplicate key value violates unique constraint")

            with pytest.raises(ConflictException, match="uniqueness constraint"):
                await api_client.post("picks", {"user_id": "A"})

    @pytest.mark.asyncio
    async def test_conflict_is_api_exception(self, api_client):
        """Callers catching APIException still see conflicts."""
        with aioresponses() as m:
            m.post(f"{BASE_URL}/picks", status=409, body="duplicate")

            with pytest.raises(APIException):
                await api_client.post("picks", {"user_id": "A"})

    @pytest.mark.asyncio
    async def test_post_request_400_error(self, api_client):
        """Test POST request with validation error."""
        with aioresponses() as m:
            m.post(f"{BASE_URL}/picks", status=400, body="Invalid data")

            with pytest.raises(APIException, match="POST request failed with status 400"):
                await api_client.post("picks", {"invalid": "data"})

    @pytest.mark.asyncio
    async def test_delete_request_success(self, api_client):
        """Test successful DELETE request."""
        with aioresponses() as m:
            m.delete(f"{BASE_URL}/league_memberships?user_id=eq.A", status=204)

            result = await api_client.delete("league_memberships", params=[("user_id", eq("A"))])

            assert result is True

    @pytest.mark.asyncio
    async def test_delete_request_404(self, api_client):
        """Test DELETE request with 404."""
        with aioresponses() as m:
            m.delete(f"{BASE_URL}/league_memberships?user_id=eq.Z", status=404)

            result = await api_client.delete("league_memberships", params=[("user_id", eq("Z"))])

            assert result is False

    @pytest.mark.asyncio
    async def test_delete_requires_filter(self, api_client):
        """An unfiltered delete would wipe the table."""
        with pytest.raises(ValueError, match="at least one filter"):
            await api_client.delete("league_memberships", params=[])


class TestAPIClientHelpers:
    """Test API client helper functions."""

    @pytest.fixture
    def mock_config(self):
        return make_mock_config()

    @pytest.mark.asyncio
    async def test_global_client_management(self, mock_config):
        """Test global client getter and cleanup."""
        with patch('api.client.get_config', return_value=mock_config):
            client1 = await get_global_client()
            client2 = await get_global_client()

            # Should return same instance
            assert client1 is client2
            assert isinstance(client1, APIClient)

            await cleanup_global_client()

            # New client should be different instance
            client3 = await get_global_client()
            assert client3 is not client1

            # Clean up for other tests
            await cleanup_global_client()

    def test_eq_filter(self):
        assert eq("league-1") == "eq.league-1"
        assert eq(42) == "eq.42"
