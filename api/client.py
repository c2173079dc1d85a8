"""
API client for the Light The Lamp draft bot

aiohttp client for the Supabase (PostgREST) REST API that stores league
memberships and picks. One pooled session is shared by every service.
"""
import asyncio
import aiohttp
import logging
from typing import Optional, List, Dict, Any, Tuple, Union
from urllib.parse import urlencode

from config import get_config
from exceptions import APIException, ConflictException

logger = logging.getLogger(f'{__name__}.APIClient')

JSONResponse = Union[Dict[str, Any], List[Dict[str, Any]]]
QueryParams = List[Tuple[str, Any]]

# Longest response body echoed in debug logs
LOG_BODY_LIMIT = 1200

STATUS_MESSAGES = {
    401: "Authentication failed - check API token",
    403: "Access forbidden - insufficient permissions",
}


def eq(value: Any) -> str:
    """PostgREST equality filter, e.g. ('league_id', eq('abc'))."""
    return f"eq.{value}"


class APIClient:
    """
    Async HTTP client for the draft tables.

    Every request carries the Supabase key as both apikey and bearer token.
    Filters are passed as (column, 'op.value') pairs. A 409 from a unique
    constraint is raised as ConflictException so callers can tell a lost
    race apart from an outage.
    """

    def __init__(self, base_url: Optional[str] = None, api_token: Optional[str] = None,
                 timeout: Optional[int] = None):
        """
        Args:
            base_url: REST base URL, defaults to SUPABASE_URL + rest path
            api_token: Service key, defaults to API_TOKEN
            timeout: Total request timeout in seconds

        Raises:
            ValueError: If the URL or token is not configured
        """
        config = get_config()
        self.base_url = base_url or config.rest_base_url
        self.api_token = api_token or config.api_token
        self.timeout = timeout or config.default_timeout
        self.connect_timeout = min(config.connect_timeout, self.timeout)
        self._session: Optional[aiohttp.ClientSession] = None

        if not self.base_url:
            raise ValueError("SUPABASE_URL must be configured")
        if not self.api_token:
            raise ValueError("API_TOKEN must be configured")

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'apikey': self.api_token,
            'Authorization': f'Bearer {self.api_token}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'User-Agent': 'LightTheLamp-Draft/2.0'
        }

    def _build_url(self, table: str) -> str:
        if table.startswith(('http://', 'https://')):
            return table
        return f"{self.base_url.rstrip('/')}/{table.lstrip('/')}"

    def _add_params(self, url: str, params: Optional[QueryParams] = None) -> str:
        """Append params to url, leaving PostgREST operator punctuation unescaped."""
        if not params:
            return url
        query = urlencode([(key, str(value)) for key, value in params], safe='.,()')
        return f"{url}{'&' if '?' in url else '?'}{query}"

    async def _ensure_session(self) -> None:
        if self._session is not None and not self._session.closed:
            return

        self._session = aiohttp.ClientSession(
            headers=self.headers,
            connector=aiohttp.TCPConnector(limit=20, limit_per_host=10, ttl_dns_cache=300),
            timeout=aiohttp.ClientTimeout(total=self.timeout, connect=self.connect_timeout)
        )
        logger.debug(f"Opened session for {self.base_url}")

    async def _raise_for_status(self, method: str, url: str, response: aiohttp.ClientResponse) -> None:
        if response.status < 400:
            return

        if response.status in STATUS_MESSAGES:
            logger.error(f"{method} {url} returned {response.status}")
            raise APIException(STATUS_MESSAGES[response.status])

        error_text = await response.text()
        if response.status == 409:
            logger.warning(f"{method} conflict: {url} - {error_text}")
            raise ConflictException(f"{method} rejected by a uniqueness constraint: {error_text}")

        logger.error(f"{method} error {response.status}: {url} - {error_text}")
        raise APIException(f"{method} request failed with status {response.status}: {error_text}")

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[QueryParams] = None,
        payload: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
        read_body: bool = True
    ) -> Tuple[bool, Optional[JSONResponse]]:
        """
        Send one request.

        Returns:
            (found, body) where found is False on a 404 and body is the
            decoded JSON when read_body is set

        Raises:
            ConflictException: On 409
            APIException: On any other error status or a network failure
        """
        url = self._add_params(self._build_url(table), params)
        await self._ensure_session()
        logger.debug(f"{method}: {table} params={params} payload={payload}")

        try:
            async with self._session.request(method, url, json=payload, headers=extra_headers) as response:
                if response.status == 404:
                    logger.warning(f"{method} {url} not found")
                    return False, None
                await self._raise_for_status(method, url, response)

                body = await response.json() if read_body else None
                logger.debug(f"{method} response: {str(body)[:LOG_BODY_LIMIT]}")
                return True, body

        except APIException:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIException(f"Network error: {e}")
        except ValueError as e:
            logger.error(f"{method} {url} returned an unreadable body: {e}")
            raise APIException(f"{method} returned invalid JSON: {e}")

    async def get(self, table: str, params: Optional[QueryParams] = None) -> Optional[JSONResponse]:
        """
        Read rows from a table.

        Returns:
            JSON rows, or None when the endpoint answers 404
        """
        _, body = await self._request("GET", table, params=params)
        return body

    async def post(self, table: str, data: Dict[str, Any]) -> Optional[JSONResponse]:
        """
        Insert a row and return its stored representation.

        PostgREST answers with a one-element list.

        Raises:
            ConflictException: When a unique constraint rejects the row
        """
        _, body = await self._request(
            "POST", table,
            payload=data,
            extra_headers={'Prefer': 'return=representation'}
        )
        return body

    async def delete(self, table: str, params: QueryParams) -> bool:
        """
        Delete the rows matching params.

        Returns:
            False when the endpoint answers 404

        Raises:
            ValueError: If no filter is given, an unfiltered delete would empty the table
        """
        if not params:
            raise ValueError("DELETE requires at least one filter")

        found, _ = await self._request("DELETE", table, params=params, read_body=False)
        return found

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("Closed aiohttp session")


_global_client: Optional[APIClient] = None


async def get_global_client() -> APIClient:
    """Shared client used by the REST-backed services."""
    global _global_client
    if _global_client is None:
        _global_client = APIClient()

    await _global_client._ensure_session()
    return _global_client


async def cleanup_global_client() -> None:
    """Close the shared client. Called during bot shutdown."""
    global _global_client
    if _global_client:
        await _global_client.close()
        _global_client = None
