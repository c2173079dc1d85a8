"""
Base service class for the Light The Lamp draft bot

Table reads and writes shared by the REST-backed membership and pick services.
"""
import logging
from typing import Optional, Type, TypeVar, Generic, Dict, Any, List

from api.client import get_global_client, APIClient, QueryParams
from models.base import TrackerBaseModel
from exceptions import APIException

logger = logging.getLogger(f'{__name__}.BaseService')

T = TypeVar('T', bound=TrackerBaseModel)


class BaseService(Generic[T]):
    """
    Typed access to one PostgREST table.

    Rows come back as model_class instances. API errors (including
    ConflictException) propagate unchanged; anything else raised while
    talking to the table or parsing its rows is wrapped in APIException so
    callers only ever handle one failure type.
    """

    def __init__(self,
                 model_class: Type[T],
                 table: str,
                 client: Optional[APIClient] = None):
        """
        Args:
            model_class: Model each row is parsed into
            table: Table endpoint, e.g. 'picks'
            client: Client override, the shared global client otherwise
        """
        self.model_class = model_class
        self.table = table
        self._client = client

    @property
    def model_name(self) -> str:
        return self.model_class.__name__

    async def get_client(self) -> APIClient:
        if self._client is None:
            self._client = await get_global_client()
        return self._client

    def _wrap_failure(self, action: str, error: Exception) -> APIException:
        logger.error(f"Error trying to {action} {self.model_name}: {error}")
        return APIException(f"Failed to {action} {self.model_name}: {error}")

    async def get_all_items(self, params: Optional[QueryParams] = None) -> List[T]:
        """
        Rows matching params, in the order the API returns them.

        Raises:
            APIException: For API errors or rows that fail validation
        """
        try:
            client = await self.get_client()
            data = await client.get(self.table, params=params)
            rows = [self.model_class.from_api_data(item) for item in self._rows(data)]
        except APIException:
            raise
        except Exception as e:
            raise self._wrap_failure("retrieve", e) from e

        logger.debug(f"Retrieved {len(rows)} {self.model_name} rows from '{self.table}'")
        return rows

    async def create(self, model_data: Dict[str, Any]) -> Optional[T]:
        """
        Insert a row and parse the stored representation.

        Returns:
            The stored row, or None when the API echoed nothing back

        Raises:
            ConflictException: When a unique constraint rejects the row
            APIException: For other API errors
        """
        try:
            client = await self.get_client()
            rows = self._rows(await client.post(self.table, model_data))
            created = self.model_class.from_api_data(rows[0]) if rows else None
        except APIException:
            raise
        except Exception as e:
            raise self._wrap_failure("create", e) from e

        if created is None:
            logger.warning(f"No row returned creating {self.model_name}")
        return created

    async def delete_where(self, params: QueryParams) -> bool:
        """
        Delete rows matching params.

        Returns:
            False when nothing matched
        """
        try:
            client = await self.get_client()
            deleted = await client.delete(self.table, params=params)
        except APIException:
            raise
        except Exception as e:
            raise self._wrap_failure("delete", e) from e

        logger.debug(f"Delete {self.model_name} rows matching {params}: {'done' if deleted else 'none found'}")
        return deleted

    def _rows(self, data: Any) -> List[Dict[str, Any]]:
        """PostgREST answers with a JSON array; a lone object counts as one row."""
        if not data:
            return []
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]

        logger.warning(f"Unexpected response format for {self.model_name}: {type(data)}")
        return []
