"""Admin credential stores."""

import asyncio
import logging
from abc import ABC, abstractmethod

from azure.core.exceptions import AzureError
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from laptop_catalog.clients import CosmosDBClient, JsonFileClient
from laptop_catalog.models import Credentials

logger = logging.getLogger(__name__)

CREDENTIALS_ITEM_ID = "admin-credentials"


class CredentialStoreError(Exception):
    """Raised when credentials cannot be saved."""

    pass


def _credentials_from_dict(data: dict) -> Credentials:
    return Credentials(username=data["username"], password=data["password"])


class CredentialStore(ABC):
    """Single-record get/set of the admin credentials."""

    @abstractmethod
    async def get(self) -> Credentials:
        """Current credentials, the default pair when none are stored."""

    @abstractmethod
    async def save(self, credentials: Credentials) -> None:
        """Replace the stored credentials in a single write.

        Raises:
            CredentialStoreError: If the write fails.
        """

    async def close(self) -> None:
        pass


class JsonCredentialStore(CredentialStore):
    """Credentials kept in ``auth.json``, created with the defaults."""

    def __init__(self, path: str):
        self._file = JsonFileClient(path, default_factory=lambda: Credentials.default().to_dict())
        self._write_lock = asyncio.Lock()

    async def get(self) -> Credentials:
        try:
            return _credentials_from_dict(await self._file.read())
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error reading {self._file.path}, using default credentials: {e}")
            return Credentials.default()

    async def save(self, credentials: Credentials) -> None:
        try:
            async with self._write_lock:
                await self._file.write(credentials.to_dict())
        except OSError as e:
            raise CredentialStoreError(f"Failed to write {self._file.path}: {e}") from e
        logger.info(f"Saved admin credentials to {self._file.path}")


class CosmosCredentialStore(CredentialStore):
    """Credentials kept as a single item in the Cosmos DB settings container."""

    def __init__(self, client: CosmosDBClient):
        self._client = client

    async def get(self) -> Credentials:
        try:
            item = await self._client.read_item(CREDENTIALS_ITEM_ID, partition_key=CREDENTIALS_ITEM_ID)
        except CosmosResourceNotFoundError:
            return Credentials.default()
        try:
            return _credentials_from_dict(item)
        except KeyError as e:
            logger.error(f"Malformed credentials item, using default credentials: {e}")
            return Credentials.default()

    async def save(self, credentials: Credentials) -> None:
        try:
            await self._client.upsert_item({"id": CREDENTIALS_ITEM_ID, **credentials.to_dict()})
        except AzureError as e:
            raise CredentialStoreError(f"Failed to save credentials: {e}") from e
        logger.info("Saved admin credentials to Cosmos DB")

    async def close(self) -> None:
        await self._client.close()
