"""User store with in-memory and Cosmos DB implementations."""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, ClassVar

from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError
from azure.identity import DefaultAzureCredential

from usersync.models.user import User

logger = logging.getLogger(__name__)


class UserStoreError(Exception):
    """Raised when the backing store cannot complete a read or write."""


class UserStore(ABC):
    """Abstract interface for the user record store."""

    backend: ClassVar[str]

    @abstractmethod
    def upsert_user(self, clerk_user_id: str, create: dict[str, Any], update: dict[str, Any]) -> User:
        """Create the record if absent, otherwise update it.

        Args:
            clerk_user_id: Key of the record
            create: Fields to set when the record does not exist yet
            update: Fields to set when the record already exists

        Returns:
            The stored User after the write
        """
        pass

    @abstractmethod
    def get_user(self, clerk_user_id: str) -> User | None:
        """Get a user by Clerk user id, or None if there is no such record."""
        pass


class InMemoryUserStore(UserStore):
    """Process-local user store for tests and local development."""

    backend = "memory"

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._users)

    def upsert_user(self, clerk_user_id: str, create: dict[str, Any], update: dict[str, Any]) -> User:
        with self._lock:
            existing = self._users.get(clerk_user_id)
            if existing is None:
                user = User(clerk_user_id=clerk_user_id, **create)
            else:
                user = existing.model_copy(update=update)
            self._users[clerk_user_id] = user
            return user

    def get_user(self, clerk_user_id: str) -> User | None:
        return self._users.get(clerk_user_id)


class CosmosUserStore(UserStore):
    """Cosmos DB implementation of UserStore.

    Each user is one document whose ``id`` and partition key are the Clerk user id.
    """

    backend = "cosmos"

    # Cosmos system properties that are not part of the record
    _SYSTEM_FIELDS = frozenset({"_rid", "_self", "_etag", "_attachments", "_ts"})

    def __init__(
        self,
        cosmos_endpoint: str,
        cosmos_key: str | None = None,
        database_name: str = "usersync",
        container_name: str = "users",
        use_managed_identity: bool = False,
    ) -> None:
        """Initialize Cosmos DB user store.

        Args:
            cosmos_endpoint: Cosmos DB endpoint URL
            cosmos_key: Cosmos DB key (if not using managed identity)
            database_name: Database name
            container_name: Container name for users
            use_managed_identity: Use managed identity for authentication
        """
        if use_managed_identity:
            credential = DefaultAzureCredential()
            self.client = CosmosClient(cosmos_endpoint, credential)
        else:
            if not cosmos_key:
                raise ValueError("cosmos_key is required when not using managed identity")
            self.client = CosmosClient(cosmos_endpoint, cosmos_key)

        self.database = self.client.get_database_client(database_name)
        self.container = self.database.get_container_client(container_name)

    def _to_user(self, doc: dict[str, Any]) -> User:
        fields = {k: v for k, v in doc.items() if k not in self._SYSTEM_FIELDS and k != "id"}
        return User.model_validate(fields)

    def upsert_user(self, clerk_user_id: str, create: dict[str, Any], update: dict[str, Any]) -> User:
        """Create the document, or patch it when it already exists.

        Both the create and the patch are single atomic operations on the
        document, so concurrent deliveries for one user resolve to last writer wins.
        """
        doc = {
            "id": clerk_user_id,
            "clerk_user_id": clerk_user_id,
            "created_at": datetime.now(UTC).isoformat(),
            **create,
        }
        try:
            created = self.container.create_item(body=doc)
            logger.info("Created user %s", clerk_user_id)
            return self._to_user(created)
        except CosmosResourceExistsError:
            logger.debug("User %s exists, applying update", clerk_user_id)
        except AzureError as e:
            raise UserStoreError(f"Failed to create user {clerk_user_id}") from e

        operations = [{"op": "set", "path": f"/{field}", "value": value} for field, value in update.items()]
        try:
            if not operations:
                return self._to_user(self.container.read_item(item=clerk_user_id, partition_key=clerk_user_id))
            patched = self.container.patch_item(
                item=clerk_user_id,
                partition_key=clerk_user_id,
                patch_operations=operations,
            )
            logger.info("Updated user %s (%s)", clerk_user_id, ", ".join(update))
            return self._to_user(patched)
        except AzureError as e:
            raise UserStoreError(f"Failed to update user {clerk_user_id}") from e

    def get_user(self, clerk_user_id: str) -> User | None:
        """Get a user by Clerk user id."""
        try:
            doc = self.container.read_item(item=clerk_user_id, partition_key=clerk_user_id)
        except CosmosResourceNotFoundError:
            return None
        except AzureError as e:
            raise UserStoreError(f"Failed to read user {clerk_user_id}") from e
        return self._to_user(doc)
