"""
Entity Store Interface (IEntityStore)

Abstract base class defining the contract repositories depend on.
Implementations wrap a key-value/document store holding the single
BlogContent table.

Implementation guide:
- All methods must be async
- Items are plain dicts of attribute name -> JSON-compatible value
- Errors are reported with the blogcontent.core.errors taxonomy only;
  driver exceptions (botocore, ...) must not leak
- Each call is one logical request: query() follows pagination itself
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from blogcontent.repositories.keys import Key, KeyCondition

Item = Dict[str, Any]


class WriteCondition(str, Enum):
    """Precondition for a put."""

    NOT_EXISTS = "not_exists"  # create: fail with ConflictError if present
    EXISTS = "exists"  # update: fail with NotFoundError if absent


class IEntityStore(ABC):
    """
    Abstract interface for the single-table item store.

    The store knows nothing about users, blogs or comments; it stores
    attribute maps under (PK, SK) and answers key-condition queries
    against the base table and its secondary indexes.
    """

    @abstractmethod
    async def get(self, key: Key) -> Optional[Item]:
        """
        Fetch one item by primary key.

        Args:
            key: Primary key

        Returns:
            The item, or None if no item has this key

        Raises:
            StoreUnavailable: On transport failure or timeout
        """
        pass

    @abstractmethod
    async def put(
        self,
        item: Mapping[str, Any],
        condition: Optional[WriteCondition] = None
    ) -> None:
        """
        Write (insert or replace) one item.

        Args:
            item: Attribute map; must contain PK and SK
            condition: Optional precondition on the existing item

        Raises:
            ConflictError: condition is NOT_EXISTS and the key is taken
            NotFoundError: condition is EXISTS and the key is absent
            StoreUnavailable: On transport failure or timeout
        """
        pass

    @abstractmethod
    async def delete(self, key: Key) -> None:
        """
        Delete one item.

        Args:
            key: Primary key

        Raises:
            NotFoundError: If no item has this key
            StoreUnavailable: On transport failure or timeout
        """
        pass

    @abstractmethod
    async def query(
        self,
        condition: KeyCondition,
        filters: Optional[Mapping[str, Any]] = None
    ) -> List[Item]:
        """
        Query the base table or a secondary index.

        Args:
            condition: Partition value and optional sort-key prefix
            filters: Optional attribute equality filters applied to
                matching items

        Returns:
            Matching items ordered by the index sort key

        Raises:
            StoreUnavailable: On transport failure or timeout

        Note:
            Never implemented as a table scan.
        """
        pass

    async def close(self) -> None:
        """Release client resources. Default: nothing to release."""
        return None
