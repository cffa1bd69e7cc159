"""
In-memory implementation of IEntityStore.

Holds items in a dict keyed by (PK, SK) and evaluates key-condition
queries against the same index definitions the DynamoDB table uses,
including sparse indexes (items without the index partition attribute
are not in the index). Used for tests and local experiments.
"""

import asyncio
import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from blogcontent.core.errors import ConflictError, NotFoundError, StoreUnavailable, ValidationError
from blogcontent.repositories.keys import PK, SK, Key, KeyCondition
from blogcontent.services.interfaces.entity_store import IEntityStore, Item, WriteCondition

logger = logging.getLogger(__name__)


class InMemoryEntityStore(IEntityStore):
    """
    Dict-backed entity store.

    Items are deep-copied on the way in and out so callers never share
    mutable state with the store.

    Attributes:
        calls: Log of (operation, detail) tuples, one per store call.
            Tests use it to count round trips.
    """

    def __init__(self, latency: float = 0.0, timeout_seconds: Optional[float] = None):
        """
        Initialize an empty store.

        Args:
            latency: Artificial delay per call in seconds (simulates I/O)
            timeout_seconds: Per-call timeout; expiry raises StoreUnavailable
        """
        self._items: Dict[Tuple[str, str], Item] = {}
        self.latency = latency
        self.timeout_seconds = timeout_seconds
        self.calls: List[Tuple[str, Any]] = []

    def __len__(self) -> int:
        return len(self._items)

    def count_calls(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def reset_calls(self) -> None:
        self.calls.clear()

    def items(self) -> List[Item]:
        """Snapshot of every stored item (test helper, not part of the contract)."""
        return [copy.deepcopy(item) for item in self._items.values()]

    async def _io(self, operation: str) -> None:
        # Single suspend point per call, bounded by the timeout
        try:
            async with asyncio.timeout(self.timeout_seconds):
                await asyncio.sleep(self.latency)
        except TimeoutError:
            raise StoreUnavailable(
                f"In-memory store {operation} timed out after {self.timeout_seconds}s",
                details={"operation": operation},
            ) from None

    async def get(self, key: Key) -> Optional[Item]:
        self.calls.append(("get", key))
        await self._io("get")
        item = self._items.get((key.pk, key.sk))
        return copy.deepcopy(item) if item is not None else None

    async def put(
        self,
        item: Mapping[str, Any],
        condition: Optional[WriteCondition] = None
    ) -> None:
        if PK not in item or SK not in item:
            raise ValidationError("Item must contain PK and SK attributes")
        storage_key = (item[PK], item[SK])
        self.calls.append(("put", Key(pk=item[PK], sk=item[SK])))
        await self._io("put")

        exists = storage_key in self._items
        if condition is WriteCondition.NOT_EXISTS and exists:
            raise ConflictError(
                f"Item {item[PK]}|{item[SK]} already exists",
                details={"pk": item[PK], "sk": item[SK]},
            )
        if condition is WriteCondition.EXISTS and not exists:
            raise NotFoundError(
                f"Item {item[PK]}|{item[SK]} does not exist",
                details={"pk": item[PK], "sk": item[SK]},
            )
        self._items[storage_key] = copy.deepcopy(dict(item))

    async def delete(self, key: Key) -> None:
        self.calls.append(("delete", key))
        await self._io("delete")
        try:
            del self._items[(key.pk, key.sk)]
        except KeyError:
            raise NotFoundError(
                f"Item {key} does not exist",
                details={"pk": key.pk, "sk": key.sk},
            ) from None

    async def query(
        self,
        condition: KeyCondition,
        filters: Optional[Mapping[str, Any]] = None
    ) -> List[Item]:
        self.calls.append(("query", condition))
        await self._io("query")

        pk_attr, sk_attr = condition.partition_attr, condition.sort_attr
        matches = []
        for item in self._items.values():
            if item.get(pk_attr) != condition.partition_value:
                continue
            sort_value = item.get(sk_attr)
            if sort_value is None:
                continue
            if condition.sort_prefix and not str(sort_value).startswith(condition.sort_prefix):
                continue
            if filters and any(item.get(name) != value for name, value in filters.items()):
                continue
            matches.append(item)

        matches.sort(key=lambda i: str(i[sk_attr]))
        logger.debug(
            "In-memory query matched %d items",
            len(matches),
            extra={"operation": "query", "index": condition.index_name or "table"},
        )
        return [copy.deepcopy(item) for item in matches]
