"""
DynamoDB implementation of IEntityStore.

Wraps a boto3 ``Table`` resource for the single BlogContent table.
boto3 is synchronous, so every request runs in the default executor and
is awaited under ``asyncio.timeout``; the await is the only suspend point,
so a cancelled or timed-out call leaves no partial in-process state.

Error mapping (botocore -> blogcontent.core.errors):
- ConditionalCheckFailedException -> ConflictError / NotFoundError
- throttling and 5xx codes, connection errors, timeouts -> StoreUnavailable
  (retried with exponential backoff)
- ResourceNotFoundException (missing table) -> StoreUnavailable, not retried
- ValidationException -> ValidationError
"""

import asyncio
import functools
import logging
import operator
import time
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key as KeyExpr
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from blogcontent.core.config import Settings
from blogcontent.core.errors import (
    BlogContentError,
    ConflictError,
    NotFoundError,
    StoreUnavailable,
    ValidationError,
)
from blogcontent.core.retry import retry_with_backoff
from blogcontent.repositories.keys import PK, SK, Key, KeyCondition
from blogcontent.services.interfaces.entity_store import IEntityStore, Item, WriteCondition

logger = logging.getLogger(__name__)

RETRYABLE_ERROR_CODES = frozenset({
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
    "LimitExceededException",
})

CONDITION_FAILED = "ConditionalCheckFailedException"


def to_dynamo(value: Any) -> Any:
    """
    Convert a JSON-compatible value to what the boto3 resource accepts.

    boto3 rejects Python floats; they are sent as Decimal. Nested maps
    and lists are converted recursively.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """
    Convert a value returned by the boto3 resource back to plain Python.

    Decimals become int when integral, float otherwise.
    """
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, Mapping):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    if isinstance(value, set):
        return {from_dynamo(v) for v in value}
    return value


def map_client_error(
    error: ClientError,
    operation: str,
    on_condition_failed: Optional[Callable[[], BlogContentError]] = None,
) -> BlogContentError:
    """
    Translate a botocore ClientError into the error taxonomy.

    Args:
        error: The ClientError raised by boto3
        operation: Store operation name, for the message
        on_condition_failed: Factory for the error a failed condition means
            for this operation (ConflictError for creates, NotFoundError
            for updates and deletes)

    Returns:
        Error to raise
    """
    code = error.response.get("Error", {}).get("Code", "")
    message = error.response.get("Error", {}).get("Message", str(error))
    details = {"operation": operation, "code": code}

    if code == CONDITION_FAILED and on_condition_failed is not None:
        return on_condition_failed()
    if code in RETRYABLE_ERROR_CODES:
        return StoreUnavailable(f"DynamoDB {operation} failed ({code}): {message}", details=details)
    if code == "ResourceNotFoundException":
        return StoreUnavailable(
            f"DynamoDB {operation} failed: table not found ({message}). "
            f"Create it with scripts/create_table.py",
            details=details,
            retryable=False,
        )
    if code == "ValidationException":
        return ValidationError(f"DynamoDB rejected {operation}: {message}", details=details)
    return StoreUnavailable(
        f"DynamoDB {operation} failed ({code or 'unknown'}): {message}",
        details=details,
        retryable=False,
    )


class DynamoDBEntityStore(IEntityStore):
    """
    DynamoDB-backed entity store.

    Construct once per process and pass to every repository.

    Args:
        table_name: Table name (``BlogContent`` by default)
        endpoint_url: Endpoint override (DynamoDB Local), None for AWS
        region_name: AWS region
        aws_access_key_id: Optional explicit credentials
        aws_secret_access_key: Optional explicit credentials
        timeout_seconds: Timeout applied to every store call
        max_retries: Retries for transient failures
        retry_base_delay: First backoff delay in seconds
        table: Pre-built Table resource (tests inject a fake here)
    """

    def __init__(
        self,
        table_name: str = "BlogContent",
        endpoint_url: Optional[str] = None,
        region_name: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        timeout_seconds: float = 5.0,
        max_retries: int = 3,
        retry_base_delay: float = 0.2,
        table: Any = None,
    ):
        """Initialize a DynamoDBEntityStore."""
        self.table_name = table_name
        self.timeout_seconds = timeout_seconds

        if table is None:
            resource = boto3.resource(
                "dynamodb",
                endpoint_url=endpoint_url,
                region_name=region_name,
                aws_access_key_id=aws_access_key_id,
                aws_secret_access_key=aws_secret_access_key,
                # Retries are handled here, with our own error mapping
                config=BotoConfig(retries={"max_attempts": 1, "mode": "standard"}),
            )
            table = resource.Table(table_name)
        self.table = table

        self._call = retry_with_backoff(
            max_retries=max_retries,
            base_delay=retry_base_delay,
            max_delay=5.0,
            exceptions=(StoreUnavailable,),
            retry_if=lambda e: getattr(e, "retryable", False),
        )(self._execute)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DynamoDBEntityStore":
        """Build a store from application settings."""
        return cls(
            table_name=settings.table_name,
            endpoint_url=settings.dynamodb_endpoint_url,
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            timeout_seconds=settings.store_timeout_seconds,
            max_retries=settings.store_max_retries,
            retry_base_delay=settings.store_retry_base_delay,
        )

    async def _execute(
        self,
        operation: str,
        fn: Callable[..., Any],
        on_condition_failed: Optional[Callable[[], BlogContentError]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Run one blocking boto3 call in the executor, with timeout and
        error mapping.
        """
        loop = asyncio.get_running_loop()
        start = time.perf_counter()
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await loop.run_in_executor(None, functools.partial(fn, **kwargs))
        except TimeoutError:
            raise StoreUnavailable(
                f"DynamoDB {operation} timed out after {self.timeout_seconds}s",
                details={"operation": operation},
            ) from None
        except ClientError as e:
            raise map_client_error(e, operation, on_condition_failed) from e
        except BotoCoreError as e:
            raise StoreUnavailable(
                f"DynamoDB {operation} failed: {e}",
                details={"operation": operation},
            ) from e
        finally:
            logger.debug(
                f"DynamoDB {operation} finished",
                extra={
                    "operation": operation,
                    "table": self.table_name,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )

    async def get(self, key: Key) -> Optional[Item]:
        response = await self._call(
            "get_item",
            self.table.get_item,
            Key=key.as_dict(),
            ConsistentRead=True,
        )
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    async def put(
        self,
        item: Mapping[str, Any],
        condition: Optional[WriteCondition] = None
    ) -> None:
        if PK not in item or SK not in item:
            raise ValidationError("Item must contain PK and SK attributes")

        kwargs: Dict[str, Any] = {"Item": to_dynamo(item)}
        on_condition_failed = None
        label = f"{item[PK]}|{item[SK]}"
        if condition is WriteCondition.NOT_EXISTS:
            kwargs["ConditionExpression"] = Attr(PK).not_exists()
            on_condition_failed = lambda: ConflictError(  # noqa: E731
                f"Item {label} already exists",
                details={"pk": item[PK], "sk": item[SK]},
            )
        elif condition is WriteCondition.EXISTS:
            kwargs["ConditionExpression"] = Attr(PK).exists()
            on_condition_failed = lambda: NotFoundError(  # noqa: E731
                f"Item {label} does not exist",
                details={"pk": item[PK], "sk": item[SK]},
            )

        await self._call("put_item", self.table.put_item, on_condition_failed, **kwargs)

    async def delete(self, key: Key) -> None:
        await self._call(
            "delete_item",
            self.table.delete_item,
            lambda: NotFoundError(
                f"Item {key} does not exist",
                details={"pk": key.pk, "sk": key.sk},
            ),
            Key=key.as_dict(),
            ConditionExpression=Attr(PK).exists(),
        )

    async def query(
        self,
        condition: KeyCondition,
        filters: Optional[Mapping[str, Any]] = None
    ) -> List[Item]:
        kwargs = self._query_kwargs(condition, filters)
        items = await self._call("query", self._query_all_pages, **kwargs)
        return [from_dynamo(item) for item in items]

    @staticmethod
    def _query_kwargs(
        condition: KeyCondition,
        filters: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Build boto3 query arguments for a key condition and filters."""
        key_expr = KeyExpr(condition.partition_attr).eq(condition.partition_value)
        if condition.sort_prefix:
            key_expr = key_expr & KeyExpr(condition.sort_attr).begins_with(condition.sort_prefix)

        kwargs: Dict[str, Any] = {"KeyConditionExpression": key_expr}
        if condition.index_name:
            kwargs["IndexName"] = condition.index_name
        else:
            # GSIs only support eventually consistent reads
            kwargs["ConsistentRead"] = True
        if filters:
            kwargs["FilterExpression"] = functools.reduce(
                operator.and_,
                (Attr(name).eq(to_dynamo(value)) for name, value in filters.items()),
            )
        return kwargs

    def _query_all_pages(self, **kwargs: Any) -> List[Dict[str, Any]]:
        # Runs in the executor; follows LastEvaluatedKey until exhausted
        items: List[Dict[str, Any]] = []
        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    async def close(self) -> None:
        client = getattr(getattr(self.table, "meta", None), "client", None)
        if client is not None and hasattr(client, "close"):
            client.close()
