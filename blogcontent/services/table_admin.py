"""
Table administration for the BlogContent table.

Create, seed, export and delete the table with the low-level boto3
DynamoDB client. The seed/export format is one JSON object per line,
each a complete ``batch_write_item`` request::

    {"BlogContent": [{"PutRequest": {"Item": {"PK": {"S": "USER#..."}, ...}}}]}

Items are in DynamoDB's typed wire format, exactly as ``scan`` returns
them, so an export can be replayed into an empty table unchanged.

These helpers are synchronous; they back the command line scripts.
"""

import json
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import boto3
from botocore.exceptions import ClientError

from blogcontent.core.config import Settings
from blogcontent.core.errors import StoreUnavailable
from blogcontent.core.retry import compute_delay
from blogcontent.repositories.keys import (
    GSI1_PK,
    GSI1_SK,
    GSI2_PK,
    GSI2_SK,
    OWNER_INDEX,
    PK,
    SK,
    TYPE_INDEX,
)

logger = logging.getLogger(__name__)

# Schema keys kept when exporting (mirrors what create_table accepts)
SCHEMA_KEYS = ("TableName", "KeySchema", "AttributeDefinitions")
INDEX_KEYS = ("IndexName", "KeySchema", "Projection")

MAX_UNPROCESSED_RETRIES = 5
UNPROCESSED_BASE_DELAY = 0.1
UNPROCESSED_MAX_DELAY = 5.0


def make_client(settings: Settings):
    """Build a low-level DynamoDB client from settings."""
    return boto3.client(
        "dynamodb",
        endpoint_url=settings.dynamodb_endpoint_url,
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )


def table_definition(table_name: str) -> Dict[str, Any]:
    """
    create_table arguments for the single-table layout.

    Base table PK/SK, GSI1 (type index) and GSI2 (owner index), all
    string keys, on-demand billing.
    """
    def key_schema(hash_attr: str, range_attr: str) -> List[Dict[str, str]]:
        return [
            {"AttributeName": hash_attr, "KeyType": "HASH"},
            {"AttributeName": range_attr, "KeyType": "RANGE"},
        ]

    return {
        "TableName": table_name,
        "KeySchema": key_schema(PK, SK),
        "AttributeDefinitions": [
            {"AttributeName": name, "AttributeType": "S"}
            for name in (PK, SK, GSI1_PK, GSI1_SK, GSI2_PK, GSI2_SK)
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": TYPE_INDEX,
                "KeySchema": key_schema(GSI1_PK, GSI1_SK),
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": OWNER_INDEX,
                "KeySchema": key_schema(GSI2_PK, GSI2_SK),
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def importable_schema(description: Dict[str, Any]) -> Dict[str, Any]:
    """
    Reduce a describe_table response to create_table arguments.

    Keeps TableName, KeySchema, AttributeDefinitions, and for local and
    global secondary indexes only IndexName, KeySchema and Projection.
    Billing is forced to on-demand (provisioned throughput settings are
    dropped).

    Args:
        description: describe_table response (with or without the
            top-level "Table" wrapper)
    """
    table = description.get("Table", description)
    schema = {key: table[key] for key in SCHEMA_KEYS if key in table}

    for index_type in ("LocalSecondaryIndexes", "GlobalSecondaryIndexes"):
        indexes = table.get(index_type)
        if indexes:
            schema[index_type] = [
                {key: index[key] for key in INDEX_KEYS if key in index}
                for index in indexes
            ]

    schema["BillingMode"] = "PAY_PER_REQUEST"
    return schema


def batch_lines(items: Iterable[Dict[str, Any]], table_name: str) -> List[str]:
    """
    Convert typed items into seed-file lines, one PutRequest per line.
    """
    return [
        json.dumps({table_name: [{"PutRequest": {"Item": item}}]}, separators=(",", ":"))
        for item in items
    ]


def create_table(client, schema: Dict[str, Any], wait: bool = True) -> None:
    """
    Create a table and optionally wait until it is ACTIVE.

    Raises:
        botocore.exceptions.ClientError: e.g. ResourceInUseException if
            the table already exists
    """
    table_name = schema["TableName"]
    logger.info(f"Creating table: {table_name}", extra={"table": table_name})
    client.create_table(**schema)
    if wait:
        client.get_waiter("table_exists").wait(TableName=table_name)


def seed_table(client, lines: List[str]) -> int:
    """
    Replay seed-file lines with batch_write_item.

    Unprocessed items returned by DynamoDB are resent with backoff.

    Returns:
        Number of lines processed

    Raises:
        StoreUnavailable: If a line still has unprocessed items after
            MAX_UNPROCESSED_RETRIES resends
    """
    lines = [line for line in lines if line.strip()]
    total = len(lines)
    for current, line in enumerate(lines, start=1):
        logger.info(f"Processing line {current} of {total}")
        request_items = json.loads(line)
        for attempt in range(MAX_UNPROCESSED_RETRIES + 1):
            response = client.batch_write_item(RequestItems=request_items)
            request_items = response.get("UnprocessedItems") or {}
            if not request_items:
                break
            if attempt == MAX_UNPROCESSED_RETRIES:
                raise StoreUnavailable(
                    f"Line {current}: items still unprocessed after "
                    f"{MAX_UNPROCESSED_RETRIES + 1} attempts",
                    details={"operation": "batch_write_item", "line": current},
                )
            time.sleep(compute_delay(
                attempt, UNPROCESSED_BASE_DELAY, UNPROCESSED_MAX_DELAY,
                exponential_base=2.0, jitter=True,
            ))
    return total


def scan_items(client, table_name: str) -> List[Dict[str, Any]]:
    """Read every item of a table in typed format (paginated scan)."""
    items: List[Dict[str, Any]] = []
    for page in client.get_paginator("scan").paginate(TableName=table_name):
        items.extend(page.get("Items", []))
    return items


def export_table(client, table_name: str) -> Tuple[Dict[str, Any], List[str]]:
    """
    Export a table's schema and data.

    Returns:
        (importable schema, seed-file lines)
    """
    logger.info(f"Exporting schema for table: {table_name}", extra={"table": table_name})
    schema = importable_schema(client.describe_table(TableName=table_name))

    logger.info(f"Exporting data for table: {table_name}", extra={"table": table_name})
    items = scan_items(client, table_name)
    logger.info(f"Converting {len(items)} items to importable format")
    return schema, batch_lines(items, table_name)


def delete_table(client, table_name: str, wait: bool = True) -> bool:
    """
    Delete a table.

    Returns:
        True if the table was deleted, False if it did not exist
    """
    logger.info(f"Deleting table: {table_name}", extra={"table": table_name})
    try:
        client.delete_table(TableName=table_name)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ResourceNotFoundException":
            logger.warning(f"Table {table_name} does not exist", extra={"table": table_name})
            return False
        raise
    if wait:
        client.get_waiter("table_not_exists").wait(TableName=table_name)
    return True


def read_lines(path: Optional[str]) -> List[str]:
    if not path:
        return []
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()
