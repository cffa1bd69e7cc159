"""
Create and seed the BlogContent table.

Creates the table from an exported schema file (or the built-in
single-table definition) and replays a seed file line by line.

Usage:
    python scripts/create_table.py
    python scripts/create_table.py --schema table_schema.json --data batch_items.json
"""

import argparse
import json
import sys

from blogcontent.core.config import settings
from blogcontent.core.logging_config import setup_logging
from blogcontent.services import table_admin


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create the BlogContent table and seed it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
    TABLE_NAME             - Table name (default: BlogContent)
    DYNAMODB_ENDPOINT_URL  - Endpoint (default: http://localhost:8000)
    AWS_REGION             - Region (default: us-east-1)
        """
    )
    parser.add_argument(
        "--schema",
        help="create_table JSON (from export_table.py); built-in definition if omitted",
    )
    parser.add_argument(
        "--data",
        help="Seed file: one batch_write_item request per line",
    )
    parser.add_argument(
        "--table-name",
        default=settings.table_name,
        help="Table name when using the built-in definition",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    client = table_admin.make_client(settings)

    if args.schema:
        with open(args.schema, encoding="utf-8") as f:
            schema = json.load(f)
    else:
        schema = table_admin.table_definition(args.table_name)

    table_admin.create_table(client, schema)

    lines = table_admin.read_lines(args.data)
    if lines:
        print(f"Seeding table: {schema['TableName']}")
        table_admin.seed_table(client, lines)
    return 0


if __name__ == "__main__":
    sys.exit(main())
