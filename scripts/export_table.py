"""
Export the BlogContent table's schema and data.

Writes an importable schema (for create_table.py --schema) and a seed
file with one batch_write_item request per line.

Usage:
    python scripts/export_table.py
    python scripts/export_table.py --schema-out table_schema.json --data-out batch_items.json
"""

import argparse
import json
import sys

from blogcontent.core.config import settings
from blogcontent.core.logging_config import setup_logging
from blogcontent.services import table_admin


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export the BlogContent table")
    parser.add_argument("--table-name", default=settings.table_name)
    parser.add_argument("--schema-out", default="table_schema.json")
    parser.add_argument("--data-out", default="batch_items.json")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(level=settings.log_level, json_format=settings.log_json)
    client = table_admin.make_client(settings)

    schema, lines = table_admin.export_table(client, args.table_name)

    with open(args.schema_out, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2)
    with open(args.data_out, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
        if lines:
            f.write("\n")

    print(f"Wrote {args.schema_out} and {args.data_out} ({len(lines)} items)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
