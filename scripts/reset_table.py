"""
Delete the BlogContent table.

Usage:
    python scripts/reset_table.py
"""

import argparse
import sys

from blogcontent.core.config import settings
from blogcontent.core.logging_config import setup_logging
from blogcontent.services import table_admin


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Delete the BlogContent table")
    parser.add_argument("--table-name", default=settings.table_name)
    args = parser.parse_args(argv)

    setup_logging(level=settings.log_level, json_format=settings.log_json)
    client = table_admin.make_client(settings)
    table_admin.delete_table(client, args.table_name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
