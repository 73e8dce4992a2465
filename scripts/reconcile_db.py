#!/usr/bin/env python3
"""Bring the database schema up to date outside the web process."""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from clinic_api.config import settings  # noqa: E402
from clinic_api.core.schema import (  # noqa: E402
    backfill_appointment_mirror,
    reconcile_schema,
)
from clinic_api.database import Database  # noqa: E402
from clinic_api.middleware.logging import configure_logging  # noqa: E402


async def run(backfill: bool) -> int:
    """Reconcile the schema and optionally backfill appointment mirrors."""
    database = Database.from_settings(settings)
    try:
        report = await reconcile_schema(database.engine)

        print(f"✓ Applied {len(report.applied)} statement(s)")
        for column in report.added_columns:
            print(f"  + {column}")
        for step in report.skipped:
            print(f"  ~ skipped {step}")
        for step, error in report.failed:
            print(f"✗ {step}: {error}", file=sys.stderr)

        if backfill:
            inserted = await backfill_appointment_mirror(database.engine)
            print(f"✓ Backfilled {inserted} appointment mirror row(s)")
    finally:
        await database.dispose()

    return 0 if report.ok else 1


def main() -> int:
    """Parse arguments and run the reconciler."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--backfill",
        action="store_true",
        help="create mirror rows for appointments that have none",
    )
    args = parser.parse_args()

    configure_logging()
    return asyncio.run(run(args.backfill))


if __name__ == "__main__":
    sys.exit(main())
