"""Check that the configured database answers and optionally create tables."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.db import create_sync_engine, create_tables, get_sessionmaker, session_scope  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create any missing tables after connecting",
    )
    args = parser.parse_args(argv)

    engine = create_sync_engine()
    with session_scope(get_sessionmaker(engine)) as session:
        session.execute(text("SELECT 1"))
    print(f"Connected to {engine.url.render_as_string(hide_password=True)}")

    if args.create_tables:
        create_tables(engine)
        print("Missing tables created")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
