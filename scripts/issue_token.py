#!/usr/bin/env python3
"""Sign a development bearer token for calling the API locally."""
from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path
from uuid import UUID

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.security import AuthenticatedUser, get_security_provider  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("user_id", type=UUID, help="UUID placed in the 'sub' claim")
    parser.add_argument(
        "--role",
        dest="roles",
        action="append",
        choices=("admin", "hr", "eor"),
        default=None,
        help="Role to grant; repeat for several (default: admin)",
    )
    parser.add_argument("--email", default=None)
    parser.add_argument(
        "--minutes", type=int, default=None, help="Lifetime override in minutes"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    user = AuthenticatedUser(
        user_id=args.user_id,
        roles=tuple(args.roles or ("admin",)),
        email=args.email,
    )
    expires_in = timedelta(minutes=args.minutes) if args.minutes else None
    print(get_security_provider().create_access_token(user, expires_in=expires_in))


if __name__ == "__main__":
    main()
