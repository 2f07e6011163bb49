#!/usr/bin/env python3
"""Issue or revoke API tokens for the file analysis backend.

The plain token is printed once; only its hash is stored.

Usage:
    # Issue a token for a user
    python scripts/issue_token.py --user-id 3f2a9c --email grower@example.com

    # Revoke a token
    python scripts/issue_token.py --revoke <token>
"""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

# Load environment variables before settings are read at import time
load_dotenv()

from fileanalyst.db.mongo import close_database
from fileanalyst.services import auth_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _run(args: argparse.Namespace) -> int:
    try:
        if args.revoke:
            revoked = await auth_service.revoke_token(args.revoke)
            if not revoked:
                logger.error("Token not found")
                return 1
            print("Token revoked")
            return 0

        token = await auth_service.issue_token(args.user_id, args.email)
        print(token)
        return 0
    finally:
        await close_database()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Issue or revoke API tokens",
    )
    parser.add_argument(
        "--user-id",
        help="User ID the token authenticates as (also the storage folder name)",
    )
    parser.add_argument(
        "--email",
        default=None,
        help="Optional email recorded with the token",
    )
    parser.add_argument(
        "--revoke",
        metavar="TOKEN",
        help="Revoke the given token instead of issuing one",
    )
    args = parser.parse_args()

    if not args.revoke and not args.user_id:
        parser.error("--user-id is required unless --revoke is given")

    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
