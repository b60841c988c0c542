"""Pre-register a parent so they can sign in with a verification code."""

import argparse
import asyncio
from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from app.core.config import settings  # noqa: E402
from app.core.database import Database  # noqa: E402
from app.domain.parents.services import ParentDirectory  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register a parent")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--email", required=True, help="Email used to sign in")
    parser.add_argument("--phone", default=None, help="Optional phone number")
    parser.add_argument(
        "--child",
        action="append",
        default=[],
        dest="children",
        help="Child name (repeat for several children)",
    )
    return parser.parse_args()


async def seed_parent(name: str, email: str, phone: str | None, children: list[str]) -> None:
    database = Database(settings.DATABASE_URL)
    try:
        await database.create_all()
        directory = ParentDirectory(database)

        if await directory.find_by_email(email) is not None:
            print(f"Parent {email} already registered")
            return

        parent = await directory.register(name, email, phone=phone, children=children)
        print(f"Registered parent #{parent.id} <{parent.email}>")
    finally:
        await database.dispose()


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(seed_parent(args.name, args.email, args.phone, args.children))
