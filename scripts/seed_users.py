#!/usr/bin/env python3
"""
Seed script: creates the Users table and inserts sample users through the generic statement path.
Works on engines without stored procedures (sqlite); then reads a few users back by id and email.
  python scripts/seed_users.py
  python scripts/seed_users.py --users 50 --connection DefaultConnection
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dbinteraction.config import DEFAULT_CONNECTION, get_settings
from dbinteraction.core.log_config import configure_logging
from dbinteraction.db.base import Base
from dbinteraction.db.data_access import SqlDataAccess, UserData
from dbinteraction.db.enums import DatabaseTables, QueryType
from dbinteraction.db.models import User  # noqa: F401 - registers the Users table
from dbinteraction.db.session import ConnectionFactory

FIRST_NAMES = ["Ada", "Alan", "Grace", "Linus", "Barbara", "Ken", "Margaret", "Dennis", "Frances", "Edsger"]
LAST_NAMES = ["Lovelace", "Turing", "Hopper", "Torvalds", "Liskov", "Thompson", "Hamilton", "Ritchie", "Allen", "Dijkstra"]


async def seed(connection_name: str, count: int) -> int:
    settings = get_settings()
    connections = ConnectionFactory(echo=settings.debug)
    sql = SqlDataAccess(settings, connections)
    users = UserData(sql)
    errors = 0
    try:
        engine = connections.get_engine(sql.get_connection_string(connection_name))
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        print(f"Creating {count} users...")
        for i in range(count):
            first = FIRST_NAMES[i % len(FIRST_NAMES)]
            last = LAST_NAMES[(i // len(FIRST_NAMES)) % len(LAST_NAMES)]
            result = await sql.generic_query(
                connection_name,
                QueryType.INSERT,
                DatabaseTables.USERS,
                values={
                    "FirstName": first,
                    "LastName": last,
                    "EmailAddress": f"{first.lower()}.{last.lower()}{i + 1}@example.com",
                },
            )
            if not result.ok:
                errors += 1
                print(f"  insert {i + 1} failed: {result.error}")

        first_user = await users.get_user_by_id(1)
        by_email = await users.get_user_by_email("ada.lovelace1@example.com")
        for label, result in (("by id 1", first_user), ("by email", by_email)):
            if result.ok and result.data:
                print(f"Fetched {label}: {result.data[0]}")
            else:
                print(f"Fetched {label}: {result.error or 'no rows'}")
    finally:
        await connections.dispose()
    return errors


def main():
    ap = argparse.ArgumentParser(description="Create the Users table and seed sample users")
    ap.add_argument("--users", type=int, default=20, help="Number of users to create")
    ap.add_argument("--connection", default=DEFAULT_CONNECTION, help="Connection string name")
    args = ap.parse_args()

    configure_logging(get_settings().log_level)
    errors = asyncio.run(seed(args.connection, args.users))
    print(f"Done. Errors: {errors}")
    sys.exit(1 if errors else 0)


if __name__ == "__main__":
    main()
