#!/usr/bin/env python3
"""
Script to create the portal tables and the first admin account.

Usage:
    python bootstrap_portal_db.py admin@example.com "Portal Admin"
"""

import asyncio
import sys

from portal.core.logging import setup_logging
from portal.db import session as db_session
from portal.db.init_db import create_tables, seed_initial_admin


async def main(email: str, full_name: str) -> int:
    """Main function to bootstrap the database."""
    setup_logging()
    engine = db_session.create_engine()
    maker = db_session.create_sessionmaker()
    try:
        await create_tables(engine)
        async with maker() as session:
            admin = await seed_initial_admin(session, email, full_name)
        print("Admin created." if admin else "Admin already exists, nothing to do.")
    finally:
        await db_session.close_db()
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else "Portal Admin")))
