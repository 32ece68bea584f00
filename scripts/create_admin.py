"""
Admin Promotion Script

Grants the admin role to an existing member, looked up by handle, and
records the promotion in the audit log. Admins can delete other members
and read the audit log.

Usage:
    python scripts/create_admin.py <handle>
"""

import asyncio
import os
import sys

# Add parent directory to Python path so we can import borohub modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from borohub.database import AsyncSessionLocal, engine
from borohub.models import Base
from borohub.services.members import promote_to_admin


async def promote(handle: str) -> bool:
    """
    Set the member's role to admin.

    Returns:
        True if the member exists, False otherwise
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with AsyncSessionLocal() as db:
            member = await promote_to_admin(db, handle)
    finally:
        await engine.dispose()

    if not member:
        print(f"No member with handle {handle!r}")
        return False
    print(f"{handle} is now an admin")
    return True


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    ok = asyncio.run(promote(sys.argv[1]))
    sys.exit(0 if ok else 1)
