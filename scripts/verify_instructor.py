#!/usr/bin/env python3
"""Record a moderation decision for an instructor profile.

Only approved instructors are considered by matching. Usage:

    python scripts/verify_instructor.py <instructor-id> [approved|rejected|pending]
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from instructormatch.core.logging import setup_logging  # noqa: E402
from instructormatch.domain import MarketplaceError  # noqa: E402
from instructormatch.domain.services.profiles import ProfileService  # noqa: E402
from instructormatch.infrastructure.db.models import VerificationStatus  # noqa: E402
from instructormatch.infrastructure.db.session import (  # noqa: E402
    dispose_engine,
    get_session_factory,
)


async def run(instructor_id: str, status: VerificationStatus) -> int:
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            try:
                instructor = await ProfileService(session).set_verification(
                    instructor_id=instructor_id, status=status
                )
            except MarketplaceError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return 1
            print(
                f"Instructor {instructor.id}: verification_status={instructor.verification_status.value}"
                f" is_verified={instructor.is_verified}"
            )
            return 0
    finally:
        await dispose_engine()


def main() -> None:
    if len(sys.argv) < 2:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    instructor_id = sys.argv[1]
    try:
        status = VerificationStatus(sys.argv[2] if len(sys.argv) > 2 else "approved")
    except ValueError:
        print("Status must be one of: approved, rejected, pending", file=sys.stderr)
        sys.exit(2)

    setup_logging()
    sys.exit(asyncio.run(run(instructor_id, status)))


if __name__ == "__main__":
    main()
