#!/usr/bin/env python
"""
Seed access control data (and optionally demo accounts) for development.
"""

import argparse
import asyncio
import sys

from staffdesk.core.database import async_session_factory
from staffdesk.core.permissions.seeding import seed_access_control, seed_demo_users


SCENARIOS = ("access-control", "demo")


async def main(scenario: str) -> None:
    """Run the seeding based on scenario."""
    async with async_session_factory() as session:
        if scenario == "demo":
            created = await seed_demo_users(session)
            print(f"Demo users created: {created}")

        roles = await seed_access_control(session)
        await session.commit()
        print(f"System roles ready: {', '.join(sorted(roles))}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the access control tables")
    parser.add_argument(
        "--scenario",
        "-s",
        default="access-control",
        help=f"Seed scenario to run ({', '.join(SCENARIOS)})",
    )
    args = parser.parse_args()

    if args.scenario not in SCENARIOS:
        print(f"Unknown scenario: {args.scenario}")
        print(f"Available scenarios: {', '.join(SCENARIOS)}")
        sys.exit(1)

    asyncio.run(main(args.scenario))
