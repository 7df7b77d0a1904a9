#!/usr/bin/env python
"""Seed the built-in configuration profiles, prompt templates and variables."""

import asyncio
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.persistence.database import AsyncSessionLocal, create_all_tables
from app.persistence.seed import seed_profiles, seed_templates


async def main():
    """Create missing tables and insert the default data."""
    await create_all_tables()

    async with AsyncSessionLocal() as session:
        profiles = await seed_profiles(session)
        templates = await seed_templates(session)

    if profiles:
        print(f"Inserted {profiles} configuration profiles")
    else:
        print("Configuration profiles already present, skipped")
    print(f"Inserted {templates} prompt template/variable rows")


if __name__ == "__main__":
    asyncio.run(main())
