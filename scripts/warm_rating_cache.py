"""
Pre-populate the professor rating cache.

Usage:
    python scripts/warm_rating_cache.py "John Smith" "Jane Doe" Staff

Names are looked up the same way the course list does it, so the
placeholder instructor is skipped and repeated names are fetched once.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add parent directory to Python path so the package imports from any cwd
sys.path.insert(0, str(Path(__file__).parent.parent))

from course_catalog.core.config import get_settings
from course_catalog.core.logging import setup_logging
from course_catalog.domain.services.rating_fetcher import (
    create_rating_fetcher,
    fetch_instructor_ratings,
)


async def warm(names: list[str]) -> int:
    fetcher = create_rating_fetcher()
    results = await fetch_instructor_ratings(fetcher, names)

    for name, result in results.items():
        if result.found:
            ratings = result.professor.ratings
            print(f"{name}: {ratings.overall} overall, {ratings.total_ratings} ratings")
        else:
            print(f"{name}: not found")

    print(f"Cached {len(fetcher.cache)} entries")
    return 0


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, json=False)

    names = sys.argv[1:]
    if not names:
        print(__doc__)
        sys.exit(1)

    sys.exit(asyncio.run(warm(names)))


if __name__ == "__main__":
    main()
