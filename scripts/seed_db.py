"""Seed the database with JLPT vocabulary, grammar points and kaiwa scenarios.

Usage:
    python scripts/seed_db.py          # Only seeds collections that are empty
    python scripts/seed_db.py --merge  # Add seed entries to every collection
"""

import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from kyi.config import require_config
from kyi.database import (
    init_db, get_db, count_content,
    insert_vocabulary, insert_grammar_point, insert_kaiwa_scenario,
)
from kyi.services.content import parse_rows

SEED_DIR = Path(__file__).resolve().parent.parent / "data" / "seed"


def _load(name: str, collection: str) -> list[dict]:
    path = SEED_DIR / name
    if not path.exists():
        print(f"Warning: {path} not found")
        return []
    raw = json.loads(path.read_text(encoding="utf-8"))
    # Validate against the same record types the views use; the placeholder ids
    # are only there to satisfy the models.
    rows = [{"id": str(i), **r} for i, r in enumerate(raw)]
    valid = parse_rows(collection, rows)
    if len(valid) != len(raw):
        print(f"Warning: {len(raw) - len(valid)} malformed entries in {name} skipped")
    return [v.model_dump(exclude={"id", "created_at"}) for v in valid]


async def seed(merge=False):
    require_config()
    await init_db()
    db = await get_db()

    try:
        totals = {}

        if merge or await count_content(db, "vocabulary") == 0:
            entries = _load("vocabulary.json", "vocabulary")
            for item in entries:
                await insert_vocabulary(db, **item)
            totals["vocabulary"] = len(entries)

        if merge or await count_content(db, "grammar_points") == 0:
            entries = _load("grammar_points.json", "grammar_points")
            for item in entries:
                await insert_grammar_point(db, **item)
            totals["grammar_points"] = len(entries)

        if merge or await count_content(db, "kaiwa_scenarios") == 0:
            entries = _load("kaiwa_scenarios.json", "kaiwa_scenarios")
            for item in entries:
                await insert_kaiwa_scenario(db, **item)
            totals["kaiwa_scenarios"] = len(entries)

        await db.commit()
        if not totals:
            print("Every collection already has content. Use --merge to add the seed entries anyway.")
            return
        for collection, added in totals.items():
            print(f"{collection}: {added} added")
    finally:
        await db.close()


if __name__ == "__main__":
    merge = "--merge" in sys.argv
    asyncio.run(seed(merge=merge))
