import json
import logging

import aiosqlite
from pydantic import BaseModel, ValidationError

from kyi.database import list_content
from kyi.models import VocabularyItem, GrammarPoint, KaiwaScenario

logger = logging.getLogger(__name__)

# Nested collections are stored as JSON text
JSON_FIELDS = {
    "grammar_points": ("examples",),
    "kaiwa_scenarios": ("dialogue", "key_phrases"),
}

COLLECTION_MODELS = {
    "vocabulary": VocabularyItem,
    "grammar_points": GrammarPoint,
    "kaiwa_scenarios": KaiwaScenario,
}


def parse_rows(collection: str, rows: list[dict]) -> list[BaseModel]:
    """Validate raw rows into typed records, dropping any that don't fit."""
    model = COLLECTION_MODELS[collection]
    parsed = []
    for row in rows:
        row = dict(row)
        try:
            for field in JSON_FIELDS.get(collection, ()):
                if isinstance(row.get(field), str):
                    row[field] = json.loads(row[field])
            parsed.append(model.model_validate(row))
        except (ValueError, ValidationError):
            logger.warning("Skipping malformed %s row %s", collection, row.get("id"))
    return parsed


async def load_content(db: aiosqlite.Connection, collection: str,
                       filters: dict | None = None) -> list[BaseModel]:
    """Newest-first content for the given filters. Store failures read as empty."""
    try:
        rows = await list_content(db, collection, filters)
    except aiosqlite.Error:
        logger.warning("Query on %s failed, showing nothing", collection, exc_info=True)
        return []
    return parse_rows(collection, rows)


def distinct_categories(items: list[VocabularyItem]) -> list[str]:
    """Categories in order of first appearance."""
    seen = []
    for item in items:
        if item.category not in seen:
            seen.append(item.category)
    return seen
