from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from kyi.auth import get_session
from kyi.config import LEVELS, DEFAULT_LEVEL
from kyi.database import get_db
from kyi.services.content import load_content, distinct_categories
from kyi.services.progress import record_study

router = APIRouter()


@router.get("")
async def list_vocabulary(
    level: str = Query(DEFAULT_LEVEL),
    category: str = Query("all"),
):
    if level not in LEVELS:
        return JSONResponse({"error": f"Unknown level {level}"}, status_code=400)
    filters = {"level": level}
    if category != "all":
        filters["category"] = category

    db = await get_db()
    try:
        items = await load_content(db, "vocabulary", filters)
        return {
            "items": [i.model_dump() for i in items],
            "categories": distinct_categories(items),
            "levels": list(LEVELS),
            "empty_message": None if items else "No vocabulary items found.",
        }
    finally:
        await db.close()


@router.post("/{item_id}/studied")
async def mark_studied(item_id: str, request: Request):
    session = get_session(request)
    db = await get_db()
    try:
        recorded = await record_study(db, session, "vocabulary", item_id)
        return {"ok": True, "recorded": recorded}
    finally:
        await db.close()
