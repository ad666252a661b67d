from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from kyi.auth import get_session
from kyi.config import LEVELS, DEFAULT_LEVEL
from kyi.database import get_db
from kyi.services.content import load_content
from kyi.services.progress import record_study

router = APIRouter()


@router.get("")
async def list_grammar(level: str = Query(DEFAULT_LEVEL)):
    if level not in LEVELS:
        return JSONResponse({"error": f"Unknown level {level}"}, status_code=400)
    db = await get_db()
    try:
        points = await load_content(db, "grammar_points", {"level": level})
        return {
            "grammar_points": [p.model_dump() for p in points],
            "levels": list(LEVELS),
            "empty_message": None if points else "No grammar points found.",
        }
    finally:
        await db.close()


@router.post("/{grammar_id}/studied")
async def mark_studied(grammar_id: str, request: Request):
    session = get_session(request)
    db = await get_db()
    try:
        recorded = await record_study(db, session, "grammar", grammar_id)
        return {"ok": True, "recorded": recorded}
    finally:
        await db.close()
