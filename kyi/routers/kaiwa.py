from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from kyi.auth import get_session
from kyi.config import LEVELS, DEFAULT_LEVEL
from kyi.database import get_db
from kyi.services.content import load_content
from kyi.services.progress import record_study

router = APIRouter()


@router.get("")
async def list_scenarios(level: str = Query(DEFAULT_LEVEL)):
    if level not in LEVELS:
        return JSONResponse({"error": f"Unknown level {level}"}, status_code=400)
    db = await get_db()
    try:
        scenarios = await load_content(db, "kaiwa_scenarios", {"level": level})
        return {
            "scenarios": [s.model_dump() for s in scenarios],
            "levels": list(LEVELS),
            "empty_message": None if scenarios else "No conversation scenarios found.",
        }
    finally:
        await db.close()


@router.get("/{scenario_id}")
async def get_scenario(scenario_id: str):
    db = await get_db()
    try:
        scenarios = await load_content(db, "kaiwa_scenarios", {"id": scenario_id})
        if not scenarios:
            return JSONResponse({"error": "Not found"}, status_code=404)
        return scenarios[0].model_dump()
    finally:
        await db.close()


@router.post("/{scenario_id}/studied")
async def complete_practice(scenario_id: str, request: Request):
    session = get_session(request)
    db = await get_db()
    try:
        recorded = await record_study(db, session, "kaiwa", scenario_id)
        return {"ok": True, "recorded": recorded}
    finally:
        await db.close()
