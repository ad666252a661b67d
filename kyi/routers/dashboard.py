import logging

import aiosqlite
from fastapi import APIRouter, Depends

from kyi.auth import StudySession, require_auth
from kyi.database import get_db, get_user_profile, list_progress
from kyi.services.progress import summarize_progress

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_dashboard(session: StudySession = Depends(require_auth)):
    db = await get_db()
    try:
        try:
            profile = await get_user_profile(db, session.user_id)
            records = await list_progress(db, session.user_id)
        except aiosqlite.Error:
            logger.warning("Dashboard query failed for %s", session.user_id, exc_info=True)
            profile, records = None, []
        return {
            "profile": profile.model_dump() if profile else None,
            "stats": summarize_progress(records).model_dump(),
        }
    finally:
        await db.close()
