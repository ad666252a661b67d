from fastapi import APIRouter, Depends, Query
from kyi.auth import StudySession, require_auth
from kyi.database import get_db
from kyi.models import ChatRequest
from kyi.services.chat import ChatSession

router = APIRouter()


@router.get("/history")
async def chat_history(language: str = Query("burmese"),
                       session: StudySession = Depends(require_auth)):
    db = await get_db()
    try:
        chat = ChatSession(db, session, language)
        messages = await chat.load_history()
        return {"messages": [m.model_dump() for m in messages], "language": chat.language}
    finally:
        await db.close()


@router.post("/messages")
async def send_message(req: ChatRequest, session: StudySession = Depends(require_auth)):
    db = await get_db()
    try:
        chat = ChatSession(db, session, req.language)
        new_messages = await chat.submit(req.message)
        return {"messages": [m.model_dump() for m in new_messages], "language": chat.language}
    finally:
        await db.close()
