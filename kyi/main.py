import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from kyi.config import LOG_LEVEL, HOST, PORT, require_config
from kyi.database import init_db, get_db, get_user_profile
from kyi.auth import AuthError, sign_up, sign_in, validate_sign_up, set_session_cookie, get_session, COOKIE_NAME
from kyi.models import SignUpRequest, LoginRequest

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=LOG_LEVEL)
    require_config()
    await init_db()
    logger.info("Kyi learning aid ready")
    yield


app = FastAPI(title="Kyi Japanese Learning Aid", lifespan=lifespan)


# --- Auth routes (public) ---

@app.post("/api/signup")
async def signup(req: SignUpRequest):
    try:
        validate_sign_up(req.email, req.password, req.name)
    except AuthError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)

    db = await get_db()
    try:
        user = await sign_up(db, req.email, req.password, req.name)
    except AuthError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    finally:
        await db.close()
    resp = JSONResponse({"ok": True, "user": user.model_dump()})
    set_session_cookie(resp, user.id)
    return resp


@app.post("/api/login")
async def login(req: LoginRequest):
    db = await get_db()
    try:
        user = await sign_in(db, req.email, req.password)
    except AuthError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    finally:
        await db.close()
    resp = JSONResponse({"ok": True, "user": user.model_dump()})
    set_session_cookie(resp, user.id)
    return resp


@app.post("/api/logout")
async def logout():
    resp = JSONResponse({"ok": True})
    resp.delete_cookie(COOKIE_NAME)
    return resp


@app.get("/api/auth/check")
async def auth_check(request: Request):
    session = get_session(request)
    if session.authenticated:
        db = await get_db()
        try:
            profile = await get_user_profile(db, session.user_id)
        finally:
            await db.close()
        if profile:
            return {"authenticated": True, "user_id": session.user_id, **profile.model_dump()}
    return JSONResponse({"authenticated": False}, status_code=401)


# --- Health check ---

@app.get("/api/health")
async def health():
    return {"status": "ok"}


# --- Routers (content is browsable without login) ---

from kyi.routers import vocabulary, grammar, kaiwa, dashboard, chat

app.include_router(vocabulary.router, prefix="/api/vocabulary")
app.include_router(grammar.router, prefix="/api/grammar")
app.include_router(kaiwa.router, prefix="/api/kaiwa")
app.include_router(dashboard.router, prefix="/api/dashboard")
app.include_router(chat.router, prefix="/api/chat")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("kyi.main:app", host=HOST, port=PORT)
