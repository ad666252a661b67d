import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from typing import Optional

import aiosqlite
import bcrypt
from fastapi import Request, HTTPException, Response

from kyi import config
from kyi.config import SESSION_EXPIRY_DAYS, MIN_PASSWORD_LENGTH
from kyi.database import create_user, get_user_by_email
from kyi.models import User

logger = logging.getLogger(__name__)

COOKIE_NAME = "kyi_session"


class AuthError(Exception):
    """Sign-up/sign-in failure that is shown to the user as-is."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class StudySession:
    """Identity of whoever is making the request. user_id is None when logged out."""
    user_id: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.user_id)


def validate_sign_up(email: str, password: str, name: str):
    if not email.strip() or not name.strip():
        raise AuthError("Name and email are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


async def sign_up(db: aiosqlite.Connection, email: str, password: str, name: str) -> User:
    # Checked before touching the store
    validate_sign_up(email, password, name)
    email = email.strip().lower()
    pw_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()
    try:
        user_id = await create_user(db, email, pw_hash, name.strip())
        await db.commit()
    except aiosqlite.IntegrityError:
        raise AuthError("Email already registered", status_code=409)
    logger.info("New user %s signed up", user_id)
    return User(id=user_id, email=email, name=name.strip())


async def sign_in(db: aiosqlite.Connection, email: str, password: str) -> User:
    row = await get_user_by_email(db, email.strip().lower())
    if not row or not bcrypt.checkpw(password.encode(), row["password_hash"].encode()):
        logger.info("Failed sign-in attempt")
        raise AuthError("Invalid email or password", status_code=401)
    return User(id=row["id"], email=row["email"], name=row["name"],
                current_level=row["current_level"])


def create_session_token(user_id: str) -> str:
    expires = int(time.time()) + SESSION_EXPIRY_DAYS * 86400
    payload = f"{expires}.{user_id}"
    sig = hmac.new(config.APP_SECRET_KEY.encode(), payload.encode(), hashlib.sha256).hexdigest()
    return f"{payload}.{sig}"


def verify_session_token(token: str) -> tuple[bool, str]:
    """Returns (valid, user_id) tuple."""
    parts = token.rsplit(".", 1)
    if len(parts) != 2:
        return False, ""
    payload, sig = parts
    expected = hmac.new(config.APP_SECRET_KEY.encode(), payload.encode(), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(sig.encode(), expected.encode()):
        return False, ""
    expires, _, user_id = payload.partition(".")
    try:
        if time.time() >= int(expires):
            return False, ""
    except ValueError:
        return False, ""
    return bool(user_id), user_id


def get_session(request: Request) -> StudySession:
    """Build the explicit session for a request from its cookie."""
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        return StudySession()
    valid, user_id = verify_session_token(token)
    return StudySession(user_id=user_id) if valid else StudySession()


def set_session_cookie(response: Response, user_id: str) -> Response:
    token = create_session_token(user_id)
    response.set_cookie(
        COOKIE_NAME, token,
        max_age=SESSION_EXPIRY_DAYS * 86400,
        httponly=True, samesite="lax", secure=False
    )
    return response


def require_auth(request: Request) -> StudySession:
    session = get_session(request)
    if not session.authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session
