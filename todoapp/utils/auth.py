from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, Request
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from todoapp.config import SECRET_KEY, ALGORITHM, SESSION_COOKIE_NAME
from todoapp.database import get_db
from todoapp.errors import Unauthorized
from todoapp.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if len(password.encode("utf-8")) > 72:
        raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    If verification raises a ValueError (for example plain >72 bytes), return False
    so the caller answers with an authentication failure instead of an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(user_id: str):
    # read expiry at call-time so tests (and runtime overrides) that modify
    # todoapp.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
    import todoapp.config as _cfg
    expire = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    data = {"sub": user_id, "exp": int(expire.timestamp())}
    return jwt.encode(data, SECRET_KEY, algorithm=ALGORITHM)


def extract_token(authorization: Optional[str], token_query: Optional[str], cookie: Optional[str]) -> Optional[str]:
    """Return the session token from, in order of precedence, the
    Authorization header (Bearer ...), the ``token`` query param, or the
    session cookie.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return token_query or cookie or None


def resolve_principal(token: Optional[str], db: Session) -> Optional[str]:
    """Map a session token to the id of an existing user.

    Returns None when there is no token at all; a token that is present but
    expired, malformed or for a deleted user raises Unauthorized.
    """
    if not token:
        return None
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except JWTError:
        raise Unauthorized("Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid token: missing user")
    if db.get(User, user_id) is None:
        raise Unauthorized("Invalid token: unknown user")
    return user_id


def get_principal(request: Request, db: Session = Depends(get_db)) -> Optional[str]:
    tok = extract_token(
        request.headers.get("authorization"),
        request.query_params.get("token"),
        request.cookies.get(SESSION_COOKIE_NAME),
    )
    return resolve_principal(tok, db)


def require_principal(principal: Optional[str] = Depends(get_principal)) -> str:
    # runs before request body validation, so anonymous callers always get 401
    if not principal:
        raise Unauthorized()
    return principal
