import logging
import re
from urllib.parse import unquote

from typing import Generator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from jose import JWTError, ExpiredSignatureError

from academy.db import session as db_session
from academy.core import security
from academy.models.user.user_model import User

log = logging.getLogger(__name__)


def get_db() -> Generator[Session, None, None]:
    """One SQLAlchemy session per request, closed once the response is sent."""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _normalize_token_value(raw_token: str | None) -> str | None:
    """Return a clean JWT string extracted from various transport formats.

    Tokens may reach the API through cookies, headers, or query parameters.
    Browsers can percent-encode cookie values (``Bearer%20…``) and some
    frontends send quoted strings. We normalise those cases and also accept
    case-insensitive ``Bearer`` prefixes.
    """

    if raw_token is None:
        return None

    token = raw_token.strip().strip('"').strip("'")
    if not token:
        return None

    token = unquote(token)

    match = re.match(r"^(bearer|token)[\s,:]+(.+)$", token, flags=re.IGNORECASE)
    if match:
        token = match.group(2)

    token = token.strip()
    return token or None


def _decode_user_from_token(token: str | None, db: Session) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )

    token = _normalize_token_value(token)
    if not token:
        log.warning("Authentication failed: no token provided.")
        raise credentials_exception

    try:
        payload = security.decode_access_token(token)
        user_id_str = payload.get("sub")
        if user_id_str is None:
            log.warning("Authentication failed: token has no 'sub'.")
            raise credentials_exception
        user_id = int(user_id_str)
    except ExpiredSignatureError:
        log.warning("Authentication failed: token expired.")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="token_expired")
    except (JWTError, ValueError, TypeError):
        log.warning("Authentication failed: invalid or malformed token.")
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None:
        log.warning(f"Authentication failed: user {user_id} not found.")
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="inactive_user")

    return user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    token_sources = (
        request.headers.get("Authorization"),
        request.cookies.get("access_token"),
        request.headers.get("X-Access-Token"),
        request.query_params.get("access_token"),
    )

    last_unauthorized_error: HTTPException | None = None

    for candidate in token_sources:
        token = _normalize_token_value(candidate)
        if not token:
            continue

        try:
            return _decode_user_from_token(token, db)
        except HTTPException as exc:
            if exc.status_code != status.HTTP_401_UNAUTHORIZED:
                raise
            last_unauthorized_error = exc

    if last_unauthorized_error is not None:
        raise last_unauthorized_error

    return _decode_user_from_token(None, db)
