"""How a client proves who it is.

Two credentials are handed out at sign-in: a long-lived remember token,
sent back as an HttpOnly cookie and stored only as its SHA-256 digest, and
a short-lived bearer JWT carrying the user id in ``sub``.
"""
import os
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request, Response
from jose import jwt, JWTError

# Prefer JWT_SECRET but support legacy JWT_SECRET_KEY for compatibility
SECRET = os.getenv('JWT_SECRET') or os.getenv('JWT_SECRET_KEY', 'devsecret')
ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', str(60 * 24)))

REMEMBER_COOKIE_NAME = 'remember_token'
REMEMBER_COOKIE_MAX_AGE = int(os.getenv('REMEMBER_COOKIE_DAYS', str(365 * 20))) * 24 * 60 * 60


# remember token

def generate_remember_token() -> str:
    # 384 bits, URL-safe
    return secrets.token_urlsafe(48)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def set_remember_cookie(response: Response, token: str):
    response.set_cookie(
        REMEMBER_COOKIE_NAME,
        token,
        max_age=REMEMBER_COOKIE_MAX_AGE,
        httponly=True,
        samesite='lax',
    )


def clear_remember_cookie(response: Response):
    response.delete_cookie(REMEMBER_COOKIE_NAME, httponly=True, samesite='lax')


def remember_token_from(request: Request) -> Optional[str]:
    return request.cookies.get(REMEMBER_COOKIE_NAME) or None


# bearer token

def access_token_for(user, lifetime: timedelta = None) -> str:
    issued = datetime.now(timezone.utc)
    if lifetime is None:
        lifetime = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        'sub': str(user.id),
        'email': user.email,
        'iat': issued,
        'exp': issued + lifetime,
    }
    return jwt.encode(claims, SECRET, algorithm=ALGORITHM)


def read_access_token(token: str) -> Optional[dict]:
    """Verified claims of ``token``, or None when it is forged, malformed or expired."""
    try:
        return jwt.decode(token, SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None


def user_id_from_access_token(token: str) -> Optional[int]:
    claims = read_access_token(token)
    if not claims:
        return None
    try:
        return int(claims['sub'])
    except (KeyError, TypeError, ValueError):
        return None
