from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Literal

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwe, jwt
from jose.exceptions import JWEError

from skillgap.core.config import settings

TokenKind = Literal["access", "extension"]

_bearer = HTTPBearer(auto_error=False)


class CredentialError(ValueError):
    pass


def _credential_key() -> bytes:
    # A256GCM with direct key agreement needs exactly 32 bytes.
    return hashlib.sha256(settings.credential_secret.encode("utf-8")).digest()


def issue_token(user_id: str, *, kind: TokenKind = "access") -> str:
    ttl_days = settings.extension_token_ttl_days if kind == "extension" else settings.access_token_ttl_days
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "type": kind,
        "iat": now,
        "exp": now + timedelta(days=max(1, ttl_days)),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str | None:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


def current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required.",
        )
    user_id = verify_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
        )
    return user_id


def encrypt_credential(plain: str) -> str:
    token = jwe.encrypt(plain.encode("utf-8"), _credential_key(), algorithm="dir", encryption="A256GCM")
    return token.decode("ascii") if isinstance(token, bytes) else token


def decrypt_credential(encrypted: str) -> str:
    try:
        plain = jwe.decrypt(encrypted, _credential_key())
    except (JWEError, ValueError, TypeError) as exc:
        raise CredentialError("Stored credential could not be decrypted.") from exc
    if plain is None:
        raise CredentialError("Stored credential could not be decrypted.")
    return plain.decode("utf-8")


def check_admin_key(x_api_key: str | None) -> None:
    if not settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access is not configured.",
        )
    if x_api_key != settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please provide a valid admin API key.",
        )
