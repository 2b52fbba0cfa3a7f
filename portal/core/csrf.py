"""Double-submit CSRF tokens for the server-rendered client forms."""

from __future__ import annotations

import secrets
from urllib import parse as urlparse

from fastapi import HTTPException, Request, Response

from portal.core.config import get_settings

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "x-csrf-token"
_MIN_TOKEN_LENGTH = 16


def issue_token(request: Request) -> str:
    """Reuse the browser's token when it looks sane, otherwise mint a new one."""
    token = request.cookies.get(CSRF_COOKIE_NAME) or ""
    if len(token) < _MIN_TOKEN_LENGTH:
        token = secrets.token_urlsafe(32)
    return token


def attach_token(response: Response, token: str) -> Response:
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=7 * 24 * 60 * 60,
        httponly=False,
        secure=get_settings().app_env == "prod",
        samesite="strict",
        path="/",
    )
    return response


def _same_origin(request: Request) -> bool:
    source = request.headers.get("origin") or request.headers.get("referer") or ""
    if not source:
        return True
    try:
        parsed = urlparse.urlparse(source)
    except ValueError:
        return False
    host = (request.headers.get("host") or "").split(":", 1)[0].lower()
    if parsed.hostname and host and parsed.hostname.lower() != host:
        return False
    return not parsed.scheme or parsed.scheme == request.url.scheme


def validate_csrf(request: Request, supplied_token: str | None) -> None:
    """Raise 403 unless the form/header token matches the cookie and origin."""
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    token = (supplied_token or "").strip() or (request.headers.get(CSRF_HEADER_NAME) or "").strip()
    if not cookie_token or not token:
        raise HTTPException(403, "Missing CSRF token.")
    if not secrets.compare_digest(cookie_token, token):
        raise HTTPException(403, "Invalid CSRF token.")
    if not _same_origin(request):
        raise HTTPException(403, "Invalid request origin.")
