# bendinledim/auth.py
import base64
import binascii
import hmac
from typing import Optional

from flask import Response, current_app, request

PROTECTED_API_PREFIXES = (
    "/api/articles",
    "/api/categories",
    "/api/tags",
    "/api/seed",
    "/api/bootstrap",
    "/api/ai-generate",
    "/api/chatgpt",
    "/api/grok",
    "/api/gemini",
    "/api/rss/translate",
    "/api/rss/import",
)

API_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type",
}


def _sec_eq(a: str, b: str) -> bool:
    return hmac.compare_digest((a or "").encode("utf-8"), (b or "").encode("utf-8"))


def is_protected_api(path: str) -> bool:
    return any(path.startswith(p) for p in PROTECTED_API_PREFIXES)


def is_admin_route(path: str) -> bool:
    return path == "/admin" or path.startswith("/admin/")


def _basic_credentials(header: Optional[str]):
    if not header or not header.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(header[6:].strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return user, password


def check_basic_auth(header: Optional[str], username: str, password: str) -> Optional[bool]:
    """None when the server has no credentials configured, else match result."""
    if not username or not password:
        return None
    creds = _basic_credentials(header)
    if creds is None:
        return False
    # both compared, no early exit on the username
    ok_user = _sec_eq(creds[0], username)
    ok_pass = _sec_eq(creds[1], password)
    return ok_user and ok_pass


def _with_cors(resp: Response) -> Response:
    for k, v in API_CORS_HEADERS.items():
        resp.headers[k] = v
    return resp


def guard_request():
    """before_request hook: admin visibility flag, Basic auth, CORS preflight."""
    path = request.path
    admin = is_admin_route(path)
    protected = is_protected_api(path)

    if protected and request.method == "OPTIONS":
        return _with_cors(Response(status=204))

    cfg = current_app.config
    if admin and cfg.get("IS_PRODUCTION") and not cfg.get("ENABLE_ADMIN_DASHBOARD"):
        return Response("Not Found", status=404)

    if not admin and not protected:
        return None

    authorized = check_basic_auth(
        request.headers.get("Authorization"),
        cfg.get("ADMIN_USERNAME", ""),
        cfg.get("ADMIN_PASSWORD", ""),
    )
    if authorized is None:
        if protected:
            return _with_cors(Response("ADMIN_USERNAME / ADMIN_PASSWORD is not configured", status=503))
        return Response("Service unavailable", status=503)
    if not authorized:
        if protected:
            resp = Response("Authentication required", status=401)
            resp.headers["WWW-Authenticate"] = 'Basic realm="Admin Panel", charset="UTF-8"'
            return _with_cors(resp)
        resp = Response("Unauthorized", status=401)
        resp.headers["WWW-Authenticate"] = 'Basic realm="Admin Panel", charset="UTF-8"'
        return resp
    return None


def add_cors_headers(resp: Response) -> Response:
    """after_request hook: protected API answers always carry the CORS set."""
    if is_protected_api(request.path):
        _with_cors(resp)
    return resp
