# bendinledim/errors.py
"""
Error taxonomy shared by the API, the admin forms and the integrations.

Every failure that reaches a caller is a BlogError subclass; the Flask
handler registered in create_app() turns it into the JSON envelope
{"error": ..., "details": ..., "raw": ...}.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from flask import jsonify
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)


class BlogError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, raw: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.raw = raw

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            out["details"] = self.details
        if self.raw is not None:
            out["raw"] = self.raw
        return out


class UpstreamConfigError(BlogError):
    """A provider credential is missing on the server."""


class UpstreamRequestError(BlogError):
    """A provider answered with a non-success status."""


class ResponseShapeError(BlogError):
    """Generative output could not be parsed into the expected shape."""


class NotFoundError(BlogError):
    status_code = 404


class ValidationError(BlogError):
    status_code = 400


def register_error_handlers(app):
    @app.errorhandler(BlogError)
    def _blog_error(exc: BlogError):
        if exc.status_code >= 500:
            log.warning("%s: %s", type(exc).__name__, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(404)
    def _not_found(exc):
        return jsonify(error="Not found"), 404

    @app.errorhandler(Exception)
    def _unexpected(exc):
        if isinstance(exc, HTTPException):
            return exc
        log.exception("unhandled error")
        return jsonify(error="Request failed", details=str(exc)), 500
