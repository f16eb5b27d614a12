# backend/errors.py

from flask import jsonify
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
import structlog

log = structlog.get_logger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status and a JSON body."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_response(self):
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return jsonify(body), self.status_code


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(ApiError):
    # Also used for records owned by someone else.
    status_code = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Conflict"


class ReferentialIntegrityError(ApiError):
    status_code = 400
    default_message = "Referenced record does not exist"


class StorageError(ApiError):
    status_code = 500
    default_message = "Internal storage error"


def schema_error(exc: ValidationError) -> BadRequestError:
    """Turn a pydantic ValidationError into a 400 with a readable message."""
    errors = exc.errors(include_url=False, include_context=False, include_input=False)
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "__root__")
    message = first.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if field:
        message = f"{field}: {message}"
    return BadRequestError(message, details=errors)


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            log.error("request_failed", status=err.status_code, error=err.message)
        return err.to_response()

    @app.errorhandler(ValidationError)
    def handle_schema_error(err):
        return schema_error(err).to_response()

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err):
        log.exception("storage_error", error_type=type(err).__name__)
        return StorageError().to_response()

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.description}), err.code
