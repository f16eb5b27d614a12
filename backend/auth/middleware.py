# backend/auth/middleware.py

from functools import wraps

from flask import g, request
import structlog

from errors import AuthenticationError
from .services import verify_token

log = structlog.get_logger(__name__)


def resolve_identity():
    """
    before_request hook: attach the bearer token's user id to ``g`` when the
    token checks out. Requests without a usable token carry on anonymously;
    handlers that need a user use ``auth_required``.
    """
    g.user_id = None

    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return

    token = header[len("Bearer "):].strip()
    if not token:
        return

    try:
        g.user_id = verify_token(token)
    except AuthenticationError as e:
        log.debug("token_rejected", reason=e.message, path=request.path)


def current_user_id():
    user_id = g.get("user_id")
    if not user_id:
        raise AuthenticationError("Unauthorized")
    return user_id


def auth_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        current_user_id()
        return fn(*args, **kwargs)

    return wrapper


def init_auth(app):
    app.before_request(resolve_identity)
