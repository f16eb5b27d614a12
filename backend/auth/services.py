# backend/auth/services.py

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import ExpiredSignatureError, PyJWTError
from sqlalchemy import select
from werkzeug.security import generate_password_hash, check_password_hash
import structlog

from errors import AuthenticationError, ConflictError, NotFoundError
from models import atomic
from models.user_model import User

log = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def issue_token(user_id):
    return create_access_token(identity=str(user_id))


def verify_token(token):
    """
    Check signature and expiry against the app's JWT secret and return the
    user id carried in ``sub``. Never touches storage.
    """
    try:
        claims = decode_token(token)
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired") from None
    except (PyJWTError, JWTExtendedException):
        raise AuthenticationError("Invalid token") from None

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token") from None


def _find_by_email(session, email):
    return session.execute(select(User).where(User.email == email)).scalar_one_or_none()


def register_user(session, data):

    if _find_by_email(session, data.email) is not None:
        raise ConflictError("User already exists")

    user = User(
        name=data.name,
        email=data.email,
        password=generate_password_hash(data.password),
    )

    # the unique index still catches a concurrent registration
    with atomic(session, integrity_error=ConflictError("User already exists")):
        session.add(user)

    log.info("user_registered", user_id=user.id)

    return {
        "token": issue_token(user.id),
        "user": user.public_dict(),
    }


def login_user(session, data):

    user = _find_by_email(session, data.email.strip())

    if not user or not check_password_hash(user.password, data.password):
        log.info("login_failed")
        raise AuthenticationError(INVALID_CREDENTIALS)

    log.info("user_logged_in", user_id=user.id)

    return {
        "token": issue_token(user.id),
        "user": user.public_dict(),
    }


def get_profile(session, user_id):
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user.public_dict(with_timestamps=True)


def update_profile(session, user_id, data):
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return user.public_dict(with_timestamps=True)

    with atomic(session):
        if "name" in changes:
            user.name = changes["name"].strip()
        if "password" in changes:
            user.password = generate_password_hash(changes["password"])

    log.info("profile_updated", user_id=user_id, fields=sorted(changes))
    return user.public_dict(with_timestamps=True)
