from flask import Blueprint, request, jsonify

from auth.middleware import auth_required, current_user_id
from auth.schemas import ProfileUpdateSchema
from auth.services import update_profile
from models import db

from .services import UserStore

users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.route("", methods=["GET"])
@auth_required
def list_users():
    """
    Users visible to the caller, with their categories and latest balance.
    Ownership rules make that the caller's own account only.
    """
    overview = UserStore(db.session).overview(current_user_id())
    return jsonify({"data": [overview]}), 200


@users_bp.route("/me", methods=["PUT"])
@auth_required
def update_me():
    data = ProfileUpdateSchema.model_validate(request.get_json(silent=True) or {})
    user = update_profile(db.session, current_user_id(), data)
    return jsonify({"data": user}), 200


@users_bp.route("/me", methods=["DELETE"])
@auth_required
def delete_me():
    deleted = UserStore(db.session).delete(current_user_id())
    return jsonify({"data": {"id": deleted}}), 200
