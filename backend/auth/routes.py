# backend/auth/routes.py

from flask import Blueprint, request, jsonify

from models import db
from auth.middleware import auth_required, current_user_id
from auth.schemas import RegisterSchema, LoginSchema
from auth.services import register_user, login_user, get_profile

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/register", methods=["POST"])
def register():

    data = RegisterSchema.model_validate(request.get_json(silent=True) or {})

    result = register_user(db.session, data)

    return jsonify(result), 201


@auth_bp.route("/login", methods=["POST"])
def login():

    data = LoginSchema.model_validate(request.get_json(silent=True) or {})

    result = login_user(db.session, data)

    return jsonify(result), 200


@auth_bp.route("/me", methods=["GET"])
@auth_required
def me():

    user = get_profile(db.session, current_user_id())

    return jsonify({"user": user}), 200
