from flask import Blueprint, request, jsonify

from auth.middleware import auth_required, current_user_id
from common_schemas import parse_id, query_args
from models import db

from .schemas import CategoryCreateSchema, CategoryQuerySchema
from .services import CategoryStore

categories_bp = Blueprint("categories", __name__, url_prefix="/categories")


@categories_bp.route("", methods=["GET"])
@auth_required
def list_categories():
    query = CategoryQuerySchema.model_validate(query_args(request.args))
    rows = CategoryStore(db.session).list(current_user_id(), type=query.type)
    return jsonify({"data": [c.to_dict() for c in rows]}), 200


@categories_bp.route("", methods=["POST"])
@auth_required
def create_category():
    data = CategoryCreateSchema.model_validate(request.get_json(silent=True) or {})
    category = CategoryStore(db.session).create(current_user_id(), data)
    return jsonify({"data": category.to_dict()}), 201


@categories_bp.route("/<category_id>", methods=["GET"])
@auth_required
def get_category(category_id):
    category = CategoryStore(db.session).get(current_user_id(), parse_id(category_id))
    return jsonify({"data": category.to_dict()}), 200


@categories_bp.route("/<category_id>", methods=["DELETE"])
@auth_required
def delete_category(category_id):
    deleted = CategoryStore(db.session).delete(current_user_id(), parse_id(category_id))
    return jsonify({"data": {"id": deleted}}), 200
