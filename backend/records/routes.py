from flask import Blueprint, request, jsonify

from auth.middleware import auth_required, current_user_id
from common_schemas import parse_id, query_args
from models import db

from .schemas import RecordCreateSchema, RecordListQuery, RecordUpdateSchema
from .services import RecordStore


def make_records_blueprint(kind, url_prefix):
    """
    Build the CRUD blueprint for one record kind. Income and expenses share
    the same routes and rules, they only differ in table and category type.
    """
    bp = Blueprint(url_prefix.strip("/"), __name__, url_prefix=url_prefix)

    def store():
        return RecordStore(db.session, kind)

    @bp.route("", methods=["GET"])
    @auth_required
    def list_records():
        """
        Query params: startDate, endDate, categoryId, limit (default 50, max 100), offset.
        """
        query = RecordListQuery.model_validate(query_args(request.args))
        rows = store().list(current_user_id(), query)
        return jsonify({"data": [r.to_dict(category=c) for r, c in rows]}), 200

    @bp.route("", methods=["POST"])
    @auth_required
    def create_record():
        data = RecordCreateSchema.model_validate(request.get_json(silent=True) or {})
        record, category = store().create(current_user_id(), data)
        return jsonify({"data": record.to_dict(category=category)}), 201

    @bp.route("/<record_id>", methods=["GET"])
    @auth_required
    def get_record(record_id):
        record, category = store().get(current_user_id(), parse_id(record_id))
        return jsonify({"data": record.to_dict(category=category)}), 200

    @bp.route("/<record_id>", methods=["PUT"])
    @auth_required
    def update_record(record_id):
        record_id = parse_id(record_id)
        changes = RecordUpdateSchema.model_validate(request.get_json(silent=True) or {})
        record, category = store().update(current_user_id(), record_id, changes)
        return jsonify({"data": record.to_dict(category=category)}), 200

    @bp.route("/<record_id>", methods=["DELETE"])
    @auth_required
    def delete_record(record_id):
        deleted = store().delete(current_user_id(), parse_id(record_id))
        return jsonify({"data": {"id": deleted}}), 200

    return bp


income_bp = make_records_blueprint("income", "/income")
expenses_bp = make_records_blueprint("expense", "/expenses")
