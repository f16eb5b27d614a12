from flask import Blueprint, request, jsonify

from auth.middleware import auth_required, current_user_id
from common_schemas import parse_id, query_args
from models import db

from .schemas import BalanceCreateSchema, BalanceListQuery, BalanceUpdateSchema, LatestBalanceQuery
from .services import BalanceStore

balances_bp = Blueprint("balances", __name__, url_prefix="/balances")


@balances_bp.route("", methods=["GET"])
@auth_required
def list_balances():
    """
    Query params: currency, startDate, endDate, limit (default 50, max 100), offset.
    """
    query = BalanceListQuery.model_validate(query_args(request.args))
    rows = BalanceStore(db.session).list(current_user_id(), query)
    return jsonify({"data": [b.to_dict() for b in rows]}), 200


@balances_bp.route("", methods=["POST"])
@auth_required
def create_balance():
    data = BalanceCreateSchema.model_validate(request.get_json(silent=True) or {})
    balance = BalanceStore(db.session).create(current_user_id(), data)
    return jsonify({"data": balance.to_dict()}), 201


@balances_bp.route("/latest", methods=["GET"])
@auth_required
def latest_balance():
    query = LatestBalanceQuery.model_validate(query_args(request.args))
    balance = BalanceStore(db.session).latest(current_user_id(), query.currency)
    return jsonify({"data": balance.to_dict()}), 200


@balances_bp.route("/<balance_id>", methods=["GET"])
@auth_required
def get_balance(balance_id):
    balance = BalanceStore(db.session).get(current_user_id(), parse_id(balance_id))
    return jsonify({"data": balance.to_dict()}), 200


@balances_bp.route("/<balance_id>", methods=["PUT"])
@auth_required
def update_balance(balance_id):
    balance_id = parse_id(balance_id)
    changes = BalanceUpdateSchema.model_validate(request.get_json(silent=True) or {})
    balance = BalanceStore(db.session).update(current_user_id(), balance_id, changes)
    return jsonify({"data": balance.to_dict()}), 200


@balances_bp.route("/<balance_id>", methods=["DELETE"])
@auth_required
def delete_balance(balance_id):
    deleted = BalanceStore(db.session).delete(current_user_id(), parse_id(balance_id))
    return jsonify({"data": {"id": deleted}}), 200
