from flask import Blueprint, request, jsonify

from auth.middleware import auth_required, current_user_id
from common_schemas import query_args
from models import db
from money import iso, to_number

from .schemas import PeriodQuery
from .services import Summaries

transactions_bp = Blueprint("transactions", __name__, url_prefix="/transactions")


def _period():
    return PeriodQuery.model_validate(query_args(request.args)).resolved()


@transactions_bp.route("/summary", methods=["GET"])
@auth_required
def summary():
    """
    Income vs expenses for the current user.
    Query params: startDate, endDate (ISO-8601; default: start of year .. now).
    """
    user_id = current_user_id()
    start, end = _period()

    result = Summaries(db.session).summarize(user_id, start, end)

    return jsonify(
        {
            "data": {
                "userId": user_id,
                "period": {"start": iso(start), "end": iso(end)},
                "summary": {
                    "totalIncome": to_number(result["income"]["total"]),
                    "totalExpenses": to_number(result["expenses"]["total"]),
                    "netAmount": to_number(result["net"]),
                    "incomeCount": result["income"]["count"],
                    "expenseCount": result["expenses"]["count"],
                },
            }
        }
    ), 200


@transactions_bp.route("/by-category", methods=["GET"])
@auth_required
def by_category():
    user_id = current_user_id()
    start, end = _period()

    rows = Summaries(db.session).spending_by_category(user_id, start, end)

    return jsonify(
        {
            "data": {
                "userId": user_id,
                "period": {"start": iso(start), "end": iso(end)},
                "categories": [
                    {
                        **r,
                        "total": to_number(r["total"]),
                        "average": to_number(r["average"]),
                    }
                    for r in rows
                ],
            }
        }
    ), 200
