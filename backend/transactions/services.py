from __future__ import annotations

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import Numeric, func, select, type_coerce

from models.category_model import Category
from models.record_models import Expense, Income
from money import CENT, as_money


def _money_sum(column):
    # keep SUM typed as NUMERIC so drivers hand back Decimal, and 0 for no rows
    return type_coerce(func.coalesce(func.sum(column), 0), Numeric(14, 2))


class Summaries:
    """
    Aggregates over a user's money records in an inclusive date window.

    Sums run in SQL over NUMERIC columns and come back as Decimal; nothing is
    converted to float before the JSON boundary.
    """

    def __init__(self, session):
        self.session = session

    def _totals(self, model, user_id: int, start: datetime, end: datetime) -> dict:
        stmt = select(
            _money_sum(model.amount).label("total"),
            func.count(model.id).label("count"),
        ).where(
            model.user_id == user_id,
            model.date >= start,
            model.date <= end,
        )
        row = self.session.execute(stmt).one()
        return {"total": as_money(row.total), "count": int(row.count or 0)}

    def summarize(self, user_id: int, start: datetime, end: datetime) -> dict:
        income = self._totals(Income, user_id, start, end)
        expenses = self._totals(Expense, user_id, start, end)
        return {
            "income": income,
            "expenses": expenses,
            "net": income["total"] - expenses["total"],
        }

    def spending_by_category(self, user_id: int, start: datetime, end: datetime) -> list[dict]:
        """Expense totals per category; categories without expenses in the window are left out."""
        total = _money_sum(Expense.amount).label("total")
        count = func.count(Expense.id).label("count")
        stmt = (
            select(Expense.category_id, Category.name, total, count)
            .join(Category, Expense.category_id == Category.id)
            .where(
                Expense.user_id == user_id,
                Expense.date >= start,
                Expense.date <= end,
            )
            .group_by(Expense.category_id, Category.name)
        )

        out = []
        for category_id, name, cat_total, cat_count in self.session.execute(stmt):
            cat_total = as_money(cat_total)
            cat_count = int(cat_count)
            average = (cat_total / Decimal(cat_count)).quantize(CENT, rounding=ROUND_HALF_UP)
            out.append(
                {
                    "categoryId": category_id,
                    "categoryName": name,
                    "total": cat_total,
                    "count": cat_count,
                    "average": average,
                }
            )
        out.sort(key=lambda x: (-x["total"], x["categoryId"]))
        return out
