from sqlalchemy.orm import declared_attr

from models import db
from money import iso, to_number, utcnow


class MoneyRecordMixin:
    """
    Columns shared by the income and expenses tables.

    The category FK is RESTRICT: a category cannot disappear while a record
    still points at it. The user FK cascades.
    """

    kind = None

    id = db.Column(db.Integer, primary_key=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @declared_attr
    def user_id(cls):
        return db.Column(
            db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
        )

    @declared_attr
    def category_id(cls):
        return db.Column(
            db.Integer,
            db.ForeignKey("categories.id", ondelete="RESTRICT"),
            index=True,
            nullable=False,
        )

    @declared_attr
    def __table_args__(cls):
        return (
            db.Index(f"{cls.__tablename__}_user_date_idx", "user_id", "date"),
            {"sqlite_autoincrement": True},
        )

    def to_dict(self, category=None):
        out = {
            "id": self.id,
            "userId": self.user_id,
            "categoryId": self.category_id,
            "amount": to_number(self.amount),
            "description": self.description,
            "date": iso(self.date),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if category is not None:
            out["category"] = {"id": category.id, "name": category.name, "type": category.type}
        return out


class Income(MoneyRecordMixin, db.Model):
    __tablename__ = "income"
    kind = "income"


class Expense(MoneyRecordMixin, db.Model):
    __tablename__ = "expenses"
    kind = "expense"


RECORD_MODELS = {"income": Income, "expense": Expense}
