from __future__ import annotations

import structlog
from sqlalchemy import select

from balances.services import BalanceStore
from errors import BadRequestError, NotFoundError, ReferentialIntegrityError
from models import atomic
from models.category_model import Category
from models.record_models import RECORD_MODELS

log = structlog.get_logger(__name__)

INVALID_CATEGORY = "Invalid categoryId: Category does not exist"


class RecordStore:
    """
    Income or expense records of one user.

    Every method takes the caller's ``user_id`` and filters on it in SQL;
    a record owned by somebody else looks exactly like a missing one.
    """

    def __init__(self, session, kind: str):
        if kind not in RECORD_MODELS:
            raise ValueError(f"unknown record kind: {kind!r}")
        self.session = session
        self.kind = kind
        self.model = RECORD_MODELS[kind]
        self.label = "Income" if kind == "income" else "Expense"

    def _category_for(self, user_id: int, category_id: int) -> Category:
        stmt = select(Category).where(Category.id == category_id, Category.user_id == user_id)
        category = self.session.execute(stmt).scalar_one_or_none()
        if category is None:
            raise ReferentialIntegrityError(INVALID_CATEGORY)
        if category.type != self.kind:
            raise BadRequestError(
                f"Invalid categoryId: category {category.id} is an {category.type} category"
            )
        return category

    def _owned(self, user_id: int, record_id: int):
        model = self.model
        stmt = select(model).where(model.id == record_id, model.user_id == user_id)
        record = self.session.execute(stmt).scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"{self.label} record not found")
        return record

    def create(self, user_id: int, data):
        category = self._category_for(user_id, data.category_id)
        record = self.model(
            user_id=user_id,
            category_id=category.id,
            amount=data.amount,
            description=data.description or None,
            date=data.date,
        )

        with atomic(self.session, integrity_error=ReferentialIntegrityError(INVALID_CATEGORY)):
            self.session.add(record)
            if data.adjust_balance:
                delta = data.amount if self.kind == "income" else -data.amount
                BalanceStore(self.session).stage_adjustment(user_id, delta, data.currency)

        log.info(
            "record_created",
            kind=self.kind,
            user_id=user_id,
            record_id=record.id,
            adjusted_balance=data.adjust_balance,
        )
        return record, category

    def list(self, user_id: int, query):
        """Newest first, joined to categories for the category summary."""
        model = self.model
        stmt = (
            select(model, Category)
            .join(Category, model.category_id == Category.id)
            .where(model.user_id == user_id, Category.user_id == user_id)
        )
        if query.start_date:
            stmt = stmt.where(model.date >= query.start_date)
        if query.end_date:
            stmt = stmt.where(model.date <= query.end_date)
        if query.category_id:
            stmt = stmt.where(model.category_id == query.category_id)
        stmt = (
            stmt.order_by(model.date.desc(), model.id.desc())
            .limit(query.limit)
            .offset(query.offset)
        )
        return [(row[0], row[1]) for row in self.session.execute(stmt)]

    def get(self, user_id: int, record_id: int):
        model = self.model
        stmt = (
            select(model, Category)
            .join(Category, model.category_id == Category.id)
            .where(model.id == record_id, model.user_id == user_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            raise NotFoundError(f"{self.label} record not found")
        return row[0], row[1]

    def update(self, user_id: int, record_id: int, changes):
        record = self._owned(user_id, record_id)
        fields = changes.model_dump(exclude_unset=True)

        if "category_id" in fields:
            self._category_for(user_id, fields["category_id"])
        if "description" in fields:
            fields["description"] = fields["description"] or None

        if fields:
            with atomic(self.session, integrity_error=ReferentialIntegrityError(INVALID_CATEGORY)):
                for name, value in fields.items():
                    setattr(record, name, value)
            log.info(
                "record_updated",
                kind=self.kind,
                user_id=user_id,
                record_id=record_id,
                fields=sorted(fields),
            )

        return record, self.session.get(Category, record.category_id)

    def delete(self, user_id: int, record_id: int) -> int:
        record = self._owned(user_id, record_id)
        with atomic(self.session):
            self.session.delete(record)
        log.info("record_deleted", kind=self.kind, user_id=user_id, record_id=record_id)
        return record_id
