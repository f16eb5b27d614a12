from __future__ import annotations

from sqlalchemy import exists, or_, select
import structlog

from errors import ConflictError, NotFoundError, ReferentialIntegrityError
from models import atomic
from models.category_model import Category
from models.record_models import Expense, Income

log = structlog.get_logger(__name__)


class CategoryStore:
    """Categories of one user. Every method is scoped by ``user_id``."""

    def __init__(self, session):
        self.session = session

    def create(self, user_id: int, data) -> Category:
        category = Category(user_id=user_id, name=data.name, type=data.type)
        with atomic(self.session, integrity_error=ReferentialIntegrityError("User does not exist")):
            self.session.add(category)
        log.info("category_created", user_id=user_id, category_id=category.id, type=category.type)
        return category

    def list(self, user_id: int, type: str | None = None) -> list[Category]:
        stmt = select(Category).where(Category.user_id == user_id)
        if type:
            stmt = stmt.where(Category.type == type)
        stmt = stmt.order_by(Category.type, Category.name, Category.id)
        return list(self.session.execute(stmt).scalars())

    def find(self, user_id: int, category_id: int) -> Category | None:
        stmt = select(Category).where(Category.id == category_id, Category.user_id == user_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def get(self, user_id: int, category_id: int) -> Category:
        category = self.find(user_id, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def is_referenced(self, category_id: int) -> bool:
        stmt = select(
            or_(
                exists().where(Income.category_id == category_id),
                exists().where(Expense.category_id == category_id),
            )
        )
        return bool(self.session.execute(stmt).scalar())

    def delete(self, user_id: int, category_id: int) -> int:
        category = self.get(user_id, category_id)
        if self.is_referenced(category.id):
            raise ConflictError("Category is in use by existing income or expense records")

        # RESTRICT on the FK covers a record inserted between the check and the delete
        with atomic(
            self.session,
            integrity_error=ConflictError("Category is in use by existing income or expense records"),
        ):
            self.session.delete(category)

        log.info("category_deleted", user_id=user_id, category_id=category_id)
        return category_id
