from __future__ import annotations

from sqlalchemy import delete, select
import structlog

from balances.services import BalanceStore
from errors import NotFoundError
from models import atomic
from models.balance_model import Balance
from models.category_model import Category
from models.record_models import Expense, Income
from models.user_model import User

log = structlog.get_logger(__name__)


class UserStore:
    def __init__(self, session):
        self.session = session

    def _get(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def overview(self, user_id: int) -> dict:
        """
        The user's public columns plus their categories and most recent
        balance snapshot, each loaded by its own explicit query.
        """
        user = self._get(user_id)

        categories = self.session.execute(
            select(Category)
            .where(Category.user_id == user_id)
            .order_by(Category.type, Category.name, Category.id)
        ).scalars()

        latest = BalanceStore(self.session).find_latest(user_id, currency=None)

        return {
            **user.public_dict(with_timestamps=True),
            "categories": [c.to_dict() for c in categories],
            "latestBalance": latest.to_dict() if latest is not None else None,
        }

    def delete(self, user_id: int) -> int:
        """
        Remove the user and everything they own in one transaction.

        Records go before categories so the RESTRICT key on category_id never
        trips; the FK cascades would also catch anything left over.
        """
        user = self._get(user_id)
        with atomic(self.session):
            for model in (Income, Expense, Balance, Category):
                self.session.execute(
                    delete(model)
                    .where(model.user_id == user_id)
                    .execution_options(synchronize_session=False)
                )
            self.session.delete(user)
        log.info("user_deleted", user_id=user_id)
        return user_id
