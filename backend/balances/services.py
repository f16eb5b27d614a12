from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
import structlog

from errors import BadRequestError, NotFoundError, ReferentialIntegrityError
from models import atomic
from models.balance_model import Balance
from money import ZERO, to_decimal, utcnow

log = structlog.get_logger(__name__)


class BalanceStore:
    """Balance snapshots of one user. Every method is scoped by ``user_id``."""

    def __init__(self, session):
        self.session = session

    def create(self, user_id: int, data) -> Balance:
        balance = Balance(
            user_id=user_id,
            amount=data.amount,
            currency=data.currency,
            date=data.date,
        )
        with atomic(self.session, integrity_error=ReferentialIntegrityError("User does not exist")):
            self.session.add(balance)
        log.info("balance_created", user_id=user_id, balance_id=balance.id, currency=balance.currency)
        return balance

    def list(self, user_id: int, query) -> list[Balance]:
        stmt = select(Balance).where(Balance.user_id == user_id)
        if query.currency:
            stmt = stmt.where(Balance.currency == query.currency)
        if query.start_date:
            stmt = stmt.where(Balance.date >= query.start_date)
        if query.end_date:
            stmt = stmt.where(Balance.date <= query.end_date)
        stmt = (
            stmt.order_by(Balance.date.desc(), Balance.id.desc())
            .limit(query.limit)
            .offset(query.offset)
        )
        return list(self.session.execute(stmt).scalars())

    def find_latest(self, user_id: int, currency: str | None = "USD") -> Balance | None:
        stmt = select(Balance).where(Balance.user_id == user_id)
        if currency:
            stmt = stmt.where(Balance.currency == currency)
        stmt = stmt.order_by(Balance.date.desc(), Balance.id.desc()).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def latest(self, user_id: int, currency: str = "USD") -> Balance:
        balance = self.find_latest(user_id, currency)
        if balance is None:
            raise NotFoundError(f"No {currency} balance recorded")
        return balance

    def get(self, user_id: int, balance_id: int) -> Balance:
        stmt = select(Balance).where(Balance.id == balance_id, Balance.user_id == user_id)
        balance = self.session.execute(stmt).scalar_one_or_none()
        if balance is None:
            raise NotFoundError("Balance record not found")
        return balance

    def update(self, user_id: int, balance_id: int, changes) -> Balance:
        balance = self.get(user_id, balance_id)
        fields = changes.model_dump(exclude_unset=True)
        if not fields:
            return balance
        with atomic(self.session):
            for name, value in fields.items():
                setattr(balance, name, value)
        log.info("balance_updated", user_id=user_id, balance_id=balance_id, fields=sorted(fields))
        return balance

    def delete(self, user_id: int, balance_id: int) -> int:
        balance = self.get(user_id, balance_id)
        with atomic(self.session):
            self.session.delete(balance)
        log.info("balance_deleted", user_id=user_id, balance_id=balance_id)
        return balance_id

    def stage_adjustment(self, user_id: int, delta: Decimal, currency: str = "USD") -> Balance:
        """
        Add a snapshot equal to the latest one for ``currency`` moved by
        ``delta``. Only stages the row; the caller owns the transaction.

        The new snapshot is dated now, or at the latest snapshot's date when
        that one lies in the future, so it always becomes the latest.
        """
        latest = self.find_latest(user_id, currency)
        base = Decimal(latest.amount) if latest is not None else ZERO
        try:
            amount = to_decimal(base + delta)
        except ValueError as e:
            raise BadRequestError(f"Adjusted {currency} balance {e}") from None

        date = utcnow()
        if latest is not None and latest.date > date:
            date = latest.date

        balance = Balance(
            user_id=user_id,
            amount=amount,
            currency=currency,
            date=date,
        )
        self.session.add(balance)
        return balance
