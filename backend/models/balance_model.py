from models import db
from money import iso, to_number, utcnow


class Balance(db.Model):
    """Point-in-time balance of one of the user's accounts, in one currency."""

    __tablename__ = "balances"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # may be negative (overdraft)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    currency = db.Column(db.String(3), nullable=False, default="USD", index=True)
    date = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        db.Index("balances_user_date_idx", "user_id", "date"),
        {"sqlite_autoincrement": True},
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "amount": to_number(self.amount),
            "currency": self.currency,
            "date": iso(self.date),
            "createdAt": iso(self.created_at),
        }
