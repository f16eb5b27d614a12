from models import db
from money import iso, utcnow

CATEGORY_TYPES = ("income", "expense")


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    type = db.Column(db.Enum(*CATEGORY_TYPES, name="category_type"), nullable=False, index=True)

    # Ownership
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        db.Index("user_type_idx", "user_id", "type"),
        {"sqlite_autoincrement": True},
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "userId": self.user_id,
            "createdAt": iso(self.created_at),
        }
