# backend/models/user_model.py

from models import db
from money import iso, utcnow


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    password = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # never hand a deleted user's id (and so their tokens) to someone else
    __table_args__ = {"sqlite_autoincrement": True}

    def public_dict(self, with_timestamps=False):
        """Fields safe to return to a client. The password hash never leaves."""
        out = {"id": self.id, "email": self.email, "name": self.name}
        if with_timestamps:
            out["createdAt"] = iso(self.created_at)
            out["updatedAt"] = iso(self.updated_at)
        return out
