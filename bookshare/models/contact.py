from bookshare.extensions import db
from bookshare.models.user import new_id
from bookshare.utils.timeutil import utcnow


class Contact(db.Model):
    """Undirected edge between two users, stored once with user_a < user_b."""

    __tablename__ = "contacts"
    __table_args__ = (
        db.UniqueConstraint("user_a", "user_b", name="uq_contacts_pair"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_a = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    user_b = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
