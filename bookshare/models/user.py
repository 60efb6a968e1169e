import uuid

from bookshare.extensions import db
from bookshare.utils.timeutil import utcnow


def new_id() -> str:
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    bio = db.Column(db.Text, nullable=False, default="")
    avatar_url = db.Column(db.String(500), nullable=False, default="")

    city = db.Column(db.String(120), nullable=False, default="")
    neighborhood = db.Column(db.String(120), nullable=False, default="")
    lat = db.Column(db.Float, nullable=False, default=0)
    lng = db.Column(db.Float, nullable=False, default=0)

    books_shared = db.Column(db.Integer, nullable=False, default=0)
    books_borrowed = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Float, nullable=False, default=5.0)
    rating_count = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
