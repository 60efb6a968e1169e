from bookshare.extensions import db
from bookshare.models.user import new_id
from bookshare.utils.timeutil import utcnow

BOOK_AVAILABLE = "available"
BOOK_RESERVED = "reserved"
BOOK_BORROWED = "borrowed"
BOOK_STATUSES = (BOOK_AVAILABLE, BOOK_RESERVED, BOOK_BORROWED)


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    title = db.Column(db.String(300), nullable=False, index=True)
    author = db.Column(db.String(300), nullable=False, index=True)
    isbn = db.Column(db.String(32), nullable=False, default="")
    cover_url = db.Column(db.String(500), nullable=False, default="")
    description = db.Column(db.Text, nullable=False, default="")
    genre = db.Column(db.String(80), nullable=False, default="", index=True)
    language = db.Column(db.String(80), nullable=False, default="English")
    condition = db.Column(db.String(40), nullable=False, default="Good")

    status = db.Column(db.String(20), nullable=False, default=BOOK_AVAILABLE, index=True)
    max_borrow_days = db.Column(db.Integer, nullable=False, default=14)

    # owner's location at listing time, not kept in sync
    lat = db.Column(db.Float, nullable=False, default=0)
    lng = db.Column(db.Float, nullable=False, default=0)
    city = db.Column(db.String(120), nullable=False, default="")
    neighborhood = db.Column(db.String(120), nullable=False, default="")

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", backref="books")
    requests = db.relationship(
        "BorrowRequest", back_populates="book", cascade="all, delete-orphan"
    )
