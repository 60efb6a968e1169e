from bookshare.extensions import db
from bookshare.models.user import new_id
from bookshare.utils.timeutil import utcnow

REQUEST_PENDING = "pending"
REQUEST_APPROVED = "approved"
REQUEST_REJECTED = "rejected"
REQUEST_BORROWED = "borrowed"
REQUEST_RETURNED = "returned"

# states that hold the book
ACTIVE_STATUSES = (REQUEST_APPROVED, REQUEST_BORROWED)


class BorrowRequest(db.Model):
    __tablename__ = "borrow_requests"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    book_id = db.Column(db.String(36), db.ForeignKey("books.id"), nullable=False, index=True)
    requester_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    owner_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=REQUEST_PENDING, index=True)
    message = db.Column(db.Text, nullable=False, default="")
    borrow_days = db.Column(db.Integer, nullable=False, default=14)

    requested_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    responded_at = db.Column(db.DateTime, nullable=True)
    borrowed_at = db.Column(db.DateTime, nullable=True)
    due_date = db.Column(db.Date, nullable=True)
    returned_at = db.Column(db.DateTime, nullable=True)

    book = db.relationship("Book", back_populates="requests")
    requester = db.relationship("User", foreign_keys=[requester_id])
    owner = db.relationship("User", foreign_keys=[owner_id])
    reviews = db.relationship("Review", back_populates="borrow_request", cascade="all, delete-orphan")
