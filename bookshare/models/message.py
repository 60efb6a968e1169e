from bookshare.extensions import db
from bookshare.models.user import new_id
from bookshare.utils.timeutil import utcnow


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    sender_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    # optional context tags
    book_id = db.Column(db.String(36), db.ForeignKey("books.id"), nullable=True, index=True)
    borrow_request_id = db.Column(db.String(36), db.ForeignKey("borrow_requests.id"), nullable=True)

    content = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    sender = db.relationship("User", foreign_keys=[sender_id])
    receiver = db.relationship("User", foreign_keys=[receiver_id])
    book = db.relationship("Book")
