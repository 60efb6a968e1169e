from bookshare.extensions import db
from bookshare.models.user import new_id
from bookshare.utils.timeutil import utcnow


class Review(db.Model):
    __tablename__ = "reviews"
    __table_args__ = (
        db.UniqueConstraint("reviewer_id", "borrow_request_id", name="uq_reviews_reviewer_request"),
        db.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    reviewer_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    reviewed_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    borrow_request_id = db.Column(db.String(36), db.ForeignKey("borrow_requests.id"), nullable=False)

    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=False, default="")

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    reviewer = db.relationship("User", foreign_keys=[reviewer_id])
    borrow_request = db.relationship("BorrowRequest", back_populates="reviews")
