from bookshare.extensions import db
from bookshare.models.review import Review


class ReviewRepo:
    @staticmethod
    def find(reviewer_id: str, borrow_request_id: str):
        return Review.query.filter_by(reviewer_id=reviewer_id, borrow_request_id=borrow_request_id).first()

    @staticmethod
    def add(review: Review):
        db.session.add(review)
        return review

    @staticmethod
    def list_for_user(user_id: str):
        return (
            Review.query.filter_by(reviewed_id=user_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )
