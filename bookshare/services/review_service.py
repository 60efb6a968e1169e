from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookshare.errors import Conflict, Forbidden, InvalidArgument, InvalidState, NotFound
from bookshare.extensions import db
from bookshare.models.borrow_request import REQUEST_RETURNED
from bookshare.models.review import Review
from bookshare.repositories.borrow_request_repo import BorrowRequestRepo
from bookshare.repositories.review_repo import ReviewRepo
from bookshare.repositories.user_repo import UserRepo


def _parse_rating(value) -> int:
    if isinstance(value, bool):
        raise InvalidArgument("rating must be an integer from 1 to 5")
    try:
        rating = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument("rating must be an integer from 1 to 5")
    if rating != value and str(rating) != str(value).strip():
        raise InvalidArgument("rating must be an integer from 1 to 5")
    if not 1 <= rating <= 5:
        raise InvalidArgument("rating must be an integer from 1 to 5")
    return rating


class ReviewService:
    @staticmethod
    def create_review(caller_id: str, borrow_request_id: str, rating, comment: str = ""):
        req = BorrowRequestRepo.get(borrow_request_id)
        if not req:
            raise NotFound("Request not found")
        if caller_id not in (req.owner_id, req.requester_id):
            raise Forbidden("Only the two parties can review a loan")
        if req.status != REQUEST_RETURNED:
            raise InvalidState("Only returned loans can be reviewed")
        rating = _parse_rating(rating)
        if ReviewRepo.find(caller_id, req.id):
            raise Conflict("You already reviewed this loan")

        reviewed_id = req.requester_id if caller_id == req.owner_id else req.owner_id
        try:
            review = ReviewRepo.add(Review(
                reviewer_id=caller_id,
                reviewed_id=reviewed_id,
                borrow_request_id=req.id,
                rating=rating,
                comment=(comment or "").strip(),
            ))
            user = UserRepo.get_by_id(reviewed_id, for_update=True)
            count = user.rating_count or 0
            # running mean; the 5.0 default only stands until the first review
            user.rating = ((user.rating or 0) * count + rating) / (count + 1) if count else float(rating)
            user.rating_count = count + 1
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict("You already reviewed this loan")
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[reviews] {caller_id} rated {reviewed_id} {rating}")
        return review

    @staticmethod
    def list_for_user(user_id: str):
        if not UserRepo.get_by_id(user_id):
            raise NotFound("User not found")
        return ReviewRepo.list_for_user(user_id)
