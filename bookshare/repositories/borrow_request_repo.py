from sqlalchemy.orm import aliased

from bookshare.extensions import db
from bookshare.models.book import Book
from bookshare.models.borrow_request import REQUEST_PENDING, REQUEST_REJECTED, BorrowRequest
from bookshare.models.user import User


class BorrowRequestRepo:
    @staticmethod
    def get(request_id: str, for_update: bool = False):
        if not request_id:
            return None
        if for_update:
            return BorrowRequest.query.filter_by(id=request_id).with_for_update().first()
        return db.session.get(BorrowRequest, request_id)

    @staticmethod
    def find_pending(book_id: str, requester_id: str):
        return BorrowRequest.query.filter_by(
            book_id=book_id, requester_id=requester_id, status=REQUEST_PENDING
        ).first()

    @staticmethod
    def create(borrow_request: BorrowRequest, commit: bool = True):
        db.session.add(borrow_request)
        if commit:
            db.session.commit()
        return borrow_request

    @staticmethod
    def transition(request_id: str, from_status: str, to_status: str, **fields) -> bool:
        """
        Conditional status change: only applies while the row is still in
        ``from_status``. Returns False when another writer got there first.
        """
        values = {"status": to_status}
        values.update(fields)
        count = BorrowRequest.query.filter(
            BorrowRequest.id == request_id,
            BorrowRequest.status == from_status,
        ).update(values, synchronize_session=False)
        return count == 1

    @staticmethod
    def reject_other_pending(book_id: str, keep_request_id: str, responded_at) -> int:
        return BorrowRequest.query.filter(
            BorrowRequest.book_id == book_id,
            BorrowRequest.id != keep_request_id,
            BorrowRequest.status == REQUEST_PENDING,
        ).update(
            {"status": REQUEST_REJECTED, "responded_at": responded_at},
            synchronize_session=False,
        )

    @staticmethod
    def list_for_user(user_id: str, role: str = "requester"):
        """Rows of (request, book_title, book_cover, requester_name, owner_name)."""
        requester = aliased(User)
        owner = aliased(User)
        query = (
            db.session.query(
                BorrowRequest,
                Book.title,
                Book.cover_url,
                requester.name,
                owner.name,
            )
            .join(Book, BorrowRequest.book_id == Book.id)
            .join(requester, BorrowRequest.requester_id == requester.id)
            .join(owner, BorrowRequest.owner_id == owner.id)
        )
        if role == "owner":
            query = query.filter(BorrowRequest.owner_id == user_id)
        else:
            query = query.filter(BorrowRequest.requester_id == user_id)
        return query.order_by(BorrowRequest.requested_at.desc(), BorrowRequest.id.desc()).all()
