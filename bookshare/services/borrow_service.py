from datetime import timedelta

from flask import current_app

from bookshare.errors import Conflict, Forbidden, InvalidArgument, InvalidState, NotFound
from bookshare.extensions import db
from bookshare.models.book import BOOK_AVAILABLE, BOOK_BORROWED, BOOK_RESERVED
from bookshare.models.borrow_request import (
    REQUEST_APPROVED,
    REQUEST_BORROWED,
    REQUEST_PENDING,
    REQUEST_REJECTED,
    REQUEST_RETURNED,
    BorrowRequest,
)
from bookshare.repositories.book_repo import BookRepo
from bookshare.repositories.borrow_request_repo import BorrowRequestRepo
from bookshare.repositories.user_repo import UserRepo
from bookshare.services.book_service import BookService
from bookshare.utils.timeutil import utc_today, utcnow
from bookshare.utils.validators import parse_positive_int


class BorrowService:
    """
    Borrow request lifecycle.

    pending -> approved | rejected, approved -> borrowed, borrowed -> returned.
    Every transition writes the request row and the book status in one
    transaction; nothing else is allowed to move a book out of ``available``
    while a request holds it.
    """

    @staticmethod
    def _load_for_update(request_id: str) -> BorrowRequest:
        req = BorrowRequestRepo.get(request_id, for_update=True)
        if not req:
            raise NotFound("Request not found")
        return req

    @staticmethod
    def create_request(caller_id: str, book_id: str, message: str = "", borrow_days=None):
        if not book_id:
            raise InvalidArgument("book_id required")

        try:
            book = BookRepo.get(book_id, for_update=True)
            if not book:
                raise NotFound("Book not found")
            if book.owner_id == caller_id:
                raise InvalidArgument("Cannot request your own book")
            if book.status != BOOK_AVAILABLE:
                raise Conflict("Book not available")
            if BorrowRequestRepo.find_pending(book.id, caller_id):
                raise Conflict("You already have a pending request")

            days = book.max_borrow_days
            if borrow_days not in (None, ""):
                days = parse_positive_int(borrow_days, "borrow_days")

            req = BorrowRequest(
                book_id=book.id,
                requester_id=caller_id,
                owner_id=book.owner_id,
                status=REQUEST_PENDING,
                message=(message or "").strip(),
                borrow_days=days,
            )
            BorrowRequestRepo.create(req, commit=False)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[borrow] request {req.id} created book={book_id} requester={caller_id}")
        return req

    @staticmethod
    def apply_action(caller_id: str, request_id: str, action: str):
        handlers = {
            "approve": BorrowService.approve,
            "reject": BorrowService.reject,
            "mark_borrowed": BorrowService.mark_borrowed,
            "mark_returned": BorrowService.mark_returned,
        }
        handler = handlers.get(action)
        if not handler:
            raise InvalidArgument("Invalid action")
        return handler(caller_id, request_id)

    @staticmethod
    def approve(caller_id: str, request_id: str):
        try:
            req = BorrowService._load_for_update(request_id)
            if req.owner_id != caller_id:
                raise Forbidden("Only the owner can approve")
            if req.status != REQUEST_PENDING:
                raise InvalidState("Only pending requests can be approved")

            book = BookRepo.get(req.book_id, for_update=True)
            if BookRepo.has_active_request(req.book_id, exclude_request_id=req.id):
                raise Conflict("Book is already promised to another request")

            now = utcnow()
            if not BorrowRequestRepo.transition(req.id, REQUEST_PENDING, REQUEST_APPROVED, responded_at=now):
                raise InvalidState("Only pending requests can be approved")
            BookService.set_status(book, BOOK_RESERVED)
            rejected = BorrowRequestRepo.reject_other_pending(req.book_id, req.id, now)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            f"[borrow] request {request_id} approved, book {req.book_id} reserved, {rejected} competing rejected"
        )
        return BorrowRequestRepo.get(request_id)

    @staticmethod
    def reject(caller_id: str, request_id: str):
        try:
            req = BorrowService._load_for_update(request_id)
            if req.owner_id != caller_id:
                raise Forbidden("Only the owner can reject")
            if req.status != REQUEST_PENDING:
                raise InvalidState("Only pending requests can be rejected")

            if not BorrowRequestRepo.transition(req.id, REQUEST_PENDING, REQUEST_REJECTED, responded_at=utcnow()):
                raise InvalidState("Only pending requests can be rejected")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[borrow] request {request_id} rejected")
        return BorrowRequestRepo.get(request_id)

    @staticmethod
    def mark_borrowed(caller_id: str, request_id: str):
        try:
            req = BorrowService._load_for_update(request_id)
            if req.owner_id != caller_id:
                raise Forbidden("Only the owner can hand the book over")
            if req.status != REQUEST_APPROVED:
                raise InvalidState("Request must be approved first")

            book = BookRepo.get(req.book_id, for_update=True)
            due = utc_today() + timedelta(days=req.borrow_days)
            if not BorrowRequestRepo.transition(
                req.id, REQUEST_APPROVED, REQUEST_BORROWED, borrowed_at=utcnow(), due_date=due
            ):
                raise InvalidState("Request must be approved first")
            BookService.set_status(book, BOOK_BORROWED)
            UserRepo.increment_books_borrowed(req.requester_id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[borrow] request {request_id} borrowed, due {due.isoformat()}")
        return BorrowRequestRepo.get(request_id)

    @staticmethod
    def mark_returned(caller_id: str, request_id: str):
        try:
            req = BorrowService._load_for_update(request_id)
            if caller_id not in (req.owner_id, req.requester_id):
                raise Forbidden("Only the owner or the borrower can mark a return")
            if req.status != REQUEST_BORROWED:
                raise InvalidState("Book is not currently borrowed")

            book = BookRepo.get(req.book_id, for_update=True)
            if not BorrowRequestRepo.transition(req.id, REQUEST_BORROWED, REQUEST_RETURNED, returned_at=utcnow()):
                raise InvalidState("Book is not currently borrowed")
            BookService.set_status(book, BOOK_AVAILABLE)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[borrow] request {request_id} returned, book {req.book_id} available")
        return BorrowRequestRepo.get(request_id)

    @staticmethod
    def get_request(caller_id: str, request_id: str):
        req = BorrowRequestRepo.get(request_id)
        if not req:
            raise NotFound("Request not found")
        if caller_id not in (req.owner_id, req.requester_id):
            raise Forbidden("Not your request")
        return req

    @staticmethod
    def list_requests(caller_id: str, role: str = "requester"):
        if role not in ("requester", "owner"):
            raise InvalidArgument("role must be requester or owner")
        return BorrowRequestRepo.list_for_user(caller_id, role)

    @staticmethod
    def is_overdue(req: BorrowRequest, today=None) -> bool:
        if req.status != REQUEST_BORROWED or not req.due_date:
            return False
        return req.due_date < (today or utc_today())
