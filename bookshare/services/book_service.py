from flask import current_app

from bookshare.errors import Conflict, Forbidden, InvalidArgument, NotFound
from bookshare.extensions import db
from bookshare.models.book import BOOK_AVAILABLE, BOOK_STATUSES, Book
from bookshare.repositories.book_repo import BookRepo
from bookshare.repositories.user_repo import UserRepo
from bookshare.services.metadata_service import MetadataService
from bookshare.utils.geo import FAR_AWAY_KM, distance_km
from bookshare.utils.timeutil import utcnow
from bookshare.utils.validators import normalize_isbn, parse_positive_int

EDITABLE_FIELDS = ("title", "author", "description", "genre", "condition", "language", "cover_url")


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


class BookService:
    @staticmethod
    def list_books(q: str = None, genre: str = None, status: str = None, owner_id: str = None,
                   lat: float = None, lng: float = None):
        """
        Newest first. When both lat and lng are given the result is ordered
        by distance to each owner instead, unknown distances last.
        """
        q = (q or "").strip()
        books = BookRepo.search(q=q or None, genre=genre or None, status=status or None, owner_id=owner_id or None)
        if lat and lng:
            def _key(b):
                d = distance_km(b, lat, lng)
                return FAR_AWAY_KM if d is None else d

            books = sorted(books, key=_key)
        return books

    @staticmethod
    def get_book(book_id: str):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    @staticmethod
    def set_status(book: Book, status: str):
        """Stages a status change; the caller owns the transaction."""
        if status not in BOOK_STATUSES:
            raise InvalidArgument(f"Invalid book status: {status}")
        book.status = status
        book.updated_at = utcnow()
        return book

    @staticmethod
    def _enrich_from_isbn(fields: dict):
        if not fields["isbn"] or not current_app.config.get("ISBN_LOOKUP_ENABLED"):
            return
        meta = MetadataService.lookup_isbn(fields["isbn"])
        if not meta:
            return
        for key in ("title", "author", "description", "cover_url"):
            if not fields[key] and meta.get(key):
                fields[key] = meta[key]

    @staticmethod
    def create_book(owner_id: str, data: dict):
        owner = UserRepo.get_by_id(owner_id)
        if not owner:
            raise NotFound("User not found")

        fields = {k: _text(data, k) for k in EDITABLE_FIELDS}
        fields["isbn"] = normalize_isbn(data.get("isbn"))
        BookService._enrich_from_isbn(fields)

        if not fields["title"] or not fields["author"]:
            raise InvalidArgument("Title and author required")

        days = data.get("borrow_days", data.get("max_borrow_days"))
        max_days = 14 if days in (None, "") else parse_positive_int(days, "max_borrow_days")

        book = Book(
            owner_id=owner.id,
            title=fields["title"],
            author=fields["author"],
            isbn=fields["isbn"],
            cover_url=fields["cover_url"],
            description=fields["description"],
            genre=fields["genre"],
            language=fields["language"] or "English",
            condition=fields["condition"] or "Good",
            status=BOOK_AVAILABLE,
            max_borrow_days=max_days,
            lat=owner.lat or 0,
            lng=owner.lng or 0,
            city=owner.city or "",
            neighborhood=owner.neighborhood or "",
        )

        try:
            BookRepo.create(book, commit=False)
            UserRepo.increment_books_shared(owner.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[books] {book.id} listed by {owner_id}")
        return book

    @staticmethod
    def update_book(caller_id: str, book_id: str, data: dict):
        book = BookService.get_book(book_id)
        if book.owner_id != caller_id:
            raise Forbidden("Only the owner can edit this book")

        changes = {k: _text(data, k) for k in EDITABLE_FIELDS if data.get(k) is not None}
        if data.get("max_borrow_days") is not None:
            changes["max_borrow_days"] = parse_positive_int(data["max_borrow_days"], "max_borrow_days")

        status = data.get("status")
        if status is not None:
            if status not in BOOK_STATUSES:
                raise InvalidArgument(f"status must be one of {', '.join(BOOK_STATUSES)}")
            # an approved/borrowed request drives the status, not the owner
            if status != book.status and BookRepo.has_active_request(book.id):
                raise Conflict("Book status is managed by an active borrow request")

        if not changes and status is None:
            raise InvalidArgument("No valid fields")
        if ("title" in changes and not changes["title"]) or ("author" in changes and not changes["author"]):
            raise InvalidArgument("Title and author cannot be empty")

        for key, value in changes.items():
            setattr(book, key, value)
        if status is not None:
            BookService.set_status(book, status)
        book.updated_at = utcnow()
        BookRepo.update()
        return book

    @staticmethod
    def delete_book(caller_id: str, book_id: str):
        book = BookService.get_book(book_id)
        if book.owner_id != caller_id:
            raise Forbidden("Only the owner can delete this book")
        if BookRepo.has_active_request(book.id):
            raise Conflict("Book is reserved or lent out")

        try:
            BookRepo.delete(book, commit=False)
            UserRepo.decrement_books_shared(caller_id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[books] {book_id} deleted by {caller_id}")
