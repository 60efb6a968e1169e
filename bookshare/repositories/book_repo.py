from bookshare.extensions import db
from bookshare.models.book import Book
from bookshare.models.borrow_request import ACTIVE_STATUSES, BorrowRequest
from bookshare.models.message import Message


class BookRepo:
    @staticmethod
    def search(q: str = None, genre: str = None, status: str = None, owner_id: str = None):
        query = Book.query
        if q:
            pattern = f"%{q}%"
            query = query.filter(Book.title.ilike(pattern) | Book.author.ilike(pattern))
        if genre:
            query = query.filter(Book.genre == genre)
        if status:
            query = query.filter(Book.status == status)
        if owner_id:
            query = query.filter(Book.owner_id == owner_id)
        return query.order_by(Book.created_at.desc(), Book.id.desc()).all()

    @staticmethod
    def get(book_id: str, for_update: bool = False):
        if not book_id:
            return None
        if for_update:
            return Book.query.filter_by(id=book_id).with_for_update().first()
        return db.session.get(Book, book_id)

    @staticmethod
    def create(book: Book, commit: bool = True):
        db.session.add(book)
        if commit:
            db.session.commit()
        return book

    @staticmethod
    def has_active_request(book_id: str, exclude_request_id: str = None) -> bool:
        query = BorrowRequest.query.filter(
            BorrowRequest.book_id == book_id,
            BorrowRequest.status.in_(ACTIVE_STATUSES),
        )
        if exclude_request_id:
            query = query.filter(BorrowRequest.id != exclude_request_id)
        return query.first() is not None

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(book: Book, commit: bool = True):
        request_ids = [r.id for r in book.requests]
        # messages only tag the book, keep them
        Message.query.filter(Message.book_id == book.id).update(
            {Message.book_id: None}, synchronize_session=False
        )
        if request_ids:
            Message.query.filter(Message.borrow_request_id.in_(request_ids)).update(
                {Message.borrow_request_id: None}, synchronize_session=False
            )
        db.session.delete(book)
        if commit:
            db.session.commit()
