from bookshare.errors import InvalidArgument, NotFound
from bookshare.extensions import db
from bookshare.models.message import Message
from bookshare.repositories.book_repo import BookRepo
from bookshare.repositories.borrow_request_repo import BorrowRequestRepo
from bookshare.repositories.message_repo import MessageRepo
from bookshare.repositories.user_repo import UserRepo


class MessageService:
    @staticmethod
    def send(caller_id: str, receiver_id: str, content: str, book_id: str = None, borrow_request_id: str = None):
        content = (content or "").strip()
        if not receiver_id or not content:
            raise InvalidArgument("receiver_id and content required")
        if receiver_id == caller_id:
            raise InvalidArgument("Cannot message yourself")
        if not UserRepo.get_by_id(receiver_id):
            raise NotFound("Receiver not found")
        if book_id and not BookRepo.get(book_id):
            raise NotFound("Book not found")
        if borrow_request_id and not BorrowRequestRepo.get(borrow_request_id):
            raise NotFound("Request not found")

        message = Message(
            sender_id=caller_id,
            receiver_id=receiver_id,
            content=content,
            book_id=book_id or None,
            borrow_request_id=borrow_request_id or None,
        )
        return MessageRepo.create(message)

    @staticmethod
    def thread(caller_id: str, with_user_id: str, book_id: str = None):
        """
        Messages with one counterpart, oldest first. Opening the thread marks
        the counterpart's unread messages to the caller as read, whatever the
        book filter. The returned rows still show the state before marking.
        """
        other = UserRepo.get_by_id(with_user_id)
        if not other:
            raise NotFound("User not found")

        try:
            messages = MessageRepo.thread(caller_id, other.id, book_id=book_id)
            # detached rows keep their loaded read flags through the commit
            for m in messages:
                db.session.expunge(m)
            MessageRepo.mark_thread_read(receiver_id=caller_id, sender_id=other.id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return other, messages

    @staticmethod
    def inbox(caller_id: str):
        """One entry per counterpart, newest conversation first."""
        conversations = {}
        for m in MessageRepo.involving(caller_id):
            other_id = m.receiver_id if m.sender_id == caller_id else m.sender_id
            conv = conversations.get(other_id)
            if conv is None:
                conv = conversations[other_id] = {"other_id": other_id, "last_message": m, "unread": 0}
            if m.receiver_id == caller_id and not m.read:
                conv["unread"] += 1

        rows = []
        for conv in conversations.values():
            conv["other"] = UserRepo.get_by_id(conv["other_id"])
            rows.append(conv)
        return rows

    @staticmethod
    def unread_count(caller_id: str) -> int:
        return MessageRepo.unread_count(caller_id)
