from sqlalchemy import and_, func, or_

from bookshare.extensions import db
from bookshare.models.message import Message


def _pair_filter(user_id: str, other_id: str):
    return or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_id),
        and_(Message.sender_id == other_id, Message.receiver_id == user_id),
    )


class MessageRepo:
    @staticmethod
    def create(message: Message, commit: bool = True):
        db.session.add(message)
        if commit:
            db.session.commit()
        return message

    @staticmethod
    def thread(user_id: str, other_id: str, book_id: str = None):
        query = Message.query.filter(_pair_filter(user_id, other_id))
        if book_id:
            query = query.filter(Message.book_id == book_id)
        return query.order_by(Message.created_at.asc(), Message.id.asc()).all()

    @staticmethod
    def mark_thread_read(receiver_id: str, sender_id: str) -> int:
        # only the counterpart -> receiver direction
        return Message.query.filter(
            Message.receiver_id == receiver_id,
            Message.sender_id == sender_id,
            Message.read.is_(False),
        ).update({Message.read: True}, synchronize_session=False)

    @staticmethod
    def involving(user_id: str):
        return (
            Message.query.filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .all()
        )

    @staticmethod
    def unread_count(user_id: str) -> int:
        return (
            db.session.query(func.count(Message.id))
            .filter(Message.receiver_id == user_id, Message.read.is_(False))
            .scalar()
            or 0
        )
