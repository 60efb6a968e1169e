from sqlalchemy import or_

from bookshare.extensions import db
from bookshare.models.contact import Contact


def canonical_pair(user_x: str, user_y: str):
    a, b = sorted((user_x, user_y))
    return a, b


class ContactRepo:
    @staticmethod
    def find(user_x: str, user_y: str):
        a, b = canonical_pair(user_x, user_y)
        return Contact.query.filter_by(user_a=a, user_b=b).first()

    @staticmethod
    def ensure(user_x: str, user_y: str):
        """Insert the edge for the pair unless it exists. Does not commit."""
        existing = ContactRepo.find(user_x, user_y)
        if existing:
            return existing, False
        a, b = canonical_pair(user_x, user_y)
        contact = Contact(user_a=a, user_b=b)
        db.session.add(contact)
        # flush so a second ensure() in the same transaction sees the row
        db.session.flush()
        return contact, True

    @staticmethod
    def list_for(user_id: str):
        return Contact.query.filter(or_(Contact.user_a == user_id, Contact.user_b == user_id)).all()
