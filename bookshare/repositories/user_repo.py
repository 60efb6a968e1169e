from bookshare.extensions import db
from bookshare.models.user import User


class UserRepo:
    @staticmethod
    def get_by_email(email: str):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_by_id(user_id: str, for_update: bool = False):
        if not user_id:
            return None
        if for_update:
            return User.query.filter_by(id=user_id).with_for_update().first()
        return db.session.get(User, user_id)

    @staticmethod
    def create(user: User, commit: bool = True):
        db.session.add(user)
        if commit:
            db.session.commit()
        return user

    # counters are bumped with a single UPDATE so concurrent requests don't lose increments

    @staticmethod
    def increment_books_borrowed(user_id: str):
        User.query.filter(User.id == user_id).update(
            {User.books_borrowed: User.books_borrowed + 1}, synchronize_session=False
        )

    @staticmethod
    def increment_books_shared(user_id: str):
        User.query.filter(User.id == user_id).update(
            {User.books_shared: User.books_shared + 1}, synchronize_session=False
        )

    @staticmethod
    def decrement_books_shared(user_id: str):
        User.query.filter(User.id == user_id, User.books_shared > 0).update(
            {User.books_shared: User.books_shared - 1}, synchronize_session=False
        )
