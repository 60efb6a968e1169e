from werkzeug.security import generate_password_hash, check_password_hash
from flask import current_app
from flask_jwt_extended import create_access_token

from bookshare.errors import Conflict, InvalidArgument, Unauthorized
from bookshare.models.user import User
from bookshare.repositories.user_repo import UserRepo
from bookshare.utils.validators import looks_like_email, normalize_email


def _optional_float(value, field: str) -> float:
    if value in (None, ""):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{field} must be a number")


class AuthService:
    @staticmethod
    def issue_credential(user: User) -> str:
        # expiry comes from JWT_ACCESS_TOKEN_EXPIRES
        return create_access_token(
            identity=str(user.id),
            additional_claims={"email": user.email, "name": user.name},
        )

    @staticmethod
    def register(name: str, email: str, password: str, city: str = "", neighborhood: str = "", lat=None, lng=None):
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise InvalidArgument("name, email and password are required")
        if not looks_like_email(email):
            raise InvalidArgument("Invalid email")
        if UserRepo.get_by_email(email):
            raise Conflict("Email already registered")

        user = User(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            city=(city or "").strip(),
            neighborhood=(neighborhood or "").strip(),
            lat=_optional_float(lat, "lat"),
            lng=_optional_float(lng, "lng"),
        )
        UserRepo.create(user)
        current_app.logger.info(f"[auth] registered user {user.id}")
        return user, AuthService.issue_credential(user)

    @staticmethod
    def login(email: str, password: str):
        user = UserRepo.get_by_email(normalize_email(email))
        if not user or not check_password_hash(user.password_hash, password or ""):
            raise Unauthorized("Invalid credentials")
        return AuthService.issue_credential(user), user
