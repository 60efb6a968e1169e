from bookshare.errors import Forbidden, InvalidArgument, NotFound
from bookshare.extensions import db
from bookshare.repositories.user_repo import UserRepo

PROFILE_FIELDS = ("name", "bio", "avatar_url", "city", "neighborhood", "lat", "lng")


class UserService:
    @staticmethod
    def get_profile(user_id: str):
        user = UserRepo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    @staticmethod
    def update_profile(caller_id: str, user_id: str, data: dict):
        if caller_id != user_id:
            raise Forbidden("You can only edit your own profile")
        user = UserService.get_profile(user_id)

        changes = {k: data[k] for k in PROFILE_FIELDS if data.get(k) is not None}
        if not changes:
            raise InvalidArgument("No valid fields")

        for key in ("lat", "lng"):
            if key in changes:
                try:
                    changes[key] = float(changes[key])
                except (TypeError, ValueError):
                    raise InvalidArgument(f"{key} must be a number")
        if "name" in changes:
            changes["name"] = str(changes["name"]).strip()
            if not changes["name"]:
                raise InvalidArgument("name cannot be empty")

        for key, value in changes.items():
            setattr(user, key, value)
        db.session.commit()
        return user
