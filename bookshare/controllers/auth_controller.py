from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, set_access_cookies, unset_jwt_cookies

from bookshare.errors import NotFound, ServiceError, error_response
from bookshare.repositories.user_repo import UserRepo
from bookshare.services.auth_service import AuthService
from bookshare.utils.auth import caller_id
from bookshare.utils.serializers import user_private

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register", endpoint="auth_register")
def register():
    data = request.get_json(silent=True) or {}
    try:
        user, token = AuthService.register(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            city=data.get("city"),
            neighborhood=data.get("neighborhood"),
            lat=data.get("lat"),
            lng=data.get("lng"),
        )
    except ServiceError as e:
        return error_response(e)

    resp = jsonify({"success": True, "token": token, "user": user_private(user)})
    set_access_cookies(resp, token)
    return resp, 201


@auth_bp.post("/login", endpoint="auth_login")
def login():
    data = request.get_json(silent=True) or {}
    try:
        token, user = AuthService.login(data.get("email"), data.get("password"))
    except ServiceError as e:
        return error_response(e)

    resp = jsonify({"success": True, "token": token, "user": user_private(user)})
    set_access_cookies(resp, token)
    return resp


@auth_bp.post("/logout", endpoint="auth_logout")
def logout():
    resp = jsonify({"success": True})
    unset_jwt_cookies(resp)
    return resp


@auth_bp.get("/me", endpoint="auth_me")
@jwt_required()
def me():
    user = UserRepo.get_by_id(caller_id())
    if not user:
        return error_response(NotFound("User not found"))
    return jsonify({"success": True, "user": user_private(user)})
