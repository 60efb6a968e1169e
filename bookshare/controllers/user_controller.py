from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from bookshare.errors import ServiceError, error_response
from bookshare.services.review_service import ReviewService
from bookshare.services.user_service import UserService
from bookshare.utils.auth import caller_id
from bookshare.utils.serializers import review_json, user_public

user_bp = Blueprint("users", __name__)


@user_bp.get("/<user_id>")
def get_user(user_id: str):
    try:
        user = UserService.get_profile(user_id)
        return jsonify({"success": True, "user": user_public(user)})
    except ServiceError as e:
        return error_response(e)


@user_bp.patch("/<user_id>")
@jwt_required()
def update_user(user_id: str):
    data = request.get_json(silent=True) or {}
    try:
        user = UserService.update_profile(caller_id(), user_id, data)
        return jsonify({"success": True, "user": user_public(user)})
    except ServiceError as e:
        return error_response(e)


@user_bp.get("/<user_id>/reviews")
def user_reviews(user_id: str):
    try:
        reviews = ReviewService.list_for_user(user_id)
        return jsonify({"success": True, "data": [review_json(r) for r in reviews]})
    except ServiceError as e:
        return error_response(e)
