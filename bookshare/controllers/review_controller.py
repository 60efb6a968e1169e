from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from bookshare.errors import ServiceError, error_response
from bookshare.services.review_service import ReviewService
from bookshare.utils.auth import caller_id
from bookshare.utils.serializers import review_json

review_bp = Blueprint("reviews", __name__)


@review_bp.post("/")
@jwt_required()
def create_review():
    data = request.get_json(silent=True) or {}
    try:
        review = ReviewService.create_review(
            caller_id(),
            data.get("borrow_request_id"),
            data.get("rating"),
            comment=data.get("comment") or "",
        )
        return jsonify({"success": True, "data": review_json(review)}), 201
    except ServiceError as e:
        return error_response(e)
