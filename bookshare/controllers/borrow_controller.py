from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from bookshare.errors import ServiceError, error_response
from bookshare.services.borrow_service import BorrowService
from bookshare.utils.auth import caller_id
from bookshare.utils.serializers import request_json

borrow_bp = Blueprint("requests", __name__)


@borrow_bp.get("/")
@jwt_required()
def list_requests():
    try:
        rows = BorrowService.list_requests(caller_id(), request.args.get("role") or "requester")
    except ServiceError as e:
        return error_response(e)
    return jsonify({"success": True, "data": [
        request_json(r, book_title=title, book_cover=cover, requester_name=requester, owner_name=owner)
        for r, title, cover, requester, owner in rows
    ]})


@borrow_bp.post("/")
@jwt_required()
def create_request():
    data = request.get_json(silent=True) or {}
    try:
        r = BorrowService.create_request(
            caller_id(),
            data.get("book_id"),
            message=data.get("message") or "",
            borrow_days=data.get("borrow_days"),
        )
        return jsonify({"success": True, "data": request_json(r)}), 201
    except ServiceError as e:
        return error_response(e)


@borrow_bp.get("/<request_id>")
@jwt_required()
def get_request(request_id: str):
    try:
        r = BorrowService.get_request(caller_id(), request_id)
        return jsonify({"success": True, "data": request_json(r)})
    except ServiceError as e:
        return error_response(e)


@borrow_bp.patch("/<request_id>")
@jwt_required()
def update_request(request_id: str):
    data = request.get_json(silent=True) or {}
    try:
        r = BorrowService.apply_action(caller_id(), request_id, data.get("action"))
        return jsonify({"success": True, "data": request_json(r)})
    except ServiceError as e:
        return error_response(e)
