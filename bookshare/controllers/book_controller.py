# bookshare/controllers/book_controller.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from bookshare.errors import NotFound, ServiceError, error_response
from bookshare.services.book_service import BookService
from bookshare.services.metadata_service import MetadataService
from bookshare.utils.auth import caller_id
from bookshare.utils.geo import distance_km
from bookshare.utils.serializers import book_json

book_bp = Blueprint("books", __name__)


@book_bp.get("/")
def list_books():
    lat = request.args.get("lat", type=float)
    lng = request.args.get("lng", type=float)
    books = BookService.list_books(
        q=request.args.get("q"),
        genre=request.args.get("genre"),
        status=request.args.get("status"),
        owner_id=request.args.get("owner_id"),
        lat=lat,
        lng=lng,
    )
    return jsonify({"success": True, "data": [book_json(b, distance_km=distance_km(b, lat, lng)) for b in books]})


@book_bp.get("/isbn/<isbn>")
def lookup_isbn(isbn: str):
    meta = MetadataService.lookup_isbn(isbn)
    if not meta:
        return error_response(NotFound("No metadata for this ISBN"))
    return jsonify({"success": True, "data": meta})


@book_bp.get("/<book_id>")
def get_book(book_id: str):
    try:
        b = BookService.get_book(book_id)
        return jsonify({"success": True, "data": book_json(b, detail=True)})
    except ServiceError as e:
        return error_response(e)


@book_bp.post("/")
@jwt_required()
def create_book():
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.create_book(caller_id(), data)
        return jsonify({"success": True, "data": book_json(b)}), 201
    except ServiceError as e:
        return error_response(e)


@book_bp.patch("/<book_id>")
@jwt_required()
def update_book(book_id: str):
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.update_book(caller_id(), book_id, data)
        return jsonify({"success": True, "data": book_json(b)})
    except ServiceError as e:
        return error_response(e)


@book_bp.delete("/<book_id>")
@jwt_required()
def delete_book(book_id: str):
    try:
        BookService.delete_book(caller_id(), book_id)
        return jsonify({"success": True})
    except ServiceError as e:
        return error_response(e)
