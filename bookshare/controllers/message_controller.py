from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from bookshare.errors import ServiceError, error_response
from bookshare.services.message_service import MessageService
from bookshare.utils.auth import caller_id, resolve_caller
from bookshare.utils.serializers import message_json

message_bp = Blueprint("messages", __name__)


@message_bp.get("/")
@jwt_required()
def messages():
    me = caller_id()
    with_user = request.args.get("with")
    try:
        if with_user:
            other, rows = MessageService.thread(me, with_user, book_id=request.args.get("book_id"))
            return jsonify({
                "success": True,
                "with": {"id": other.id, "name": other.name, "avatar_url": other.avatar_url},
                "messages": [message_json(m) for m in rows],
            })

        conversations = MessageService.inbox(me)
    except ServiceError as e:
        return error_response(e)

    return jsonify({"success": True, "conversations": [
        {
            "other_id": c["other_id"],
            "other_name": c["other"].name if c["other"] else None,
            "other_avatar": c["other"].avatar_url if c["other"] else None,
            "book_title": c["last_message"].book.title if c["last_message"].book else None,
            "unread": c["unread"],
            "last_message": message_json(c["last_message"]),
        }
        for c in conversations
    ]})


@message_bp.post("/")
@jwt_required()
def send_message():
    data = request.get_json(silent=True) or {}
    try:
        m = MessageService.send(
            caller_id(),
            data.get("receiver_id"),
            data.get("content"),
            book_id=data.get("book_id"),
            borrow_request_id=data.get("borrow_request_id"),
        )
        return jsonify({"success": True, "message": message_json(m)}), 201
    except ServiceError as e:
        return error_response(e)


@message_bp.get("/unread")
def unread():
    caller = resolve_caller(strict=False)
    if not caller:
        return jsonify({"count": 0})
    return jsonify({"count": MessageService.unread_count(caller["id"])})
