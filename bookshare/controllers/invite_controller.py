from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from bookshare.errors import ServiceError, error_response
from bookshare.services.invite_service import InviteService
from bookshare.utils.auth import caller_id, resolve_caller
from bookshare.utils.serializers import invite_json, iso, user_public

invite_bp = Blueprint("invites", __name__)


@invite_bp.get("/invites")
@jwt_required()
def list_invites():
    invites = InviteService.list_invites(caller_id())
    return jsonify({"success": True, "data": [invite_json(i, with_token=True) for i in invites]})


@invite_bp.post("/invites")
@jwt_required()
def create_invites():
    data = request.get_json(silent=True) or {}
    try:
        created = InviteService.create_invites(caller_id(), data.get("emails"))
    except ServiceError as e:
        return error_response(e)
    return jsonify({
        "success": True,
        "created": [invite_json(i, with_token=True) for i in created],
        "count": len(created),
    }), 201


@invite_bp.get("/invites/accept")
def preview_invite():
    try:
        invite = InviteService.lookup_invite(request.args.get("token"))
    except ServiceError as e:
        return error_response(e)
    inviter = invite.inviter
    return jsonify({"success": True, "invite": {
        "email": invite.email,
        "status": invite.status,
        "inviter_name": inviter.name if inviter else None,
        "inviter_city": inviter.city if inviter else None,
        "inviter_books_shared": inviter.books_shared if inviter else 0,
    }})


@invite_bp.post("/invites/accept")
def accept_invite():
    data = request.get_json(silent=True) or {}
    caller = resolve_caller()
    try:
        inviter = InviteService.accept_invite(caller["id"] if caller else None, data.get("token"))
    except ServiceError as e:
        return error_response(e)
    return jsonify({"success": True, "inviter": user_public(inviter)})


@invite_bp.get("/contacts")
@jwt_required()
def list_contacts():
    rows = InviteService.list_contacts(caller_id())
    data = []
    for user, connected_at in rows:
        item = user_public(user)
        item["connected_at"] = iso(connected_at)
        data.append(item)
    return jsonify({"success": True, "data": data})
