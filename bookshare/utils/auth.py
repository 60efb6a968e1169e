from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError


def resolve_caller(strict: bool = True):
    """
    Caller identity from the bearer header or the ``token`` cookie.
    Returns {"id", "email", "name"} or None when no credential is sent.

    With ``strict=False`` an expired or malformed credential also counts as
    anonymous instead of raising.
    """
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        if strict:
            raise
        return None
    identity = get_jwt_identity()
    if not identity:
        return None
    claims = get_jwt() or {}
    return {"id": identity, "email": claims.get("email"), "name": claims.get("name")}


def caller_id() -> str:
    # only valid behind @jwt_required()
    return get_jwt_identity()
